from datetime import date

from pilates_tracker.core.stats import (
    ALL_MONTHS,
    MonthKey,
    SummaryRecord,
    attendance_rate,
    available_months,
    compute_monthly_trend,
    compute_statistics,
    filter_by_month,
    monthly_trend,
    parse_month_filter,
    sessions_on,
    sessions_to_df,
    status_breakdown,
    summarize,
    upcoming_sessions,
)
from pilates_tracker.models.sessions import Session, SessionStatus

S = SessionStatus


def make(date_iso, status=S.SCHEDULED, time="18:00", sid=None):
    return Session(id=sid or f"{date_iso}-{time}", date=date_iso, time=time, duration=50, status=status)


def test_empty_collection_summary():
    assert compute_statistics([]) == SummaryRecord(
        total=0, attended=0, missed=0, cancelled=0, scheduled=0, rate=0
    )


def test_rate_three_attended_one_missed():
    sessions = [
        make("2024-01-01", S.ATTENDED),
        make("2024-01-02", S.ATTENDED),
        make("2024-01-03", S.ATTENDED),
        make("2024-01-04", S.MISSED),
        make("2024-01-05", S.SCHEDULED),
    ]
    summary = summarize(sessions)
    assert summary.total == 5
    assert summary.attended == 3
    assert summary.missed == 1
    assert summary.cancelled == 0
    assert summary.scheduled == 1
    assert summary.rate == 75


def test_rate_counts_instructor_cancellations_as_resolved():
    sessions = [make("2024-01-01", S.ATTENDED), make("2024-01-02", S.INSTRUCTOR_CANCELLED)]
    assert summarize(sessions).rate == 50


def test_rate_with_only_future_sessions_is_zero():
    assert summarize([make("2030-01-01"), make("2030-01-02")]).rate == 0


def test_attendance_rate_rounds_half_up():
    assert attendance_rate(1, 7, 0) == 13      # 12.5
    assert attendance_rate(1, 2, 0) == 33      # 33.3
    assert attendance_rate(2, 1, 0) == 67      # 66.7
    assert attendance_rate(0, 0, 0) == 0
    assert attendance_rate(4, 0, 0) == 100


def test_rescheduled_status_is_only_counted_in_total():
    summary = summarize([make("2024-01-01", S.RESCHEDULED)])
    assert summary.total == 1
    assert (summary.attended, summary.missed, summary.cancelled, summary.scheduled) == (0, 0, 0, 0)


def test_upcoming_filters_sorts_and_limits():
    sessions = [
        make("2024-05-20", S.SCHEDULED, "09:00"),
        make("2024-05-10", S.SCHEDULED, "18:00"),     # past
        make("2024-05-15", S.SCHEDULED, "19:00"),
        make("2024-05-15", S.SCHEDULED, "07:30"),
        make("2024-05-16", S.ATTENDED, "10:00"),      # not scheduled
        make("2024-05-30", S.SCHEDULED, "10:00"),
    ]
    out = upcoming_sessions(sessions, today=date(2024, 5, 15))
    assert [(s.date, s.time) for s in out] == [
        ("2024-05-15", "07:30"),
        ("2024-05-15", "19:00"),
        ("2024-05-20", "09:00"),
    ]


def test_upcoming_never_returns_past_or_resolved_sessions():
    sessions = [make(f"2024-05-{d:02d}", status) for d in range(1, 29) for status in (S.SCHEDULED, S.MISSED)]
    out = upcoming_sessions(sessions, today="2024-05-27", limit=10)
    assert len(out) == 2
    assert all(s.date >= "2024-05-27" and s.status == S.SCHEDULED for s in out)
    assert len(upcoming_sessions(sessions, today="2024-05-01")) == 3


def test_month_filter():
    sessions = [make("2024-01-31"), make("2024-02-01"), make("2023-02-14")]
    assert filter_by_month(sessions, ALL_MONTHS) == sessions
    assert [s.date for s in filter_by_month(sessions, MonthKey(2024, 1))] == ["2024-02-01"]
    assert [s.date for s in filter_by_month(sessions, (2023, 1))] == ["2023-02-14"]
    assert filter_by_month(sessions, MonthKey(2022, 0)) == []


def test_compute_statistics_respects_month_filter():
    sessions = [make("2024-01-05", S.ATTENDED), make("2024-02-05", S.MISSED)]
    january = compute_statistics(sessions, MonthKey(2024, 0))
    assert (january.total, january.attended, january.rate) == (1, 1, 100)
    assert compute_statistics(sessions).rate == 50


def test_available_months_are_numeric_reverse_chronological():
    sessions = [
        make("2024-02-01"),
        make("2024-10-03"),
        make("2023-12-25"),
        make("2024-02-20"),
        make("2024-11-11"),
    ]
    months = available_months(sessions)
    assert months == [MonthKey(2024, 10), MonthKey(2024, 9), MonthKey(2024, 1), MonthKey(2023, 11)]
    assert months[0].label == "November 2024"
    assert months[-1].value == "2023-11"


def test_parse_month_filter():
    assert parse_month_filter("all") == ALL_MONTHS
    assert parse_month_filter("") == ALL_MONTHS
    assert parse_month_filter(None) == ALL_MONTHS
    assert parse_month_filter("2024-0") == MonthKey(2024, 0)
    assert parse_month_filter("2024-12") == ALL_MONTHS
    assert parse_month_filter("garbage") == ALL_MONTHS


def test_monthly_trend_orders_buckets_chronologically():
    # Inserted out of order and across a year boundary
    sessions = [
        make("2024-02-10", S.ATTENDED),
        make("2023-11-03", S.MISSED),
        make("2024-01-15", S.ATTENDED),
        make("2023-12-24", S.ATTENDED),
        make("2024-02-11", S.MISSED),
        make("2024-10-01", S.SCHEDULED),
    ]
    trend = monthly_trend(sessions)
    assert [(b.year, b.month0) for b in trend] == [(2023, 10), (2023, 11), (2024, 0), (2024, 1), (2024, 9)]
    assert [b.label for b in trend] == ["November", "December", "January", "February", "October"]
    feb = trend[3]
    assert (feb.total, feb.attended) == (2, 1)


def test_monthly_trend_keeps_most_recent_six():
    sessions = [make(f"2023-{m:02d}-01", S.ATTENDED) for m in range(1, 13)]
    sessions += [make("2024-01-05"), make("2024-01-06")]
    trend = compute_monthly_trend(list(reversed(sessions)))
    assert len(trend) == 6
    assert [(b.year, b.month0) for b in trend] == [
        (2023, 7), (2023, 8), (2023, 9), (2023, 10), (2023, 11), (2024, 0),
    ]
    keys = [(b.year, b.month0) for b in trend]
    assert keys == sorted(set(keys))
    assert (trend[-1].total, trend[-1].attended) == (2, 0)


def test_monthly_trend_edge_cases():
    assert monthly_trend([]) == []
    assert monthly_trend([make("2024-01-01")], max_buckets=0) == []
    assert len(monthly_trend([make("2024-01-01"), make("2024-03-01")], max_buckets=1)) == 1


def test_sessions_to_df_adds_month_columns():
    df = sessions_to_df([make("2024-03-09", S.ATTENDED)])
    assert list(df["year"]) == [2024]
    assert list(df["month0"]) == [2]
    assert list(df["status"]) == ["ATTENDED"]
    assert sessions_to_df([]).empty


def test_status_breakdown_skips_empty_statuses():
    summary = SummaryRecord(total=3, attended=2, missed=0, cancelled=1, scheduled=0, rate=67)
    assert status_breakdown(summary) == [("Attended", 2), ("Instructor cancelled", 1)]


def test_sessions_on_a_day_sorted_by_time():
    sessions = [make("2024-01-01", time="19:00"), make("2024-01-02"), make("2024-01-01", time="08:00")]
    assert [s.time for s in sessions_on(sessions, date(2024, 1, 1))] == ["08:00", "19:00"]
    assert sessions_on(sessions, "2024-01-03") == []
