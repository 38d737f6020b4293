from pilates_tracker.config import DEFAULT_DURATION_MINUTES, RECURRENCE_SCAN_LIMIT
from pilates_tracker.core.schedule import (
    build_drafts,
    generate_recurring_dates,
    is_valid_time,
    schedule_errors,
)
from pilates_tracker.models.sessions import SessionDraft


def test_mondays_in_january_2024():
    assert generate_recurring_dates("2024-01-01", "2024-01-31", {1}) == [
        "2024-01-01",
        "2024-01-08",
        "2024-01-15",
        "2024-01-22",
        "2024-01-29",
    ]


def test_both_endpoints_are_included():
    # Tue 2 Jan and Thu 4 Jan
    assert generate_recurring_dates("2024-01-02", "2024-01-04", [2, 4]) == ["2024-01-02", "2024-01-04"]


def test_several_weekdays_come_back_sorted_without_duplicates():
    out = generate_recurring_dates("2024-02-01", "2024-02-29", [4, 2, 2, 0])
    assert out == sorted(set(out))
    assert "2024-02-04" in out        # Sunday
    assert "2024-02-29" in out        # Thursday, leap day
    assert len(out) == 4 + 4 + 5      # Sun, Tue, Thu in Feb 2024


def test_empty_weekday_set_returns_nothing():
    assert generate_recurring_dates("2024-01-01", "2024-12-31", set()) == []
    assert generate_recurring_dates("2024-01-01", "2024-12-31", []) == []


def test_inverted_range_returns_nothing():
    assert generate_recurring_dates("2024-02-01", "2024-01-01", {0, 1, 2, 3, 4, 5, 6}) == []


def test_single_day_range():
    assert generate_recurring_dates("2024-01-01", "2024-01-01", {1}) == ["2024-01-01"]
    assert generate_recurring_dates("2024-01-01", "2024-01-01", {2}) == []


def test_long_range_is_truncated_at_scan_limit():
    assert RECURRENCE_SCAN_LIMIT == 366
    every_day = set(range(7))
    out = generate_recurring_dates("2024-01-01", "2025-12-31", every_day)
    assert len(out) == RECURRENCE_SCAN_LIMIT
    assert out[0] == "2024-01-01"
    assert out[-1] == "2024-12-31"   # 2024 has 366 days


def test_truncation_keeps_only_matches_inside_the_scanned_window():
    out = generate_recurring_dates("2023-01-01", "2026-01-01", {0})
    assert out[0] == "2023-01-01"
    assert out[-1] <= "2024-01-01"
    assert len(out) == 53


def test_schedule_errors_accepts_a_valid_request():
    assert schedule_errors("2024-01-01", "2024-01-31", [1, 3], "18:00", 50) == []


def test_schedule_errors_requires_a_weekday():
    errors = schedule_errors("2024-01-01", "2024-01-31", [], "18:00", 50)
    assert errors == ["Please select at least one weekday."]


def test_schedule_errors_reports_each_problem():
    errors = schedule_errors("2024-02-01", "2024-01-01", [9], "25:00", 0)
    assert len(errors) == 4
    assert "End date must be on/after start date." in errors


def test_schedule_errors_flags_unparseable_dates():
    errors = schedule_errors(None, "2024-13-01", [1], "07:30", 45)
    assert "Start date must be a YYYY-MM-DD date." in errors
    assert "End date must be a YYYY-MM-DD date." in errors


def test_is_valid_time():
    assert is_valid_time("00:00")
    assert is_valid_time("23:59")
    assert not is_valid_time("24:00")
    assert not is_valid_time("7:30")
    assert not is_valid_time("")
    assert not is_valid_time(None)


def test_build_drafts_pairs_dates_with_time_and_duration():
    drafts = build_drafts(["2024-01-01", "2024-01-08"], "18:00", 55, athlete_id="ATH001")
    assert drafts == [
        SessionDraft("2024-01-01", "18:00", 55, "ATH001"),
        SessionDraft("2024-01-08", "18:00", 55, "ATH001"),
    ]
    assert build_drafts(["2024-01-01"], "09:00", 0)[0].duration == DEFAULT_DURATION_MINUTES
