# pilates_tracker/core/stats.py
"""
Attendance statistics over in-memory session collections.

Everything here is a pure function of its arguments. Dates are assumed to
be well-formed ``YYYY-MM-DD`` strings, which also sort chronologically
as plain strings.
"""
from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterable, NamedTuple, Optional, Sequence, Union

import pandas as pd

from pilates_tracker.config import MONTH_NAMES, TREND_BUCKETS, UPCOMING_LIMIT
from pilates_tracker.models.sessions import STATUS_LABELS, Session, SessionStatus
from pilates_tracker.utils.dates import from_iso_date, local_today, to_iso_date

ALL_MONTHS = "all"

SESSION_COLUMNS = ["id", "date", "time", "duration", "status", "athlete_id", "original_date", "notes"]


class MonthKey(NamedTuple):
    year: int
    month0: int

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month0]} {self.year}"

    @property
    def value(self) -> str:
        return f"{self.year}-{self.month0}"

    @staticmethod
    def of(iso_date: str) -> "MonthKey":
        d = from_iso_date(iso_date)
        return MonthKey(d.year, d.month - 1)


MonthFilter = Union[MonthKey, str]


@dataclass(frozen=True)
class SummaryRecord:
    total: int = 0
    attended: int = 0
    missed: int = 0
    cancelled: int = 0
    scheduled: int = 0
    rate: int = 0


@dataclass(frozen=True)
class TrendBucket:
    year: int
    month0: int
    label: str
    total: int
    attended: int


def attendance_rate(attended: int, missed: int, cancelled: int) -> int:
    """Percent of resolved sessions attended, rounded half up; 0 with nothing resolved."""
    resolved = attended + missed + cancelled
    if resolved <= 0:
        return 0
    # integer form of floor(attended / resolved * 100 + 0.5)
    return (200 * attended + resolved) // (2 * resolved)


def summarize(sessions: Iterable[Session]) -> SummaryRecord:
    counts = {status: 0 for status in SessionStatus}
    total = 0
    for s in sessions:
        counts[s.status] += 1
        total += 1

    attended = counts[SessionStatus.ATTENDED]
    missed = counts[SessionStatus.MISSED]
    cancelled = counts[SessionStatus.INSTRUCTOR_CANCELLED]
    return SummaryRecord(
        total=total,
        attended=attended,
        missed=missed,
        cancelled=cancelled,
        scheduled=counts[SessionStatus.SCHEDULED],
        rate=attendance_rate(attended, missed, cancelled),
    )


def filter_by_month(sessions: Iterable[Session], month_filter: MonthFilter = ALL_MONTHS) -> list[Session]:
    if month_filter == ALL_MONTHS or month_filter is None:
        return list(sessions)
    key = MonthKey(*month_filter)
    return [s for s in sessions if MonthKey.of(s.date) == key]


def compute_statistics(sessions: Iterable[Session], month_filter: MonthFilter = ALL_MONTHS) -> SummaryRecord:
    return summarize(filter_by_month(sessions, month_filter))


def upcoming_sessions(
    sessions: Iterable[Session],
    today: Optional[Union[date, str]] = None,
    limit: int = UPCOMING_LIMIT,
) -> list[Session]:
    if today is None:
        today = local_today()
    today_iso = today if isinstance(today, str) else to_iso_date(today)

    pending = [
        s for s in sessions
        if s.date >= today_iso and s.status == SessionStatus.SCHEDULED
    ]
    pending.sort(key=lambda s: (s.date, s.time))
    return pending[:max(limit, 0)]


def available_months(sessions: Iterable[Session]) -> list[MonthKey]:
    """Distinct months with at least one session, most recent first."""
    return sorted({MonthKey.of(s.date) for s in sessions}, reverse=True)


def parse_month_filter(value: Optional[str]) -> MonthFilter:
    """Turn a month-picker value ("2024-0") back into a filter."""
    if not value or value == ALL_MONTHS:
        return ALL_MONTHS
    try:
        year, month0 = (int(part) for part in value.split("-"))
    except ValueError:
        return ALL_MONTHS
    if not 0 <= month0 <= 11:
        return ALL_MONTHS
    return MonthKey(year, month0)


def sessions_to_df(sessions: Iterable[Session]) -> pd.DataFrame:
    rows = []
    for s in sessions:
        row = asdict(s)
        row["status"] = s.status.value
        rows.append(row)
    df = pd.DataFrame(rows, columns=SESSION_COLUMNS)
    dt = pd.to_datetime(df["date"], format="%Y-%m-%d")
    df["year"] = dt.dt.year.astype(int)
    df["month0"] = (dt.dt.month - 1).astype(int)
    return df


def monthly_trend(sessions: Iterable[Session], max_buckets: int = TREND_BUCKETS) -> list[TrendBucket]:
    """
    Sessions and attended sessions per calendar month, for the most recent
    ``max_buckets`` months that have sessions, oldest first.
    """
    if max_buckets <= 0:
        return []
    df = sessions_to_df(sessions)
    if df.empty:
        return []

    df["attended"] = df["status"] == SessionStatus.ATTENDED.value
    grouped = (
        df.groupby(["year", "month0"], sort=True)
        .agg(total=("id", "size"), attended=("attended", "sum"))
        .sort_index()
        .tail(max_buckets)
    )

    return [
        TrendBucket(
            year=int(year),
            month0=int(month0),
            label=MONTH_NAMES[int(month0)],
            total=int(row["total"]),
            attended=int(row["attended"]),
        )
        for (year, month0), row in grouped.iterrows()
    ]


def compute_monthly_trend(sessions: Iterable[Session], max_buckets: int = TREND_BUCKETS) -> list[TrendBucket]:
    return monthly_trend(sessions, max_buckets)


def status_breakdown(summary: SummaryRecord) -> list[tuple[str, int]]:
    """(label, count) for each non-empty outcome, in chart order."""
    pairs = [
        (STATUS_LABELS[SessionStatus.ATTENDED], summary.attended),
        (STATUS_LABELS[SessionStatus.MISSED], summary.missed),
        (STATUS_LABELS[SessionStatus.INSTRUCTOR_CANCELLED], summary.cancelled),
        (STATUS_LABELS[SessionStatus.SCHEDULED], summary.scheduled),
    ]
    return [(label, count) for label, count in pairs if count > 0]


def sessions_on(sessions: Sequence[Session], day: Union[date, str]) -> list[Session]:
    iso = day if isinstance(day, str) else to_iso_date(day)
    return sorted((s for s in sessions if s.date == iso), key=lambda s: s.time)
