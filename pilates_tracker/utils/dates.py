# pilates_tracker/utils/dates.py
"""
Calendar helpers. Dates are plain ``datetime.date`` values: local calendar
days with no time zone, so ISO strings round-trip exactly.

Months are 0-based (January = 0) and weekdays use the native index
(0 = Sunday ... 6 = Saturday) throughout the app.
"""
from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from pilates_tracker.config import APP_TZ


def _as_date(d) -> date:
    return d.date() if isinstance(d, datetime) else d


def _month_first(year: int, month0: int) -> date:
    return date(year + month0 // 12, month0 % 12 + 1, 1)


def days_in_month(year: int, month0: int) -> int:
    # day 0 of next month
    last = _month_first(year, month0 + 1) - timedelta(days=1)
    return last.day


def native_weekday(d) -> int:
    """Python counts Monday as 0; the app counts Sunday as 0."""
    return (_as_date(d).weekday() + 1) % 7


def first_weekday_of_month(year: int, month0: int) -> int:
    return native_weekday(_month_first(year, month0))


def to_iso_date(d) -> str:
    d = _as_date(d)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def from_iso_date(s: str) -> date:
    y, m, d = (int(part) for part in s.strip().split("-"))
    return date(y, m, d)


def is_same_day(d1, d2) -> bool:
    a, b = _as_date(d1), _as_date(d2)
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def add_days(d, n: int) -> date:
    return _as_date(d) + timedelta(days=n)


def month_grid(year: int, month0: int) -> list[Optional[date]]:
    """
    Cells of a Monday-first month view: ``None`` padding for the days
    before the 1st, then every day of the month.
    """
    start = first_weekday_of_month(year, month0)
    offset = 6 if start == 0 else start - 1
    first = _month_first(year, month0)
    cells: list[Optional[date]] = [None] * offset
    cells.extend(add_days(first, i) for i in range(days_in_month(year, month0)))
    return cells


def shift_month(year: int, month0: int, delta: int) -> tuple[int, int]:
    total = year * 12 + month0 + delta
    return total // 12, total % 12


def local_today(tz_name: Optional[str] = None) -> date:
    return datetime.now(pytz.timezone(tz_name or APP_TZ)).date()
