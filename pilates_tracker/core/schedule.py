# pilates_tracker/core/schedule.py
import re
from typing import Iterable, Optional

import pandas as pd

from pilates_tracker.config import DEFAULT_DURATION_MINUTES, RECURRENCE_SCAN_LIMIT
from pilates_tracker.models.sessions import SessionDraft
from pilates_tracker.utils.dates import add_days, from_iso_date, native_weekday, to_iso_date

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _parse_iso_date(s):
    try:
        return from_iso_date(s)
    except (AttributeError, TypeError, ValueError):
        return None


def generate_recurring_dates(start_date: str, end_date: str, weekdays: Iterable[int]) -> list[str]:
    """
    Every date in [start_date, end_date] whose native weekday (0 = Sunday)
    is in ``weekdays``, ascending, as ISO strings.

    At most RECURRENCE_SCAN_LIMIT days are examined starting at start_date;
    a longer range comes back truncated, not as an error.
    """
    selected = set(weekdays)
    if not selected:
        return []

    first = from_iso_date(start_date)
    last = min(from_iso_date(end_date), add_days(first, RECURRENCE_SCAN_LIMIT - 1))
    if first > last:
        return []

    days = pd.date_range(first, last, freq="D")
    return [to_iso_date(ts.date()) for ts in days if native_weekday(ts.date()) in selected]


def schedule_errors(
    start_date: Optional[str],
    end_date: Optional[str],
    weekdays: Iterable[int],
    time: Optional[str],
    duration,
) -> list[str]:
    """Validation for the add-schedule form. Empty list means OK."""
    errors = []
    selected = list(weekdays or [])

    if not selected:
        errors.append("Please select at least one weekday.")
    elif any(not isinstance(d, int) or d < 0 or d > 6 for d in selected):
        errors.append("Weekdays must be between 0 (Sunday) and 6 (Saturday).")

    first = _parse_iso_date(start_date)
    last = _parse_iso_date(end_date)
    if first is None:
        errors.append("Start date must be a YYYY-MM-DD date.")
    if last is None:
        errors.append("End date must be a YYYY-MM-DD date.")
    if first is not None and last is not None and last < first:
        errors.append("End date must be on/after start date.")

    if not is_valid_time(time):
        errors.append("Time must be HH:MM (24-hour).")

    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        errors.append("Duration must be a positive number of minutes.")

    return errors


def build_drafts(
    dates: Iterable[str],
    time: str,
    duration: int = DEFAULT_DURATION_MINUTES,
    athlete_id: Optional[str] = None,
) -> list[SessionDraft]:
    return [
        SessionDraft(date=d, time=time, duration=duration or DEFAULT_DURATION_MINUTES, athlete_id=athlete_id)
        for d in dates
    ]


def is_valid_time(value: Optional[str]) -> bool:
    return bool(value) and bool(_TIME_RE.match(str(value).strip()))
