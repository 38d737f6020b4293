import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

import pytz

from pilates_tracker.config import DEFAULT_DURATION_MINUTES


class SessionStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    ATTENDED = "ATTENDED"
    MISSED = "MISSED"
    INSTRUCTOR_CANCELLED = "INSTRUCTOR_CANCELLED"
    # Never assigned: a moved session goes back to SCHEDULED on its new date.
    # Kept so rows written with it still load.
    RESCHEDULED = "RESCHEDULED"


# Outcomes a user can set on a session
MARKABLE_STATUSES = [
    SessionStatus.ATTENDED,
    SessionStatus.MISSED,
    SessionStatus.INSTRUCTOR_CANCELLED,
]

STATUS_LABELS = {
    SessionStatus.SCHEDULED: "Scheduled",
    SessionStatus.ATTENDED: "Attended",
    SessionStatus.MISSED: "Missed",
    SessionStatus.INSTRUCTOR_CANCELLED: "Instructor cancelled",
    SessionStatus.RESCHEDULED: "Rescheduled",
}


@dataclass(frozen=True)
class DayOfWeekOption:
    value: int      # native weekday, 0 = Sunday
    label: str


DAYS_OF_WEEK = [
    DayOfWeekOption(1, "Mon"),
    DayOfWeekOption(2, "Tue"),
    DayOfWeekOption(3, "Wed"),
    DayOfWeekOption(4, "Thu"),
    DayOfWeekOption(5, "Fri"),
    DayOfWeekOption(6, "Sat"),
    DayOfWeekOption(0, "Sun"),
]


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _to_duration(value: Any) -> int:
    try:
        minutes = int(float(str(value).strip()))
    except (TypeError, ValueError):
        return DEFAULT_DURATION_MINUTES
    return minutes if minutes > 0 else DEFAULT_DURATION_MINUTES


def _to_status(value: Any) -> SessionStatus:
    try:
        return SessionStatus(str(value).strip().upper())
    except ValueError:
        return SessionStatus.SCHEDULED


# -----------------------------
# Data model
# -----------------------------
@dataclass(frozen=True)
class SessionDraft:
    date: str               # YYYY-MM-DD
    time: str               # HH:mm
    duration: int = DEFAULT_DURATION_MINUTES
    athlete_id: Optional[str] = None


@dataclass(frozen=True)
class Session:
    id: str
    date: str               # YYYY-MM-DD
    time: str               # HH:mm
    duration: int
    status: SessionStatus
    athlete_id: Optional[str] = None
    original_date: Optional[str] = None
    notes: Optional[str] = None

    @staticmethod
    def from_draft(draft: SessionDraft) -> "Session":
        return Session(
            id=str(uuid.uuid4()),
            date=draft.date,
            time=draft.time,
            duration=draft.duration or DEFAULT_DURATION_MINUTES,
            status=SessionStatus.SCHEDULED,
            athlete_id=draft.athlete_id,
        )

    def with_status(self, status: SessionStatus) -> "Session":
        return replace(self, status=SessionStatus(status))

    def with_notes(self, notes: Optional[str]) -> "Session":
        return replace(self, notes=_blank_to_none(notes))

    def reschedule(self, new_date: str, new_time: str) -> "Session":
        """
        Move this session. The first move remembers where it came from;
        later moves keep that earliest date.
        """
        return replace(
            self,
            date=new_date,
            time=new_time,
            status=SessionStatus.SCHEDULED,
            original_date=self.original_date or self.date,
        )

    def to_record(self) -> dict:
        return {
            "session_id": self.id,
            "athlete_id": self.athlete_id or "",
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "status": self.status.value,
            "original_date": self.original_date or "",
            "notes": self.notes or "",
        }

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "Session":
        return Session(
            id=str(record.get("session_id", "")).strip(),
            date=str(record.get("date", "")).strip(),
            time=str(record.get("time", "")).strip(),
            duration=_to_duration(record.get("duration")),
            status=_to_status(record.get("status", "")),
            athlete_id=_blank_to_none(record.get("athlete_id")),
            original_date=_blank_to_none(record.get("original_date")),
            notes=_blank_to_none(record.get("notes")),
        )


def utc_now_iso() -> str:
    return datetime.now(pytz.UTC).isoformat()
