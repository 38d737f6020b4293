from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pilates_tracker.models.sessions import utc_now_iso


@dataclass(frozen=True)
class Athlete:
    id: str
    name: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at_utc: str = ""

    @staticmethod
    def create(
        *,
        athlete_id: str,
        name: str,
        phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "Athlete":
        return Athlete(
            id=athlete_id,
            name=name.strip(),
            phone=(phone or "").strip() or None,
            notes=(notes or "").strip() or None,
            created_at_utc=utc_now_iso(),
        )

    def to_record(self) -> dict:
        return {
            "athlete_id": self.id,
            "name": self.name,
            "phone": self.phone or "",
            "notes": self.notes or "",
            "created_at_utc": self.created_at_utc,
        }

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "Athlete":
        # Sheets hands phone numbers back as ints
        phone = str(record.get("phone", "") or "").strip()
        notes = str(record.get("notes", "") or "").strip()
        return Athlete(
            id=str(record.get("athlete_id", "")).strip(),
            name=str(record.get("name", "")).strip(),
            phone=phone or None,
            notes=notes or None,
            created_at_utc=str(record.get("created_at_utc", "") or ""),
        )
