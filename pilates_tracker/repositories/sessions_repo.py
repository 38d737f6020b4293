# pilates_tracker/repositories/sessions_repo.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

import pandas as pd

from pilates_tracker.config import SESSIONS_HEADERS, SESSIONS_TAB
from pilates_tracker.models.sessions import Session, SessionDraft, utc_now_iso
from pilates_tracker.repositories.athletes_repo import (
    ensure_headers,
    find_row,
    get_or_create_worksheet,
    translate_api_errors,
)
from pilates_tracker.repositories.base import SessionStore, StoreError

log = logging.getLogger(__name__)


def session_row(session: Session, created_at_utc: str, updated_at_utc: str) -> list:
    row_dict = session.to_record()
    row_dict["created_at_utc"] = created_at_utc
    row_dict["updated_at_utc"] = updated_at_utc
    return [row_dict.get(h, "") for h in SESSIONS_HEADERS]


class SheetsSessionStore(SessionStore):
    """
    Sessions of every athlete live in one "Sessions" tab. A store bound to
    ``athlete_id`` only reads that athlete's rows and stamps new rows with it.
    """

    def __init__(self, spreadsheet, athlete_id: Optional[str] = None):
        self.spreadsheet = spreadsheet
        self.athlete_id = athlete_id
        self._ws_cache = {}

    def _worksheet(self):
        ws = get_or_create_worksheet(self.spreadsheet, SESSIONS_TAB, self._ws_cache)
        ensure_headers(ws, SESSIONS_HEADERS)
        return ws

    @translate_api_errors
    def load_sessions_df(self) -> pd.DataFrame:
        records = self._worksheet().get_all_records()
        return pd.DataFrame(records) if records else pd.DataFrame(columns=SESSIONS_HEADERS)

    @translate_api_errors
    def list(self) -> list[Session]:
        records = self._worksheet().get_all_records()
        sessions = [Session.from_record(r) for r in records]
        if self.athlete_id is not None:
            sessions = [s for s in sessions if s.athlete_id == self.athlete_id]
        return sorted((s for s in sessions if s.id), key=lambda s: (s.date, s.time))

    @translate_api_errors
    def create_many(self, drafts: Iterable[SessionDraft]) -> list[Session]:
        created = []
        for d in drafts:
            if d.athlete_id is None and self.athlete_id is not None:
                d = SessionDraft(date=d.date, time=d.time, duration=d.duration, athlete_id=self.athlete_id)
            created.append(Session.from_draft(d))
        if not created:
            return []

        now_utc = utc_now_iso()
        rows = [session_row(s, now_utc, now_utc) for s in created]
        self._worksheet().append_rows(rows, value_input_option="RAW")
        log.info("Appended %d sessions", len(rows))
        return created

    @translate_api_errors
    def update(self, session: Session) -> None:
        ws = self._worksheet()
        idx = find_row(ws, session.id)
        if idx is None:
            raise StoreError(f"Session not found: {session.id}")

        existing = ws.row_values(idx)
        created_pos = SESSIONS_HEADERS.index("created_at_utc")
        created = existing[created_pos] if len(existing) > created_pos else ""

        ws.update(range_name=f"A{idx}", values=[session_row(session, created, utc_now_iso())])
        log.info("Updated session %s", session.id)

    @translate_api_errors
    def delete(self, session_id: str) -> None:
        ws = self._worksheet()
        idx = find_row(ws, session_id)
        if idx is None:
            raise StoreError(f"Session not found: {session_id}")
        ws.delete_rows(idx)
        log.info("Deleted session %s", session_id)

    @translate_api_errors
    def delete_for_athlete(self, athlete_id: str) -> int:
        """
        Remove every session of ``athlete_id`` by rewriting the whole tab.
        Fine for small/medium datasets.
        """
        df_all = self.load_sessions_df()
        if df_all.empty:
            return 0

        owned = df_all["athlete_id"].astype(str).str.strip() == athlete_id
        removed = int(owned.sum())
        if not removed:
            return 0

        df_all = df_all[~owned].copy()
        for c in SESSIONS_HEADERS:
            if c not in df_all.columns:
                df_all[c] = ""
        df_all = df_all[SESSIONS_HEADERS]

        ws = self._worksheet()
        values = [SESSIONS_HEADERS] + df_all.astype(str).values.tolist()
        ws.clear()
        ws.update(range_name="A1", values=values)
        log.info("Deleted %d sessions of athlete %s", removed, athlete_id)
        return removed
