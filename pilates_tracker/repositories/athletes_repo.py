# pilates_tracker/repositories/athletes_repo.py
import functools
import logging
from typing import Optional

from gspread.exceptions import APIError, WorksheetNotFound

from pilates_tracker.config import ATHLETES_HEADERS, ATHLETES_TAB
from pilates_tracker.models.athletes import Athlete
from pilates_tracker.repositories.base import StoreError

log = logging.getLogger(__name__)


# -----------------------------
# Sheet helpers
# -----------------------------
def get_or_create_worksheet(sh, tab_name: str, cache: Optional[dict] = None):
    """
    ``sh.worksheet`` triggers a metadata read, so callers pass a dict to
    keep worksheets around between calls.
    """
    if cache is None:
        cache = {}

    key = (sh.id, tab_name)
    if key in cache:
        return cache[key]

    try:
        ws = sh.worksheet(tab_name)
    except WorksheetNotFound:
        log.info("Creating worksheet %s", tab_name)
        ws = sh.add_worksheet(title=tab_name, rows=1000, cols=50)

    cache[key] = ws
    return ws


def ensure_headers(ws, headers):
    values = ws.get_all_values()
    if not values or values[0] != headers:
        ws.update(range_name="A1", values=[headers])


def find_row(ws, row_id: str) -> Optional[int]:
    """1-based row number of ``row_id`` in column A, header excluded."""
    col = ws.col_values(1)
    for idx, v in enumerate(col[1:], start=2):
        if str(v).strip() == row_id:
            return idx
    return None


def translate_api_errors(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except APIError as exc:
            log.exception("Google Sheets call %s failed", fn.__name__)
            raise StoreError(f"Google Sheets request failed: {exc}") from exc
    return wrapper


def _parse_prefixed_id(s, prefix: str) -> Optional[int]:
    # Accepts e.g. ATH001, ATH12, ATH0007
    if not isinstance(s, str):
        return None
    s = s.strip()
    if not s.startswith(prefix):
        return None
    tail = s[len(prefix):]
    if not tail.isdigit():
        return None
    return int(tail)


def next_athlete_id(ws, prefix: str = "ATH", width: int = 3) -> str:
    """
    Reads existing ids in column A (header in row 1) and returns the next
    one: ATH001, ATH002, ...
    """
    col = ws.col_values(1)
    nums = [n for n in (_parse_prefixed_id(v, prefix) for v in col[1:]) if n is not None]
    nxt = (max(nums) + 1) if nums else 1
    return f"{prefix}{nxt:0{width}d}"


class SheetsAthleteStore:
    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet
        self._ws_cache = {}

    def _worksheet(self):
        ws = get_or_create_worksheet(self.spreadsheet, ATHLETES_TAB, self._ws_cache)
        ensure_headers(ws, ATHLETES_HEADERS)
        return ws

    @translate_api_errors
    def list(self) -> list[Athlete]:
        records = self._worksheet().get_all_records()
        athletes = [Athlete.from_record(r) for r in records]
        return sorted((a for a in athletes if a.id), key=lambda a: a.name.lower())

    @translate_api_errors
    def create(self, name: str, phone: Optional[str] = None) -> Athlete:
        if not name or not name.strip():
            raise ValueError("Athlete name is required")
        ws = self._worksheet()
        athlete = Athlete.create(athlete_id=next_athlete_id(ws), name=name, phone=phone)

        row_dict = athlete.to_record()
        ws.append_row([row_dict.get(h, "") for h in ATHLETES_HEADERS], value_input_option="RAW")
        log.info("Created athlete %s", athlete.id)
        return athlete

    @translate_api_errors
    def delete(self, athlete_id: str) -> None:
        ws = self._worksheet()
        idx = find_row(ws, athlete_id)
        if idx is None:
            raise StoreError(f"Athlete not found: {athlete_id}")
        ws.delete_rows(idx)
        log.info("Deleted athlete %s", athlete_id)
