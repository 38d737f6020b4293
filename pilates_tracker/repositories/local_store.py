# pilates_tracker/repositories/local_store.py
import json
import logging
import pathlib

from pilates_tracker.config import LOCAL_STORE_KEY
from pilates_tracker.models.sessions import Session
from pilates_tracker.repositories.base import CollectionStore, StoreError

log = logging.getLogger(__name__)


class LocalSessionStore(CollectionStore):
    """Single-user store: the whole collection in one JSON file."""

    def __init__(self, path):
        self.path = pathlib.Path(path)

    def load(self) -> list[Session]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            log.exception("Failed to load sessions from %s", self.path)
            raise StoreError(f"Could not read {self.path}") from exc

        records = data.get(LOCAL_STORE_KEY, []) if isinstance(data, dict) else []
        return [Session.from_record(r) for r in records]

    def save(self, sessions: list[Session]) -> None:
        payload = {LOCAL_STORE_KEY: [s.to_record() for s in sessions]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            log.exception("Failed to save sessions to %s", self.path)
            raise StoreError(f"Could not write {self.path}") from exc
        log.info("Saved %d sessions to %s", len(sessions), self.path)
