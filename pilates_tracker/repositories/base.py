# pilates_tracker/repositories/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from pilates_tracker.models.sessions import Session, SessionDraft


class StoreError(RuntimeError):
    """A session/athlete store could not read or write its backend."""


class SessionStore(ABC):
    @abstractmethod
    def list(self) -> list[Session]:
        ...

    @abstractmethod
    def create_many(self, drafts: Iterable[SessionDraft]) -> list[Session]:
        ...

    @abstractmethod
    def update(self, session: Session) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...


class CollectionStore(SessionStore):
    """
    Session store over a backend that can only load and save the whole
    collection at once.
    """

    @abstractmethod
    def load(self) -> list[Session]:
        ...

    @abstractmethod
    def save(self, sessions: list[Session]) -> None:
        ...

    def list(self) -> list[Session]:
        return sorted(self.load(), key=lambda s: (s.date, s.time))

    def create_many(self, drafts: Iterable[SessionDraft]) -> list[Session]:
        created = [Session.from_draft(d) for d in drafts]
        if created:
            self.save(self.load() + created)
        return created

    def update(self, session: Session) -> None:
        sessions = self.load()
        ids = [s.id for s in sessions]
        if session.id not in ids:
            raise StoreError(f"Session not found: {session.id}")
        sessions[ids.index(session.id)] = session
        self.save(sessions)

    def delete(self, session_id: str) -> None:
        sessions = self.load()
        remaining = [s for s in sessions if s.id != session_id]
        if len(remaining) == len(sessions):
            raise StoreError(f"Session not found: {session_id}")
        self.save(remaining)
