"""In-memory adapter for SessionStore — for tests and local development."""

import threading
from dataclasses import replace
from datetime import datetime

from cleanstay.domain.sessions import (
    CleaningSession,
    CloseReason,
    SessionAlreadyOpen,
    SessionStore,
)


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store.  A lock turns every check-and-write into one
    atomic step, standing in for the database's unique index.
    """

    def __init__(self):
        self._sessions: dict[str, CleaningSession] = {}
        self._lock = threading.Lock()

    def _find_open(self, tenant_id: str, worker_id: str) -> CleaningSession | None:
        for s in self._sessions.values():
            if s.tenant_id == tenant_id and s.worker_id == worker_id and s.status == "open":
                return s
        return None

    async def create_open(self, session: CleaningSession) -> None:
        with self._lock:
            if self._find_open(session.tenant_id, session.worker_id) is not None:
                raise SessionAlreadyOpen(session.tenant_id, session.worker_id)
            self._sessions[session.session_id] = replace(
                session, status="open", ended_at=None, close_reason=None
            )

    async def get_open(self, tenant_id: str, worker_id: str) -> CleaningSession | None:
        with self._lock:
            s = self._find_open(tenant_id, worker_id)
            return replace(s) if s else None

    async def get(self, session_id: str) -> CleaningSession | None:
        with self._lock:
            s = self._sessions.get(session_id)
            return replace(s) if s else None

    async def close(
        self, session_id: str, reason: CloseReason, ended_at: datetime
    ) -> bool:
        with self._lock:
            s = self._sessions.get(session_id)
            if s is None or s.status != "open":
                return False
            s.status = "closed"
            s.ended_at = ended_at
            s.close_reason = reason
            return True

    async def close_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [
                s for s in self._sessions.values()
                if s.status == "open" and s.expected_end_at < now
            ]
            for s in expired:
                s.status = "closed"
                s.ended_at = now
                s.close_reason = "timeout"
            return len(expired)
