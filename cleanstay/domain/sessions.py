"""
SessionStore port — persistence for cleaning sessions.

The single-open-session rule is enforced HERE, by the storage itself,
with an atomic conditional write.  The controller may pre-check for a
friendlier error, but correctness never depends on that pre-check.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

SESSION_TTL = timedelta(hours=4)

SessionStatus = Literal["open", "closed"]
CloseReason = Literal["done", "timeout", "manual"]
CLOSE_REASONS: tuple[str, ...] = ("done", "timeout", "manual")


@dataclass
class CleaningSession:
    session_id: str
    tenant_id: str
    property_id: str
    worker_id: str                 # stable worker identity, e.g. "+420777123456"
    started_at: datetime
    expected_end_at: datetime      # TTL deadline
    status: SessionStatus = "open"
    ended_at: datetime | None = None
    close_reason: CloseReason | None = None


class SessionAlreadyOpen(Exception):
    """Storage rejected a second open session for the same (tenant, worker)."""

    def __init__(self, tenant_id: str, worker_id: str):
        super().__init__(f"session already open for tenant={tenant_id} worker={worker_id}")
        self.tenant_id = tenant_id
        self.worker_id = worker_id


class SessionStore(ABC):
    """
    Port: create, look up, and close cleaning sessions.

    Sessions are never deleted.  Closing only flips status, ended_at and
    close_reason, and only while the session is still open, so racing
    closers (explicit close vs. the expiry sweep) transition it once.
    """

    @abstractmethod
    async def create_open(self, session: CleaningSession) -> None:
        """
        Insert an open session.

        Raises SessionAlreadyOpen if (tenant_id, worker_id) already has
        an open session, atomically even under concurrent callers.
        """
        ...

    @abstractmethod
    async def get_open(self, tenant_id: str, worker_id: str) -> CleaningSession | None:
        """Return the open session for a worker, or None."""
        ...

    @abstractmethod
    async def get(self, session_id: str) -> CleaningSession | None:
        """Look up any session (open or closed) by id."""
        ...

    @abstractmethod
    async def close(
        self, session_id: str, reason: CloseReason, ended_at: datetime
    ) -> bool:
        """
        Close the session if it is still open.

        Returns True if this call performed the transition, False if the
        session was already closed (or does not exist).
        """
        ...

    @abstractmethod
    async def close_expired(self, now: datetime) -> int:
        """
        Close every open session (all tenants) whose expected_end_at < now
        with reason "timeout".  Returns how many sessions this call closed.
        """
        ...
