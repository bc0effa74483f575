"""
Session lifecycle controller.

Per (tenant, worker) there are two states, NoSession and Open:

    open()            NoSession → Open     (emits session_start)
    append_event()    Open → Open          (emits the intent's event)
    close()           Open → NoSession     (emits done only for reason "done")
    auto_close_expired_sessions()          bulk Open → NoSession, reason "timeout"

The storage layer enforces "at most one open session per worker" with an
atomic conditional write.  The pre-check in open() exists only to produce
the conflict reply cheaply; when two opens race past it, the storage
rejects the loser and we answer with the very same SessionConflict.  If
the winner is already gone when we look, the write is tried once more.
A session whose session_start event cannot be stored is closed again
with reason "manual" before the failure propagates.

Every refusal is a CleanStayError carrying a chat-ready reply.  They are
normal conversation, so they are logged at INFO and never retried.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from cleanstay.domain.catalog import PropertyCatalog
from cleanstay.domain.errors import (
    CleanStayError,
    MissingPropertyHint,
    NoActiveSession,
    SessionConflict,
)
from cleanstay.domain.events import Event, EventLog, describe_event, event_type_for
from cleanstay.domain.intent import Done, ParsedIntent, StartCleaning, payload_to_dict
from cleanstay.domain.replies import reply
from cleanstay.domain.sessions import (
    CLOSE_REASONS,
    SESSION_TTL,
    CleaningSession,
    CloseReason,
    SessionAlreadyOpen,
    SessionStore,
)
from cleanstay.resolver import PropertyResolver

log = logging.getLogger(__name__)

OPEN_ATTEMPTS = 2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionRef:
    session_id: str
    property_id: str
    property_name: str | None = None


@dataclass(frozen=True)
class EventRef:
    session_id: str
    event_id: str


class SessionController:

    def __init__(
        self,
        catalog: PropertyCatalog,
        sessions: SessionStore,
        events: EventLog,
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = SESSION_TTL,
    ):
        self._catalog = catalog
        self._resolver = PropertyResolver(catalog)
        self._sessions = sessions
        self._events = events
        self._clock = clock
        self._ttl = ttl

    # -- transitions ---------------------------------------------------------

    async def open(
        self,
        tenant_id: str,
        worker_id: str,
        property_hint: str | None = None,
        language: str | None = None,
    ) -> SessionRef:
        """Start a session at the property named by ``property_hint``."""
        if not property_hint or not property_hint.strip():
            log.info("tenant=%s worker=%s open refused: no property hint", tenant_id, worker_id)
            raise MissingPropertyHint(language)

        current = await self._sessions.get_open(tenant_id, worker_id)
        if current is not None:
            raise self._conflict(current, language)

        prop = self._resolver.resolve_property(tenant_id, property_hint, language)

        now = self._clock()
        session = CleaningSession(
            session_id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            property_id=prop.property_id,
            worker_id=worker_id,
            started_at=now,
            expected_end_at=now + self._ttl,
        )
        await self._create_open(session, language)

        try:
            await self._events.append(
                Event(
                    tenant_id=tenant_id,
                    property_id=prop.property_id,
                    session_id=session.session_id,
                    type="session_start",
                    started_at=now,
                    note=describe_event(StartCleaning(), property_hint.strip()),
                )
            )
        except Exception as exc:
            # No session may stay open without its session_start event.
            await self._sessions.close(session.session_id, "manual", self._clock())
            log.error("tenant=%s worker=%s session=%s start not recorded, closed: %s",
                      tenant_id, worker_id, session.session_id, exc)
            raise
        log.info(
            "tenant=%s worker=%s session=%s opened at %s",
            tenant_id, worker_id, session.session_id, prop.name,
        )
        return SessionRef(session.session_id, prop.property_id, prop.name)

    async def append_event(
        self,
        tenant_id: str,
        worker_id: str,
        intent: ParsedIntent,
        language: str | None = None,
    ) -> EventRef:
        """Record ``intent`` against the worker's open session."""
        language = language or intent.language
        session = await self._sessions.get_open(tenant_id, worker_id)
        if session is None:
            log.info("tenant=%s worker=%s %s refused: no open session",
                     tenant_id, worker_id, intent.kind)
            raise NoActiveSession.for_event(language)

        # The session decides the property; a hint on the intent is informational.
        event_id = await self._events.append(
            Event(
                tenant_id=tenant_id,
                property_id=session.property_id,
                session_id=session.session_id,
                type=event_type_for(intent.payload),
                started_at=self._clock(),
                note=describe_event(intent.payload, intent.property_hint),
                payload=payload_to_dict(intent.payload),
            )
        )
        log.info("tenant=%s worker=%s session=%s event=%s %s",
                 tenant_id, worker_id, session.session_id, event_id, intent.kind)
        return EventRef(session.session_id, event_id)

    async def close(
        self,
        tenant_id: str,
        worker_id: str,
        reason: CloseReason = "done",
        language: str | None = None,
    ) -> SessionRef:
        """End the worker's open session.  Only reason "done" emits an event."""
        if reason not in CLOSE_REASONS:
            raise ValueError(f"unknown close reason {reason!r}")

        session = await self._sessions.get_open(tenant_id, worker_id)
        if session is None:
            log.info("tenant=%s worker=%s close refused: no open session", tenant_id, worker_id)
            raise NoActiveSession.for_close(language)

        now = self._clock()
        if not await self._sessions.close(session.session_id, reason, now):
            # The expiry sweep (or a concurrent close) got there first.
            log.info("tenant=%s worker=%s session=%s already closed",
                     tenant_id, worker_id, session.session_id)
            raise NoActiveSession.for_close(language)

        if reason == "done":
            await self._events.append(
                Event(
                    tenant_id=tenant_id,
                    property_id=session.property_id,
                    session_id=session.session_id,
                    type="done",
                    started_at=now,
                    note=describe_event(Done()),
                )
            )
        log.info("tenant=%s worker=%s session=%s closed reason=%s",
                 tenant_id, worker_id, session.session_id, reason)
        return SessionRef(session.session_id, session.property_id)

    async def auto_close_expired_sessions(self) -> int:
        """Close every session past its TTL deadline, across all tenants."""
        closed = await self._sessions.close_expired(self._clock())
        if closed:
            log.info("auto-closed %d expired session(s)", closed)
        return closed

    # -- reads ---------------------------------------------------------------

    async def get_active_session(self, tenant_id: str, worker_id: str) -> SessionRef | None:
        session = await self._sessions.get_open(tenant_id, worker_id)
        if session is None:
            return None
        return SessionRef(session.session_id, session.property_id)

    # -- helpers -------------------------------------------------------------

    async def _create_open(self, session: CleaningSession, language: str | None) -> None:
        """
        Store ``session`` as the worker's open session.

        A rejected write means another open won the race.  When the winner
        has already been closed again by the time we look, the slot is free
        and the write is retried.
        """
        for _ in range(OPEN_ATTEMPTS):
            try:
                await self._sessions.create_open(session)
                return
            except SessionAlreadyOpen:
                winner = await self._sessions.get_open(session.tenant_id, session.worker_id)
                log.info("tenant=%s worker=%s open lost a race", session.tenant_id, session.worker_id)
                if winner is not None:
                    raise self._conflict(winner, language)
        log.info("tenant=%s worker=%s open gave up after %d attempts",
                 session.tenant_id, session.worker_id, OPEN_ATTEMPTS)
        raise CleanStayError(reply("repeat_clearly", language), language)

    def _conflict(self, current: CleaningSession, language: str | None) -> SessionConflict:
        prop = self._catalog.get(current.tenant_id, current.property_id)
        name = prop.name if prop else current.property_id
        log.info("tenant=%s worker=%s open refused: session=%s already open at %s",
                 current.tenant_id, current.worker_id, current.session_id, name)
        return SessionConflict(name, language)
