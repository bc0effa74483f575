"""
EventLog port — append-only record of what happened during a session.

Consumers needing aggregates (durations, supply counts, summaries) scan
the events themselves; nothing here computes them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from cleanstay.domain.intent import (
    Done,
    IntentPayload,
    LinenUsed,
    Note,
    PhotoMeta,
    StartCleaning,
    SupplyOut,
)

EventType = Literal["session_start", "supply_out", "linen_used", "note", "photo_meta", "done"]


@dataclass(frozen=True)
class Event:
    tenant_id: str
    property_id: str
    type: EventType
    started_at: datetime
    note: str                          # human-readable, primary locale
    session_id: str | None = None
    payload: dict = field(default_factory=dict)
    event_id: str = ""                 # assigned by the log on append


class EventLog(ABC):
    """
    Port: append events and read them back per session.

    There is no update or delete.
    """

    @abstractmethod
    async def append(self, event: Event) -> str:
        """Store the event. Returns its event_id."""
        ...

    @abstractmethod
    async def list_for_session(self, session_id: str) -> list[Event]:
        """Events of one session, ordered by started_at ascending."""
        ...


def event_type_for(payload: IntentPayload) -> EventType:
    if isinstance(payload, StartCleaning):
        return "session_start"
    return payload.kind  # type: ignore[return-value]


def describe_event(payload: IntentPayload, property_hint: str | None = None) -> str:
    """Dashboard note for an event, in the primary locale."""
    if isinstance(payload, StartCleaning):
        return f"Začátek úklidu - {property_hint}" if property_hint else "Začátek úklidu"
    if isinstance(payload, SupplyOut):
        return f"Došly zásoby: {', '.join(payload.items) or 'neznámé'}"
    if isinstance(payload, LinenUsed):
        return f"Ložní prádlo: {payload.changed} vyměněno, {payload.dirty or 0} špinavých"
    if isinstance(payload, Note):
        return payload.text or "Poznámka"
    if isinstance(payload, PhotoMeta):
        return f"Foto: {payload.description or 'bez popisu'}"
    if isinstance(payload, Done):
        return "Úklid dokončen"
    raise TypeError(f"unknown payload {payload!r}")
