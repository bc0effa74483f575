"""In-memory adapter for EventLog — for tests and local development."""

import copy
import uuid
from dataclasses import replace

from cleanstay.domain.events import Event, EventLog


def _detached(event: Event) -> Event:
    return replace(event, payload=copy.deepcopy(event.payload))


class InMemoryEventLog(EventLog):

    def __init__(self):
        self._events: list[Event] = []

    async def append(self, event: Event) -> str:
        stored = _detached(replace(event, event_id=event.event_id or str(uuid.uuid4())))
        self._events.append(stored)
        return stored.event_id

    async def list_for_session(self, session_id: str) -> list[Event]:
        # sorted() is stable: equal timestamps keep append order
        return [
            _detached(e)
            for e in sorted(
                (e for e in self._events if e.session_id == session_id),
                key=lambda e: e.started_at,
            )
        ]
