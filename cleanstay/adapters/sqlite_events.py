"""
SQLite adapter for EventLog.

Use ":memory:" for tests, a file path for production.
Insert-only: the adapter issues no UPDATE or DELETE against events.
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone

from cleanstay.domain.events import Event, EventLog

_SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id    TEXT NOT NULL UNIQUE,
    tenant_id   TEXT NOT NULL,
    property_id TEXT NOT NULL,
    session_id  TEXT,
    type        TEXT NOT NULL,
    started_at  TEXT NOT NULL,
    note        TEXT NOT NULL DEFAULT '',
    payload     TEXT NOT NULL DEFAULT '{}'
);

CREATE INDEX IF NOT EXISTS events_by_session ON events (session_id, started_at);
"""


def _iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SqliteEventLog(EventLog):

    def __init__(self, db_path: str = "cleanstay.db"):
        self._conn = sqlite3.connect(db_path, timeout=10.0)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    async def append(self, event: Event) -> str:
        event_id = event.event_id or str(uuid.uuid4())
        with self._conn:
            self._conn.execute(
                "INSERT INTO events"
                " (event_id, tenant_id, property_id, session_id, type,"
                "  started_at, note, payload)"
                " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (event_id, event.tenant_id, event.property_id, event.session_id,
                 event.type, _iso(event.started_at), event.note,
                 json.dumps(event.payload, ensure_ascii=False)),
            )
        return event_id

    async def list_for_session(self, session_id: str) -> list[Event]:
        rows = self._conn.execute(
            "SELECT * FROM events WHERE session_id = ? ORDER BY started_at, seq",
            (session_id,),
        ).fetchall()
        return [self._row_to_event(r) for r in rows]

    @staticmethod
    def _row_to_event(row) -> Event:
        return Event(
            event_id=row["event_id"],
            tenant_id=row["tenant_id"],
            property_id=row["property_id"],
            session_id=row["session_id"],
            type=row["type"],
            started_at=datetime.fromisoformat(row["started_at"]),
            note=row["note"],
            payload=json.loads(row["payload"]),
        )
