"""
SQLite adapter for SessionStore.

Use ":memory:" for tests, a file path for production.

The partial unique index is what makes "one open session per worker"
hold under concurrent writers; the adapter only translates its
IntegrityError into SessionAlreadyOpen.
"""

import sqlite3
from datetime import datetime, timezone

from cleanstay.domain.sessions import (
    CleaningSession,
    CloseReason,
    SessionAlreadyOpen,
    SessionStore,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cleaning_sessions (
    session_id      TEXT PRIMARY KEY,
    tenant_id       TEXT NOT NULL,
    property_id     TEXT NOT NULL,
    worker_id       TEXT NOT NULL,
    started_at      TEXT NOT NULL,
    expected_end_at TEXT NOT NULL,
    ended_at        TEXT,
    status          TEXT NOT NULL DEFAULT 'open'
                    CHECK (status IN ('open', 'closed')),
    close_reason    TEXT
                    CHECK (close_reason IS NULL OR close_reason IN ('done', 'timeout', 'manual'))
);

CREATE UNIQUE INDEX IF NOT EXISTS one_open_session_per_worker
    ON cleaning_sessions (tenant_id, worker_id)
    WHERE status = 'open';

CREATE INDEX IF NOT EXISTS open_sessions_by_deadline
    ON cleaning_sessions (expected_end_at)
    WHERE status = 'open';
"""


def _iso(dt: datetime) -> str:
    # Fixed-width UTC text so string comparison in SQL orders like time.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_dt(s: str) -> datetime:
    return datetime.fromisoformat(s)


class SqliteSessionStore(SessionStore):

    def __init__(self, db_path: str = "cleanstay.db"):
        self._conn = sqlite3.connect(db_path, timeout=10.0)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    async def create_open(self, session: CleaningSession) -> None:
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO cleaning_sessions"
                    " (session_id, tenant_id, property_id, worker_id,"
                    "  started_at, expected_end_at, status)"
                    " VALUES (?, ?, ?, ?, ?, ?, 'open')",
                    (session.session_id, session.tenant_id, session.property_id,
                     session.worker_id, _iso(session.started_at),
                     _iso(session.expected_end_at)),
                )
        except sqlite3.IntegrityError as exc:
            if "worker_id" not in str(exc):
                raise
            raise SessionAlreadyOpen(session.tenant_id, session.worker_id) from exc

    async def get_open(self, tenant_id: str, worker_id: str) -> CleaningSession | None:
        row = self._conn.execute(
            "SELECT * FROM cleaning_sessions"
            " WHERE tenant_id = ? AND worker_id = ? AND status = 'open'",
            (tenant_id, worker_id),
        ).fetchone()
        return self._row_to_session(row) if row else None

    async def get(self, session_id: str) -> CleaningSession | None:
        row = self._conn.execute(
            "SELECT * FROM cleaning_sessions WHERE session_id = ?", (session_id,)
        ).fetchone()
        return self._row_to_session(row) if row else None

    async def close(
        self, session_id: str, reason: CloseReason, ended_at: datetime
    ) -> bool:
        with self._conn:
            cur = self._conn.execute(
                "UPDATE cleaning_sessions"
                " SET status = 'closed', ended_at = ?, close_reason = ?"
                " WHERE session_id = ? AND status = 'open'",
                (_iso(ended_at), reason, session_id),
            )
        return cur.rowcount == 1

    async def close_expired(self, now: datetime) -> int:
        stamp = _iso(now)
        with self._conn:
            cur = self._conn.execute(
                "UPDATE cleaning_sessions"
                " SET status = 'closed', ended_at = ?, close_reason = 'timeout'"
                " WHERE status = 'open' AND expected_end_at < ?",
                (stamp, stamp),
            )
        return cur.rowcount

    @staticmethod
    def _row_to_session(row) -> CleaningSession:
        return CleaningSession(
            session_id=row["session_id"],
            tenant_id=row["tenant_id"],
            property_id=row["property_id"],
            worker_id=row["worker_id"],
            started_at=_parse_dt(row["started_at"]),
            expected_end_at=_parse_dt(row["expected_end_at"]),
            status=row["status"],
            ended_at=_parse_dt(row["ended_at"]) if row["ended_at"] else None,
            close_reason=row["close_reason"],
        )
