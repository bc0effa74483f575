#!/usr/bin/env python3
"""
Print a worker's open session and the event timeline of any session.

Usage (from project root):
    TENANT_ID=t1 python scripts/show_session.py worker +420777123456
    python scripts/show_session.py events <session_id>
"""

import asyncio
import os
import sys

# Allow running as `python scripts/show_session.py` from project root.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cleanstay.adapters.sqlite_events import SqliteEventLog
from cleanstay.adapters.sqlite_sessions import SqliteSessionStore

DB_PATH = os.environ.get("DB_PATH", "data/cleanstay.db")


async def show_worker(tenant_id: str, worker_id: str) -> None:
    session = await SqliteSessionStore(DB_PATH).get_open(tenant_id, worker_id)
    if session is None:
        print(f"No open session for {worker_id}.")
        return
    print(f"\n{'=' * 60}")
    print(f"  Session:  {session.session_id}")
    print(f"  Property: {session.property_id}")
    print(f"  Started:  {session.started_at:%Y-%m-%d %H:%M}")
    print(f"  Deadline: {session.expected_end_at:%Y-%m-%d %H:%M}")
    print(f"{'=' * 60}\n")


async def show_events(session_id: str) -> None:
    session = await SqliteSessionStore(DB_PATH).get(session_id)
    if session is None:
        print(f"Session {session_id} not found.")
        return

    status = session.status
    if session.close_reason:
        status += f" ({session.close_reason})"
    print(f"\nSession {session_id}  |  {status}")
    print("-" * 80)
    for e in await SqliteEventLog(DB_PATH).list_for_session(session_id):
        print(f"  {e.started_at:%H:%M:%S}  {e.type:<14}  {e.note[:52]}")
    print()


async def main() -> None:
    if len(sys.argv) >= 3 and sys.argv[1] == "worker":
        tenant_id = os.environ.get("TENANT_ID")
        if not tenant_id:
            print("ERROR: environment variable 'TENANT_ID' is not set.", file=sys.stderr)
            sys.exit(1)
        await show_worker(tenant_id, sys.argv[2])
    elif len(sys.argv) >= 3 and sys.argv[1] == "events":
        await show_events(sys.argv[2])
    else:
        print(__doc__)


if __name__ == "__main__":
    asyncio.run(main())
