"""
Expiry sweeper process.

Closes every open cleaning session whose 4-hour deadline has passed,
every SWEEP_INTERVAL seconds.  Safe to run several copies at once.

Usage:
    python scripts/run_sweeper.py           # loop forever
    python scripts/run_sweeper.py --once    # single sweep, then exit (cron)

Environment variables:
    DB_PATH         - SQLite database path (default: data/cleanstay.db)
    SWEEP_INTERVAL  - seconds between sweeps (default: 300)
"""

import asyncio
import logging
import os
import sys

# Make sure project root is on sys.path when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cleanstay.adapters.sqlite_catalog import SqlitePropertyCatalog
from cleanstay.adapters.sqlite_events import SqliteEventLog
from cleanstay.adapters.sqlite_sessions import SqliteSessionStore
from cleanstay.controller import SessionController
from cleanstay.sweeper import DEFAULT_INTERVAL, run_forever, sweep_once

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger(__name__)


def build_controller() -> SessionController:
    db_path = os.environ.get("DB_PATH", "data/cleanstay.db")
    if os.path.dirname(db_path):
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
    return SessionController(
        catalog=SqlitePropertyCatalog(db_path),
        sessions=SqliteSessionStore(db_path),
        events=SqliteEventLog(db_path),
    )


async def main() -> None:
    controller = build_controller()

    if "--once" in sys.argv[1:]:
        await sweep_once(controller)
        return

    interval = int(os.environ.get("SWEEP_INTERVAL", str(DEFAULT_INTERVAL)))
    log.info("Sweeper started, interval=%ds", interval)
    await run_forever(controller, interval)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Sweeper stopped.")
