"""
Expiry sweeper — closes sessions nobody closed.

A worker who forgets to say "hotovo" would otherwise block their own next
start forever.  The sweep is one conditional bulk update in storage, so
overlapping or repeated sweeps never close (or count) a session twice.
"""

import asyncio
import logging

from cleanstay.controller import SessionController

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 300


async def sweep_once(controller: SessionController) -> int:
    """One sweep.  Returns the number of sessions closed by this call."""
    closed = await controller.auto_close_expired_sessions()
    log.info("Expiry sweep: %d session(s) closed with reason=timeout", closed)
    return closed


async def run_forever(
    controller: SessionController,
    interval_seconds: float = DEFAULT_INTERVAL,
    max_cycles: int | None = None,
) -> None:
    """
    Sweep every ``interval_seconds``.

    A failed cycle (e.g. the database is locked) is logged and the loop
    carries on; the next cycle picks up whatever the failed one missed.
    ``max_cycles`` bounds the loop for tests.
    """
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        try:
            await sweep_once(controller)
        except Exception as exc:
            log.error("Expiry sweep failed: %s", exc)
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        await asyncio.sleep(interval_seconds)
