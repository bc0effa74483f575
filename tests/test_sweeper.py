"""
Expiry sweep — sessions past their 4h deadline are closed with reason
"timeout", once, however often the sweep runs.
"""

import pytest

from cleanstay.adapters.memory_catalog import InMemoryPropertyCatalog
from cleanstay.adapters.memory_events import InMemoryEventLog
from cleanstay.adapters.memory_sessions import InMemorySessionStore
from cleanstay.adapters.sqlite_sessions import SqliteSessionStore
from cleanstay.controller import SessionController
from cleanstay.domain.catalog import Property
from cleanstay.domain.errors import NoActiveSession
from cleanstay import sweeper
from tests.fakes import FakeClock

TENANT = "T"


class FlakySessionStore(InMemorySessionStore):
    """Fails the first ``failures`` close_expired() calls."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.sweeps = 0

    async def close_expired(self, now):
        self.sweeps += 1
        if self.failures:
            self.failures -= 1
            raise RuntimeError("database is locked")
        return await super().close_expired(now)


@pytest.fixture(params=["memory", "sqlite"])
def sessions(request):
    if request.param == "memory":
        return InMemorySessionStore()
    return SqliteSessionStore(":memory:")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return InMemoryEventLog()


def _controller(sessions, events, clock) -> SessionController:
    catalog = InMemoryPropertyCatalog([
        Property("p1", TENANT, "Nikolajka 302"),
        Property("p3", TENANT, "Karlín 15"),
    ])
    return SessionController(catalog, sessions, events, clock=clock)


@pytest.mark.asyncio
async def test_expired_session_closed_once(sessions, events, clock):
    controller = _controller(sessions, events, clock)
    ref = await controller.open(TENANT, "W", "302")

    clock.advance(hours=4, minutes=1)
    assert await sweeper.sweep_once(controller) == 1
    assert await sweeper.sweep_once(controller) == 0

    assert await controller.get_active_session(TENANT, "W") is None
    stored = await sessions.get(ref.session_id)
    assert stored.close_reason == "timeout"
    assert stored.ended_at == clock.now
    # a timeout is not a "done": no event beyond the start
    assert [e.type for e in await events.list_for_session(ref.session_id)] == ["session_start"]


@pytest.mark.asyncio
async def test_session_within_ttl_survives(sessions, events, clock):
    controller = _controller(sessions, events, clock)
    await controller.open(TENANT, "W", "302")

    clock.advance(hours=3, minutes=59)
    assert await sweeper.sweep_once(controller) == 0
    assert await controller.get_active_session(TENANT, "W") is not None


@pytest.mark.asyncio
async def test_sweep_spans_workers(sessions, events, clock):
    controller = _controller(sessions, events, clock)
    await controller.open(TENANT, "W1", "302")
    await controller.open(TENANT, "W2", "Karlín")
    clock.advance(hours=2)
    await controller.open(TENANT, "W3", "302")

    clock.advance(hours=2, minutes=30)
    assert await controller.auto_close_expired_sessions() == 2
    assert await controller.get_active_session(TENANT, "W3") is not None


@pytest.mark.asyncio
async def test_close_after_sweep_reports_no_session(sessions, events, clock):
    controller = _controller(sessions, events, clock)
    await controller.open(TENANT, "W", "302")
    clock.advance(hours=5)
    await sweeper.sweep_once(controller)

    with pytest.raises(NoActiveSession):
        await controller.close(TENANT, "W", "done")


@pytest.mark.asyncio
async def test_worker_can_start_again_after_timeout(sessions, events, clock):
    controller = _controller(sessions, events, clock)
    first = await controller.open(TENANT, "W", "302")
    clock.advance(hours=5)
    await sweeper.sweep_once(controller)

    second = await controller.open(TENANT, "W", "Karlín")
    assert second.session_id != first.session_id


@pytest.mark.asyncio
async def test_run_forever_survives_failed_cycle(events, clock):
    store = FlakySessionStore(failures=1)
    controller = _controller(store, events, clock)
    await controller.open(TENANT, "W", "302")
    clock.advance(hours=5)

    await sweeper.run_forever(controller, interval_seconds=0, max_cycles=3)

    assert store.sweeps == 3
    assert await controller.get_active_session(TENANT, "W") is None
