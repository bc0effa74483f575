"""
Adapter contract for SessionStore.

Any implementation (in-memory, SQLite, ...) must pass these tests.
The single-open rule must hold in storage itself, not only in callers.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

import pytest

from cleanstay.domain.sessions import CleaningSession, SessionAlreadyOpen, SessionStore

T0 = datetime(2026, 3, 5, 8, 0, tzinfo=timezone.utc)


def _session(session_id: str, tenant: str = "T", worker: str = "+420111",
             started: datetime = T0, ttl_hours: int = 4) -> CleaningSession:
    return CleaningSession(
        session_id=session_id,
        tenant_id=tenant,
        property_id="p-302",
        worker_id=worker,
        started_at=started,
        expected_end_at=started + timedelta(hours=ttl_hours),
    )


class SessionStoreContract(ABC):

    @abstractmethod
    def create_store(self) -> SessionStore:
        """Return a fresh, empty store."""
        ...

    @pytest.mark.asyncio
    async def test_create_then_get_open(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        s = await store.get_open("T", "+420111")
        assert s is not None
        assert s.session_id == "s1"
        assert s.status == "open"
        assert s.expected_end_at == T0 + timedelta(hours=4)
        assert s.ended_at is None
        assert s.close_reason is None

    @pytest.mark.asyncio
    async def test_no_open_session_by_default(self):
        store = self.create_store()
        assert await store.get_open("T", "+420111") is None

    @pytest.mark.asyncio
    async def test_second_open_for_same_worker_rejected(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        with pytest.raises(SessionAlreadyOpen):
            await store.create_open(_session("s2"))
        assert (await store.get_open("T", "+420111")).session_id == "s1"
        assert await store.get("s2") is None

    @pytest.mark.asyncio
    async def test_other_worker_and_other_tenant_are_independent(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        await store.create_open(_session("s2", worker="+420222"))
        await store.create_open(_session("s3", tenant="U"))
        assert (await store.get_open("T", "+420222")).session_id == "s2"
        assert (await store.get_open("U", "+420111")).session_id == "s3"

    @pytest.mark.asyncio
    async def test_close_sets_fields_once(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        ended = T0 + timedelta(hours=1)
        assert await store.close("s1", "done", ended) is True
        assert await store.close("s1", "manual", ended) is False

        s = await store.get("s1")
        assert s.status == "closed"
        assert s.close_reason == "done"
        assert s.ended_at == ended
        assert await store.get_open("T", "+420111") is None

    @pytest.mark.asyncio
    async def test_close_unknown_session_returns_false(self):
        store = self.create_store()
        assert await store.close("nope", "done", T0) is False

    @pytest.mark.asyncio
    async def test_reopen_after_close(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        await store.close("s1", "done", T0 + timedelta(hours=1))
        await store.create_open(_session("s2", started=T0 + timedelta(hours=2)))
        assert (await store.get_open("T", "+420111")).session_id == "s2"

    @pytest.mark.asyncio
    async def test_close_expired_only_touches_past_deadline(self):
        store = self.create_store()
        await store.create_open(_session("old", worker="+420111", started=T0))
        await store.create_open(_session("fresh", worker="+420222", started=T0 + timedelta(hours=3)))
        await store.create_open(_session("other-tenant", tenant="U", started=T0))

        now = T0 + timedelta(hours=5)
        assert await store.close_expired(now) == 2

        old = await store.get("old")
        assert old.status == "closed"
        assert old.close_reason == "timeout"
        assert old.ended_at == now
        assert (await store.get("other-tenant")).close_reason == "timeout"
        assert (await store.get("fresh")).status == "open"

    @pytest.mark.asyncio
    async def test_close_expired_is_idempotent(self):
        store = self.create_store()
        await store.create_open(_session("old"))
        now = T0 + timedelta(hours=5)
        assert await store.close_expired(now) == 1
        assert await store.close_expired(now) == 0

    @pytest.mark.asyncio
    async def test_close_expired_skips_explicitly_closed(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        await store.close("s1", "manual", T0 + timedelta(hours=1))
        assert await store.close_expired(T0 + timedelta(hours=5)) == 0
        assert (await store.get("s1")).close_reason == "manual"

    @pytest.mark.asyncio
    async def test_deadline_is_strictly_in_the_past(self):
        store = self.create_store()
        await store.create_open(_session("s1"))
        assert await store.close_expired(T0 + timedelta(hours=4)) == 0
        assert await store.close_expired(T0 + timedelta(hours=4, microseconds=1)) == 1
