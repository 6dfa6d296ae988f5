"""
Unit tests for the pending-authorization stores.

Both implementations share one contract, exercised here against the
in-process store and the Redis store backed by ``fakeredis``:

- ``consume`` is single-use and honours the TTL
- ``purge_expired`` drops only stale entries
- concurrent ``consume`` calls on one state hand it out exactly once
"""

from __future__ import annotations

import threading
from datetime import timedelta

import fakeredis
import pytest
from passport.infra.redis.redis_pending_authorization_store import (
    RedisPendingAuthorizationStore,
)
from passport.services._shared.errors import StoreUnavailableError
from passport.services._shared.ports import (
    InMemoryPendingAuthorizationStore,
    PendingAuthorization,
)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(params=["memory", "redis"])
def store(request, fake_redis):
    if request.param == "memory":
        return InMemoryPendingAuthorizationStore(ttl=timedelta(minutes=10))
    return RedisPendingAuthorizationStore(fake_redis, ttl=timedelta(minutes=10))


def _entry(state: str, created_at) -> PendingAuthorization:
    return PendingAuthorization(state=state, server_id="srv-t", user_id="u1", created_at=created_at)


class TestPendingAuthorizationStore:
    def test_consume_returns_entry_once(self, store, now):
        store.put(_entry("s1", now))

        first = store.consume("s1", now=now + timedelta(minutes=1))
        second = store.consume("s1", now=now + timedelta(minutes=1))

        assert first == _entry("s1", now)
        assert second is None
        assert store.count() == 0

    def test_consume_unknown_state(self, store, now):
        assert store.consume("missing", now=now) is None

    def test_consume_after_ttl(self, store, now):
        store.put(_entry("s1", now))

        assert store.consume("s1", now=now + timedelta(minutes=10, seconds=1)) is None

    def test_purge_expired(self, store, now):
        store.put(_entry("old", now - timedelta(minutes=20)))
        store.put(_entry("fresh", now))

        assert store.purge_expired(now) == 1
        assert store.count() == 1
        assert store.consume("fresh", now=now) is not None

    def test_concurrent_consume_hands_out_state_once(self, store, now):
        """
        GIVEN one pending authorization
        WHEN several threads consume the same state at the same instant
        THEN exactly one of them receives the entry
        """
        workers = 8
        store.put(_entry("shared", now))
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def consume():
            barrier.wait()
            got = store.consume("shared", now=now + timedelta(seconds=1))
            with results_lock:
                results.append(got)

        threads = [threading.Thread(target=consume) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert len(results) == workers
        assert [r for r in results if r is not None] == [_entry("shared", now)]
        assert store.count() == 0


class TestRedisPendingAuthorizationStore:
    def test_entries_carry_a_redis_ttl(self, fake_redis, now):
        store = RedisPendingAuthorizationStore(fake_redis, ttl=timedelta(minutes=10))

        store.put(_entry("s1", now))

        assert 0 < fake_redis.ttl("oauth:state:s1") <= 600

    def test_corrupt_payload_is_treated_as_missing(self, fake_redis, now):
        store = RedisPendingAuthorizationStore(fake_redis)
        fake_redis.set("oauth:state:bad", "not-json")

        assert store.consume("bad", now=now) is None
        assert fake_redis.exists("oauth:state:bad") == 0

    def test_unreachable_server_raises_store_unavailable(self, now):
        server = fakeredis.FakeServer()
        server.connected = False
        store = RedisPendingAuthorizationStore(fakeredis.FakeRedis(server=server))

        with pytest.raises(StoreUnavailableError):
            store.put(_entry("s1", now))
        with pytest.raises(StoreUnavailableError):
            store.consume("s1", now=now)
        with pytest.raises(StoreUnavailableError):
            store.purge_expired(now)
