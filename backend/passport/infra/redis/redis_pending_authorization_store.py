# comments in English; reST docstrings
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from passport.services._shared.errors import StoreUnavailableError
from passport.services._shared.ports.pending_authorization_store import (
    DEFAULT_PENDING_TTL,
    PendingAuthorization,
    PendingAuthorizationStore,
)

log = logging.getLogger(__name__)


class RedisPendingAuthorizationStore(PendingAuthorizationStore):
    """
    Redis-backed pending-authorization table shared by every worker process.

    Entries are written with a Redis TTL and consumed with ``GETDEL`` so the
    lookup-and-remove is a single atomic command. Redis failures surface as
    :class:`StoreUnavailableError`.

    :param r: A Redis client (already connected).
    :param ttl: Entry lifetime.
    """

    def __init__(self, r: redis.Redis, ttl: timedelta = DEFAULT_PENDING_TTL) -> None:
        self.r = r
        self.ttl = ttl

    # -------------------- helpers --------------------

    @staticmethod
    def _k(state: str) -> str:
        return f"oauth:state:{state}"

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except RedisError as exc:
            log.error("pending_store.unavailable", extra={"operation": operation}, exc_info=True)
            raise StoreUnavailableError("Pending authorization store unavailable") from exc

    @staticmethod
    def _encode(entry: PendingAuthorization) -> str:
        return json.dumps(
            {
                "server_id": entry.server_id,
                "user_id": entry.user_id,
                "created_at": entry.created_at.timestamp(),
            }
        )

    @staticmethod
    def _decode(state: str, raw: bytes | str) -> PendingAuthorization | None:
        try:
            data = json.loads(raw)
            return PendingAuthorization(
                state=state,
                server_id=str(data["server_id"]),
                user_id=str(data["user_id"]),
                created_at=datetime.fromtimestamp(float(data["created_at"]), tz=UTC),
            )
        except (ValueError, KeyError, TypeError):
            return None

    # -------------------- API ------------------------

    def put(self, entry: PendingAuthorization) -> None:
        ttl_seconds = max(1, int(self.ttl.total_seconds()))
        with self._guard("put"):
            self.r.set(self._k(entry.state), self._encode(entry), ex=ttl_seconds)

    def consume(self, state: str, *, now: datetime) -> PendingAuthorization | None:
        with self._guard("consume"):
            raw = self.r.getdel(self._k(state))
        if raw is None:
            return None
        entry = self._decode(state, raw)
        if entry is None or entry.is_expired(now, self.ttl):
            return None
        return entry

    def purge_expired(self, now: datetime) -> int:
        # Redis expires keys on its own; this only catches entries whose
        # recorded creation time is older than the TTL (e.g. after a TTL change).
        removed = 0
        with self._guard("purge_expired"):
            for key in self.r.scan_iter(match=self._k("*")):
                raw = self.r.get(key)
                if raw is None:
                    continue
                name = key.decode() if isinstance(key, bytes) else str(key)
                entry = self._decode(name.split(":", 2)[2], raw)
                if entry is None or entry.is_expired(now, self.ttl):
                    removed += int(self.r.delete(key))
        return removed

    def count(self) -> int:
        with self._guard("count"):
            return sum(1 for _ in self.r.scan_iter(match=self._k("*")))
