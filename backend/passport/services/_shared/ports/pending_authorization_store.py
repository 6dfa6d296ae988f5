from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

DEFAULT_PENDING_TTL = timedelta(minutes=10)


@dataclass(frozen=True, slots=True)
class PendingAuthorization:
    """
    Ephemeral record tying an opaque OAuth ``state`` to a join attempt.

    :ivar state: Random opaque identifier embedded in the authorize URL.
    :ivar server_id: Target server of the join.
    :ivar user_id: Platform user who opened the join link.
    :ivar created_at: Creation instant (UTC).
    """

    state: str
    server_id: str
    user_id: str
    created_at: datetime

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.created_at > ttl


class PendingAuthorizationStore(Protocol):
    """
    Single-use table of pending authorizations.

    ``consume`` MUST look up and remove the entry atomically so one ``state``
    can never be redeemed twice.
    """

    ttl: timedelta

    def put(self, entry: PendingAuthorization) -> None: ...

    def consume(self, state: str, *, now: datetime) -> PendingAuthorization | None:
        """Remove and return the entry, or ``None`` when absent or past the TTL."""
        ...

    def purge_expired(self, now: datetime) -> int:
        """Drop entries older than the TTL. :returns: Number removed."""
        ...

    def count(self) -> int: ...


class InMemoryPendingAuthorizationStore(PendingAuthorizationStore):
    """
    Process-local store guarded by a single lock.

    .. note::
       Entries do not survive a restart and are not shared between worker
       processes.
    """

    def __init__(self, ttl: timedelta = DEFAULT_PENDING_TTL) -> None:
        self.ttl = ttl
        self._entries: dict[str, PendingAuthorization] = {}
        self._lock = threading.Lock()

    def put(self, entry: PendingAuthorization) -> None:
        with self._lock:
            self._entries[entry.state] = entry

    def consume(self, state: str, *, now: datetime) -> PendingAuthorization | None:
        with self._lock:
            entry = self._entries.pop(state, None)
        if entry is None or entry.is_expired(now, self.ttl):
            return None
        return entry

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [k for k, v in self._entries.items() if v.is_expired(now, self.ttl)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)
