# passport/services/access/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """
    Outcome of an admission check.

    :param granted: Whether the holder may join the target server.
    :param role_id: Role granted by the matched acceptance policy, if any.
    :param issuer_id: Issuer of the credential that matched.
    :param store_unavailable: ``True`` when the decision was forced closed
        because the credential store could not be read.
    """

    granted: bool
    role_id: str | None = None
    issuer_id: str | None = None
    store_unavailable: bool = False

    @classmethod
    def denied(cls, *, store_unavailable: bool = False) -> AccessDecision:
        return cls(granted=False, store_unavailable=store_unavailable)


@dataclass(frozen=True, slots=True)
class AccessibleServer:
    """A server reachable through one of the holder's credentials."""

    server_id: str
    issuer_id: str
    role_id: str | None = None


@dataclass(frozen=True, slots=True)
class HolderEntry:
    """A holder of a credential issued by a given issuer."""

    holder_id: str
    issued_at: datetime
    issued_by_id: str


@dataclass(frozen=True, slots=True)
class AccessListing:
    """
    Accessible servers for one holder.

    Items are grouped by credential and not deduplicated; see
    :meth:`unique_servers`.
    """

    items: tuple[AccessibleServer, ...] = field(default_factory=tuple)
    store_unavailable: bool = False

    def unique_servers(self) -> list[AccessibleServer]:
        """Return the first item per ``server_id``, preserving order."""
        seen: set[str] = set()
        out: list[AccessibleServer] = []
        for item in self.items:
            if item.server_id in seen:
                continue
            seen.add(item.server_id)
            out.append(item)
        return out


@dataclass(frozen=True, slots=True)
class HolderListing:
    """Holders of one issuer's credentials, oldest issuance first."""

    items: tuple[HolderEntry, ...] = field(default_factory=tuple)
    store_unavailable: bool = False
