# passport/services/reconciler/dto.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class MembershipChange:
    """
    Role delta for one member of one server.

    :param added_roles: Roles gained in this event.
    :param removed_roles: Roles lost in this event.
    :param held_roles: Roles held after the event, when the feed knows them.
        Without it only same-event additions can keep a passport alive.
    """

    server_id: str
    user_id: str
    added_roles: frozenset[str] = field(default_factory=frozenset)
    removed_roles: frozenset[str] = field(default_factory=frozenset)
    held_roles: frozenset[str] | None = None

    @classmethod
    def from_snapshots(
        cls,
        server_id: str,
        user_id: str,
        before: Iterable[str],
        after: Iterable[str],
    ) -> MembershipChange:
        """Compute the delta between two role snapshots."""
        old, new = frozenset(before), frozenset(after)
        return cls(
            server_id=server_id,
            user_id=user_id,
            added_roles=new - old,
            removed_roles=old - new,
            held_roles=new,
        )


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """A rule whose store operation failed while handling an event."""

    role_id: str | None
    operation: str
    message: str


@dataclass(slots=True)
class ReconcileReport:
    """
    What one event did to the member's passport from the server.

    ``retained`` is set when a trigger role was removed but another held
    trigger role still justifies the passport.
    """

    server_id: str
    user_id: str
    issued: bool = False
    revoked: bool = False
    retained: bool = False
    failures: list[RuleFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
