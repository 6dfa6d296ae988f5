from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol

# Provider error codes that mean the delegated token is unusable:
# 50001 "Missing Access", 50025 "Invalid OAuth2 access token".
AUTHORIZATION_FAILURE_CODES: frozenset[int] = frozenset({50001, 50025})


@dataclass(frozen=True, slots=True)
class MemberAdded:
    """
    Successful outcome of adding a member with a delegated token.

    :ivar username: Display name reported by the directory.
    :ivar already_member: ``True`` when the directory reported no change.
    """

    username: str | None = None
    already_member: bool = False


class DirectoryError(Exception):
    """
    Error reported by the group-membership directory.

    :param message: Provider message, surfaced verbatim to users.
    :param code: Provider-specific error code, when present.
    :param status: HTTP status of the failed call, when present.
    """

    def __init__(self, message: str, *, code: int | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    @property
    def is_authorization_failure(self) -> bool:
        """``True`` when the delegated token was rejected as invalid or unauthorized."""
        return self.code in AUTHORIZATION_FAILURE_CODES or self.status == 401


class MembershipDirectory(Protocol):
    """Port for the external group-membership directory."""

    def is_member(self, server_id: str, user_id: str) -> bool:
        """Return whether ``user_id`` currently belongs to ``server_id``."""
        ...

    def add_member_with_token(
        self,
        server_id: str,
        user_id: str,
        access_token: str,
        role_id: str | None = None,
    ) -> MemberAdded:
        """
        Add ``user_id`` to ``server_id`` on their behalf.

        :raises DirectoryError: When the directory rejects the call.
        """
        ...

    def server_name(self, server_id: str) -> str | None:
        """Return a display name for ``server_id`` or ``None`` when unknown."""
        ...


@dataclass
class InMemoryMembershipDirectory(MembershipDirectory):
    """
    Deterministic directory used in unit tests.

    ``rejected_tokens`` maps an access token to the :class:`DirectoryError`
    raised when it is used.
    """

    members: dict[str, set[str]] = field(default_factory=dict)
    roles: dict[tuple[str, str], set[str]] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)
    rejected_tokens: dict[str, DirectoryError] = field(default_factory=dict)
    calls: list[tuple[str, str, str, str | None]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_member(self, server_id: str, user_id: str) -> bool:
        with self._lock:
            return user_id in self.members.get(server_id, set())

    def add_member_with_token(
        self,
        server_id: str,
        user_id: str,
        access_token: str,
        role_id: str | None = None,
    ) -> MemberAdded:
        with self._lock:
            self.calls.append((server_id, user_id, access_token, role_id))
            error = self.rejected_tokens.get(access_token)
            if error is not None:
                raise error
            current = self.members.setdefault(server_id, set())
            if user_id in current:
                return MemberAdded(username=f"user-{user_id}", already_member=True)
            current.add(user_id)
            if role_id:
                self.roles.setdefault((server_id, user_id), set()).add(role_id)
            return MemberAdded(username=f"user-{user_id}")

    def server_name(self, server_id: str) -> str | None:
        return self.names.get(server_id)
