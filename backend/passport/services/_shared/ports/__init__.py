"""
passport.services._shared.ports
===============================

*Ports* (hexagonal interfaces) for the collaborators the passport services
talk to but do not own.

Modules
-------
- :mod:`membership_directory`:
    :class:`~.MembershipDirectory`: membership checks and adding members
    with a delegated token.
- :mod:`authorization_provider`:
    :class:`~.AuthorizationProvider`: OAuth2 authorization-code exchange.
- :mod:`pending_authorization_store`:
    :class:`~.PendingAuthorizationStore`: single-use table of pending
    authorizations.

Design Notes
------------
Each port ships an in-memory double for unit tests. Concrete adapters
(requests-based HTTP clients, Redis) live under ``passport.infra``.
"""

from __future__ import annotations

from .authorization_provider import (
    AuthorizationProvider,
    StubAuthorizationProvider,
    TokenExchangeError,
    TokenGrant,
)
from .membership_directory import (
    AUTHORIZATION_FAILURE_CODES,
    DirectoryError,
    InMemoryMembershipDirectory,
    MemberAdded,
    MembershipDirectory,
)
from .pending_authorization_store import (
    DEFAULT_PENDING_TTL,
    InMemoryPendingAuthorizationStore,
    PendingAuthorization,
    PendingAuthorizationStore,
)

__all__ = [
    "AUTHORIZATION_FAILURE_CODES",
    "AuthorizationProvider",
    "DEFAULT_PENDING_TTL",
    "DirectoryError",
    "InMemoryMembershipDirectory",
    "InMemoryPendingAuthorizationStore",
    "MemberAdded",
    "MembershipDirectory",
    "PendingAuthorization",
    "PendingAuthorizationStore",
    "StubAuthorizationProvider",
    "TokenExchangeError",
    "TokenGrant",
]
