"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`passport.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``passport.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Access resolution (from ``passport.services.access``)
    * :class:`AccessResolver`, :class:`AccessDecision`

- Capability tokens (from ``passport.services.capability``)
    * :class:`CapabilityCodec`

- Passport administration (from ``passport.services.passports``)
    * :class:`PassportService`

- Joining (from ``passport.services.join`` and ``passport.services.oauth``)
    * :class:`JoinOrchestrator`, :class:`JoinResult`, :class:`JoinError`
    * :class:`OAuthExchangeCoordinator`

- Auto-issue (from ``passport.services.reconciler``)
    * :class:`AutoIssueReconciler`, :class:`MembershipChange`
"""

from __future__ import annotations

from passport.services._shared.base import BaseService, ServiceContext
from passport.services.access import AccessDecision, AccessResolver
from passport.services.capability import CapabilityCodec
from passport.services.join import JoinError, JoinOrchestrator, JoinResult
from passport.services.oauth import OAuthExchangeCoordinator
from passport.services.passports import PassportService
from passport.services.reconciler import AutoIssueReconciler, MembershipChange

__all__ = [
    "AccessDecision",
    "AccessResolver",
    "AutoIssueReconciler",
    "BaseService",
    "CapabilityCodec",
    "JoinError",
    "JoinOrchestrator",
    "JoinResult",
    "MembershipChange",
    "OAuthExchangeCoordinator",
    "PassportService",
    "ServiceContext",
]
