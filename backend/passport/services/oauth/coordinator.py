"""
OAuthExchangeCoordinator
========================

Drives one authorization attempt through its states::

    Requested --(callback, valid code)--> Exchanged
        |--(TTL elapsed, swept)---------> Expired
        '--(unknown state / bad code)---> Rejected

The pending table is single-use: :meth:`complete_authorization` consumes the
state atomically, so a replayed callback can never join twice.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from urllib.parse import urlencode

from passport.models.base import utcnow
from passport.services._shared.base import BaseService
from passport.services._shared.errors import AccessDeniedError, StoreUnavailableError
from passport.services._shared.ports.authorization_provider import (
    AuthorizationProvider,
    TokenExchangeError,
)
from passport.services._shared.ports.pending_authorization_store import (
    PendingAuthorization,
    PendingAuthorizationStore,
)
from passport.services.join.dto import JoinError, JoinResult
from passport.services.join.orchestrator import JoinOrchestrator

log = logging.getLogger(__name__)

DEFAULT_SCOPES = "guilds.join"


class OAuthExchangeCoordinator(BaseService):
    """
    Authorization-code flow for join links.

    :param orchestrator: Join orchestrator (also provides the resolver and codec).
    :param provider: Authorization provider performing the code exchange.
    :param pending: Single-use pending-authorization table.
    :param client_id: OAuth client id.
    :param redirect_uri: Callback URL registered with the provider.
    :param authorize_endpoint: Provider authorize URL.
    :param scopes: Space-separated scopes requested.
    """

    def __init__(
        self,
        *,
        orchestrator: JoinOrchestrator,
        provider: AuthorizationProvider,
        pending: PendingAuthorizationStore,
        client_id: str,
        redirect_uri: str,
        authorize_endpoint: str,
        scopes: str = DEFAULT_SCOPES,
    ) -> None:
        super().__init__()
        self.orchestrator = orchestrator
        self.provider = provider
        self.pending = pending
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.authorize_endpoint = authorize_endpoint
        self.scopes = scopes

    # ------------------------------------------------------------------ #
    # Requested
    # ------------------------------------------------------------------ #

    def begin_authorization(
        self, user_id: str, server_id: str, now: datetime | None = None
    ) -> str:
        """Record a pending authorization and return its opaque ``state``."""
        state = secrets.token_urlsafe(32)
        self.pending.put(
            PendingAuthorization(
                state=state,
                server_id=server_id,
                user_id=user_id,
                created_at=now or utcnow(),
            )
        )
        return state

    def authorize_url(self, state: str) -> str:
        """Return the provider authorize URL carrying ``state``."""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": self.scopes,
                "state": state,
            }
        )
        return f"{self.authorize_endpoint}?{query}"

    def open_join_link(
        self,
        server_id: str,
        user_id: str,
        token: str,
        now: datetime | None = None,
    ) -> str:
        """
        Validate a join link and start the authorization round-trip.

        :returns: Provider authorize URL to redirect the user to.
        :raises AccessDeniedError: If the capability token is invalid or expired,
            or the user no longer has access.
        :raises StoreUnavailableError: If the pending table cannot be written.
        """
        now = now or utcnow()
        fields = {"user_id": user_id, "server_id": server_id}
        if not self.orchestrator.codec.verify(user_id, server_id, token, now):
            log.warning("oauth.join_link_rejected", extra=fields)
            raise AccessDeniedError("Invalid or expired join link.")

        decision = self.orchestrator.resolver.resolve_access(user_id, server_id)
        if not decision.granted:
            log.warning(
                "oauth.join_link_without_access",
                extra={**fields, "store_unavailable": decision.store_unavailable},
            )
            raise AccessDeniedError("No valid passport for this server.")

        state = self.begin_authorization(user_id, server_id, now)
        log.info("oauth.authorization_requested", extra=fields)
        return self.authorize_url(state)

    # ------------------------------------------------------------------ #
    # Exchanged / Rejected
    # ------------------------------------------------------------------ #

    def complete_authorization(
        self, code: str, state: str, now: datetime | None = None
    ) -> JoinResult:
        """
        Redeem ``code`` for the pending authorization behind ``state`` and join.

        The code is never retried: it is single-use at the provider.
        """
        now = now or utcnow()
        try:
            entry = self.pending.consume(state, now=now) if state else None
        except StoreUnavailableError:
            return JoinResult.failed(JoinError.STORE_UNAVAILABLE)
        if entry is None:
            log.warning("oauth.state_rejected")
            return JoinResult.failed(JoinError.INVALID_OR_EXPIRED_STATE)

        fields = {"user_id": entry.user_id, "server_id": entry.server_id}
        if not code:
            log.warning("oauth.code_missing", extra=fields)
            return JoinResult.failed(JoinError.TOKEN_EXCHANGE_FAILED, server_id=entry.server_id)

        try:
            grant = self.provider.exchange_code(code)
        except TokenExchangeError as exc:
            log.warning(
                "oauth.exchange_failed",
                extra={**fields, "provider_status": exc.status, "error": str(exc)},
            )
            return JoinResult.failed(JoinError.TOKEN_EXCHANGE_FAILED, server_id=entry.server_id)

        try:
            with self.store_guard("token_upsert", **fields):
                with self.rw_uow() as uow:
                    uow.tokens.upsert(
                        holder_id=entry.user_id,
                        access_token=grant.access_token,
                        refresh_token=grant.refresh_token,
                        expires_at=now + timedelta(seconds=grant.expires_in),
                        now=now,
                    )
        except StoreUnavailableError:
            return JoinResult.failed(JoinError.STORE_UNAVAILABLE, server_id=entry.server_id)

        log.info("oauth.exchanged", extra=fields)
        return self.orchestrator.attempt_join(
            entry.user_id, entry.server_id, access_token=grant.access_token, now=now
        )

    # ------------------------------------------------------------------ #
    # Expired
    # ------------------------------------------------------------------ #

    def sweep(self, now: datetime | None = None) -> int:
        """Drop pending authorizations older than the TTL; return how many."""
        removed = self.pending.purge_expired(now or utcnow())
        if removed:
            log.info("oauth.pending_swept", extra={"removed": removed})
        return removed
