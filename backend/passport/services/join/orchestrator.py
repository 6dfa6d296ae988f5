"""
JoinOrchestrator
================

Top-level join use case: admit a user to a server with their delegated token,
or tell the caller that an authorization round-trip is needed.

Flow of :meth:`JoinOrchestrator.attempt_join`:

1. Resolve access from passports and acceptance policies.
2. Reject users who already belong to the server.
3. Pick the token: explicitly supplied, else the stored one.
4. Drop expired stored tokens.
5. Add the member through the directory, deleting tokens the provider rejects.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from passport.models.base import utcnow
from passport.services._shared.base import BaseService
from passport.services._shared.errors import StoreUnavailableError
from passport.services._shared.ports.membership_directory import (
    DirectoryError,
    MembershipDirectory,
)
from passport.services.access.resolver import AccessResolver
from passport.services.capability.codec import CapabilityCodec
from passport.services.join.dto import JoinError, JoinResult

log = logging.getLogger(__name__)


class JoinOrchestrator(BaseService):
    """
    Join a user to a server on the strength of their passports.

    :param resolver: Access resolver used for every admission check.
    :param directory: External group-membership directory.
    :param codec: Capability codec signing join links.
    :param public_base_url: Base URL embedded in join links.
    """

    def __init__(
        self,
        *,
        resolver: AccessResolver,
        directory: MembershipDirectory,
        codec: CapabilityCodec,
        public_base_url: str,
    ) -> None:
        super().__init__()
        self.resolver = resolver
        self.directory = directory
        self.codec = codec
        self.public_base_url = public_base_url.rstrip("/")

    # ------------------------------------------------------------------ #
    # Join
    # ------------------------------------------------------------------ #

    def attempt_join(
        self,
        user_id: str,
        server_id: str,
        access_token: str | None = None,
        now: datetime | None = None,
    ) -> JoinResult:
        """
        Try to add ``user_id`` to ``server_id``.

        :param access_token: Freshly exchanged token; when omitted the stored
            delegated token is used.
        :returns: The join outcome; this method does not raise for expected
            failures.
        """
        now = now or utcnow()
        fields = {"user_id": user_id, "server_id": server_id}

        decision = self.resolver.resolve_access(user_id, server_id)
        if not decision.granted:
            error = (
                JoinError.STORE_UNAVAILABLE
                if decision.store_unavailable
                else JoinError.NO_VALID_CREDENTIAL
            )
            log.info("join.denied", extra={**fields, "error": error.value})
            return JoinResult.failed(error, server_id=server_id)

        issuer_id = decision.issuer_id
        try:
            if self.directory.is_member(server_id, user_id):
                return JoinResult.failed(
                    JoinError.ALREADY_MEMBER, server_id=server_id, issuer_id=issuer_id
                )
        except DirectoryError as exc:
            log.warning("join.membership_check_failed", extra={**fields, "error": exc.message})
            return JoinResult.failed(
                JoinError.PROVIDER_ERROR,
                message=exc.message,
                server_id=server_id,
                issuer_id=issuer_id,
            )

        token = access_token
        if token is None:
            try:
                with self.ro_uow() as uow:
                    stored = uow.tokens.get_for_holder(user_id)
                    expired = stored is not None and stored.is_expired(now)
                    token = stored.access_token if stored is not None else None
            except SQLAlchemyError:
                log.error("join.token_lookup_failed", extra=fields, exc_info=True)
                return JoinResult.failed(JoinError.STORE_UNAVAILABLE, server_id=server_id)

            if token is None:
                log.info("join.authorization_required", extra=fields)
                return JoinResult.failed(
                    JoinError.AUTHORIZATION_REQUIRED, server_id=server_id, issuer_id=issuer_id
                )
            if expired:
                failure = self._discard_token(user_id, JoinError.AUTHORIZATION_EXPIRED)
                log.info("join.authorization_expired", extra=fields)
                return JoinResult.failed(failure, server_id=server_id, issuer_id=issuer_id)

        try:
            added = self.directory.add_member_with_token(
                server_id, user_id, token, decision.role_id
            )
        except DirectoryError as exc:
            if exc.is_authorization_failure:
                failure = self._discard_token(user_id, JoinError.AUTHORIZATION_INVALID)
                log.info(
                    "join.authorization_invalid",
                    extra={**fields, "provider_code": exc.code, "provider_status": exc.status},
                )
                return JoinResult.failed(failure, server_id=server_id, issuer_id=issuer_id)
            log.warning(
                "join.provider_error",
                extra={**fields, "provider_code": exc.code, "error": exc.message},
            )
            return JoinResult.failed(
                JoinError.PROVIDER_ERROR,
                message=exc.message,
                server_id=server_id,
                issuer_id=issuer_id,
            )

        if added.already_member:
            return JoinResult.failed(
                JoinError.ALREADY_MEMBER, server_id=server_id, issuer_id=issuer_id
            )

        role_assigned = decision.role_id is not None
        log.info(
            "join.succeeded",
            extra={
                **fields,
                "issuer_id": issuer_id,
                "role_id": decision.role_id,
                "role_assigned": role_assigned,
            },
        )
        return JoinResult(
            success=True,
            role_assigned=role_assigned,
            message="Joined the server.",
            username=added.username,
            issuer_id=issuer_id,
            server_id=server_id,
            server_name=self._server_name(server_id),
        )

    def _discard_token(self, user_id: str, reason: JoinError) -> JoinError:
        """Delete the stored token; report ``reason`` or a store failure."""
        try:
            with self.store_guard("discard_token", user_id=user_id):
                with self.rw_uow() as uow:
                    uow.tokens.delete_for_holder(user_id)
        except StoreUnavailableError:
            return JoinError.STORE_UNAVAILABLE
        return reason

    def _server_name(self, server_id: str) -> str | None:
        try:
            return self.directory.server_name(server_id)
        except DirectoryError:
            return None

    # ------------------------------------------------------------------ #
    # Authorization links
    # ------------------------------------------------------------------ #

    def generate_authorization_link(
        self, user_id: str, server_id: str, now: datetime | None = None
    ) -> str | None:
        """
        Build a signed join link for ``user_id``.

        :returns: ``<base>/join/<server_id>/<user_id>/<token>`` or ``None`` when
            the user has no access (no token is ever minted without access).
        """
        decision = self.resolver.resolve_access(user_id, server_id)
        if not decision.granted:
            log.warning(
                "join.link_denied",
                extra={"user_id": user_id, "server_id": server_id},
            )
            return None
        token = self.codec.mint(user_id, server_id, now or utcnow())
        log.info("join.link_generated", extra={"user_id": user_id, "server_id": server_id})
        return f"{self.public_base_url}/join/{server_id}/{user_id}/{token}"
