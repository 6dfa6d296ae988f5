# passport/services/access/resolver.py
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from passport.models.base import ensure_utc
from passport.services._shared.base import BaseService
from passport.services.access.dto import (
    AccessDecision,
    AccessibleServer,
    AccessListing,
    HolderEntry,
    HolderListing,
)

log = logging.getLogger(__name__)


class AccessResolver(BaseService):
    """
    Read-only admission logic over credentials and acceptance policies.

    A store failure never raises out of this class: resolution fails closed
    (``granted=False``) and listings come back empty with
    ``store_unavailable=True`` so callers can report the outage.
    """

    def resolve_access(self, holder_id: str, server_id: str) -> AccessDecision:
        """
        Decide whether ``holder_id`` may join ``server_id``.

        When several credentials are accepted by the server, the most recently
        issued one wins.

        :param holder_id: Platform user id.
        :param server_id: Target server id.
        :returns: The access decision.
        """
        try:
            with self.ro_uow() as uow:
                match = uow.credentials.best_match(holder_id, server_id)
                if match is None:
                    return AccessDecision.denied()
                credential, policy = match
                return AccessDecision(
                    granted=True,
                    role_id=policy.granted_role_id,
                    issuer_id=credential.issuer_id,
                )
        except SQLAlchemyError:
            log.error(
                "access.resolve_failed",
                extra={"holder_id": holder_id, "server_id": server_id},
                exc_info=True,
            )
            return AccessDecision.denied(store_unavailable=True)

    def list_accessible_servers(self, holder_id: str) -> AccessListing:
        """Expand each of the holder's credentials to every policy accepting its issuer."""
        try:
            with self.ro_uow() as uow:
                issuers = [c.issuer_id for c in uow.credentials.list_for_holder(holder_id)]
                by_issuer: dict[str, list[AccessibleServer]] = {}
                for policy in uow.policies.list_for_issuers(set(issuers)):
                    by_issuer.setdefault(policy.issuer_id, []).append(
                        AccessibleServer(
                            server_id=policy.server_id,
                            issuer_id=policy.issuer_id,
                            role_id=policy.granted_role_id,
                        )
                    )
        except SQLAlchemyError:
            log.error("access.list_servers_failed", extra={"holder_id": holder_id}, exc_info=True)
            return AccessListing(store_unavailable=True)

        items: list[AccessibleServer] = []
        for issuer_id in issuers:
            items.extend(by_issuer.get(issuer_id, ()))
        return AccessListing(items=tuple(items))

    def list_holders(self, issuer_id: str) -> HolderListing:
        """List holders of ``issuer_id``'s credentials ordered by issuance."""
        try:
            with self.ro_uow() as uow:
                items = tuple(
                    HolderEntry(
                        holder_id=c.holder_id,
                        issued_at=ensure_utc(c.issued_at),
                        issued_by_id=c.issued_by_id,
                    )
                    for c in uow.credentials.list_for_issuer(issuer_id)
                )
        except SQLAlchemyError:
            log.error("access.list_holders_failed", extra={"issuer_id": issuer_id}, exc_info=True)
            return HolderListing(store_unavailable=True)
        return HolderListing(items=items)
