"""
PassportService
===============

Administrative operations on passports and the server-level configuration
around them:

- Issue and revoke passports (manual and idempotent variants).
- Accept or stop accepting another server's passports.
- Configure auto-issue trigger roles.
- Summaries and listings for administrators and holders.

Notes
-----
- Write operations use ``rw_uow()`` and surface store failures as
  :class:`StoreUnavailableError`.
- Read operations use ``ro_uow()``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from passport.models.acceptance_policy import AcceptancePolicy
from passport.models.auto_issue_rule import AutoIssueRule
from passport.models.base import ensure_utc
from passport.models.credential import Credential
from passport.services._shared.base import BaseService
from passport.services._shared.errors import ConflictError, NotFoundError, ServiceError
from passport.services.passports.dto import (
    AddAutoIssueRuleIn,
    AddPolicyIn,
    AutoIssueRuleOut,
    IssuePassportIn,
    PassportOut,
    PolicyOut,
    ServerInfoOut,
)

log = logging.getLogger(__name__)


def _passport_out(c: Credential) -> PassportOut:
    return PassportOut(
        holder_id=c.holder_id,
        issuer_id=c.issuer_id,
        issued_at=ensure_utc(c.issued_at),
        issued_by_id=c.issued_by_id,
    )


def _policy_out(p: AcceptancePolicy) -> PolicyOut:
    return PolicyOut(
        server_id=p.server_id,
        issuer_id=p.issuer_id,
        role_id=p.granted_role_id,
        added_at=ensure_utc(p.added_at),
        added_by_id=p.added_by_id,
    )


def _rule_out(r: AutoIssueRule) -> AutoIssueRuleOut:
    return AutoIssueRuleOut(
        server_id=r.server_id,
        role_id=r.trigger_role_id,
        created_at=ensure_utc(r.created_at),
        created_by_id=r.created_by_id,
    )


class PassportService(BaseService):
    """Application service for passports, acceptance policies and auto-issue rules."""

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_if_absent(
        self,
        *,
        holder_id: str,
        issuer_id: str,
        issued_by_id: str,
        now: datetime | None = None,
    ) -> bool:
        """
        Idempotently issue a passport.

        :returns: ``True`` when a passport was created, ``False`` when the holder
            already had one from ``issuer_id``.
        :raises StoreUnavailableError: If the store cannot be written.
        """
        with self.store_guard("issue", holder_id=holder_id, issuer_id=issuer_id):
            with self.rw_uow() as uow:
                issued = uow.credentials.insert_if_absent(
                    holder_id=holder_id,
                    issuer_id=issuer_id,
                    issued_by_id=issued_by_id,
                    issued_at=now,
                )
        if issued:
            log.info(
                "passport.issued",
                extra={
                    "holder_id": holder_id,
                    "issuer_id": issuer_id,
                    "issued_by_id": issued_by_id,
                },
            )
        return issued

    def issue_passport(self, dto: IssuePassportIn) -> PassportOut:
        """
        Manually issue a passport from ``dto.server_id`` to ``dto.holder_id``.

        :raises ServiceError: If an administrator issues a passport to themselves.
        :raises ConflictError: If the holder already has one from this server.
        """
        if dto.holder_id == dto.issued_by_id:
            raise ServiceError("You cannot issue a passport to yourself.")
        created = self.issue_if_absent(
            holder_id=dto.holder_id, issuer_id=dto.server_id, issued_by_id=dto.issued_by_id
        )
        if not created:
            raise ConflictError("Credential", "holder already has a passport from this server")
        with self.ro_uow() as uow:
            credential = uow.credentials.find_one(holder_id=dto.holder_id, issuer_id=dto.server_id)
            if credential is None:
                # Revoked concurrently between the write and the read-back.
                raise NotFoundError("Credential", f"{dto.server_id}:{dto.holder_id}")
            return _passport_out(credential)

    def revoke_passport(self, *, holder_id: str, issuer_id: str) -> bool:
        """
        Idempotently revoke a passport.

        :returns: ``True`` when a passport was deleted; revoking a missing one is a no-op.
        :raises StoreUnavailableError: If the store cannot be written.
        """
        with self.store_guard("revoke", holder_id=holder_id, issuer_id=issuer_id):
            with self.rw_uow() as uow:
                removed = uow.credentials.delete_for(holder_id=holder_id, issuer_id=issuer_id)
        if removed:
            log.info("passport.revoked", extra={"holder_id": holder_id, "issuer_id": issuer_id})
        return removed

    # ------------------------------------------------------------------ #
    # Acceptance policies
    # ------------------------------------------------------------------ #

    def add_policy(self, dto: AddPolicyIn) -> PolicyOut:
        """
        Accept passports issued by ``dto.issuer_id`` in ``dto.server_id``.

        :raises ConflictError: If the issuer is already accepted.
        """
        with self.store_guard("add_policy", server_id=dto.server_id, issuer_id=dto.issuer_id):
            with self.rw_uow() as uow:
                if uow.policies.get_for(dto.server_id, dto.issuer_id) is not None:
                    raise ConflictError("AcceptancePolicy", "issuer already accepted")
                policy = uow.policies.add(
                    AcceptancePolicy(
                        server_id=dto.server_id,
                        issuer_id=dto.issuer_id,
                        granted_role_id=dto.role_id,
                        added_by_id=dto.added_by_id,
                    )
                )
                out = _policy_out(policy)
        log.info(
            "policy.added",
            extra={"server_id": dto.server_id, "issuer_id": dto.issuer_id, "role_id": dto.role_id},
        )
        return out

    def remove_policy(self, *, server_id: str, issuer_id: str) -> None:
        """
        Stop accepting ``issuer_id`` in ``server_id``.

        :raises NotFoundError: If the issuer is not currently accepted.
        """
        with self.store_guard("remove_policy", server_id=server_id, issuer_id=issuer_id):
            with self.rw_uow() as uow:
                removed = uow.policies.delete_for(server_id, issuer_id)
        if not removed:
            raise NotFoundError("AcceptancePolicy", f"{server_id}:{issuer_id}")
        log.info("policy.removed", extra={"server_id": server_id, "issuer_id": issuer_id})

    # ------------------------------------------------------------------ #
    # Auto-issue rules
    # ------------------------------------------------------------------ #

    def add_auto_issue_rule(self, dto: AddAutoIssueRuleIn) -> AutoIssueRuleOut:
        """
        Mirror possession of ``dto.role_id`` into a passport from ``dto.server_id``.

        :raises ConflictError: If the rule already exists.
        """
        with self.store_guard("add_auto_issue_rule", server_id=dto.server_id, role_id=dto.role_id):
            with self.rw_uow() as uow:
                if uow.auto_issue_rules.exists(
                    server_id=dto.server_id, trigger_role_id=dto.role_id
                ):
                    raise ConflictError("AutoIssueRule", "role already configured")
                rule = uow.auto_issue_rules.add(
                    AutoIssueRule(
                        server_id=dto.server_id,
                        trigger_role_id=dto.role_id,
                        created_by_id=dto.created_by_id,
                    )
                )
                out = _rule_out(rule)
        log.info("auto_issue.added", extra={"server_id": dto.server_id, "role_id": dto.role_id})
        return out

    def remove_auto_issue_rule(self, *, server_id: str, role_id: str) -> None:
        """:raises NotFoundError: If no rule exists for ``role_id``."""
        with self.store_guard("remove_auto_issue_rule", server_id=server_id, role_id=role_id):
            with self.rw_uow() as uow:
                removed = uow.auto_issue_rules.delete_for(server_id, role_id)
        if not removed:
            raise NotFoundError("AutoIssueRule", f"{server_id}:{role_id}")
        log.info("auto_issue.removed", extra={"server_id": server_id, "role_id": role_id})

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_holder_passports(self, holder_id: str) -> list[PassportOut]:
        """Return the holder's passports ordered by issuance."""
        with self.store_guard("list_holder_passports", holder_id=holder_id):
            with self.ro_uow() as uow:
                return [_passport_out(c) for c in uow.credentials.list_for_holder(holder_id)]

    def server_info(self, server_id: str) -> ServerInfoOut:
        """Summarize issued passports, accepted issuers and auto-issue roles."""
        with self.store_guard("server_info", server_id=server_id):
            with self.ro_uow() as uow:
                return ServerInfoOut(
                    server_id=server_id,
                    issued_count=uow.credentials.count_for_issuer(server_id),
                    accepted_issuers=tuple(
                        _policy_out(p) for p in uow.policies.list_for_server(server_id)
                    ),
                    auto_issue_roles=tuple(
                        r.trigger_role_id for r in uow.auto_issue_rules.list_for_server(server_id)
                    ),
                )
