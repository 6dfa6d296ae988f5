"""
AutoIssueReconciler
===================

Mirror trigger-role possession into passports issued by the server itself.

Events are delivered at least once and possibly out of order, so every
action is idempotent: issuing an existing passport and revoking a missing one
are both no-ops.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError

from passport.services._shared.base import BaseService
from passport.services._shared.errors import StoreUnavailableError
from passport.services.passports.service import PassportService
from passport.services.reconciler.dto import MembershipChange, ReconcileReport, RuleFailure

log = logging.getLogger(__name__)


class AutoIssueReconciler(BaseService):
    """
    Issue or revoke passports in response to membership role changes.

    :param passports: Service performing idempotent issuance and revocation.
    """

    def __init__(self, *, passports: PassportService) -> None:
        super().__init__()
        self.passports = passports

    def handle(self, change: MembershipChange) -> ReconcileReport:
        """
        Apply every auto-issue rule of ``change.server_id`` to ``change``.

        A failing rule never stops the remaining ones; failures are collected
        in the report.
        """
        report = ReconcileReport(server_id=change.server_id, user_id=change.user_id)
        fields = {"server_id": change.server_id, "user_id": change.user_id}

        try:
            with self.ro_uow() as uow:
                rules = [
                    (r.trigger_role_id, r.created_by_id)
                    for r in uow.auto_issue_rules.list_for_server(change.server_id)
                ]
        except SQLAlchemyError as exc:
            log.error("reconcile.rules_unavailable", extra=fields, exc_info=True)
            report.failures.append(RuleFailure(None, "load_rules", str(exc)))
            return report

        if not rules:
            return report

        # A role both gained and lost in one event is a net no-op.
        added = change.added_roles - change.removed_roles
        removed = change.removed_roles - change.added_roles
        triggers = {role_id for role_id, _ in rules}
        still_held = ((change.held_roles or frozenset()) | added) - removed
        justifying = triggers & still_held

        for role_id, created_by_id in rules:
            if role_id in added:
                try:
                    if self.passports.issue_if_absent(
                        holder_id=change.user_id,
                        issuer_id=change.server_id,
                        issued_by_id=created_by_id,
                    ):
                        report.issued = True
                except StoreUnavailableError as exc:
                    report.failures.append(RuleFailure(role_id, "issue", str(exc)))
            elif role_id in removed:
                if justifying:
                    report.retained = True
                    log.info(
                        "reconcile.passport_retained",
                        extra={**fields, "role_id": role_id, "held_triggers": sorted(justifying)},
                    )
                    continue
                try:
                    if self.passports.revoke_passport(
                        holder_id=change.user_id, issuer_id=change.server_id
                    ):
                        report.revoked = True
                except StoreUnavailableError as exc:
                    report.failures.append(RuleFailure(role_id, "revoke", str(exc)))

        if report.failures:
            log.error(
                "reconcile.partial_failure",
                extra={
                    **fields,
                    "failures": [f"{f.operation}:{f.role_id}" for f in report.failures],
                },
            )
        return report

    def handle_member_joined(
        self, server_id: str, user_id: str, roles: Iterable[str]
    ) -> ReconcileReport:
        """Issue passports to a member who arrives already holding trigger roles."""
        held = frozenset(roles)
        return self.handle(
            MembershipChange(
                server_id=server_id,
                user_id=user_id,
                added_roles=held,
                held_roles=held,
            )
        )
