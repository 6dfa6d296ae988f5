"""Unit tests for ``PassportService``."""

from __future__ import annotations

import pytest
from passport.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
)
from passport.services.passports import (
    AddAutoIssueRuleIn,
    AddPolicyIn,
    IssuePassportIn,
    PassportService,
)
from tests.factories.acceptance_policy import AcceptancePolicyFactory
from tests.factories.auto_issue_rule import AutoIssueRuleFactory
from tests.factories.credential import CredentialFactory
from tests.helpers.store import break_store


@pytest.fixture()
def service() -> PassportService:
    return PassportService()


class TestIssuance:
    def test_issue_passport_returns_created_passport(self, service, session):
        out = service.issue_passport(
            IssuePassportIn(server_id="srv-a", holder_id="u1", issued_by_id="adm")
        )

        assert out.holder_id == "u1"
        assert out.issuer_id == "srv-a"
        assert out.issued_by_id == "adm"
        assert out.issued_at.tzinfo is not None

    def test_issue_passport_to_self_is_rejected(self, service, session):
        with pytest.raises(ServiceError, match="yourself"):
            service.issue_passport(
                IssuePassportIn(server_id="srv-a", holder_id="adm", issued_by_id="adm")
            )

    def test_issue_passport_twice_conflicts(self, service, session):
        """
        GIVEN a holder who already has a passport from srv-a
        WHEN an administrator issues another one
        THEN a ConflictError is raised and the original is kept
        """
        CredentialFactory(holder_id="u1", issuer_id="srv-a", issued_by_id="first-admin")

        with pytest.raises(ConflictError):
            service.issue_passport(
                IssuePassportIn(server_id="srv-a", holder_id="u1", issued_by_id="adm")
            )

        [kept] = service.list_holder_passports("u1")
        assert kept.issued_by_id == "first-admin"

    def test_issue_if_absent_and_revoke_are_idempotent(self, service, session):
        assert service.issue_if_absent(holder_id="u1", issuer_id="srv-a", issued_by_id="x")
        assert not service.issue_if_absent(holder_id="u1", issuer_id="srv-a", issued_by_id="x")

        assert service.revoke_passport(holder_id="u1", issuer_id="srv-a") is True
        assert service.revoke_passport(holder_id="u1", issuer_id="srv-a") is False
        assert service.list_holder_passports("u1") == []

    def test_store_failure_surfaces_as_store_unavailable(self, service, session, monkeypatch):
        break_store(monkeypatch, service)

        with pytest.raises(StoreUnavailableError):
            service.issue_if_absent(holder_id="u1", issuer_id="srv-a", issued_by_id="x")
        with pytest.raises(StoreUnavailableError):
            service.revoke_passport(holder_id="u1", issuer_id="srv-a")


class TestPolicies:
    def test_add_policy_and_conflict(self, service, session):
        out = service.add_policy(
            AddPolicyIn(server_id="srv-t", issuer_id="srv-a", added_by_id="adm", role_id="r1")
        )

        assert (out.server_id, out.issuer_id, out.role_id) == ("srv-t", "srv-a", "r1")
        with pytest.raises(ConflictError):
            service.add_policy(AddPolicyIn(server_id="srv-t", issuer_id="srv-a", added_by_id="adm"))

    def test_remove_policy(self, service, session):
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-a")

        service.remove_policy(server_id="srv-t", issuer_id="srv-a")

        with pytest.raises(NotFoundError):
            service.remove_policy(server_id="srv-t", issuer_id="srv-a")


class TestAutoIssueRules:
    def test_add_and_remove_rule(self, service, session):
        out = service.add_auto_issue_rule(
            AddAutoIssueRuleIn(server_id="srv-x", role_id="r1", created_by_id="adm")
        )
        assert (out.server_id, out.role_id, out.created_by_id) == ("srv-x", "r1", "adm")

        with pytest.raises(ConflictError):
            service.add_auto_issue_rule(
                AddAutoIssueRuleIn(server_id="srv-x", role_id="r1", created_by_id="adm")
            )

        service.remove_auto_issue_rule(server_id="srv-x", role_id="r1")
        with pytest.raises(NotFoundError):
            service.remove_auto_issue_rule(server_id="srv-x", role_id="r1")


class TestServerInfo:
    def test_summarizes_server(self, service, session):
        CredentialFactory(issuer_id="srv-x")
        CredentialFactory(issuer_id="srv-x")
        AcceptancePolicyFactory(server_id="srv-x", issuer_id="srv-a", granted_role_id="r9")
        AutoIssueRuleFactory(server_id="srv-x", trigger_role_id="r1")

        info = service.server_info("srv-x")

        assert info.issued_count == 2
        assert [p.issuer_id for p in info.accepted_issuers] == ["srv-a"]
        assert info.accepted_issuers[0].role_id == "r9"
        assert info.auto_issue_roles == ("r1",)
