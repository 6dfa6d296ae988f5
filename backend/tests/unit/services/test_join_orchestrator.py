"""Unit tests for ``JoinOrchestrator``."""

from __future__ import annotations

from datetime import timedelta

import pytest
from passport.repositories.delegated_token import DelegatedTokenRepository
from passport.services._shared.ports import DirectoryError
from passport.services.join import JoinError
from tests.factories.acceptance_policy import AcceptancePolicyFactory
from tests.factories.credential import CredentialFactory
from tests.factories.delegated_token import DelegatedTokenFactory
from tests.helpers.store import break_store

TARGET = "srv-target"


@pytest.fixture()
def join(services):
    return services.join


@pytest.fixture()
def holder(session):
    """A holder whose srv-home passport is accepted by the target with role r1."""
    CredentialFactory(holder_id="u1", issuer_id="srv-home")
    AcceptancePolicyFactory(server_id=TARGET, issuer_id="srv-home", granted_role_id="r1")
    return "u1"


class TestAttemptJoin:
    def test_without_credential(self, join, session):
        result = join.attempt_join("stranger", TARGET)

        assert result.success is False
        assert result.error is JoinError.NO_VALID_CREDENTIAL
        assert result.needs_auth is False

    def test_already_member_is_checked_first(self, join, holder, directory):
        directory.members[TARGET] = {holder}

        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.ALREADY_MEMBER
        assert directory.calls == []

    def test_requires_authorization_without_stored_token(self, join, holder):
        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.AUTHORIZATION_REQUIRED
        assert result.needs_auth is True
        assert result.issuer_id == "srv-home"

    def test_joins_with_stored_token_and_assigns_role(self, join, holder, directory):
        DelegatedTokenFactory(holder_id=holder, access_token="live")

        result = join.attempt_join(holder, TARGET)

        assert result.success is True
        assert result.role_assigned is True
        assert result.username == f"user-{holder}"
        assert result.server_name == "Target Server"
        assert directory.calls == [(TARGET, holder, "live", "r1")]
        assert holder in directory.members[TARGET]

    def test_policy_without_role_joins_without_role(self, join, session, directory):
        CredentialFactory(holder_id="u2", issuer_id="srv-plain")
        AcceptancePolicyFactory(server_id=TARGET, issuer_id="srv-plain", granted_role_id=None)

        result = join.attempt_join("u2", TARGET, access_token="fresh")

        assert result.success is True
        assert result.role_assigned is False
        assert directory.calls == [(TARGET, "u2", "fresh", None)]

    def test_expired_token_is_discarded(self, join, holder, now):
        """
        GIVEN a stored token that expired yesterday
        WHEN the holder attempts to join
        THEN re-authorization is requested and the token record is gone
        """
        DelegatedTokenFactory(holder_id=holder, expires_at=now - timedelta(days=1))

        result = join.attempt_join(holder, TARGET, now=now)

        assert result.error is JoinError.AUTHORIZATION_EXPIRED
        assert result.needs_auth is True
        assert DelegatedTokenRepository().get_for_holder(holder) is None

    @pytest.mark.parametrize(
        "error",
        [
            DirectoryError("Invalid OAuth2 access token", code=50025, status=403),
            DirectoryError("Missing Access", code=50001, status=403),
            DirectoryError("401: Unauthorized", status=401),
        ],
    )
    def test_rejected_token_is_discarded(self, join, holder, directory, error):
        DelegatedTokenFactory(holder_id=holder, access_token="revoked")
        directory.rejected_tokens["revoked"] = error

        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.AUTHORIZATION_INVALID
        assert result.needs_auth is True
        assert DelegatedTokenRepository().get_for_holder(holder) is None

    def test_other_provider_errors_are_reported_verbatim(self, join, holder, directory):
        DelegatedTokenFactory(holder_id=holder, access_token="ok")
        directory.rejected_tokens["ok"] = DirectoryError(
            "Maximum number of guilds reached (100)", code=30001, status=400
        )

        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.PROVIDER_ERROR
        assert result.message == "Maximum number of guilds reached (100)"
        assert result.needs_auth is False
        assert DelegatedTokenRepository().get_for_holder(holder) is not None

    def test_directory_reporting_existing_member(self, join, holder, directory, monkeypatch):
        monkeypatch.setattr(directory, "is_member", lambda server_id, user_id: False)
        directory.members[TARGET] = {holder}

        result = join.attempt_join(holder, TARGET, access_token="fresh")

        assert result.error is JoinError.ALREADY_MEMBER

    def test_membership_check_failure(self, join, holder, directory, monkeypatch):
        def _boom(server_id, user_id):
            raise DirectoryError("Membership directory is unreachable")

        monkeypatch.setattr(directory, "is_member", _boom)

        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.PROVIDER_ERROR
        assert result.message == "Membership directory is unreachable"

    def test_store_failure(self, join, services, holder, monkeypatch):
        break_store(monkeypatch, services.resolver)

        result = join.attempt_join(holder, TARGET)

        assert result.error is JoinError.STORE_UNAVAILABLE


class TestAuthorizationLink:
    def test_link_for_user_with_access(self, join, services, holder, now):
        link = join.generate_authorization_link(holder, TARGET, now=now)

        assert link is not None
        prefix = f"http://passport.test/join/{TARGET}/{holder}/"
        assert link.startswith(prefix)
        assert services.codec.verify(holder, TARGET, link[len(prefix):], now)

    def test_no_link_without_access(self, join, session):
        assert join.generate_authorization_link("stranger", TARGET) is None
