"""Unit tests for ``AccessResolver``."""

from __future__ import annotations

from datetime import timedelta

import pytest
from passport.services.access import AccessResolver
from tests.factories.acceptance_policy import AcceptancePolicyFactory
from tests.factories.credential import CredentialFactory
from tests.helpers.store import break_store


@pytest.fixture()
def resolver() -> AccessResolver:
    return AccessResolver()


class TestResolveAccess:
    def test_denies_without_credentials(self, resolver, session):
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-a")

        decision = resolver.resolve_access("nobody", "srv-t")

        assert decision.granted is False
        assert decision.store_unavailable is False

    def test_grants_role_from_matching_policy(self, resolver, session):
        """
        GIVEN a holder with a passport from srv-a
        AND srv-t accepting srv-a with role r1
        WHEN access to srv-t is resolved
        THEN access is granted with r1 and srv-a as issuer
        """
        CredentialFactory(holder_id="u1", issuer_id="srv-a")
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-a", granted_role_id="r1")

        decision = resolver.resolve_access("u1", "srv-t")

        assert decision.granted is True
        assert decision.role_id == "r1"
        assert decision.issuer_id == "srv-a"

    def test_unaccepted_issuer_is_denied(self, resolver, session):
        CredentialFactory(holder_id="u1", issuer_id="srv-a")
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-b")

        assert resolver.resolve_access("u1", "srv-t").granted is False

    def test_store_failure_fails_closed(self, resolver, session, monkeypatch):
        break_store(monkeypatch, resolver)

        decision = resolver.resolve_access("u1", "srv-t")

        assert decision.granted is False
        assert decision.store_unavailable is True


class TestListings:
    def test_accessible_servers_grouped_by_credential(self, resolver, session, now):
        """
        GIVEN credentials from srv-a (older) and srv-b
        AND srv-t accepting both, srv-u accepting srv-b only
        WHEN listing accessible servers
        THEN items follow credential order and srv-t appears once per credential
        """
        CredentialFactory(holder_id="u1", issuer_id="srv-a", issued_at=now - timedelta(days=1))
        CredentialFactory(holder_id="u1", issuer_id="srv-b", issued_at=now)
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-a")
        AcceptancePolicyFactory(server_id="srv-t", issuer_id="srv-b", granted_role_id="r2")
        AcceptancePolicyFactory(server_id="srv-u", issuer_id="srv-b")

        listing = resolver.list_accessible_servers("u1")

        assert [(i.server_id, i.issuer_id) for i in listing.items] == [
            ("srv-t", "srv-a"),
            ("srv-t", "srv-b"),
            ("srv-u", "srv-b"),
        ]
        assert [i.server_id for i in listing.unique_servers()] == ["srv-t", "srv-u"]

    def test_accessible_servers_empty_for_unknown_holder(self, resolver, session):
        listing = resolver.list_accessible_servers("ghost")

        assert listing.items == ()
        assert listing.store_unavailable is False

    def test_list_holders_ordered_with_utc_timestamps(self, resolver, session, now):
        CredentialFactory(holder_id="late", issuer_id="srv-x", issued_at=now)
        CredentialFactory(
            holder_id="early", issuer_id="srv-x", issued_at=now - timedelta(hours=2)
        )

        listing = resolver.list_holders("srv-x")

        assert [h.holder_id for h in listing.items] == ["early", "late"]
        assert listing.items[1].issued_at == now
        assert listing.items[1].issued_at.tzinfo is not None

    def test_listings_report_store_failure(self, resolver, session, monkeypatch):
        break_store(monkeypatch, resolver)

        servers = resolver.list_accessible_servers("u1")
        holders = resolver.list_holders("srv-x")

        assert servers.store_unavailable is True and servers.items == ()
        assert holders.store_unavailable is True and holders.items == ()
