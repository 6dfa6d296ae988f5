"""Unit tests for ``DelegatedTokenRepository`` upsert semantics."""

from __future__ import annotations

from datetime import timedelta

import pytest
from passport.models.base import ensure_utc
from passport.repositories.delegated_token import DelegatedTokenRepository


class TestDelegatedTokenRepository:
    @pytest.fixture()
    def repo(self) -> DelegatedTokenRepository:
        return DelegatedTokenRepository()

    def test_upsert_inserts_then_overwrites(self, repo, session, now):
        """
        GIVEN a holder without a stored token
        WHEN two upserts are made for the same holder
        THEN one row remains carrying the latest values
        """
        # Act
        repo.upsert(
            holder_id="u1",
            access_token="first",
            refresh_token="r1",
            expires_at=now + timedelta(days=1),
            now=now,
        )
        token = repo.upsert(
            holder_id="u1",
            access_token="second",
            refresh_token=None,
            expires_at=now + timedelta(days=7),
            now=now + timedelta(minutes=5),
        )

        # Assert
        assert token.access_token == "second"
        assert token.refresh_token is None
        assert ensure_utc(token.expires_at) == now + timedelta(days=7)
        assert ensure_utc(token.created_at) == now
        assert ensure_utc(token.updated_at) == now + timedelta(minutes=5)
        assert len(repo.list_by(holder_id="u1")) == 1

    def test_delete_for_holder(self, repo, session, now):
        repo.upsert(
            holder_id="u1", access_token="a", refresh_token=None, expires_at=now, now=now
        )

        assert repo.delete_for_holder("u1") is True
        assert repo.get_for_holder("u1") is None
        assert repo.delete_for_holder("u1") is False

    def test_upsert_refreshes_an_already_loaded_row(self, repo, session, now):
        """
        GIVEN a token already loaded into the session
        WHEN it is overwritten through upsert
        THEN the returned row is that same instance carrying the new values
        """
        repo.upsert(holder_id="u1", access_token="old", refresh_token=None, expires_at=now, now=now)
        loaded = repo.get_for_holder("u1")

        token = repo.upsert(
            holder_id="u1",
            access_token="new",
            refresh_token="r2",
            expires_at=now + timedelta(days=7),
            now=now,
        )

        assert token is loaded
        assert token.access_token == "new"
        assert token.refresh_token == "r2"
