"""Unit tests for ``DelegatedToken`` and the UTC helpers it relies on."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from passport.models.base import ensure_utc
from passport.models.delegated_token import DelegatedToken
from tests.factories.delegated_token import DelegatedTokenFactory


class TestDelegatedTokenExpiry:
    def test_token_is_live_until_expiry(self, now):
        """
        GIVEN a token expiring at ``now``
        WHEN checked at and before that instant
        THEN it is not expired
        """
        token = DelegatedToken(holder_id="u1", access_token="a", expires_at=now)

        assert token.is_expired(now) is False
        assert token.is_expired(now - timedelta(seconds=1)) is False

    def test_token_expires_after_expiry(self, now):
        token = DelegatedToken(holder_id="u1", access_token="a", expires_at=now)

        assert token.is_expired(now + timedelta(seconds=1)) is True

    def test_naive_expiry_read_back_from_store_is_treated_as_utc(self, session, now):
        """SQLite drops tzinfo; comparisons must still work."""
        token = DelegatedTokenFactory(expires_at=now - timedelta(minutes=1))
        session.expire(token)

        assert token.is_expired(now) is True
        assert token.is_expired(now - timedelta(hours=1)) is False

    def test_repr_mentions_holder(self):
        token = DelegatedToken(holder_id="u42", access_token="a", expires_at=datetime.now(UTC))
        assert repr(token) == "<DelegatedToken holder_id=u42>"


class TestEnsureUtc:
    def test_attaches_utc_to_naive_values(self):
        naive = datetime(2025, 1, 1, 12, 0, 0)
        assert ensure_utc(naive) == datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_converts_aware_values(self):
        plus_two = datetime(2025, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two) == datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)
