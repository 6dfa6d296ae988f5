"""Integration tests for the ``flask passport`` CLI group."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import decode_token
from passport.services._shared.ports import PendingAuthorization


class TestMintAdminToken:
    def test_mints_token_with_claims(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(
            args=[
                "passport",
                "mint-admin-token",
                "adm",
                "--server",
                "s1",
                "--server",
                "s2",
                "--events",
            ]
        )

        assert result.exit_code == 0, result.output
        claims = decode_token(result.output.strip().splitlines()[-1])
        assert claims["sub"] == "adm"
        assert claims["managed_servers"] == ["s1", "s2"]
        assert claims["scopes"] == ["events:write"]

    def test_requires_a_grant(self, app):
        result = app.test_cli_runner().invoke(args=["passport", "mint-admin-token", "adm"])

        assert result.exit_code != 0
        assert "--server" in result.output


class TestSweepPending:
    def test_sweeps_expired_entries(self, app, services, now):
        services.pending.put(
            PendingAuthorization("stale", "srv-t", "u1", now - timedelta(days=1))
        )

        result = app.test_cli_runner().invoke(args=["passport", "sweep-pending"])

        assert result.exit_code == 0, result.output
        assert "Removed 1 expired pending authorization(s)." in result.output
        assert services.pending.count() == 0
