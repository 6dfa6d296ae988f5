"""Flask CLI commands for operating the passport service."""

from __future__ import annotations

import logging
from datetime import timedelta

import click
from flask.cli import with_appcontext
from flask_jwt_extended import create_access_token

from passport.api.deps import EVENTS_SCOPE
from passport.core.container import get_container
from passport.services._shared.errors import StoreUnavailableError

LOGGER = logging.getLogger(__name__)


@click.group("passport")
def passport_cli() -> None:
    """Passport service operations."""


@passport_cli.command("mint-admin-token")
@click.argument("user_id")
@click.option(
    "--server",
    "servers",
    multiple=True,
    help="Server the token may administer (repeatable).",
)
@click.option("--events", is_flag=True, help="Allow posting membership-change events.")
@click.option(
    "--expires-hours",
    type=click.IntRange(min=1),
    default=24,
    show_default=True,
    help="Token lifetime in hours.",
)
@with_appcontext
def mint_admin_token(
    user_id: str, servers: tuple[str, ...], events: bool, expires_hours: int
) -> None:
    """Print an operator JWT for USER_ID."""
    if not servers and not events:
        raise click.UsageError("Pass at least one --server or --events.")
    token = create_access_token(
        identity=user_id,
        additional_claims={
            "managed_servers": list(servers),
            "scopes": [EVENTS_SCOPE] if events else [],
        },
        expires_delta=timedelta(hours=expires_hours),
    )
    LOGGER.info(
        "cli.admin_token_minted",
        extra={"user_id": user_id, "servers": list(servers), "events": events},
    )
    click.echo(token)


@passport_cli.command("sweep-pending")
@with_appcontext
def sweep_pending() -> None:
    """Drop expired pending authorizations now."""
    try:
        removed = get_container().oauth.sweep()
    except StoreUnavailableError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Removed {removed} expired pending authorization(s).")
