"""Per-application wiring of services and their external collaborators."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from flask import Flask, current_app

from passport.core.extensions import get_redis
from passport.infra.http.http_authorization_provider import HttpAuthorizationProvider
from passport.infra.http.rest_membership_directory import RestMembershipDirectory
from passport.infra.redis.redis_pending_authorization_store import (
    RedisPendingAuthorizationStore,
)
from passport.services._shared.ports import (
    AuthorizationProvider,
    InMemoryPendingAuthorizationStore,
    MembershipDirectory,
    PendingAuthorizationStore,
)
from passport.services.access import AccessResolver
from passport.services.capability import CapabilityCodec
from passport.services.join import JoinOrchestrator
from passport.services.oauth import OAuthExchangeCoordinator, PendingAuthorizationSweeper
from passport.services.passports import PassportService
from passport.services.reconciler import AutoIssueReconciler

log = logging.getLogger(__name__)

EXTENSION_KEY = "passport"


@dataclass(slots=True)
class PassportContainer:
    """
    Explicitly constructed handle on everything a request needs.

    One container exists per Flask app; nothing here is a module global.
    """

    directory: MembershipDirectory
    provider: AuthorizationProvider
    pending: PendingAuthorizationStore
    codec: CapabilityCodec
    resolver: AccessResolver
    passports: PassportService
    join: JoinOrchestrator
    oauth: OAuthExchangeCoordinator
    reconciler: AutoIssueReconciler
    sweeper: PendingAuthorizationSweeper


def build_container(
    config: Mapping[str, Any],
    *,
    directory: MembershipDirectory | None = None,
    provider: AuthorizationProvider | None = None,
    pending_store: PendingAuthorizationStore | None = None,
    redis_client: Any | None = None,
) -> PassportContainer:
    """
    Build a :class:`PassportContainer` from Flask-style configuration.

    Collaborators may be injected (tests do); otherwise the HTTP adapters are
    used and the pending store is Redis-backed when a client is given,
    in-process otherwise.
    """
    timeout = float(config.get("HTTP_TIMEOUT_SECONDS", 10))
    pending_ttl = timedelta(seconds=int(config.get("PENDING_AUTH_TTL_SECONDS", 600)))

    if directory is None:
        directory = RestMembershipDirectory(
            base_url=config["DIRECTORY_API_BASE"],
            bot_token=config.get("DIRECTORY_BOT_TOKEN", ""),
            timeout=timeout,
        )
    if provider is None:
        provider = HttpAuthorizationProvider(
            token_url=config["OAUTH_TOKEN_URL"],
            client_id=config.get("OAUTH_CLIENT_ID", ""),
            client_secret=config.get("OAUTH_CLIENT_SECRET", ""),
            redirect_uri=config["OAUTH_REDIRECT_URI"],
            timeout=timeout,
        )
    if pending_store is None:
        if redis_client is not None:
            pending_store = RedisPendingAuthorizationStore(redis_client, ttl=pending_ttl)
        else:
            pending_store = InMemoryPendingAuthorizationStore(ttl=pending_ttl)

    codec = CapabilityCodec(
        secret=config.get("OAUTH_CLIENT_SECRET", ""),
        ttl_seconds=int(config.get("JOIN_TOKEN_TTL_SECONDS", 600)),
    )
    resolver = AccessResolver()
    passports = PassportService()
    join = JoinOrchestrator(
        resolver=resolver,
        directory=directory,
        codec=codec,
        public_base_url=config["PUBLIC_BASE_URL"],
    )
    oauth = OAuthExchangeCoordinator(
        orchestrator=join,
        provider=provider,
        pending=pending_store,
        client_id=config.get("OAUTH_CLIENT_ID", ""),
        redirect_uri=config["OAUTH_REDIRECT_URI"],
        authorize_endpoint=config["OAUTH_AUTHORIZE_URL"],
        scopes=config.get("OAUTH_SCOPES", "guilds.join"),
    )
    return PassportContainer(
        directory=directory,
        provider=provider,
        pending=pending_store,
        codec=codec,
        resolver=resolver,
        passports=passports,
        join=join,
        oauth=oauth,
        reconciler=AutoIssueReconciler(passports=passports),
        sweeper=PendingAuthorizationSweeper(
            oauth, interval=float(config.get("PENDING_AUTH_SWEEP_SECONDS", 600))
        ),
    )


def init_app(app: Flask, **overrides: Any) -> PassportContainer:
    """
    Build the app's container and start the sweeper when enabled.

    ``overrides`` are forwarded to :func:`build_container`.
    """
    if not app.config.get("OAUTH_CLIENT_SECRET"):
        log.warning("OAUTH_CLIENT_SECRET is not set; join links cannot be minted or verified")

    overrides.setdefault("redis_client", get_redis(app))
    container = build_container(app.config, **overrides)
    app.extensions[EXTENSION_KEY] = container

    if app.config.get("PENDING_AUTH_SWEEPER_ENABLED", True):
        container.sweeper.start()
    return container


def get_container(app: Flask | None = None) -> PassportContainer:
    """Return the container bound to ``app`` (default: the current app)."""
    target = app or current_app
    return target.extensions[EXTENSION_KEY]
