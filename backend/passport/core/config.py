"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def public_base_url(redirect_uri: str, explicit: str | None = None) -> str:
    """Derive the externally visible base URL used to build join links.

    ``PUBLIC_BASE_URL`` wins when set; otherwise the OAuth redirect URI with its
    ``/callback`` suffix stripped is used.
    """
    if explicit:
        return explicit.rstrip("/")
    if redirect_uri.endswith("/callback"):
        return redirect_uri[: -len("/callback")]
    return "http://localhost:8000"


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering the administrative API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development placeholder.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to sign operator tokens.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string for the credential store.
    REDIS_URL: str | None
        When set, pending authorizations are kept in Redis so several worker
        processes share them.
    OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET: str
        Credentials registered with the authorization provider. The client
        secret also signs join-link capability tokens.
    OAUTH_REDIRECT_URI: str
        Callback URL registered with the provider.
    OAUTH_AUTHORIZE_URL / OAUTH_TOKEN_URL: str
        Provider endpoints for the authorization-code flow.
    OAUTH_SCOPES: str
        Space-separated scopes requested on the authorize URL.
    PUBLIC_BASE_URL: str
        Base URL embedded in join links.
    DIRECTORY_API_BASE / DIRECTORY_BOT_TOKEN: str
        Group-membership directory REST endpoint and bot credential.
    HTTP_TIMEOUT_SECONDS: int
        Timeout applied to every outbound HTTP call.
    JOIN_TOKEN_TTL_SECONDS: int
        Lifetime of join-link capability tokens.
    PENDING_AUTH_TTL_SECONDS / PENDING_AUTH_SWEEP_SECONDS: int
        Lifetime of pending authorizations and the sweep interval.
    PENDING_AUTH_SWEEPER_ENABLED: bool
        Starts the background sweeper thread when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")

    # DB / cache
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # OAuth provider
    OAUTH_CLIENT_ID = os.getenv("OAUTH_CLIENT_ID", "")
    OAUTH_CLIENT_SECRET = os.getenv("OAUTH_CLIENT_SECRET", "")
    OAUTH_REDIRECT_URI = os.getenv("OAUTH_REDIRECT_URI", "http://localhost:8000/callback")
    OAUTH_AUTHORIZE_URL = os.getenv(
        "OAUTH_AUTHORIZE_URL", "https://discord.com/api/oauth2/authorize"
    )
    OAUTH_TOKEN_URL = os.getenv("OAUTH_TOKEN_URL", "https://discord.com/api/oauth2/token")
    OAUTH_SCOPES = os.getenv("OAUTH_SCOPES", "guilds.join")
    PUBLIC_BASE_URL = public_base_url(OAUTH_REDIRECT_URI, os.getenv("PUBLIC_BASE_URL"))

    # Group-membership directory
    DIRECTORY_API_BASE = os.getenv("DIRECTORY_API_BASE", "https://discord.com/api/v10")
    DIRECTORY_BOT_TOKEN = os.getenv("DIRECTORY_BOT_TOKEN", "")
    HTTP_TIMEOUT_SECONDS = env_int("HTTP_TIMEOUT_SECONDS", 10)

    # Join links and pending authorizations
    JOIN_TOKEN_TTL_SECONDS = env_int("JOIN_TOKEN_TTL_SECONDS", 600)
    PENDING_AUTH_TTL_SECONDS = env_int("PENDING_AUTH_TTL_SECONDS", 600)
    PENDING_AUTH_SWEEP_SECONDS = env_int("PENDING_AUTH_SWEEP_SECONDS", 600)
    PENDING_AUTH_SWEEPER_ENABLED = env_bool("PENDING_AUTH_SWEEPER_ENABLED", True)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never starts the pending-authorization sweeper thread.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_SECRET_KEY = "test-jwt-secret-key-long-enough-for-hs256"
    REDIS_URL = None
    OAUTH_CLIENT_ID = "test-client"
    OAUTH_CLIENT_SECRET = "test-secret"
    OAUTH_REDIRECT_URI = "http://passport.test/callback"
    PUBLIC_BASE_URL = "http://passport.test"
    PENDING_AUTH_SWEEPER_ENABLED = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
