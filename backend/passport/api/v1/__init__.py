"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .events import bp as events_bp  # noqa: E402
from .me import bp as me_bp  # noqa: E402
from .servers import bp as servers_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (servers_bp, "/servers"),  # -> /api/v1/servers
    (me_bp, "/me"),
    (events_bp, "/events"),
]
