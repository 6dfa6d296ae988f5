"""Browser-facing pages mounted at the site root."""

from __future__ import annotations

from flask import Blueprint

from .health import bp as health_bp
from .join import bp as join_bp

# Each tuple: (blueprint, url_prefix_relative_to_root)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /health
    (join_bp, ""),  # -> /join/..., /callback
]
