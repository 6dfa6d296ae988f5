"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint

from passport.api.deps import json_response, timing
from passport.models.base import utcnow

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return liveness with the current server time."""

    return json_response({"status": "ok", "timestamp": utcnow().isoformat()})
