"""Endpoints acting on behalf of the authenticated holder."""

from __future__ import annotations

import logging

from flask import Blueprint, request

from passport.api.deps import (
    container,
    current_user_id,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from passport.core.errors import ServiceUnavailable
from passport.schemas import (
    AccessibleServerSchema,
    JoinRequestSchema,
    JoinResultSchema,
    PassportSchema,
)
from passport.services._shared.ports import DirectoryError
from passport.services.join import JoinError

log = logging.getLogger(__name__)

bp = Blueprint("me", __name__)

passport_list_schema = PassportSchema(many=True)
server_list_schema = AccessibleServerSchema(many=True)
join_request_schema = JoinRequestSchema()
join_result_schema = JoinResultSchema()


@bp.get("/passports")
@require_auth
@timing
def list_my_passports():
    """Return the caller's passports ordered by issuance."""

    with service_errors():
        passports = container().passports.list_holder_passports(current_user_id())
    return json_response({"data": passport_list_schema.dump(passports)})


@bp.get("/servers")
@require_auth
@timing
def list_my_servers():
    """Return servers the caller may join and does not belong to yet."""

    user_id = current_user_id()
    services = container()
    listing = services.resolver.list_accessible_servers(user_id)
    if listing.store_unavailable:
        raise ServiceUnavailable("Passport records are temporarily unavailable")

    joinable = []
    for item in listing.unique_servers():
        try:
            if services.directory.is_member(item.server_id, user_id):
                continue
        except DirectoryError as exc:
            log.warning(
                "me.membership_check_failed",
                extra={"server_id": item.server_id, "error": exc.message},
            )
        joinable.append(item)
    return json_response({"data": server_list_schema.dump(joinable)})


@bp.post("/joins")
@require_auth
@timing
def join_server():
    """Join a server now, or return the authorization link to follow first."""

    payload = join_request_schema.load(request.get_json(silent=True) or {})
    user_id = current_user_id()
    services = container()

    result = services.join.attempt_join(user_id, payload["server_id"])
    if result.error is JoinError.STORE_UNAVAILABLE:
        raise ServiceUnavailable(result.message or "Passport records are temporarily unavailable")

    body = {"data": join_result_schema.dump(result)}
    if result.needs_auth:
        body["authorization_url"] = services.join.generate_authorization_link(
            user_id, payload["server_id"]
        )
    return json_response(body)
