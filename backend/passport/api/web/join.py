"""Join-link redirect and OAuth callback pages."""

from __future__ import annotations

import logging
from http import HTTPStatus

from flask import Blueprint, redirect, render_template, request

from passport.api.deps import container, timing
from passport.services._shared.errors import AccessDeniedError, StoreUnavailableError
from passport.services.join.dto import JoinError, JoinResult

log = logging.getLogger(__name__)

bp = Blueprint("join", __name__)

_FAILURE_STATUS: dict[JoinError, HTTPStatus] = {
    JoinError.INVALID_OR_EXPIRED_STATE: HTTPStatus.BAD_REQUEST,
    JoinError.TOKEN_EXCHANGE_FAILED: HTTPStatus.BAD_GATEWAY,
    JoinError.PROVIDER_ERROR: HTTPStatus.BAD_GATEWAY,
    JoinError.STORE_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
    JoinError.ALREADY_MEMBER: HTTPStatus.CONFLICT,
    JoinError.NO_VALID_CREDENTIAL: HTTPStatus.FORBIDDEN,
    JoinError.AUTHORIZATION_REQUIRED: HTTPStatus.FORBIDDEN,
    JoinError.AUTHORIZATION_EXPIRED: HTTPStatus.FORBIDDEN,
    JoinError.AUTHORIZATION_INVALID: HTTPStatus.FORBIDDEN,
}


def callback_status(result: JoinResult) -> HTTPStatus:
    """Map a join outcome to the callback page's HTTP status."""
    if result.success:
        return HTTPStatus.OK
    if result.error is None:
        return HTTPStatus.INTERNAL_SERVER_ERROR
    return _FAILURE_STATUS[result.error]


def _page(*, title: str, message: str, status: HTTPStatus, success: bool = False):
    html = render_template("callback_result.html", title=title, message=message, success=success)
    return html, status, {"Content-Type": "text/html; charset=utf-8"}


@bp.get("/join/<server_id>/<user_id>/<token>")
@timing
def open_join_link(server_id: str, user_id: str, token: str):
    """Verify the signed join link and redirect to the provider's consent page."""

    try:
        url = container().oauth.open_join_link(server_id, user_id, token)
    except AccessDeniedError as exc:
        return _page(title="Access denied", message=str(exc), status=HTTPStatus.FORBIDDEN)
    except StoreUnavailableError:
        return _page(
            title="Temporarily unavailable",
            message="Please try the link again in a moment.",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
        )
    return redirect(url, code=302)


@bp.get("/callback")
@timing
def oauth_callback():
    """Complete the authorization-code exchange and join the server."""

    if request.args.get("error"):
        log.info("oauth.callback_cancelled", extra={"error": request.args.get("error")})
        return _page(
            title="Authorization cancelled",
            message="Authorization was cancelled.",
            status=HTTPStatus.BAD_REQUEST,
        )

    code = (request.args.get("code") or "").strip()
    state = (request.args.get("state") or "").strip()
    if not code or not state:
        return _page(
            title="Invalid request",
            message="Missing authorization code or state.",
            status=HTTPStatus.BAD_REQUEST,
        )

    result = container().oauth.complete_authorization(code, state)
    status = callback_status(result)
    if result.success:
        name = result.server_name or "the server"
        message = f"You have joined {name}."
        if result.role_assigned:
            message += " Your passport role has been assigned."
        return _page(title="Welcome!", message=message, status=status, success=True)
    return _page(
        title="Could not join",
        message=result.message or "The server could not be joined.",
        status=status,
    )
