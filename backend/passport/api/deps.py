"""Shared API helpers for authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from passport.core.container import PassportContainer, get_container
from passport.core.errors import Forbidden
from passport.services._shared.base import BaseService
from passport.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])

#: Scope required to post membership-change events.
EVENTS_SCOPE = "events:write"


def container() -> PassportContainer:
    """Return the services bound to the current application."""

    return get_container()


def current_user_id() -> str:
    """Return the platform user id carried as the JWT identity."""

    return str(get_jwt_identity())


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_scope(required: str) -> Callable[[F], F]:
    """Ensure the verified JWT contains the requested scope claim."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            claims = get_jwt() or {}
            scopes = set(claims.get("scopes", []))
            if required not in scopes:
                raise Forbidden("Insufficient scope")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def require_server_admin(func: F) -> F:
    """
    Ensure the caller administers the ``server_id`` view argument.

    Administered servers are listed in the ``managed_servers`` JWT claim.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        claims = get_jwt() or {}
        managed = {str(s) for s in claims.get("managed_servers", [])}
        if str(kwargs.get("server_id")) not in managed:
            raise Forbidden("You do not manage this server")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


@contextmanager
def service_errors() -> Iterator[None]:
    """Re-raise service-level errors as API errors."""

    try:
        yield
    except ServiceError as exc:
        raise BaseService().translate_exceptions(exc) from exc


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def empty_response(status: int = 204) -> Response:
    """Return a body-less response."""

    return Response(status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
