# passport/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from passport.core import errors as api_errors
from passport.services._shared.errors import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
)
from passport.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated platform user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Convert store failures into :class:`StoreUnavailableError`.
    * Centralize error translation to API errors.

    Notes
    -----
    Services never touch the global session directly; they always go through
    a Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work."""
        return SQLAlchemyReadOnlyUnitOfWork()

    @contextmanager
    def store_guard(self, operation: str, **fields: object) -> Iterator[None]:
        """
        Re-raise SQLAlchemy failures inside the block as :class:`StoreUnavailableError`.

        :param operation: Short operation name used in the log line.
        :param fields: Structured context attached to the log record.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            log.error(
                "store.unavailable",
                extra={"operation": operation, **fields},
                exc_info=True,
            )
            raise StoreUnavailableError() from exc

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised.
        """
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, AccessDeniedError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, StoreUnavailableError):
            return api_errors.ServiceUnavailable(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        return exc
