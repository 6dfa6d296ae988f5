"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are stable contracts between repositories, ports and application
services. Translation to HTTP responses (RFC 7807) happens in
``BaseService.translate_exceptions()``.

Join outcomes are *not* exceptions: they travel as
:class:`passport.services.join.dto.JoinResult` values so callers always get a
specific, user-presentable reason.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to APIError.
    """

    pass


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when a record is not found in the store.

    :param entity: Entity name (e.g., "AcceptancePolicy").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str
    """

    entity: str
    key: str

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a uniqueness rule would be violated.

    :param entity: Entity name (e.g., "Credential").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AccessDeniedError(ServiceError):
    """Raised when a join link is invalid, expired or not backed by a passport."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class StoreUnavailableError(ServiceError):
    """Raised when a mutating operation cannot reach the credential store."""

    def __init__(self, message: str = "Credential store unavailable") -> None:
        super().__init__(message)
