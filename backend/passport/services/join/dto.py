# passport/services/join/dto.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class JoinError(str, Enum):
    """Why a join did not complete. Values are stable API codes."""

    NO_VALID_CREDENTIAL = "no_valid_credential"
    ALREADY_MEMBER = "already_member"
    AUTHORIZATION_REQUIRED = "authorization_required"
    AUTHORIZATION_EXPIRED = "authorization_expired"
    AUTHORIZATION_INVALID = "authorization_invalid"
    INVALID_OR_EXPIRED_STATE = "invalid_or_expired_state"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    STORE_UNAVAILABLE = "store_unavailable"
    PROVIDER_ERROR = "provider_error"


JOIN_ERROR_MESSAGES: dict[JoinError, str] = {
    JoinError.NO_VALID_CREDENTIAL: "No valid passport for this server.",
    JoinError.ALREADY_MEMBER: "You are already a member of this server.",
    JoinError.AUTHORIZATION_REQUIRED: "Authorization required.",
    JoinError.AUTHORIZATION_EXPIRED: "Authorization expired, please re-authorize.",
    JoinError.AUTHORIZATION_INVALID: "Authorization invalid, please re-authorize.",
    JoinError.INVALID_OR_EXPIRED_STATE: "This authorization link is invalid or has expired.",
    JoinError.TOKEN_EXCHANGE_FAILED: "Could not complete authorization with the provider.",
    JoinError.STORE_UNAVAILABLE: "Passport records are temporarily unavailable, try again later.",
    JoinError.PROVIDER_ERROR: "The server could not be joined.",
}

#: Errors whose remedy is to authorize (again) through the join link.
REAUTHORIZE_ERRORS = frozenset(
    {
        JoinError.AUTHORIZATION_REQUIRED,
        JoinError.AUTHORIZATION_EXPIRED,
        JoinError.AUTHORIZATION_INVALID,
    }
)


@dataclass(frozen=True, slots=True)
class JoinResult:
    """
    Outcome of a join attempt.

    :param success: ``True`` when the user was added to the server.
    :param role_assigned: ``True`` when the matched policy granted a role.
    :param error: Failure reason; ``None`` on success.
    :param needs_auth: ``True`` when the user must (re-)authorize.
    :param message: Short user-facing message.
    :param username: Directory username of the new member.
    :param issuer_id: Issuer of the credential that granted access.
    """

    success: bool
    role_assigned: bool = False
    error: JoinError | None = None
    needs_auth: bool = False
    message: str | None = None
    username: str | None = None
    issuer_id: str | None = None
    server_id: str | None = None
    server_name: str | None = None

    @classmethod
    def failed(
        cls,
        error: JoinError,
        *,
        message: str | None = None,
        server_id: str | None = None,
        issuer_id: str | None = None,
    ) -> JoinResult:
        return cls(
            success=False,
            error=error,
            needs_auth=error in REAUTHORIZE_ERRORS,
            message=message or JOIN_ERROR_MESSAGES[error],
            server_id=server_id,
            issuer_id=issuer_id,
        )
