from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class TokenGrant:
    """
    Delegated token returned by the authorization-code exchange.

    :ivar access_token: Bearer token usable against the directory.
    :ivar refresh_token: Optional refresh token.
    :ivar expires_in: Lifetime in seconds, relative to the exchange.
    """

    access_token: str
    refresh_token: str | None
    expires_in: int


class TokenExchangeError(Exception):
    """Raised when the provider refuses the code or answers with an unusable payload."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthorizationProvider(Protocol):
    """Port for the OAuth2 authorization-code exchange."""

    def exchange_code(self, code: str) -> TokenGrant:
        """
        Redeem ``code`` for a delegated token. Never retried.

        :raises TokenExchangeError: On non-2xx, transport error or missing fields.
        """
        ...


@dataclass
class StubAuthorizationProvider(AuthorizationProvider):
    """Provider double: maps known codes to grants, anything else fails."""

    grants: dict[str, TokenGrant] = field(default_factory=dict)
    redeemed: list[str] = field(default_factory=list)

    def exchange_code(self, code: str) -> TokenGrant:
        self.redeemed.append(code)
        grant = self.grants.pop(code, None)
        if grant is None:
            raise TokenExchangeError("invalid_grant", status=400)
        return grant
