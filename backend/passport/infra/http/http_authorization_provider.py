# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from passport.services._shared.ports.authorization_provider import (
    AuthorizationProvider,
    TokenExchangeError,
    TokenGrant,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpAuthorizationProvider(AuthorizationProvider):
    """
    OAuth2 authorization-code exchange over HTTP.

    The request body is form-encoded as the OAuth2 token endpoint requires.
    Nothing is retried: authorization codes are single-use.
    """

    token_url: str
    client_id: str
    client_secret: str
    redirect_uri: str
    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session)

    def exchange_code(self, code: str) -> TokenGrant:
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        try:
            resp = self.session.post(
                self.token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("oauth.token_endpoint_unreachable", extra={"error": str(exc)})
            raise TokenExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if not resp.ok:
            raise TokenExchangeError(
                f"Token endpoint answered HTTP {resp.status_code}", status=resp.status_code
            )

        status = resp.status_code
        try:
            body: Any = resp.json()
        except ValueError as exc:
            raise TokenExchangeError("Token endpoint returned invalid JSON", status=status) from exc
        if not isinstance(body, dict):
            raise TokenExchangeError("Token endpoint returned an unexpected payload", status=status)

        access_token = body.get("access_token")
        expires_in = body.get("expires_in")
        if not isinstance(access_token, str) or not access_token:
            raise TokenExchangeError("Token response is missing access_token", status=status)
        valid_lifetime = isinstance(expires_in, int | float) and not isinstance(expires_in, bool)
        if not valid_lifetime or expires_in <= 0:
            raise TokenExchangeError("Token response is missing expires_in", status=status)

        refresh_token = body.get("refresh_token")
        return TokenGrant(
            access_token=access_token,
            refresh_token=refresh_token if isinstance(refresh_token, str) else None,
            expires_in=int(expires_in),
        )
