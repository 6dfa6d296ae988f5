"""
Stateless join-link capability tokens.

A token has the shape ``"<unix_ts>.<hex(HMAC-SHA256(secret, "user:server:ts"))>"``.
It carries no server-side state: authenticity and freshness are checked from
the token alone, so a token cannot be revoked before it expires except by
rotating the secret.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime

DEFAULT_TTL_SECONDS = 600


def _signature(user_id: str, server_id: str, timestamp: int, secret: str) -> str:
    payload = f"{user_id}:{server_id}:{timestamp}".encode()
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def mint(user_id: str, server_id: str, secret: str, now: datetime) -> str:
    """
    Mint a capability token for ``(user_id, server_id)``.

    :param user_id: Platform user the link is for.
    :param server_id: Target server.
    :param secret: Signing secret; must be non-empty.
    :param now: Issue instant.
    :returns: Encoded token.
    :raises ValueError: If ``secret`` is empty.
    """
    if not secret:
        raise ValueError("capability secret is not configured")
    timestamp = int(now.timestamp())
    return f"{timestamp}.{_signature(user_id, server_id, timestamp, secret)}"


def verify(
    user_id: str,
    server_id: str,
    token: str,
    secret: str,
    now: datetime,
    *,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
) -> bool:
    """
    Check authenticity and freshness of ``token``.

    Any malformed input yields ``False``; this function never raises.
    """
    if not secret or not token:
        return False
    ts_part, sep, provided = token.partition(".")
    if not sep or not ts_part or not provided:
        return False
    # Canonical digits only, exactly as mint() writes them.
    if not (ts_part.isascii() and ts_part.isdigit()):
        return False
    timestamp = int(ts_part)
    if str(timestamp) != ts_part:
        return False
    if int(now.timestamp()) - timestamp > ttl_seconds:
        return False
    expected = _signature(user_id, server_id, timestamp, secret)
    # ``provided`` may carry non-ASCII; compare bytes so compare_digest accepts it.
    return hmac.compare_digest(provided.encode(), expected.encode())


@dataclass(frozen=True, slots=True)
class CapabilityCodec:
    """Bind :func:`mint` and :func:`verify` to one secret and lifetime."""

    secret: str
    ttl_seconds: int = DEFAULT_TTL_SECONDS

    def mint(self, user_id: str, server_id: str, now: datetime) -> str:
        return mint(user_id, server_id, self.secret, now)

    def verify(self, user_id: str, server_id: str, token: str, now: datetime) -> bool:
        return verify(user_id, server_id, token, self.secret, now, ttl_seconds=self.ttl_seconds)
