# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from passport.services._shared.ports.membership_directory import (
    DirectoryError,
    MemberAdded,
    MembershipDirectory,
)

log = logging.getLogger(__name__)

#: Provider code for "Unknown Member".
UNKNOWN_MEMBER_CODE = 10007


def _error_from(resp: requests.Response) -> DirectoryError:
    """Build a :class:`DirectoryError` from a non-success provider response."""
    code: int | None = None
    message = f"Directory request failed with HTTP {resp.status_code}"
    try:
        body: Any = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        raw_code = body.get("code")
        code = raw_code if isinstance(raw_code, int) else None
        message = str(body.get("message") or message)
    return DirectoryError(message, code=code, status=resp.status_code)


@dataclass(slots=True)
class RestMembershipDirectory(MembershipDirectory):
    """
    Bot-token REST client for the group-membership directory.

    :param base_url: API root, e.g. ``https://discord.com/api/v10``.
    :param bot_token: Bot credential sent as ``Authorization: Bot <token>``.
    :param timeout: Per-request timeout in seconds.
    :param session: Shared :class:`requests.Session` (one per container).
    """

    base_url: str
    bot_token: str
    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session)

    # -------------------- helpers --------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        headers = {"Authorization": f"Bot {self.bot_token}"}
        try:
            return self.session.request(
                method, self._url(path), headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            log.warning("directory.transport_error", extra={"path": path, "error": str(exc)})
            raise DirectoryError("Membership directory is unreachable") from exc

    # -------------------- API ------------------------

    def is_member(self, server_id: str, user_id: str) -> bool:
        resp = self._request("GET", f"guilds/{server_id}/members/{user_id}")
        if resp.status_code == 200:
            return True
        if resp.status_code == 404:
            error = _error_from(resp)
            if error.code in (None, UNKNOWN_MEMBER_CODE):
                return False
            raise error
        raise _error_from(resp)

    def add_member_with_token(
        self,
        server_id: str,
        user_id: str,
        access_token: str,
        role_id: str | None = None,
    ) -> MemberAdded:
        payload: dict[str, Any] = {"access_token": access_token}
        if role_id:
            payload["roles"] = [role_id]
        resp = self._request("PUT", f"guilds/{server_id}/members/{user_id}", json=payload)
        if resp.status_code == 204:
            return MemberAdded(already_member=True)
        if resp.status_code in (200, 201):
            try:
                body = resp.json()
            except ValueError:
                body = {}
            user = body.get("user") if isinstance(body, dict) else None
            username = user.get("username") if isinstance(user, dict) else None
            return MemberAdded(username=username)
        raise _error_from(resp)

    def server_name(self, server_id: str) -> str | None:
        resp = self._request("GET", f"guilds/{server_id}")
        if resp.status_code != 200:
            return None
        try:
            body = resp.json()
        except ValueError:
            return None
        name = body.get("name") if isinstance(body, dict) else None
        return name if isinstance(name, str) else None
