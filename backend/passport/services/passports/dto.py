# passport/services/passports/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class IssuePassportIn:
    """
    Input DTO for manual issuance.

    :param server_id: Issuing server.
    :param holder_id: Platform user receiving the passport.
    :param issued_by_id: Administrator performing the issuance.
    """

    server_id: str
    holder_id: str
    issued_by_id: str


@dataclass(frozen=True, slots=True)
class AddPolicyIn:
    """
    Input DTO for accepting another server's passports.

    :param server_id: Accepting server.
    :param issuer_id: Server whose passports become accepted.
    :param added_by_id: Administrator creating the policy.
    :param role_id: Role granted on join, if any.
    """

    server_id: str
    issuer_id: str
    added_by_id: str
    role_id: str | None = None


@dataclass(frozen=True, slots=True)
class AddAutoIssueRuleIn:
    """Input DTO for mirroring ``role_id`` into passport possession."""

    server_id: str
    role_id: str
    created_by_id: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class PassportOut:
    holder_id: str
    issuer_id: str
    issued_at: datetime
    issued_by_id: str


@dataclass(frozen=True, slots=True)
class PolicyOut:
    server_id: str
    issuer_id: str
    role_id: str | None
    added_at: datetime
    added_by_id: str


@dataclass(frozen=True, slots=True)
class AutoIssueRuleOut:
    server_id: str
    role_id: str
    created_at: datetime
    created_by_id: str


@dataclass(frozen=True, slots=True)
class ServerInfoOut:
    """
    Administrative summary of one server.

    :param issued_count: Passports issued by the server.
    :param accepted_issuers: Policies the server holds, oldest first.
    :param auto_issue_roles: Trigger roles of the server's auto-issue rules.
    """

    server_id: str
    issued_count: int
    accepted_issuers: tuple[PolicyOut, ...] = field(default_factory=tuple)
    auto_issue_roles: tuple[str, ...] = field(default_factory=tuple)
