"""Server administration endpoints (policies, passports, auto-issue rules)."""

from __future__ import annotations

from flask import Blueprint, request

from passport.api.deps import (
    container,
    current_user_id,
    empty_response,
    json_response,
    require_server_admin,
    service_errors,
    timing,
)
from passport.core.errors import ServiceUnavailable
from passport.schemas import (
    AutoIssueRuleCreateSchema,
    AutoIssueRuleSchema,
    HolderSchema,
    IssuePassportSchema,
    PassportSchema,
    PolicyCreateSchema,
    PolicySchema,
    ServerInfoSchema,
)
from passport.services.passports import AddAutoIssueRuleIn, AddPolicyIn, IssuePassportIn

bp = Blueprint("servers", __name__)

policy_schema = PolicySchema()
policy_create_schema = PolicyCreateSchema()
passport_schema = PassportSchema()
issue_schema = IssuePassportSchema()
holder_list_schema = HolderSchema(many=True)
rule_schema = AutoIssueRuleSchema()
rule_create_schema = AutoIssueRuleCreateSchema()
info_schema = ServerInfoSchema()


# ------------------------------------------------------------------ #
# Acceptance policies
# ------------------------------------------------------------------ #


@bp.post("/<server_id>/policies")
@require_server_admin
@timing
def add_policy(server_id: str):
    """Accept passports issued by another server."""

    payload = policy_create_schema.load(request.get_json(silent=True) or {})
    with service_errors():
        policy = container().passports.add_policy(
            AddPolicyIn(
                server_id=server_id,
                issuer_id=payload["issuer_id"],
                role_id=payload.get("role_id"),
                added_by_id=current_user_id(),
            )
        )
    return json_response({"data": policy_schema.dump(policy)}, status=201)


@bp.delete("/<server_id>/policies/<issuer_id>")
@require_server_admin
@timing
def remove_policy(server_id: str, issuer_id: str):
    """Stop accepting an issuer's passports."""

    with service_errors():
        container().passports.remove_policy(server_id=server_id, issuer_id=issuer_id)
    return empty_response()


# ------------------------------------------------------------------ #
# Passports
# ------------------------------------------------------------------ #


@bp.post("/<server_id>/passports")
@require_server_admin
@timing
def issue_passport(server_id: str):
    """Issue a passport from this server."""

    payload = issue_schema.load(request.get_json(silent=True) or {})
    with service_errors():
        passport = container().passports.issue_passport(
            IssuePassportIn(
                server_id=server_id,
                holder_id=payload["holder_id"],
                issued_by_id=current_user_id(),
            )
        )
    return json_response({"data": passport_schema.dump(passport)}, status=201)


@bp.delete("/<server_id>/passports/<holder_id>")
@require_server_admin
@timing
def revoke_passport(server_id: str, holder_id: str):
    """Revoke a passport issued by this server; revoking a missing one is a no-op."""

    with service_errors():
        container().passports.revoke_passport(holder_id=holder_id, issuer_id=server_id)
    return empty_response()


@bp.get("/<server_id>/holders")
@require_server_admin
@timing
def list_holders(server_id: str):
    """List holders of this server's passports, oldest issuance first."""

    listing = container().resolver.list_holders(server_id)
    if listing.store_unavailable:
        raise ServiceUnavailable("Passport records are temporarily unavailable")
    return json_response({"data": holder_list_schema.dump(listing.items)})


# ------------------------------------------------------------------ #
# Auto-issue rules
# ------------------------------------------------------------------ #


@bp.post("/<server_id>/auto-issue")
@require_server_admin
@timing
def add_auto_issue_rule(server_id: str):
    """Issue passports automatically to members holding a role."""

    payload = rule_create_schema.load(request.get_json(silent=True) or {})
    with service_errors():
        rule = container().passports.add_auto_issue_rule(
            AddAutoIssueRuleIn(
                server_id=server_id,
                role_id=payload["role_id"],
                created_by_id=current_user_id(),
            )
        )
    return json_response({"data": rule_schema.dump(rule)}, status=201)


@bp.delete("/<server_id>/auto-issue/<role_id>")
@require_server_admin
@timing
def remove_auto_issue_rule(server_id: str, role_id: str):
    """Stop auto-issuing passports for a role."""

    with service_errors():
        container().passports.remove_auto_issue_rule(server_id=server_id, role_id=role_id)
    return empty_response()


@bp.get("/<server_id>/info")
@require_server_admin
@timing
def server_info(server_id: str):
    """Summarize passports issued, accepted issuers and auto-issue roles."""

    with service_errors():
        info = container().passports.server_info(server_id)
    return json_response({"data": info_schema.dump(info)})
