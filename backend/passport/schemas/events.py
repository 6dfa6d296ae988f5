"""Membership-change event payloads."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, ValidationError, fields, post_load, validates_schema

from passport.services.reconciler.dto import MembershipChange

from .common import BaseSchema, snowflake


class MembershipEventSchema(BaseSchema):
    """
    Accept either a role delta or two role snapshots.

    Delta form: ``{server_id, user_id, added_roles, removed_roles, held_roles?}``.
    Snapshot form: ``{server_id, user_id, before, after}``.
    Loading yields a :class:`MembershipChange`.
    """

    class Meta:
        unknown = EXCLUDE

    server_id = snowflake(required=True)
    user_id = snowflake(required=True)
    added_roles = fields.List(snowflake())
    removed_roles = fields.List(snowflake())
    held_roles = fields.List(snowflake(), allow_none=True)
    before = fields.List(snowflake())
    after = fields.List(snowflake())

    @validates_schema
    def check_shape(self, data: dict[str, Any], **_: Any) -> None:
        has_snapshots = "before" in data or "after" in data
        has_delta = "added_roles" in data or "removed_roles" in data
        if has_snapshots and has_delta:
            raise ValidationError("Send either a role delta or before/after snapshots, not both.")
        if has_snapshots and not ("before" in data and "after" in data):
            raise ValidationError("Both 'before' and 'after' are required.")
        if not has_snapshots and not has_delta:
            raise ValidationError("Missing role delta ('added_roles'/'removed_roles').")

    @post_load
    def to_change(self, data: dict[str, Any], **_: Any) -> MembershipChange:
        if "before" in data:
            return MembershipChange.from_snapshots(
                data["server_id"], data["user_id"], data["before"], data["after"]
            )
        held = data.get("held_roles")
        return MembershipChange(
            server_id=data["server_id"],
            user_id=data["user_id"],
            added_roles=frozenset(data.get("added_roles", ())),
            removed_roles=frozenset(data.get("removed_roles", ())),
            held_roles=frozenset(held) if held is not None else None,
        )


class MemberJoinedEventSchema(BaseSchema):
    """A member arriving on a server with the roles they already hold."""

    class Meta:
        unknown = EXCLUDE

    server_id = snowflake(required=True)
    user_id = snowflake(required=True)
    roles = fields.List(snowflake(), load_default=list)


class ReconcileReportSchema(BaseSchema):
    """Serialize a :class:`~passport.services.reconciler.dto.ReconcileReport`."""

    server_id = fields.String(required=True)
    user_id = fields.String(required=True)
    issued = fields.Boolean(required=True)
    revoked = fields.Boolean(required=True)
    retained = fields.Boolean(required=True)
    failures = fields.Function(
        lambda r: [{"role_id": f.role_id, "operation": f.operation} for f in r.failures]
    )
