"""Passport, acceptance-policy and auto-issue schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, fields

from .common import BaseSchema, snowflake


class PassportSchema(BaseSchema):
    """Representation of an issued passport."""

    holder_id = fields.String(required=True)
    issuer_id = fields.String(required=True)
    issued_at = fields.DateTime(required=True)
    issued_by_id = fields.String(required=True)


class HolderSchema(BaseSchema):
    """A holder of the server's passports."""

    holder_id = fields.String(required=True)
    issued_at = fields.DateTime(required=True)
    issued_by_id = fields.String(required=True)


class IssuePassportSchema(BaseSchema):
    """Payload for issuing a passport."""

    class Meta:
        unknown = EXCLUDE

    holder_id = snowflake(required=True)


class PolicySchema(BaseSchema):
    """Representation of an accepted issuer."""

    server_id = fields.String(required=True)
    issuer_id = fields.String(required=True)
    role_id = fields.String(allow_none=True)
    added_at = fields.DateTime(required=True)
    added_by_id = fields.String(required=True)


class PolicyCreateSchema(BaseSchema):
    """Payload for accepting another server's passports."""

    class Meta:
        unknown = EXCLUDE

    issuer_id = snowflake(required=True)
    role_id = snowflake(load_default=None, allow_none=True)


class AutoIssueRuleSchema(BaseSchema):
    """Representation of an auto-issue rule."""

    server_id = fields.String(required=True)
    role_id = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    created_by_id = fields.String(required=True)


class AutoIssueRuleCreateSchema(BaseSchema):
    """Payload for configuring an auto-issue trigger role."""

    class Meta:
        unknown = EXCLUDE

    role_id = snowflake(required=True)


class ServerInfoSchema(BaseSchema):
    """Administrative summary of a server."""

    server_id = fields.String(required=True)
    issued_count = fields.Integer(required=True)
    accepted_issuers = fields.List(fields.Nested(PolicySchema), required=True)
    auto_issue_roles = fields.List(fields.String(), required=True)
