"""Join and accessible-server schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, fields

from .common import BaseSchema, snowflake


class JoinRequestSchema(BaseSchema):
    """Payload for ``POST /me/joins``."""

    class Meta:
        unknown = EXCLUDE

    server_id = snowflake(required=True)


class JoinResultSchema(BaseSchema):
    """Serialize a :class:`~passport.services.join.dto.JoinResult`."""

    success = fields.Boolean(required=True)
    role_assigned = fields.Boolean(required=True)
    needs_auth = fields.Boolean(required=True)
    error = fields.Function(lambda r: r.error.value if r.error is not None else None)
    message = fields.String(allow_none=True)
    server_id = fields.String(allow_none=True)
    server_name = fields.String(allow_none=True)
    issuer_id = fields.String(allow_none=True)
    username = fields.String(allow_none=True)


class AccessibleServerSchema(BaseSchema):
    """A server the caller may join."""

    server_id = fields.String(required=True)
    issuer_id = fields.String(required=True)
    role_id = fields.String(allow_none=True)
