"""Common Marshmallow fields shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, validate


def snowflake(**kwargs: Any) -> fields.String:
    """Opaque platform identifier: a non-blank string of at most 64 characters."""
    kwargs.setdefault("validate", validate.Length(min=1, max=64))
    return fields.String(**kwargs)


class BaseSchema(Schema):
    """Base schema enabling ordered output for consistent API responses."""

    class Meta:
        ordered = True
