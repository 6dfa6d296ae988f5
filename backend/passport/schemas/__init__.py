"""Convenience exports for API schemas."""

from __future__ import annotations

from .common import BaseSchema, snowflake
from .events import MemberJoinedEventSchema, MembershipEventSchema, ReconcileReportSchema
from .join import AccessibleServerSchema, JoinRequestSchema, JoinResultSchema
from .passport import (
    AutoIssueRuleCreateSchema,
    AutoIssueRuleSchema,
    HolderSchema,
    IssuePassportSchema,
    PassportSchema,
    PolicyCreateSchema,
    PolicySchema,
    ServerInfoSchema,
)

__all__ = [
    "AccessibleServerSchema",
    "AutoIssueRuleCreateSchema",
    "AutoIssueRuleSchema",
    "BaseSchema",
    "HolderSchema",
    "IssuePassportSchema",
    "JoinRequestSchema",
    "JoinResultSchema",
    "MemberJoinedEventSchema",
    "MembershipEventSchema",
    "PassportSchema",
    "PolicyCreateSchema",
    "PolicySchema",
    "ReconcileReportSchema",
    "ServerInfoSchema",
    "snowflake",
]
