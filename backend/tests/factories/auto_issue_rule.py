"""Factory Boy definition for :class:`passport.models.auto_issue_rule.AutoIssueRule`."""

from __future__ import annotations

import factory
from passport.models.auto_issue_rule import AutoIssueRule
from passport.models.base import utcnow

from tests.factories import BaseFactory


class AutoIssueRuleFactory(BaseFactory):
    class Meta:
        model = AutoIssueRule

    id = None
    server_id = factory.Sequence(lambda n: f"srv-rules-{n}")
    trigger_role_id = factory.Sequence(lambda n: f"role-{n}")
    created_at = factory.LazyFunction(utcnow)
    created_by_id = factory.Sequence(lambda n: f"admin-{n}")
