"""Auto-issue rule repository."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete

from passport.models.auto_issue_rule import AutoIssueRule
from passport.repositories.base import BaseRepository


class AutoIssueRuleRepository(BaseRepository[AutoIssueRule]):
    """Persistence-only repository for :class:`AutoIssueRule`."""

    model = AutoIssueRule

    def list_for_server(self, server_id: str) -> Sequence[AutoIssueRule]:
        """Return the server's rules in creation order."""
        return self.list_by(
            AutoIssueRule.created_at.asc(), AutoIssueRule.id.asc(), server_id=server_id
        )

    def delete_for(self, server_id: str, trigger_role_id: str) -> bool:
        """Delete the rule for ``(server_id, trigger_role_id)``; ``True`` if removed."""
        stmt = delete(AutoIssueRule).where(
            AutoIssueRule.server_id == server_id,
            AutoIssueRule.trigger_role_id == trigger_role_id,
        )
        return bool(self.session.execute(stmt).rowcount)
