"""Rule mirroring a server role into passport possession."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from passport.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow


class AutoIssueRule(PKMixin, ReprMixin, db.Model):
    """Holding ``trigger_role_id`` in ``server_id`` mirrors a passport from that server."""

    __tablename__ = "auto_issue_rules"

    server_id: Mapped[str] = mapped_column(String(64), nullable=False)
    trigger_role_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_by_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("server_id", "trigger_role_id", name="uq_auto_issue_rules_server_role"),
        Index("ix_auto_issue_rules_server_id", "server_id"),
    )
