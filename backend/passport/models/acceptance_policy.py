"""Server-level declaration of accepted passport issuers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from passport.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow


class AcceptancePolicy(PKMixin, ReprMixin, db.Model):
    """
    ``server_id`` admits holders of passports issued by ``issuer_id``.

    Fields
    ------
    server_id : str
        Accepting server.
    issuer_id : str
        Accepted issuer.
    granted_role_id : str | None
        Role assigned on join, when configured.
    added_at : datetime
        Creation timestamp (UTC).
    added_by_id : str
        Administrator who created the policy.
    """

    __tablename__ = "acceptance_policies"

    server_id: Mapped[str] = mapped_column(String(64), nullable=False)
    issuer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    granted_role_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    added_by_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("server_id", "issuer_id", name="uq_acceptance_policies_server_issuer"),
        Index("ix_acceptance_policies_server_id", "server_id"),
        Index("ix_acceptance_policies_issuer_id", "issuer_id"),
    )
