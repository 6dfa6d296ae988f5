"""Passport credential issued by one server to a holder."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from passport.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow


class Credential(PKMixin, ReprMixin, db.Model):
    """
    Proof that ``issuer_id`` granted a passport to ``holder_id``.

    Fields
    ------
    holder_id : str
        Platform user holding the passport.
    issuer_id : str
        Server that issued it.
    issued_at : datetime
        Issuance timestamp (UTC); drives holder listings and tie-breaks.
    issued_by_id : str
        Administrator, or auto-issue rule creator, responsible for issuance.

    A holder has at most one credential per issuer.
    """

    __tablename__ = "passports"

    holder_id: Mapped[str] = mapped_column(String(64), nullable=False)
    issuer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    issued_by_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("holder_id", "issuer_id", name="uq_passports_holder_issuer"),
        Index("ix_passports_holder_id", "holder_id"),
        Index("ix_passports_issuer_id", "issuer_id"),
    )
