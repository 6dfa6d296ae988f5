"""Delegated OAuth token used to add a holder to servers on their behalf."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from passport.core.extensions import db

from .base import TimestampMixin, ensure_utc


class DelegatedToken(TimestampMixin, db.Model):
    """
    One live token per holder, keyed by ``holder_id``.

    Fields
    ------
    holder_id : str
        Platform user who authorized the application (primary key).
    access_token : str
        Bearer token returned by the authorization-code exchange.
    refresh_token : str | None
        Refresh token when the provider returns one.
    expires_at : datetime
        Absolute expiry (UTC).
    """

    __tablename__ = "delegated_tokens"

    holder_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def is_expired(self, now: datetime) -> bool:
        """Return ``True`` when ``now`` is past the token's expiry."""
        return ensure_utc(self.expires_at) < ensure_utc(now)

    def __repr__(self) -> str:
        return f"<DelegatedToken holder_id={self.holder_id}>"
