"""Delegated token repository with an explicit conditional upsert."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select

from passport.models.base import utcnow
from passport.models.delegated_token import DelegatedToken
from passport.repositories.base import BaseRepository


class DelegatedTokenRepository(BaseRepository[DelegatedToken]):
    """Persistence-only repository for :class:`DelegatedToken`.

    Re-authorization overwrites the holder's row; there is never more than
    one token per holder.
    """

    model = DelegatedToken

    def get_for_holder(self, holder_id: str) -> DelegatedToken | None:
        """Return the holder's token, bypassing stale identity-map state."""
        stmt = (
            select(DelegatedToken)
            .where(DelegatedToken.holder_id == holder_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def upsert(
        self,
        *,
        holder_id: str,
        access_token: str,
        refresh_token: str | None,
        expires_at: datetime,
        now: datetime | None = None,
    ) -> DelegatedToken:
        """Insert the holder's token or, on conflict, replace every field.

        ``created_at`` is kept from the original row; ``updated_at`` is
        refreshed.
        """
        stamp = now or utcnow()
        insert = self._upsert_insert()
        if insert is None:
            existing = self.get_for_holder(holder_id)
            if existing is None:
                return self.add(
                    DelegatedToken(
                        holder_id=holder_id,
                        access_token=access_token,
                        refresh_token=refresh_token,
                        expires_at=expires_at,
                        created_at=stamp,
                        updated_at=stamp,
                    )
                )
            existing.access_token = access_token
            existing.refresh_token = refresh_token
            existing.expires_at = expires_at
            existing.updated_at = stamp
            self.flush()
            return existing

        stmt = insert.values(
            holder_id=holder_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            created_at=stamp,
            updated_at=stamp,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["holder_id"],
            set_={
                "access_token": stmt.excluded.access_token,
                "refresh_token": stmt.excluded.refresh_token,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        stmt = stmt.returning(DelegatedToken)
        return self.session.scalars(stmt, execution_options={"populate_existing": True}).one()

    def delete_for_holder(self, holder_id: str) -> bool:
        """Delete the holder's token; ``True`` if a row was removed."""
        stmt = delete(DelegatedToken).where(DelegatedToken.holder_id == holder_id)
        return bool(self.session.execute(stmt).rowcount)
