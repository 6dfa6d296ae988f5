"""Acceptance policy repository."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select

from passport.models.acceptance_policy import AcceptancePolicy
from passport.repositories.base import BaseRepository


class AcceptancePolicyRepository(BaseRepository[AcceptancePolicy]):
    """Persistence-only repository for :class:`AcceptancePolicy`."""

    model = AcceptancePolicy

    def get_for(self, server_id: str, issuer_id: str) -> AcceptancePolicy | None:
        """Return the policy for ``(server_id, issuer_id)`` if any."""
        return self.find_one(server_id=server_id, issuer_id=issuer_id)

    def list_for_server(self, server_id: str) -> Sequence[AcceptancePolicy]:
        """Return the issuers ``server_id`` accepts, oldest first."""
        return self.list_by(
            AcceptancePolicy.added_at.asc(), AcceptancePolicy.id.asc(), server_id=server_id
        )

    def list_for_issuers(self, issuer_ids: Iterable[str]) -> Sequence[AcceptancePolicy]:
        """Return every policy referencing one of ``issuer_ids``."""
        ids = list(issuer_ids)
        if not ids:
            return []
        stmt = (
            select(AcceptancePolicy)
            .where(AcceptancePolicy.issuer_id.in_(ids))
            .order_by(AcceptancePolicy.added_at.asc(), AcceptancePolicy.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def delete_for(self, server_id: str, issuer_id: str) -> bool:
        """Delete the policy for ``(server_id, issuer_id)``; ``True`` if removed."""
        stmt = delete(AcceptancePolicy).where(
            AcceptancePolicy.server_id == server_id, AcceptancePolicy.issuer_id == issuer_id
        )
        return bool(self.session.execute(stmt).rowcount)
