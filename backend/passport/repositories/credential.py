"""Credential repository: passport issuance, revocation and lookups."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select

from passport.models.acceptance_policy import AcceptancePolicy
from passport.models.base import utcnow
from passport.models.credential import Credential
from passport.repositories.base import BaseRepository


class CredentialRepository(BaseRepository[Credential]):
    """Persistence-only repository for :class:`Credential`."""

    model = Credential

    def list_for_holder(self, holder_id: str) -> Sequence[Credential]:
        """Return the holder's credentials, oldest issuance first."""
        return self.list_by(Credential.issued_at.asc(), Credential.id.asc(), holder_id=holder_id)

    def list_for_issuer(self, issuer_id: str) -> Sequence[Credential]:
        """Return credentials issued by ``issuer_id``, oldest issuance first."""
        return self.list_by(Credential.issued_at.asc(), Credential.id.asc(), issuer_id=issuer_id)

    def count_for_issuer(self, issuer_id: str) -> int:
        """Return how many passports ``issuer_id`` has issued."""
        stmt = select(func.count()).select_from(Credential).where(Credential.issuer_id == issuer_id)
        return int(self.session.execute(stmt).scalar_one())

    def best_match(
        self, holder_id: str, server_id: str
    ) -> tuple[Credential, AcceptancePolicy] | None:
        """Return the most recently issued credential accepted by ``server_id``.

        Ties on ``issued_at`` fall back to the higher credential id.
        """
        stmt = (
            select(Credential, AcceptancePolicy)
            .join(AcceptancePolicy, AcceptancePolicy.issuer_id == Credential.issuer_id)
            .where(Credential.holder_id == holder_id, AcceptancePolicy.server_id == server_id)
            .order_by(Credential.issued_at.desc(), Credential.id.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]

    def insert_if_absent(
        self,
        *,
        holder_id: str,
        issuer_id: str,
        issued_by_id: str,
        issued_at: datetime | None = None,
    ) -> bool:
        """Insert a credential unless one exists for ``(holder_id, issuer_id)``.

        :returns: ``True`` when a row was inserted, ``False`` when one existed.
        """
        values = {
            "holder_id": holder_id,
            "issuer_id": issuer_id,
            "issued_by_id": issued_by_id,
            "issued_at": issued_at or utcnow(),
        }
        insert = self._upsert_insert()
        if insert is None:
            if self.exists(holder_id=holder_id, issuer_id=issuer_id):
                return False
            self.add(Credential(**values))
            return True

        stmt = insert.values(**values).on_conflict_do_nothing(
            index_elements=["holder_id", "issuer_id"]
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def delete_for(self, *, holder_id: str, issuer_id: str) -> bool:
        """Delete the credential for ``(holder_id, issuer_id)`` if present.

        :returns: ``True`` when a row was removed.
        """
        stmt = delete(Credential).where(
            Credential.holder_id == holder_id, Credential.issuer_id == issuer_id
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)
