"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session, scoped_session

from passport.core.extensions import db
from passport.repositories import (
    AcceptancePolicyRepository,
    AutoIssueRuleRepository,
    CredentialRepository,
    DelegatedTokenRepository,
)
from passport.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.credentials = CredentialRepository(session=self.session)
        self.policies = AcceptancePolicyRepository(session=self.session)
        self.auto_issue_rules = AutoIssueRuleRepository(session=self.session)
        self.tokens = DelegatedTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent transaction.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    Installs a ``before_flush`` guard for the duration of the scope so ORM
    writes fail loudly. When the scope started the transaction it also rolls
    it back on exit; when it attached to an outer transaction (for example a
    test fixture or an enclosing read-write UoW) that transaction is left
    untouched. ``commit()`` is disallowed.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._guard_installed = False
        self._owns_txn = False
        self._guard_target: Session | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # Work on the concrete Session; a scoped_session target would register
        # the guard on its factory and block writers in other threads.
        session = self.session
        target = session() if isinstance(session, scoped_session) else session
        self._owns_txn = not target.in_transaction()
        event.listen(target, "before_flush", self._block_flush)
        self._guard_target = target
        self._guard_installed = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_txn:
                with suppress(Exception):
                    self.session.rollback()
        finally:
            if self._guard_installed:
                with suppress(Exception):
                    event.remove(self._guard_target, "before_flush", self._block_flush)
                self._guard_installed = False

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
