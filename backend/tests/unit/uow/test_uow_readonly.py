"""Unit tests for the read-only SQLAlchemy Unit of Work."""

from __future__ import annotations

import pytest
from passport.models.credential import Credential
from passport.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from sqlalchemy.orm import scoped_session
from tests.factories.credential import CredentialFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(CredentialFactory.build())
            uow.session.flush()

    def test_allows_reads(self, session):
        cred = CredentialFactory()

        with ROuow() as uow:
            found = uow.credentials.find_one(holder_id=cred.holder_id)
            assert found is not None

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_attempted_mutation_does_not_persist(self, session):
        """
        GIVEN a persisted credential
        WHEN it is mutated inside a RO scope
        THEN the flush is blocked and the stored value is unchanged
        """
        cred = CredentialFactory(issued_by_id="original")
        cred_id = cred.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            row = uow.session.get(Credential, cred_id)
            row.issued_by_id = "mutated"
            uow.session.flush()

        session.rollback()
        assert session.get(Credential, cred_id).issued_by_id == "original"

    def test_guard_is_removed_on_exit(self, session):
        with ROuow():
            pass

        CredentialFactory(holder_id="after-ro")
        assert session.query(Credential).filter_by(holder_id="after-ro").count() == 1

    def test_enters_on_scoped_session(self, session):
        """
        GIVEN the scoped ``db.session`` used by the application
        WHEN a RO scope is opened outside any transaction
        THEN it enters, reads, and owns the transaction it started
        """
        holder_id = CredentialFactory().holder_id
        session.commit()
        assert isinstance(session, scoped_session)

        uow = ROuow()
        with uow:
            assert uow._owns_txn is True
            assert uow.credentials.find_one(holder_id=holder_id) is not None

    def test_attaches_to_an_open_transaction(self, session):
        CredentialFactory()
        assert session.query(Credential).count() == 1

        uow = ROuow()
        with uow:
            assert uow._owns_txn is False

        assert session.in_transaction()
