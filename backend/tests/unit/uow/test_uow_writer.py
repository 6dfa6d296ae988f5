"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from passport.models import Credential
from passport.uow import SQLAlchemyUnitOfWork
from tests.factories.credential import CredentialFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a credential is added inside the context and it exits cleanly
        THEN the row is visible afterwards
        """
        initial = db.session.query(Credential).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.credentials.add(CredentialFactory.build())

        assert db.session.query(Credential).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted
        """
        initial = db.session.query(Credential).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.credentials.add(CredentialFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(Credential).count() == initial

    def test_repositories_share_the_unit_session(self, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.credentials.session is uow.policies.session
            assert uow.tokens.session is uow.auto_issue_rules.session
