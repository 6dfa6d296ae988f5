"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. External
collaborators (membership directory, authorization provider) are replaced by
in-memory doubles on a per-test container.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest
from passport.core.config import TestingConfig
from passport.core.container import EXTENSION_KEY, build_container
from passport.core.extensions import db as _db  # Flask-SQLAlchemy instance
from passport.factory import create_app  # application factory under test
from passport.services._shared.ports import (
    InMemoryMembershipDirectory,
    InMemoryPendingAuthorizationStore,
    StubAuthorizationProvider,
)
from sqlalchemy.orm import scoped_session, sessionmaker


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(app, db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture follows the SQLAlchemy 2.0 recipe for joining a session into
    an external transaction: every session-level transaction runs in its own
    SAVEPOINT, so service commits and rollbacks behave normally while the
    outer transaction is rolled back at teardown. Each test gets its own
    application context so ``g`` never carries over between tests.
    """
    ctx = app.app_context()
    ctx.push()

    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test; session transactions nest inside it
    nested = connection.begin_nested()

    # 4) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        if nested.is_active:
            nested.rollback()
        top_trans.rollback()
        ctx.pop()


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- External collaborators ---------------------------------------------------
@pytest.fixture
def directory():
    """In-memory membership directory shared by the test's container."""
    return InMemoryMembershipDirectory(names={"srv-target": "Target Server"})


@pytest.fixture
def provider():
    """Authorization provider double; register grants per test."""
    return StubAuthorizationProvider()


@pytest.fixture
def pending_store(app):
    """Process-local pending-authorization table."""
    return InMemoryPendingAuthorizationStore()


@pytest.fixture
def services(app, session, directory, provider, pending_store):
    """Install a container wired to the doubles for the duration of one test.

    Yields
    ------
    passport.core.container.PassportContainer
        The container served by ``app.extensions``.
    """
    previous = app.extensions.get(EXTENSION_KEY)
    container = build_container(
        app.config,
        directory=directory,
        provider=provider,
        pending_store=pending_store,
    )
    app.extensions[EXTENSION_KEY] = container
    try:
        yield container
    finally:
        app.extensions[EXTENSION_KEY] = previous


@pytest.fixture
def client(app, services):
    """Flask test client bound to the per-test container."""
    return app.test_client()


@pytest.fixture
def now():
    """A fixed, whole-second UTC instant used as the test clock."""
    return datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
