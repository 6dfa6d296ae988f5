"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Session access (injected by the Unit of Work, Flask-scoped otherwise).
- Thin CRUD helpers.
- Dialect-aware ``INSERT ... ON CONFLICT`` construction for explicit upserts.
- No business logic, no commit/rollback; services own transactions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from passport.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type

#: Dialects with native ``ON CONFLICT`` support.
_UPSERT_DIALECTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single record kind.

    Subclasses MUST define ``model``. This class never opens, commits or rolls
    back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Internals --------------------------------

    def _where(self, stmt: Select[Any], criteria: Mapping[str, Any]) -> Select[Any]:
        """Apply equality filters on model attributes."""
        clauses = [getattr(self.model, key) == value for key, value in criteria.items()]
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _upsert_insert(self) -> Any | None:
        """Return a dialect ``insert`` construct supporting ``on_conflict_*``.

        ``None`` means the bound dialect has no native upsert and callers must
        fall back to select-then-write inside the same transaction.
        """
        dialect = self.session.get_bind().dialect.name
        factory = _UPSERT_DIALECTS.get(dialect)
        return factory(self.model) if factory is not None else None

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize defaults and the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key."""
        return self.session.get(self.model, entity_id)

    def find_one(self, **criteria: Any) -> E | None:
        """Return the first entity matching all equality ``criteria``."""
        stmt = self._where(select(self.model), criteria).limit(1)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **criteria: Any) -> bool:
        """Return ``True`` when at least one row matches ``criteria``."""
        return self.find_one(**criteria) is not None

    def list_by(self, *order_by: Any, **criteria: Any) -> Sequence[E]:
        """List entities matching ``criteria`` ordered by ``order_by`` clauses."""
        stmt = self._where(select(self.model), criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        return list(self.session.execute(stmt).scalars().all())

    def delete(self, instance: E) -> None:
        """Delete an entity and flush."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        """Flush pending changes to the database."""
        self.session.flush()
