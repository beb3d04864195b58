"""SQLAlchemy-backed Unit of Work.

Provides a context-managed UnitOfWork using a SQLAlchemy Connection. Each
``with`` block opens one connection, hands out entity stores bound to it, and
closes it on exit; anything not committed is rolled back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, TypeVar

from comments_microservice.interfaces.unit_of_work import AbstractUnitOfWork

from .entity_store import SqlAlchemyEntityStore

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import Connection, Engine

E = TypeVar("E")


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work.

    Args:
        engine: Engine of the comment store.
        tables: Entity type -> backing table.
    """

    def __init__(self, engine: Engine, tables: Mapping[type, Table]):
        self.engine = engine
        self.tables = dict(tables)
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()

    def entities(self, entity_type: type[E]) -> SqlAlchemyEntityStore[E]:
        try:
            table = self.tables[entity_type]
        except KeyError as e:
            raise LookupError(f"No table bound to {entity_type.__name__}") from e
        return SqlAlchemyEntityStore(self.connection, entity_type, table)

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()
