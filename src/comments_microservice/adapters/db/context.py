"""Persistence context of the comment store.

:class:`CommentContext` is the context type registered with the white-label
directory. It owns the engine and hands out the schema bootstrapper and
per-operation units of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from comments_microservice.adapters.unit_of_work import SqlAlchemyUnitOfWork

from .bootstrapper import SchemaBootstrapper
from .engine import make_engine
from .metadata import metadata
from .migrations import MIGRATIONS
from .schema import ENTITY_TABLES

if TYPE_CHECKING:
    from sqlalchemy.engine import URL, Engine


class CommentContext:
    """Engine, schema and migrations of the comment store.

    Args:
        url: SQLAlchemy database URL.
        echo: If True, log SQL statements.
    """

    metadata = metadata
    migrations = MIGRATIONS
    tables = ENTITY_TABLES

    def __init__(self, url: str | URL, *, echo: bool = False) -> None:
        self.engine: Engine = make_engine(url, echo=echo)

    def __enter__(self) -> CommentContext:
        return self

    def __exit__(self, *args) -> None:
        self.dispose()

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        """A new unit of work; use one per logical operation."""
        return SqlAlchemyUnitOfWork(self.engine, self.tables)

    def bootstrapper(self) -> SchemaBootstrapper:
        """The schema bootstrapper for this context's migrations."""
        return SchemaBootstrapper(
            self.engine, migrations=self.migrations, metadata=self.metadata
        )

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
