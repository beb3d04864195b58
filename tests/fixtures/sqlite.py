"""SQLite fixtures.

File-backed databases are preferred over ``:memory:`` wherever the schema is
created through the bootstrapper, so that every connection sees the same
schema.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import URL

from comments_microservice.adapters.db.context import CommentContext
from comments_microservice.adapters.db.engine import make_engine
from comments_microservice.adapters.db.metadata import metadata

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=redefined-outer-name


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a not-yet-existing SQLite file under the test's temp dir."""
    return str(URL.create("sqlite+pysqlite", database=str(tmp_path / "comments.db")))


@pytest.fixture
def sqlite_engine_file(sqlite_url: str) -> Iterator[Engine]:
    """Engine on an empty SQLite file; no schema is created.

    Yields:
        Engine: built with `make_engine()` so PRAGMAs and explicit BEGIN apply.
    """
    engine = make_engine(sqlite_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_engine_memory() -> Iterator[Engine]:
    """In-memory SQLite engine with tables from `metadata.create_all()`.

    No migration history is recorded here; use `comment_context` for a
    bootstrapped schema.
    """
    engine = make_engine("sqlite+pysqlite:///:memory:")
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def comment_context(sqlite_url: str) -> Iterator[CommentContext]:
    """Persistence context on a SQLite file, bootstrapped to READY."""
    with CommentContext(sqlite_url) as context:
        context.bootstrapper().run()
        yield context
