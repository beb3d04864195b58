"""Integration tests for the schema bootstrapper on SQLite."""

from __future__ import annotations

import logging

import pytest
import sqlalchemy as sa
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import event, func, insert, inspect, select

from comments_microservice import __version__
from comments_microservice.adapters.db.bootstrapper import SchemaBootstrapper
from comments_microservice.adapters.db.engine import make_engine
from comments_microservice.adapters.db.migrations import MIGRATIONS, Migration
from comments_microservice.adapters.db.schema import comments, migration_history
from comments_microservice.interfaces.schema import (
    MigrationRecord,
    SchemaBootstrapError,
    SchemaState,
)

# pylint: disable=magic-value-comparison,redefined-outer-name

ALL_IDS = tuple(m.migration_id for m in MIGRATIONS)
DDL_PREFIXES = ("CREATE", "ALTER", "DROP")


def _history_ids(engine) -> list[str]:
    with engine.connect() as conn:
        return list(conn.execute(select(migration_history.c.migration_id)).scalars())


def _columns(engine) -> set[tuple[str, bool]]:
    return {
        (column["name"], column["nullable"])
        for column in inspect(engine).get_columns("comments")
    }


def _indexes(engine) -> set[str]:
    return {index["name"] for index in inspect(engine).get_indexes("comments")}


def _build_first_release(engine) -> None:
    """Leave the store as the first release would have: one migration applied."""
    first = MIGRATIONS[0]
    with engine.begin() as conn:
        first.upgrade(Operations(MigrationContext.configure(conn)))
        migration_history.create(conn)
        conn.execute(
            insert(migration_history).values(
                migration_id=first.migration_id, product_version="0.0.1"
            )
        )


@pytest.fixture
def statements(sqlite_engine_file) -> list[str]:
    """SQL statements sent to the database, in order."""
    seen: list[str] = []

    @event.listens_for(sqlite_engine_file, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):  # pylint: disable=unused-argument,too-many-arguments
        seen.append(statement.strip().upper())

    return seen


class TestFreshStore:
    """Bootstrapping an empty database."""

    @staticmethod
    def test_creates_schema_and_seeds_every_migration(sqlite_engine_file):
        bootstrapper = SchemaBootstrapper(sqlite_engine_file)
        assert bootstrapper.state is SchemaState.UNKNOWN

        report = bootstrapper.run()

        assert report.initial_state is SchemaState.SCHEMA_ABSENT
        assert report.created
        assert report.seeded == ALL_IDS
        assert report.applied == ()
        assert bootstrapper.state is SchemaState.READY
        assert inspect(sqlite_engine_file).has_table("comments")
        assert sorted(_history_ids(sqlite_engine_file)) == sorted(ALL_IDS)

    @staticmethod
    def test_history_rows_carry_the_product_version(sqlite_engine_file):
        bootstrapper = SchemaBootstrapper(sqlite_engine_file)
        bootstrapper.run()
        assert bootstrapper.records() == [
            MigrationRecord(migration_id, __version__) for migration_id in sorted(ALL_IDS)
        ]

    @staticmethod
    def test_second_run_changes_nothing(sqlite_engine_file, statements):
        """Re-running against a ready store issues no DDL and writes no history."""
        SchemaBootstrapper(sqlite_engine_file).run()
        statements.clear()

        report = SchemaBootstrapper(sqlite_engine_file).run()

        assert report.initial_state is SchemaState.SCHEMA_PRESENT
        assert not report.created
        assert report.seeded == ()
        assert report.applied == ()
        assert len(_history_ids(sqlite_engine_file)) == len(ALL_IDS)
        assert not [s for s in statements if s.startswith(DDL_PREFIXES)]
        assert not [s for s in statements if s.startswith("INSERT")]


class TestExistingStore:
    """Bootstrapping a database that already has a schema."""

    @staticmethod
    def test_applies_only_missing_migrations(sqlite_engine_file):
        _build_first_release(sqlite_engine_file)

        report = SchemaBootstrapper(sqlite_engine_file).run()

        assert report.initial_state is SchemaState.SCHEMA_PRESENT
        assert report.applied == ALL_IDS[1:]
        assert sorted(_history_ids(sqlite_engine_file)) == sorted(ALL_IDS)

    @staticmethod
    def test_upgraded_schema_matches_fresh_schema(sqlite_engine_file, tmp_path):
        """Applying migrations in order yields the same shape as creating anew."""

        _build_first_release(sqlite_engine_file)
        SchemaBootstrapper(sqlite_engine_file).run()

        fresh = make_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
        try:
            SchemaBootstrapper(fresh).run()
            assert _columns(sqlite_engine_file) == _columns(fresh)
            assert _indexes(sqlite_engine_file) == _indexes(fresh)
        finally:
            fresh.dispose()

    @staticmethod
    def test_existing_rows_survive_migration(sqlite_engine_file):
        _build_first_release(sqlite_engine_file)
        with sqlite_engine_file.begin() as conn:
            conn.exec_driver_sql(
                "INSERT INTO comments (unique_identity, text, creation_date_time) "
                "VALUES ('1-1-article', 'kept', '2025-09-01 09:30:00')"
            )

        SchemaBootstrapper(sqlite_engine_file).run()

        with sqlite_engine_file.connect() as conn:
            row = conn.execute(select(comments)).mappings().one()
        assert row["text"] == "kept"
        assert row["parent_id"] is None

    @staticmethod
    def test_failing_migration_aborts_and_leaves_no_trace(sqlite_engine_file):
        """A failed migration is rolled back together with its history row."""
        SchemaBootstrapper(sqlite_engine_file).run()
        ran_after_failure = []

        def broken(op: Operations) -> None:
            op.create_table("scratch", sa.Column("id", sa.Integer, primary_key=True))
            raise RuntimeError("boom")

        migrations = (
            *MIGRATIONS,
            Migration("29990101000000_Broken", broken),
            Migration("29990101000001_Later", ran_after_failure.append),
        )
        bootstrapper = SchemaBootstrapper(sqlite_engine_file, migrations=migrations)

        with pytest.raises(SchemaBootstrapError, match="boom") as excinfo:
            bootstrapper.run()

        assert excinfo.value.migration_id == "29990101000000_Broken"
        assert bootstrapper.state is not SchemaState.READY
        assert not inspect(sqlite_engine_file).has_table("scratch")
        assert "29990101000000_Broken" not in _history_ids(sqlite_engine_file)
        assert not ran_after_failure

    @staticmethod
    def test_schema_without_history_is_refused(sqlite_engine_file):
        comments.create(sqlite_engine_file)
        bootstrapper = SchemaBootstrapper(sqlite_engine_file)

        with pytest.raises(SchemaBootstrapError, match="migration_history"):
            bootstrapper.run()

        assert bootstrapper.state is SchemaState.SCHEMA_PRESENT
        assert not inspect(sqlite_engine_file).has_table("migration_history")

    @staticmethod
    def test_unknown_history_entries_are_reported(sqlite_engine_file, caplog):
        """History written by a newer build is tolerated with a warning."""
        SchemaBootstrapper(sqlite_engine_file).run()
        with sqlite_engine_file.begin() as conn:
            conn.execute(
                insert(migration_history).values(
                    migration_id="29990101000000_FromTheFuture", product_version="9.9.9"
                )
            )

        with caplog.at_level(logging.WARNING):
            report = SchemaBootstrapper(sqlite_engine_file).run()

        assert report.applied == ()
        assert "29990101000000_FromTheFuture" in caplog.text


class TestStatus:
    """Read-only status reporting."""

    @staticmethod
    def test_absent(sqlite_engine_file):
        status = SchemaBootstrapper(sqlite_engine_file).status()
        assert status.state is SchemaState.SCHEMA_ABSENT
        assert status.applied == ()
        assert status.pending == ALL_IDS
        assert not inspect(sqlite_engine_file).has_table("comments")

    @staticmethod
    def test_pending(sqlite_engine_file):
        _build_first_release(sqlite_engine_file)
        status = SchemaBootstrapper(sqlite_engine_file).status()
        assert status.state is SchemaState.SCHEMA_PRESENT
        assert status.applied == ALL_IDS[:1]
        assert status.pending == ALL_IDS[1:]

    @staticmethod
    def test_ready(sqlite_engine_file):
        bootstrapper = SchemaBootstrapper(sqlite_engine_file)
        bootstrapper.run()
        status = bootstrapper.status()
        assert status.state is SchemaState.READY
        assert status.pending == ()

    @staticmethod
    def test_records_empty_without_history(sqlite_engine_file):
        assert SchemaBootstrapper(sqlite_engine_file).records() == []


def test_duplicate_migration_ids_are_rejected(sqlite_engine_file):
    with pytest.raises(ValueError, match="Duplicate migration ids"):
        SchemaBootstrapper(sqlite_engine_file, migrations=(*MIGRATIONS, MIGRATIONS[0]))


def test_history_count_matches_definitions(comment_context):
    """The bootstrapped fixture store records each definition exactly once."""
    with comment_context.engine.connect() as conn:
        count = conn.execute(select(func.count()).select_from(migration_history)).scalar()
    assert count == len(MIGRATIONS)
