"""Idempotent schema bootstrap.

On startup :class:`SchemaBootstrapper` decides whether the schema exists:

- **Absent** (no application table and no history table): create every table
  from :data:`~.metadata.metadata` and record *every* known migration as
  applied, in one transaction. A fresh schema already reflects the cumulative
  effect of all migrations, and there is never a moment where the tables exist
  but the history does not.
- **Present**: apply each migration missing from the history, in definition
  order. Each migration and its history row commit together; the first failure
  aborts the remaining sequence.

A schema that has application tables but no history table is refused: the
bootstrapper never guesses which migrations such a schema reflects.

All failures surface as :class:`SchemaBootstrapError`; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from alembic.runtime.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect, insert, select
from sqlalchemy.exc import SQLAlchemyError

from comments_microservice import __version__
from comments_microservice.interfaces.schema import (
    BootstrapReport,
    MigrationRecord,
    SchemaBootstrapError,
    SchemaState,
    SchemaStatus,
)

from .metadata import metadata as default_metadata
from .migrations import MIGRATIONS, Migration
from .schema import APPLICATION_TABLES, migration_history

if TYPE_CHECKING:
    from sqlalchemy import MetaData, Table
    from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


class SchemaBootstrapper:
    """Bring the schema behind ``engine`` to the :attr:`SchemaState.READY` state.

    Args:
        engine: Engine of the comment store.
        migrations: Ordered migration definitions known to this build.
        metadata: Metadata describing the cumulative schema.
        history: The migration-history table.
        application_tables: Tables whose existence means the schema is present.
        product_version: Version string written to each history row.

    Raises:
        ValueError: If two migrations share an id.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        engine: Engine,
        *,
        migrations: Sequence[Migration] = MIGRATIONS,
        metadata: MetaData = default_metadata,
        history: Table = migration_history,
        application_tables: Sequence[Table] = APPLICATION_TABLES,
        product_version: str = __version__,
    ) -> None:
        ids = [m.migration_id for m in migrations]
        if duplicates := sorted({i for i in ids if ids.count(i) > 1}):
            raise ValueError(f"Duplicate migration ids: {', '.join(duplicates)}")

        self.engine = engine
        self.migrations = tuple(migrations)
        self.metadata = metadata
        self.history = history
        self.application_tables = tuple(application_tables)
        self.product_version = product_version
        self.state = SchemaState.UNKNOWN

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #

    def run(self) -> BootstrapReport:
        """Run the bootstrap state machine to ``READY``.

        Returns:
            What was done. A second run against the same store reports nothing
            created, seeded, or applied.

        Raises:
            SchemaBootstrapError: If detection, creation, or any migration fails.
        """
        self.state = SchemaState.UNKNOWN
        try:
            with self.engine.connect() as conn:
                self.state = self._detect(conn)
        except SQLAlchemyError as e:
            raise SchemaBootstrapError(f"Cannot inspect the schema: {e}") from e

        logger.info("Schema bootstrap: %s", self.state.value)
        if self.state is SchemaState.SCHEMA_ABSENT:
            report = self._create()
        else:
            report = self._migrate()

        self.state = SchemaState.READY
        logger.info(
            "Schema ready (created=%s, seeded=%d, applied=%d)",
            report.created,
            len(report.seeded),
            len(report.applied),
        )
        return report

    def status(self) -> SchemaStatus:
        """Report the schema state and applied/pending migrations without changes."""
        with self.engine.connect() as conn:
            state = self._detect(conn)
            applied = (
                self._applied_ids(conn)
                if state is SchemaState.SCHEMA_PRESENT
                and inspect(conn).has_table(self.history.name)
                else set()
            )
        pending = tuple(
            m.migration_id for m in self.migrations if m.migration_id not in applied
        )
        if state is SchemaState.SCHEMA_PRESENT and not pending:
            state = SchemaState.READY
        return SchemaStatus(state=state, applied=tuple(sorted(applied)), pending=pending)

    def records(self) -> list[MigrationRecord]:
        """Return the migration history, ordered by migration id."""
        with self.engine.connect() as conn:
            if not inspect(conn).has_table(self.history.name):
                return []
            rows = conn.execute(
                select(self.history).order_by(self.history.c.migration_id)
            ).mappings()
            return [MigrationRecord(**row) for row in rows]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _detect(self, conn: Connection) -> SchemaState:
        inspector = inspect(conn)
        names = [t.name for t in self.application_tables] + [self.history.name]
        if any(inspector.has_table(name) for name in names):
            return SchemaState.SCHEMA_PRESENT
        return SchemaState.SCHEMA_ABSENT

    def _applied_ids(self, conn: Connection) -> set[str]:
        return set(conn.execute(select(self.history.c.migration_id)).scalars())

    def _record(self, migration: Migration) -> dict[str, str]:
        return {
            "migration_id": migration.migration_id,
            "product_version": self.product_version,
        }

    def _create(self) -> BootstrapReport:
        seeded = tuple(m.migration_id for m in self.migrations)
        try:
            with self.engine.begin() as conn:
                self.metadata.create_all(conn)
                self.history.create(conn, checkfirst=True)
                if self.migrations:
                    conn.execute(
                        insert(self.history), [self._record(m) for m in self.migrations]
                    )
        except SQLAlchemyError as e:
            raise SchemaBootstrapError(f"Schema creation failed: {e}") from e

        for migration_id in seeded:
            logger.debug("Recorded %s as applied by schema creation", migration_id)
        return BootstrapReport(
            initial_state=SchemaState.SCHEMA_ABSENT, created=True, seeded=seeded
        )

    def _migrate(self) -> BootstrapReport:
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(self.history.name):
                    raise SchemaBootstrapError(
                        f"Schema exists but has no {self.history.name!r} table; "
                        "cannot tell which migrations it reflects."
                    )
                applied = self._applied_ids(conn)
        except SQLAlchemyError as e:
            raise SchemaBootstrapError(f"Cannot read migration history: {e}") from e

        known = {m.migration_id for m in self.migrations}
        for migration_id in sorted(applied - known):
            logger.warning("History records unknown migration %s", migration_id)

        done: list[str] = []
        for migration in self.migrations:
            if migration.migration_id in applied:
                continue
            self._apply(migration)
            done.append(migration.migration_id)

        return BootstrapReport(
            initial_state=SchemaState.SCHEMA_PRESENT, applied=tuple(done)
        )

    def _apply(self, migration: Migration) -> None:
        logger.info("Applying migration %s", migration.migration_id)
        try:
            with self.engine.begin() as conn:
                migration.upgrade(Operations(MigrationContext.configure(conn)))
                conn.execute(insert(self.history).values(**self._record(migration)))
        except Exception as e:  # pylint: disable=broad-except
            logger.error("Migration %s failed; aborting", migration.migration_id)
            raise SchemaBootstrapError(
                f"Migration {migration.migration_id} failed: {e}",
                migration_id=migration.migration_id,
            ) from e
