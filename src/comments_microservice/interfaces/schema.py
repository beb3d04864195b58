"""Schema bootstrap DTOs and errors.

The bootstrapper walks ``UNKNOWN -> {SCHEMA_ABSENT, SCHEMA_PRESENT} -> READY``.
Every :class:`MigrationRecord` it writes stands for a schema change that has
already been physically applied in the same transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SchemaState(Enum):
    """Bootstrap states of the relational schema."""

    UNKNOWN = "unknown"
    SCHEMA_ABSENT = "schema absent"
    SCHEMA_PRESENT = "schema present"
    READY = "ready"


class SchemaBootstrapError(Exception):
    """Fatal schema bootstrap failure; startup must not continue."""

    def __init__(self, message: str, migration_id: str | None = None) -> None:
        super().__init__(message)
        self.migration_id = migration_id


@dataclass(frozen=True, slots=True)
class MigrationRecord:
    """A row of the migration-history table."""

    migration_id: str
    product_version: str


@dataclass(frozen=True, slots=True)
class BootstrapReport:
    """Outcome of one bootstrap run.

    Attributes:
        initial_state: Whether the schema was absent or present on entry.
        created: True if the schema was created from scratch.
        seeded: Migration ids recorded as applied by schema creation.
        applied: Migration ids executed incrementally.
    """

    initial_state: SchemaState
    created: bool = False
    seeded: tuple[str, ...] = field(default_factory=tuple)
    applied: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SchemaStatus:
    """Read-only view of the schema; nothing is changed to produce it."""

    state: SchemaState
    applied: tuple[str, ...]
    pending: tuple[str, ...]
