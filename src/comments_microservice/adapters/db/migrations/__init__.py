"""Ordered migration definitions.

:data:`MIGRATIONS` is the explicit, build-time list the schema bootstrapper
works from. Append new migrations at the end; never reorder or rename.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING

from .versions import v0001_create_comments, v0002_comment_replies_and_edits

if TYPE_CHECKING:
    from alembic.operations import Operations


@dataclass(frozen=True, slots=True)
class Migration:
    """One schema-defining change."""

    migration_id: str
    upgrade: Callable[[Operations], None]
    description: str = ""

    @classmethod
    def from_module(cls, module: ModuleType) -> Migration:
        """Build a migration from a module exposing ``MIGRATION_ID`` and ``upgrade``."""
        return cls(
            migration_id=module.MIGRATION_ID,
            upgrade=module.upgrade,
            description=(module.__doc__ or "").strip(),
        )


MIGRATIONS: tuple[Migration, ...] = (
    Migration.from_module(v0001_create_comments),
    Migration.from_module(v0002_comment_replies_and_edits),
)
