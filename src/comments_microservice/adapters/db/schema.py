"""Table definitions of the comment store.

``comments`` holds one row per :class:`~comments_microservice.domain.CommentEntity`.
``migration_history`` records which migration definitions the schema reflects.

These definitions describe the *cumulative* effect of every migration in
:mod:`comments_microservice.adapters.db.migrations`: a schema created from
them is equivalent to one built by applying each migration in order. Keep the
two in step when adding a migration.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, Index, String, Table, Text

from comments_microservice.domain import CommentEntity

from .metadata import metadata
from .sa_types import BIGINT_PK, UTCDateTime

__all__ = ["comments", "migration_history", "APPLICATION_TABLES", "ENTITY_TABLES"]

comments = Table(
    "comments",
    metadata,
    Column(
        "id",
        BIGINT_PK,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned comment identifier.",
    ),
    Column(
        "unique_identity",
        String(450),
        nullable=False,
        comment="Key of the resource the comment is attached to.",
    ),
    Column("text", Text, nullable=False, comment="Comment body."),
    Column(
        "creation_date_time",
        UTCDateTime(),
        nullable=False,
        comment="UTC creation time.",
    ),
    Column(
        "parent_id",
        BigInteger,
        nullable=True,
        comment="Comment this one replies to.",
    ),
    Column(
        "modification_date_time",
        UTCDateTime(),
        nullable=True,
        comment="UTC time of the last update.",
    ),
    Index("ix_comments_unique_identity", "unique_identity"),
    Index("ix_comments_parent_id", "parent_id"),
    comment="Stored comments.",
)

migration_history = Table(
    "migration_history",
    metadata,
    Column("migration_id", String(150), primary_key=True),
    Column("product_version", String(32), nullable=False),
    comment="Migrations the schema reflects. Append-only.",
)

#: Tables whose existence means "the schema is present".
APPLICATION_TABLES: tuple[Table, ...] = (comments,)

#: Entity type -> backing table, consumed by the unit of work.
ENTITY_TABLES: dict[type, Table] = {CommentEntity: comments}
