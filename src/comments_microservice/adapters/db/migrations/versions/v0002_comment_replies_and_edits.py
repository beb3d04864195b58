"""Add reply threading and modification tracking to comments."""

import sqlalchemy as sa
from alembic.operations import Operations

from comments_microservice.adapters.db.sa_types import UTCDateTime

MIGRATION_ID = "20251014161500_CommentRepliesAndEdits"


def upgrade(op: Operations) -> None:
    """Upgrade schema."""
    op.add_column(
        "comments",
        sa.Column(
            "parent_id",
            sa.BigInteger(),
            nullable=True,
            comment="Comment this one replies to.",
        ),
    )
    op.add_column(
        "comments",
        sa.Column(
            "modification_date_time",
            UTCDateTime(),
            nullable=True,
            comment="UTC time of the last update.",
        ),
    )
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"], unique=False)
