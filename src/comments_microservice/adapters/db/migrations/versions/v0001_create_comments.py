"""Create the comments table."""

import sqlalchemy as sa
from alembic.operations import Operations

from comments_microservice.adapters.db.sa_types import BIGINT_PK, UTCDateTime

MIGRATION_ID = "20250901093000_CreateComments"


def upgrade(op: Operations) -> None:
    """Upgrade schema."""
    op.create_table(
        "comments",
        sa.Column(
            "id",
            BIGINT_PK,
            nullable=False,
            autoincrement=True,
            comment="Store-assigned comment identifier.",
        ),
        sa.Column(
            "unique_identity",
            sa.String(length=450),
            nullable=False,
            comment="Key of the resource the comment is attached to.",
        ),
        sa.Column("text", sa.Text(), nullable=False, comment="Comment body."),
        sa.Column(
            "creation_date_time",
            UTCDateTime(),
            nullable=False,
            comment="UTC creation time.",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        comment="Stored comments.",
    )
    op.create_index(
        "ix_comments_unique_identity", "comments", ["unique_identity"], unique=False
    )
