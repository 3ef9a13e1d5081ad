"""Initial schema for the whiskey catalog.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create bars table
    op.create_table(
        "bars",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bars_name", "bars", ["name"])

    # Create whiskeys table
    op.create_table(
        "whiskeys",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("canonical_key", sa.String(255), nullable=False),
        sa.Column("distillery", sa.String(255), nullable=True),
        sa.Column("whiskey_type", sa.String(20), default="other"),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("abv", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_whiskeys_canonical_key", "whiskeys", ["canonical_key"], unique=True)

    # Create bar_whiskeys table
    op.create_table(
        "bar_whiskeys",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("bar_id", sa.String(36), sa.ForeignKey("bars.id"), nullable=False),
        sa.Column("whiskey_id", sa.String(36), sa.ForeignKey("whiskeys.id"), nullable=False),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("pour_size", sa.String(50), nullable=True),
        sa.Column("available", sa.Boolean(), default=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("source_type", sa.String(20), default="manual"),
        sa.Column("confidence", sa.Float(), default=1.0),
        sa.Column("is_stale", sa.Boolean(), default=False),
        sa.Column("source_job_id", sa.String(36), nullable=True),
        sa.Column("first_seen_at", sa.DateTime(), nullable=False),
        sa.Column("last_verified_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("bar_id", "whiskey_id", name="uq_bar_whiskeys_pair"),
    )
    op.create_index("ix_bar_whiskeys_bar_id", "bar_whiskeys", ["bar_id"])
    op.create_index("ix_bar_whiskeys_whiskey_id", "bar_whiskeys", ["whiskey_id"])


def downgrade() -> None:
    op.drop_index("ix_bar_whiskeys_whiskey_id", table_name="bar_whiskeys")
    op.drop_index("ix_bar_whiskeys_bar_id", table_name="bar_whiskeys")
    op.drop_table("bar_whiskeys")

    op.drop_index("ix_whiskeys_canonical_key", table_name="whiskeys")
    op.drop_table("whiskeys")

    op.drop_index("ix_bars_name", table_name="bars")
    op.drop_table("bars")
