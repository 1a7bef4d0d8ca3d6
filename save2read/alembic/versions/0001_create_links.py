"""Create pending and archived link tables.

Revision ID: 0001_create_links
Revises: 
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_links"
down_revision = None
branch_labels = None
depends_on = None


def _link_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    op.create_table("pending_links", *_link_columns())
    op.create_index("ix_pending_links_user_id", "pending_links", ["user_id"])

    op.create_table("archived_links", *_link_columns())
    op.create_index("ix_archived_links_user_id", "archived_links", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_archived_links_user_id", table_name="archived_links")
    op.drop_table("archived_links")
    op.drop_index("ix_pending_links_user_id", table_name="pending_links")
    op.drop_table("pending_links")
