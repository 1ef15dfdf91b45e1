"""create links table

Revision ID: 0001_create_links
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_links"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "links",
        sa.Column("keyword", sa.String(length=200), primary_key=True),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("ip", sa.String(length=41), nullable=False, server_default=""),
        sa.Column("clicks", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_links_timestamp", "links", ["timestamp"])
    op.create_index("ix_links_ip", "links", ["ip"])


def downgrade() -> None:
    op.drop_index("ix_links_ip", table_name="links")
    op.drop_index("ix_links_timestamp", table_name="links")
    op.drop_table("links")
