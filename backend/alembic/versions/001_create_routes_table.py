"""Create routes table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `routes` table holding saved origin/destination pairs.
How:   Portable column types (UUID via sa.Uuid) so the same migration runs on
       PostgreSQL and SQLite.

Rollback: downgrade() drops the table entirely (all saved routes lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the routes table, its uniqueness constraint and the list index.

    See app/models/route.py for column documentation.
    """
    op.create_table(
        "routes",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Opaque route identifier assigned at creation",
        ),
        sa.Column(
            "user_id",
            sa.Text(),
            nullable=False,
            comment="Anonymous identifier of the owning client",
        ),
        sa.Column(
            "origin_address",
            sa.String(200),
            nullable=False,
            comment="Trimmed origin address",
        ),
        sa.Column(
            "destination_address",
            sa.String(200),
            nullable=False,
            comment="Trimmed destination address",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this route was saved (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Last modification time (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "origin_address",
            "destination_address",
            name="uq_routes_user_origin_destination",
        ),
    )

    # GET /routes filters by owner and sorts newest first
    op.create_index(
        "idx_routes_user_id_created_at",
        "routes",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop the routes table. Destructive: all saved routes are lost."""
    op.drop_index("idx_routes_user_id_created_at", table_name="routes")
    op.drop_table("routes")
