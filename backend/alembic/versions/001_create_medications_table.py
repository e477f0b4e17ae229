"""Create medications table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `medications` table backing the medicine tracker.
How:   Portable column types (UUID, DATE, TIMESTAMP WITH TIME ZONE) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table and every stored medication with it.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the medications table, its check constraints and listing index."""
    op.create_table(
        "medications",
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Unique identifier, assigned at creation and never changed",
        ),
        sa.Column(
            "name",
            sa.String(200),
            nullable=False,
            comment="Display label entered by the user",
        ),
        sa.Column(
            "purchase_date",
            sa.Date(),
            nullable=False,
            comment="Day the medication was acquired",
        ),
        sa.Column(
            "expiry_date",
            sa.Date(),
            nullable=False,
            comment="Last day the medication is safe to use",
        ),
        sa.Column(
            "total_units",
            sa.Integer(),
            nullable=False,
            comment="Units available at purchase time",
        ),
        sa.Column(
            "units_per_day",
            sa.Integer(),
            nullable=False,
            comment="Daily consumption rate; 0 means the stock never depletes",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="When this record was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("total_units >= 0", name="ck_medications_total_units_non_negative"),
        sa.CheckConstraint("units_per_day >= 0", name="ck_medications_units_per_day_non_negative"),
    )

    # Default listing order is "as added"
    op.create_index("idx_medications_created_at", "medications", ["created_at"])


def downgrade() -> None:
    """Drop the medications table. Destructive: all stored medications are lost."""
    op.drop_index("idx_medications_created_at", table_name="medications")
    op.drop_table("medications")
