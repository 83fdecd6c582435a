"""add habits and habit_entries tables

Revision ID: 20261016_habits_initial
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261016_habits_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500)),
        sa.Column("frequency", sa.String(length=16), nullable=False),
        sa.Column("target_days", sa.Text()),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("category", sa.String(length=50)),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_habits_priority_created", "habits", ["priority", "created_at"])
    op.create_index("ix_habits_category", "habits", ["category"])

    op.create_table(
        "habit_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "habit_id",
            sa.Integer(),
            sa.ForeignKey("habits.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "completed_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index(
        "ix_habit_entries_habit_completed",
        "habit_entries",
        ["habit_id", "completed_at"],
    )


def downgrade():
    op.drop_index("ix_habit_entries_habit_completed", table_name="habit_entries")
    op.drop_table("habit_entries")
    op.drop_index("ix_habits_category", table_name="habits")
    op.drop_index("ix_habits_priority_created", table_name="habits")
    op.drop_table("habits")
