"""add recurrence fields"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_recurrence"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("tasks", sa.Column("recurrence_rule", sa.String(length=20), nullable=True))
    op.add_column(
        "tasks",
        sa.Column("recurrence_interval", sa.Integer(), nullable=False, server_default="1"),
    )
    op.add_column("tasks", sa.Column("next_due_at", sa.DateTime(), nullable=True))
    # The recurring job filters on status plus a scheduled next occurrence.
    op.create_index(
        "ix_tasks_status_next_due_at", "tasks", ["status", "next_due_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_tasks_status_next_due_at", table_name="tasks")
    op.drop_column("tasks", "next_due_at")
    op.drop_column("tasks", "recurrence_interval")
    op.drop_column("tasks", "recurrence_rule")
