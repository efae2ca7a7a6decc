"""create maintenance tasks table

Revision ID: 005
Revises: 004
Create Date: 2025-03-11 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "maintenance_tasks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("priority", sa.String(10), nullable=True),
        sa.Column("task_status", sa.String(10), nullable=False, server_default="open"),
        sa.Column("assigned_to", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.CheckConstraint(
            "priority IS NULL OR priority IN ('low', 'medium', 'high')",
            name="ck_maintenance_tasks_priority",
        ),
        sa.CheckConstraint(
            "task_status IN ('open', 'completed')",
            name="ck_maintenance_tasks_task_status",
        ),
    )
    op.create_index("ix_maintenance_tasks_id", "maintenance_tasks", ["id"], unique=False)
    op.create_index(
        "ix_maintenance_tasks_property_id", "maintenance_tasks", ["property_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_maintenance_tasks_property_id", table_name="maintenance_tasks")
    op.drop_index("ix_maintenance_tasks_id", table_name="maintenance_tasks")
    op.drop_table("maintenance_tasks")
