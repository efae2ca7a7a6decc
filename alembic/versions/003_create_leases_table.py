"""create leases table

Revision ID: 003
Revises: 002
Create Date: 2025-03-04 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("lease_start", sa.Date(), nullable=False),
        sa.Column("lease_end", sa.Date(), nullable=False),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("payment_frequency", sa.String(20), nullable=False, server_default="monthly"),
        sa.Column("payment_due_day", sa.Integer(), nullable=True),
        sa.Column("terminated_on", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"]),
        # A lease spans at least one day
        sa.CheckConstraint("lease_end > lease_start", name="ck_leases_end_after_start"),
        sa.CheckConstraint("rent_amount >= 0", name="ck_leases_rent_amount_non_negative"),
        sa.CheckConstraint("security_deposit >= 0", name="ck_leases_security_deposit_non_negative"),
        sa.CheckConstraint(
            "payment_frequency IN ('monthly', 'weekly', 'biweekly', 'quarterly', 'annually')",
            name="ck_leases_payment_frequency",
        ),
        sa.CheckConstraint(
            "payment_due_day IS NULL OR (payment_due_day >= 1 AND payment_due_day <= 31)",
            name="ck_leases_payment_due_day_range",
        ),
        # Termination can only pull the end date in, never push it out
        sa.CheckConstraint(
            "terminated_on IS NULL OR (terminated_on >= lease_start AND terminated_on <= lease_end)",
            name="ck_leases_terminated_on_within_term",
        ),
    )
    op.create_index("ix_leases_id", "leases", ["id"], unique=False)
    op.create_index("ix_leases_property_id", "leases", ["property_id"], unique=False)
    op.create_index("ix_leases_tenant_id", "leases", ["tenant_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_leases_tenant_id", table_name="leases")
    op.drop_index("ix_leases_property_id", table_name="leases")
    op.drop_index("ix_leases_id", table_name="leases")
    op.drop_table("leases")
