"""Initial schema: reference codes, budget allocations, releases and adjustments

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_MONEY = sa.Numeric(15, 2)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    # --- Reference codes ---
    op.create_table(
        "cost_centers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_table(
        "object_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )

    # --- Budget allocations ---
    op.create_table(
        "budget_allocations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("financial_year", sa.String(20), nullable=False),
        sa.Column("cost_center", sa.String(50), sa.ForeignKey("cost_centers.code"), nullable=False),
        sa.Column("object_code", sa.String(50), sa.ForeignKey("object_codes.code"), nullable=False),
        sa.Column("total_allocation", _MONEY, nullable=False, server_default="0"),
        sa.Column("surrenders", _MONEY, nullable=False, server_default="0"),
        sa.Column("supplementary", _MONEY, nullable=False, server_default="0"),
        sa.Column("reappropriation", _MONEY, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("date_created", sa.Date, nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint(
            "financial_year", "cost_center", "object_code",
            name="uq_budget_allocations_year_center_code",
        ),
        sa.CheckConstraint("total_allocation >= 0", name="ck_budget_allocations_total_non_negative"),
    )
    op.create_index("ix_budget_allocations_financial_year", "budget_allocations", ["financial_year"])
    op.create_index("ix_budget_allocations_cost_center", "budget_allocations", ["cost_center"])

    # --- Budget releases ---
    op.create_table(
        "budget_releases",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "allocation_id", UUID(as_uuid=True),
            sa.ForeignKey("budget_allocations.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("quarter", sa.Integer, nullable=False),
        sa.Column("amount", _MONEY, nullable=False),
        sa.Column("financial_year", sa.String(20), nullable=False),
        sa.Column("cost_center", sa.String(50), nullable=False),
        sa.Column("object_code", sa.String(50), nullable=False),
        sa.Column("date_released", sa.Date, nullable=False),
        sa.Column("type", sa.String(50), nullable=False, server_default="regular"),
        sa.Column("reference_number", sa.String(100), nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("quarter BETWEEN 1 AND 4", name="ck_budget_releases_quarter"),
        sa.CheckConstraint("amount >= 0", name="ck_budget_releases_amount"),
    )
    op.create_index("ix_budget_releases_allocation_id", "budget_releases", ["allocation_id"])

    # --- Budget adjustments ---
    op.create_table(
        "budget_adjustments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("period", sa.String(20), nullable=False),
        sa.Column(
            "from_allocation_id", UUID(as_uuid=True),
            sa.ForeignKey("budget_allocations.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "to_allocation_id", UUID(as_uuid=True),
            sa.ForeignKey("budget_allocations.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column("budget_released", _MONEY, nullable=False),
        sa.Column("amount_allocated", _MONEY, nullable=True),
        sa.Column("financial_year", sa.String(20), nullable=False),
        sa.Column("from_object_code", sa.String(50), nullable=True),
        sa.Column("from_cost_center_id", sa.String(64), nullable=True),
        sa.Column("from_cost_center", sa.String(50), nullable=True),
        sa.Column("to_object_code", sa.String(50), nullable=True),
        sa.Column("to_cost_center_id", sa.String(64), nullable=True),
        sa.Column("to_cost_center", sa.String(50), nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("date_created", sa.Date, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "period IN ('surrender', 'supplementary', 'reappropriation')",
            name="ck_budget_adjustments_period",
        ),
        sa.CheckConstraint("budget_released > 0", name="ck_budget_adjustments_amount"),
        sa.CheckConstraint(
            "(period = 'reappropriation') = (to_allocation_id IS NOT NULL)",
            name="ck_budget_adjustments_target",
        ),
    )
    op.create_index("ix_budget_adjustments_from_allocation_id", "budget_adjustments", ["from_allocation_id"])
    op.create_index("ix_budget_adjustments_to_allocation_id", "budget_adjustments", ["to_allocation_id"])
    op.create_index("ix_budget_adjustments_financial_year", "budget_adjustments", ["financial_year"])


def downgrade() -> None:
    op.drop_table("budget_adjustments")
    op.drop_table("budget_releases")
    op.drop_table("budget_allocations")
    op.drop_table("object_codes")
    op.drop_table("cost_centers")
