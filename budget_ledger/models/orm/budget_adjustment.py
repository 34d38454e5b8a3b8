import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from budget_ledger.models.orm.base import Base


class BudgetAdjustment(Base):
    __tablename__ = "budget_adjustments"
    __table_args__ = (
        CheckConstraint(
            "period IN ('surrender', 'supplementary', 'reappropriation')",
            name="ck_budget_adjustments_period",
        ),
        CheckConstraint("budget_released > 0", name="ck_budget_adjustments_amount"),
        CheckConstraint(
            "(period = 'reappropriation') = (to_allocation_id IS NOT NULL)",
            name="ck_budget_adjustments_target",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    period: Mapped[str] = mapped_column(String(20), nullable=False)
    from_allocation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("budget_allocations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    to_allocation_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("budget_allocations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    budget_released: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    amount_allocated: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    financial_year: Mapped[str] = mapped_column(String(20), nullable=False)
    from_object_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    from_cost_center_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    from_cost_center: Mapped[str | None] = mapped_column(String(50), nullable=True)
    to_object_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    to_cost_center_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    to_cost_center: Mapped[str | None] = mapped_column(String(50), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_created: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
