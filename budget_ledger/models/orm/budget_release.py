import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from budget_ledger.models.orm.base import Base


class BudgetRelease(Base):
    __tablename__ = "budget_releases"
    __table_args__ = (
        CheckConstraint("quarter BETWEEN 1 AND 4", name="ck_budget_releases_quarter"),
        CheckConstraint("amount >= 0", name="ck_budget_releases_amount"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    allocation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("budget_allocations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    financial_year: Mapped[str] = mapped_column(String(20), nullable=False)
    cost_center: Mapped[str] = mapped_column(String(50), nullable=False)
    object_code: Mapped[str] = mapped_column(String(50), nullable=False)
    date_released: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="regular", server_default="regular"
    )
    reference_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
