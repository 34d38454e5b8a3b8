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
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from budget_ledger.models.orm.base import Base

MONEY = Numeric(15, 2)


class BudgetAllocation(Base):
    __tablename__ = "budget_allocations"
    __table_args__ = (
        UniqueConstraint(
            "financial_year", "cost_center", "object_code",
            name="uq_budget_allocations_year_center_code",
        ),
        CheckConstraint("total_allocation >= 0", name="ck_budget_allocations_total_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    financial_year: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    cost_center: Mapped[str] = mapped_column(
        String(50), ForeignKey("cost_centers.code"), nullable=False, index=True
    )
    object_code: Mapped[str] = mapped_column(
        String(50), ForeignKey("object_codes.code"), nullable=False
    )
    total_allocation: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    surrenders: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    supplementary: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    reappropriation: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_created: Mapped[date] = mapped_column(
        Date, nullable=False, server_default=func.current_date()
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # UPDATE ... WHERE version = :old; zero rows matched raises StaleDataError
    __mapper_args__ = {"version_id_col": version}

    @property
    def base_allocation(self) -> Decimal:
        """Amount before any adjustment was applied."""
        return (
            self.total_allocation
            + self.surrenders
            - self.supplementary
            - self.reappropriation
        )
