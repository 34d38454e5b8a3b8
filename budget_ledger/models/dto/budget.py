from datetime import date, datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import Field, model_validator

from budget_ledger.models.dto.common import (
    FINANCIAL_YEAR_PATTERN,
    CamelModel,
    Money,
    PaginatedResponse,
)

AdjustmentPeriod = Literal["surrender", "supplementary", "reappropriation"]

PositiveMoney = Annotated[Money, Field(gt=0)]
NonNegativeMoney = Annotated[Money, Field(ge=0)]


# Budget Allocations
class BudgetAllocationCreate(CamelModel):
    financial_year: str = Field(pattern=FINANCIAL_YEAR_PATTERN)
    cost_center: str = Field(min_length=1, max_length=50)
    object_code: str = Field(min_length=1, max_length=50)
    total_allocation: NonNegativeMoney
    notes: str | None = Field(default=None, max_length=2000)
    date_created: date | None = None


class BudgetAllocationUpdate(CamelModel):
    notes: str | None = Field(default=None, max_length=2000)
    date_created: date | None = None


class BudgetAllocationResponse(CamelModel):
    id: UUID
    financial_year: str
    cost_center: str
    object_code: str
    total_allocation: Money
    surrenders: Money
    supplementary: Money
    reappropriation: Money
    base_allocation: Money
    notes: str | None = None
    date_created: date | None = None
    version: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BudgetAllocationSummary(CamelModel):
    id: UUID
    financial_year: str
    cost_center: str
    object_code: str
    base_allocation: Money
    total_allocation: Money
    surrenders: Money
    supplementary: Money
    reappropriation: Money
    released: Money
    unreleased: Money
    adjustment_count: int


# Budget Releases
class BudgetReleaseCreate(CamelModel):
    allocation_id: UUID
    quarter: int = Field(ge=1, le=4)
    amount: NonNegativeMoney
    financial_year: str | None = Field(default=None, pattern=FINANCIAL_YEAR_PATTERN)
    cost_center: str | None = Field(default=None, max_length=50)
    object_code: str | None = Field(default=None, max_length=50)
    date_released: date | None = None
    type: str = Field(default="regular", min_length=1, max_length=50)
    reference_number: str | None = Field(default=None, max_length=100)
    remarks: str | None = Field(default=None, max_length=2000)


class BudgetReleaseResponse(CamelModel):
    id: UUID
    allocation_id: UUID
    quarter: int
    amount: Money
    financial_year: str
    cost_center: str
    object_code: str
    date_released: date
    type: str
    reference_number: str | None = None
    remarks: str | None = None
    created_at: datetime | None = None


# Budget Adjustments
class _AdjustmentCreateBase(CamelModel):
    from_allocation: UUID
    budget_released: PositiveMoney
    amount_allocated: Money | None = None
    financial_year: str | None = Field(default=None, pattern=FINANCIAL_YEAR_PATTERN)
    from_object_code: str | None = Field(default=None, max_length=50)
    from_cost_center_id: str | None = Field(default=None, max_length=64)
    from_cost_center: str | None = Field(default=None, max_length=50)
    remarks: str | None = Field(default=None, max_length=2000)
    date_created: date | None = None


class SurrenderCreate(_AdjustmentCreateBase):
    period: Literal["surrender"]
    to_allocation: None = None


class SupplementaryCreate(_AdjustmentCreateBase):
    period: Literal["supplementary"]
    to_allocation: None = None


class ReappropriationCreate(_AdjustmentCreateBase):
    period: Literal["reappropriation"]
    to_allocation: UUID
    to_object_code: str | None = Field(default=None, max_length=50)
    to_cost_center_id: str | None = Field(default=None, max_length=64)
    to_cost_center: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def _distinct_allocations(self) -> "ReappropriationCreate":
        if self.from_allocation == self.to_allocation:
            raise ValueError("fromAllocation and toAllocation must differ")
        return self


BudgetAdjustmentInput = Union[SurrenderCreate, SupplementaryCreate, ReappropriationCreate]

BudgetAdjustmentCreate = Annotated[BudgetAdjustmentInput, Field(discriminator="period")]


class BudgetAdjustmentResponse(CamelModel):
    id: UUID
    period: AdjustmentPeriod
    from_allocation: UUID
    to_allocation: UUID | None = None
    budget_released: Money
    amount_allocated: Money | None = None
    financial_year: str
    from_object_code: str | None = None
    from_cost_center_id: str | None = None
    from_cost_center: str | None = None
    to_object_code: str | None = None
    to_cost_center_id: str | None = None
    to_cost_center: str | None = None
    remarks: str | None = None
    date_created: date
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BudgetAdjustmentResult(BudgetAdjustmentResponse):
    allocations: list[BudgetAllocationResponse] = []


BudgetAdjustmentListResponse = PaginatedResponse[BudgetAdjustmentResponse]
