from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.adjustments import adjustment_body
from budget_ledger.api.dependencies.database import get_db
from budget_ledger.mappers.budget import adjustment_to_dict
from budget_ledger.models.dto.budget import (
    AdjustmentPeriod,
    BudgetAdjustmentInput,
    BudgetAdjustmentListResponse,
    BudgetAdjustmentResponse,
    BudgetAdjustmentResult,
)
from budget_ledger.services import ledger_service

router = APIRouter(prefix="/budget-adjustments", tags=["budget-adjustments"])


@router.get("", response_model=BudgetAdjustmentListResponse)
async def list_adjustments(
    financial_year: str | None = Query(None, alias="financialYear", max_length=20),
    allocation_id: UUID | None = Query(None, alias="allocationId"),
    period: AdjustmentPeriod | None = None,
    q: str | None = Query(None, max_length=200),
    sort: Literal["newest", "oldest", "amount_asc", "amount_desc"] = "newest",
    page: int = Query(1, ge=1),
    per_page: int = Query(50, alias="perPage", ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    items, total = await ledger_service.list_adjustments(
        db,
        financial_year=financial_year,
        allocation_id=allocation_id,
        period=period,
        q=q,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [adjustment_to_dict(a) for a in items],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/{adjustment_id}", response_model=BudgetAdjustmentResponse)
async def get_adjustment(adjustment_id: UUID, db: AsyncSession = Depends(get_db)):
    adjustment = await ledger_service.get_adjustment(db, adjustment_id)
    return adjustment_to_dict(adjustment)


@router.post("", response_model=BudgetAdjustmentResult, status_code=201)
async def create_adjustment(
    body: BudgetAdjustmentInput = Depends(adjustment_body),
    db: AsyncSession = Depends(get_db),
):
    adjustment, allocations = await ledger_service.apply_adjustment(db, body)
    return adjustment_to_dict(adjustment, allocations)


@router.put("/{adjustment_id}", response_model=BudgetAdjustmentResult)
async def update_adjustment(
    adjustment_id: UUID,
    body: BudgetAdjustmentInput = Depends(adjustment_body),
    db: AsyncSession = Depends(get_db),
):
    adjustment, allocations = await ledger_service.update_adjustment(db, adjustment_id, body)
    return adjustment_to_dict(adjustment, allocations)


@router.delete("/{adjustment_id}", status_code=204)
async def delete_adjustment(adjustment_id: UUID, db: AsyncSession = Depends(get_db)):
    await ledger_service.reverse_adjustment(db, adjustment_id)
    return Response(status_code=204)
