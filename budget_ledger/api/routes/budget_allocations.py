from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.mappers.budget import allocation_to_dict
from budget_ledger.models.dto.budget import (
    BudgetAllocationCreate,
    BudgetAllocationResponse,
    BudgetAllocationSummary,
    BudgetAllocationUpdate,
)
from budget_ledger.services import allocation_service

router = APIRouter(prefix="/budget-allocations", tags=["budget-allocations"])


@router.get("", response_model=list[BudgetAllocationResponse])
async def list_allocations(
    cost_center: str | None = Query(None, alias="costCenter", max_length=50),
    financial_year: str | None = Query(None, alias="financialYear", max_length=20),
    db: AsyncSession = Depends(get_db),
):
    allocations = await allocation_service.list_allocations(
        db, cost_center=cost_center, financial_year=financial_year,
    )
    return [allocation_to_dict(a) for a in allocations]


@router.post("", response_model=BudgetAllocationResponse, status_code=201)
async def create_allocation(
    body: BudgetAllocationCreate,
    db: AsyncSession = Depends(get_db),
):
    allocation = await allocation_service.create_allocation(
        db,
        financial_year=body.financial_year,
        cost_center=body.cost_center,
        object_code=body.object_code,
        total_allocation=body.total_allocation,
        notes=body.notes,
        date_created=body.date_created,
    )
    return allocation_to_dict(allocation)


@router.get("/{allocation_id}", response_model=BudgetAllocationResponse)
async def get_allocation(allocation_id: UUID, db: AsyncSession = Depends(get_db)):
    allocation = await allocation_service.get_allocation(db, allocation_id)
    return allocation_to_dict(allocation)


@router.get("/{allocation_id}/summary", response_model=BudgetAllocationSummary)
async def get_allocation_summary(allocation_id: UUID, db: AsyncSession = Depends(get_db)):
    return await allocation_service.get_summary(db, allocation_id)


@router.put("/{allocation_id}", response_model=BudgetAllocationResponse)
async def update_allocation(
    allocation_id: UUID,
    body: BudgetAllocationUpdate,
    db: AsyncSession = Depends(get_db),
):
    allocation, _ = await allocation_service.update_allocation(
        db, allocation_id, body.model_dump(exclude_unset=True),
    )
    return allocation_to_dict(allocation)


@router.delete("/{allocation_id}", status_code=204)
async def delete_allocation(allocation_id: UUID, db: AsyncSession = Depends(get_db)):
    await allocation_service.delete_allocation(db, allocation_id)
    return Response(status_code=204)
