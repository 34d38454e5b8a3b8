from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.models.dto.reference import (
    CostCenterCreate,
    CostCenterResponse,
    CostCenterUpdate,
)
from budget_ledger.models.orm.reference import CostCenter
from budget_ledger.services import reference_service

router = APIRouter(prefix="/cost-centers", tags=["cost-centers"])


@router.get("", response_model=list[CostCenterResponse])
async def list_cost_centers(
    q: str | None = Query(None, max_length=200),
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
):
    return await reference_service.list_all(db, CostCenter, q=q, is_active=is_active)


@router.post("", response_model=CostCenterResponse, status_code=201)
async def create_cost_center(body: CostCenterCreate, db: AsyncSession = Depends(get_db)):
    return await reference_service.create(db, CostCenter, body.model_dump())


@router.get("/{cost_center_id}", response_model=CostCenterResponse)
async def get_cost_center(cost_center_id: UUID, db: AsyncSession = Depends(get_db)):
    return await reference_service.get(db, CostCenter, cost_center_id)


@router.put("/{cost_center_id}", response_model=CostCenterResponse)
async def update_cost_center(
    cost_center_id: UUID,
    body: CostCenterUpdate,
    db: AsyncSession = Depends(get_db),
):
    cost_center, _ = await reference_service.update(
        db, CostCenter, cost_center_id, body.model_dump(exclude_unset=True),
    )
    return cost_center


@router.delete("/{cost_center_id}", status_code=204)
async def delete_cost_center(cost_center_id: UUID, db: AsyncSession = Depends(get_db)):
    await reference_service.delete(db, CostCenter, cost_center_id)
    return Response(status_code=204)
