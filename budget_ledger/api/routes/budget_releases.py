from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.models.dto.budget import BudgetReleaseCreate, BudgetReleaseResponse
from budget_ledger.services import release_service

router = APIRouter(prefix="/budget-releases", tags=["budget-releases"])


@router.get("", response_model=list[BudgetReleaseResponse])
async def list_releases(
    allocation_id: UUID | None = Query(None, alias="allocationId"),
    cost_center: str | None = Query(None, alias="costCenter", max_length=50),
    financial_year: str | None = Query(None, alias="financialYear", max_length=20),
    db: AsyncSession = Depends(get_db),
):
    return await release_service.list_releases(
        db,
        allocation_id=allocation_id,
        cost_center=cost_center,
        financial_year=financial_year,
    )


@router.post("", response_model=BudgetReleaseResponse, status_code=201)
async def create_release(body: BudgetReleaseCreate, db: AsyncSession = Depends(get_db)):
    return await release_service.create_release(db, body.model_dump())


@router.get("/{release_id}", response_model=BudgetReleaseResponse)
async def get_release(release_id: UUID, db: AsyncSession = Depends(get_db)):
    return await release_service.get_release(db, release_id)


@router.delete("/{release_id}", status_code=204)
async def delete_release(release_id: UUID, db: AsyncSession = Depends(get_db)):
    await release_service.delete_release(db, release_id)
    return Response(status_code=204)
