from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.models.dto.reference import VendorCreate, VendorResponse, VendorUpdate
from budget_ledger.models.orm.reference import Vendor
from budget_ledger.services import reference_service

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=list[VendorResponse])
async def list_vendors(
    q: str | None = Query(None, max_length=200),
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
):
    return await reference_service.list_all(db, Vendor, q=q, is_active=is_active)


@router.post("", response_model=VendorResponse, status_code=201)
async def create_vendor(body: VendorCreate, db: AsyncSession = Depends(get_db)):
    return await reference_service.create(db, Vendor, body.model_dump())


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(vendor_id: UUID, db: AsyncSession = Depends(get_db)):
    return await reference_service.get(db, Vendor, vendor_id)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: UUID,
    body: VendorUpdate,
    db: AsyncSession = Depends(get_db),
):
    vendor, _ = await reference_service.update(
        db, Vendor, vendor_id, body.model_dump(exclude_unset=True),
    )
    return vendor


@router.delete("/{vendor_id}", status_code=204)
async def deactivate_vendor(vendor_id: UUID, db: AsyncSession = Depends(get_db)):
    await reference_service.delete(db, Vendor, vendor_id)
    return Response(status_code=204)
