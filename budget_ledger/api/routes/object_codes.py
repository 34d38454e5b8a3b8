from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.models.dto.reference import (
    ObjectCodeCreate,
    ObjectCodeResponse,
    ObjectCodeUpdate,
)
from budget_ledger.models.orm.reference import ObjectCode
from budget_ledger.services import reference_service

router = APIRouter(prefix="/object-codes", tags=["object-codes"])


@router.get("", response_model=list[ObjectCodeResponse])
async def list_object_codes(
    q: str | None = Query(None, max_length=200),
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
):
    return await reference_service.list_all(db, ObjectCode, q=q, is_active=is_active)


@router.post("", response_model=ObjectCodeResponse, status_code=201)
async def create_object_code(body: ObjectCodeCreate, db: AsyncSession = Depends(get_db)):
    return await reference_service.create(db, ObjectCode, body.model_dump())


@router.get("/{object_code_id}", response_model=ObjectCodeResponse)
async def get_object_code(object_code_id: UUID, db: AsyncSession = Depends(get_db)):
    return await reference_service.get(db, ObjectCode, object_code_id)


@router.put("/{object_code_id}", response_model=ObjectCodeResponse)
async def update_object_code(
    object_code_id: UUID,
    body: ObjectCodeUpdate,
    db: AsyncSession = Depends(get_db),
):
    object_code, _ = await reference_service.update(
        db, ObjectCode, object_code_id, body.model_dump(exclude_unset=True),
    )
    return object_code


@router.delete("/{object_code_id}", status_code=204)
async def delete_object_code(object_code_id: UUID, db: AsyncSession = Depends(get_db)):
    await reference_service.delete(db, ObjectCode, object_code_id)
    return Response(status_code=204)
