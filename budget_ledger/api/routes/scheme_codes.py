from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.models.dto.reference import (
    SchemeCodeCreate,
    SchemeCodeResponse,
    SchemeCodeUpdate,
)
from budget_ledger.models.orm.reference import SchemeCode
from budget_ledger.services import reference_service

router = APIRouter(prefix="/scheme-codes", tags=["scheme-codes"])


@router.get("", response_model=list[SchemeCodeResponse])
async def list_scheme_codes(
    q: str | None = Query(None, max_length=200),
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
):
    return await reference_service.list_all(db, SchemeCode, q=q, is_active=is_active)


@router.post("", response_model=SchemeCodeResponse, status_code=201)
async def create_scheme_code(body: SchemeCodeCreate, db: AsyncSession = Depends(get_db)):
    return await reference_service.create(db, SchemeCode, body.model_dump())


@router.get("/{scheme_code_id}", response_model=SchemeCodeResponse)
async def get_scheme_code(scheme_code_id: UUID, db: AsyncSession = Depends(get_db)):
    return await reference_service.get(db, SchemeCode, scheme_code_id)


@router.put("/{scheme_code_id}", response_model=SchemeCodeResponse)
async def update_scheme_code(
    scheme_code_id: UUID,
    body: SchemeCodeUpdate,
    db: AsyncSession = Depends(get_db),
):
    scheme_code, _ = await reference_service.update(
        db, SchemeCode, scheme_code_id, body.model_dump(exclude_unset=True),
    )
    return scheme_code


@router.delete("/{scheme_code_id}", status_code=204)
async def delete_scheme_code(scheme_code_id: UUID, db: AsyncSession = Depends(get_db)):
    await reference_service.delete(db, SchemeCode, scheme_code_id)
    return Response(status_code=204)
