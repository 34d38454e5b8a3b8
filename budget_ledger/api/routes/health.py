from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.api.dependencies.database import get_db
from budget_ledger.services import health_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)):
    body, status_code = await health_service.get_basic_health(db)
    return JSONResponse(content=body, status_code=status_code)


@router.get("/detailed")
async def detailed_health_check(db: AsyncSession = Depends(get_db)):
    return await health_service.get_detailed_health(db)
