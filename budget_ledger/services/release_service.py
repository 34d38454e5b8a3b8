import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.core.exceptions import BadRequestError, NotFoundError
from budget_ledger.models.orm.budget_release import BudgetRelease
from budget_ledger.repositories import allocation_repo

logger = logging.getLogger(__name__)


async def list_releases(
    db: AsyncSession,
    *,
    allocation_id: UUID | None = None,
    cost_center: str | None = None,
    financial_year: str | None = None,
) -> list[BudgetRelease]:
    query = select(BudgetRelease)
    if allocation_id is not None:
        query = query.where(BudgetRelease.allocation_id == allocation_id)
    if cost_center is not None:
        query = query.where(BudgetRelease.cost_center == cost_center)
    if financial_year is not None:
        query = query.where(BudgetRelease.financial_year == financial_year)
    result = await db.execute(
        query.order_by(BudgetRelease.date_released.desc(), BudgetRelease.quarter)
    )
    return list(result.scalars().all())


async def get_release(db: AsyncSession, release_id: UUID) -> BudgetRelease:
    release = await db.get(BudgetRelease, release_id)
    if not release:
        raise NotFoundError("Budget release not found")
    return release


async def create_release(db: AsyncSession, data: dict) -> BudgetRelease:
    """Record a quarterly release; descriptive codes default to the allocation's."""
    allocation = await allocation_repo.get_by_id(db, data["allocation_id"])
    if not allocation:
        raise BadRequestError("allocationId does not reference an existing allocation")

    financial_year = data.get("financial_year") or allocation.financial_year
    if financial_year != allocation.financial_year:
        raise BadRequestError(
            f"financialYear {financial_year} does not match the allocation's "
            f"{allocation.financial_year}"
        )

    release = BudgetRelease(
        allocation_id=allocation.id,
        quarter=data["quarter"],
        amount=data["amount"],
        financial_year=financial_year,
        cost_center=data.get("cost_center") or allocation.cost_center,
        object_code=data.get("object_code") or allocation.object_code,
        date_released=data.get("date_released") or date.today(),
        type=data.get("type") or "regular",
        reference_number=data.get("reference_number"),
        remarks=data.get("remarks"),
    )
    db.add(release)
    await db.flush()
    await db.refresh(release)
    logger.info(
        "Released %s for Q%d on allocation %s", release.amount, release.quarter, allocation.id,
    )
    return release


async def delete_release(db: AsyncSession, release_id: UUID) -> None:
    release = await get_release(db, release_id)
    await db.delete(release)
    await db.flush()
