from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.models.orm.budget_allocation import BudgetAllocation


async def get_by_id(db: AsyncSession, allocation_id: UUID) -> BudgetAllocation | None:
    result = await db.execute(
        select(BudgetAllocation).where(BudgetAllocation.id == allocation_id)
    )
    return result.scalar_one_or_none()


async def get_by_key(
    db: AsyncSession, financial_year: str, cost_center: str, object_code: str,
) -> BudgetAllocation | None:
    result = await db.execute(
        select(BudgetAllocation).where(
            BudgetAllocation.financial_year == financial_year,
            BudgetAllocation.cost_center == cost_center,
            BudgetAllocation.object_code == object_code,
        )
    )
    return result.scalar_one_or_none()


async def lock_many(
    db: AsyncSession, allocation_ids: list[UUID],
) -> dict[UUID, BudgetAllocation]:
    """Load allocations with FOR UPDATE, locking rows in id order."""
    if not allocation_ids:
        return {}
    result = await db.execute(
        select(BudgetAllocation)
        .where(BudgetAllocation.id.in_(sorted(set(allocation_ids))))
        .order_by(BudgetAllocation.id)
        .with_for_update()
    )
    return {a.id: a for a in result.scalars().all()}


async def list_filtered(
    db: AsyncSession,
    *,
    cost_center: str | None = None,
    financial_year: str | None = None,
) -> list[BudgetAllocation]:
    query = select(BudgetAllocation)
    if cost_center is not None:
        query = query.where(BudgetAllocation.cost_center == cost_center)
    if financial_year is not None:
        query = query.where(BudgetAllocation.financial_year == financial_year)
    result = await db.execute(
        query.order_by(
            BudgetAllocation.financial_year.desc(),
            BudgetAllocation.cost_center,
            BudgetAllocation.object_code,
        )
    )
    return list(result.scalars().all())
