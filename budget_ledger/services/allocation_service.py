import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.core.exceptions import (
    AllocationNotFoundError,
    BadRequestError,
    ConflictError,
)
from budget_ledger.models.orm.budget_adjustment import BudgetAdjustment
from budget_ledger.models.orm.budget_allocation import BudgetAllocation
from budget_ledger.models.orm.budget_release import BudgetRelease
from budget_ledger.models.orm.reference import CostCenter, ObjectCode
from budget_ledger.repositories import allocation_repo
from budget_ledger.services import reference_service

logger = logging.getLogger(__name__)

_MUTABLE_ALLOCATION_FIELDS = {"notes", "date_created"}


async def get_allocation(db: AsyncSession, allocation_id: UUID) -> BudgetAllocation:
    allocation = await allocation_repo.get_by_id(db, allocation_id)
    if not allocation:
        raise AllocationNotFoundError(allocation_id)
    return allocation


async def list_allocations(
    db: AsyncSession,
    *,
    cost_center: str | None = None,
    financial_year: str | None = None,
) -> list[BudgetAllocation]:
    return await allocation_repo.list_filtered(
        db, cost_center=cost_center, financial_year=financial_year,
    )


async def create_allocation(
    db: AsyncSession,
    *,
    financial_year: str,
    cost_center: str,
    object_code: str,
    total_allocation: Decimal,
    notes: str | None = None,
    date_created: date | None = None,
) -> BudgetAllocation:
    """Create the single allocation for a (financial year, cost center, object code)."""
    if not await reference_service.get_by_code(db, CostCenter, cost_center):
        raise BadRequestError(f"Unknown cost center {cost_center!r}")
    if not await reference_service.get_by_code(db, ObjectCode, object_code):
        raise BadRequestError(f"Unknown object code {object_code!r}")
    if await allocation_repo.get_by_key(db, financial_year, cost_center, object_code):
        raise ConflictError(
            f"An allocation for {cost_center}/{object_code} in {financial_year} already exists"
        )

    zero = Decimal("0")
    allocation = BudgetAllocation(
        financial_year=financial_year,
        cost_center=cost_center,
        object_code=object_code,
        total_allocation=total_allocation,
        surrenders=zero,
        supplementary=zero,
        reappropriation=zero,
        notes=notes,
        date_created=date_created or date.today(),
    )
    db.add(allocation)
    await db.flush()
    await db.refresh(allocation)
    logger.info(
        "Created allocation %s/%s/%s of %s",
        financial_year, cost_center, object_code, total_allocation,
    )
    return allocation


async def update_allocation(
    db: AsyncSession, allocation_id: UUID, data: dict,
) -> tuple[BudgetAllocation, dict]:
    """Update descriptive fields. Amounts only change through adjustments."""
    allocation = await get_allocation(db, allocation_id)
    changes = {}
    for field, value in data.items():
        if field not in _MUTABLE_ALLOCATION_FIELDS or value is None:
            continue
        if getattr(allocation, field) != value:
            changes[field] = value
            setattr(allocation, field, value)
    await db.flush()
    await db.refresh(allocation)
    return allocation, changes


async def delete_allocation(db: AsyncSession, allocation_id: UUID) -> None:
    """Delete an allocation together with its releases and own adjustments.

    A reappropriation linking it to another allocation has to be reversed
    first, otherwise the counterpart would keep an effect with no record.
    """
    allocation = await get_allocation(db, allocation_id)
    linked = await db.execute(
        select(func.count())
        .select_from(BudgetAdjustment)
        .where(
            BudgetAdjustment.period == "reappropriation",
            (BudgetAdjustment.from_allocation_id == allocation_id)
            | (BudgetAdjustment.to_allocation_id == allocation_id),
        )
    )
    if linked.scalar() or 0:
        raise ConflictError(
            "Allocation is part of a reappropriation; reverse it before deleting"
        )
    await db.delete(allocation)
    await db.flush()
    logger.info("Deleted allocation %s", allocation_id)


async def get_summary(db: AsyncSession, allocation_id: UUID) -> dict:
    allocation = await get_allocation(db, allocation_id)
    released_result = await db.execute(
        select(func.coalesce(func.sum(BudgetRelease.amount), 0)).where(
            BudgetRelease.allocation_id == allocation_id
        )
    )
    released = Decimal(released_result.scalar() or 0)
    count_result = await db.execute(
        select(func.count())
        .select_from(BudgetAdjustment)
        .where(
            (BudgetAdjustment.from_allocation_id == allocation_id)
            | (BudgetAdjustment.to_allocation_id == allocation_id)
        )
    )
    return {
        "id": allocation.id,
        "financial_year": allocation.financial_year,
        "cost_center": allocation.cost_center,
        "object_code": allocation.object_code,
        "base_allocation": allocation.base_allocation,
        "total_allocation": allocation.total_allocation,
        "surrenders": allocation.surrenders,
        "supplementary": allocation.supplementary,
        "reappropriation": allocation.reappropriation,
        "released": released,
        "unreleased": allocation.total_allocation - released,
        "adjustment_count": count_result.scalar() or 0,
    }
