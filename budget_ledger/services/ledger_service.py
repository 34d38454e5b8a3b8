"""Budget ledger: applies and reverses adjustment effects on allocations.

Every adjustment is described as a list of ``AllocationDelta`` values, one per
allocation it touches. Applying an adjustment adds its deltas to the locked
allocation rows; reversing it adds the inverted deltas to the current state.
Because deltas are plain additions the inverse is exact regardless of what
other adjustments were applied in between.

Bucket conventions (all amounts positive as entered):

    surrender        surrenders += a        total -= a
    supplementary    supplementary += a     total += a
    reappropriation  from: reappropriation -= a, total -= a
                     to:   reappropriation += a, total += a

so ``total - supplementary + surrenders - reappropriation`` always equals the
allocation's original amount, and a reappropriation conserves the sum of the
two totals.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from budget_ledger.core.exceptions import (
    AdjustmentNotFoundError,
    AllocationNotFoundError,
    ConcurrentModificationError,
    InsufficientBudgetError,
    InvalidAdjustmentError,
    StorageError,
)
from budget_ledger.core.search import ilike_any
from budget_ledger.models.orm.budget_adjustment import BudgetAdjustment
from budget_ledger.models.orm.budget_allocation import BudgetAllocation
from budget_ledger.repositories import allocation_repo

logger = logging.getLogger(__name__)

ADJUSTMENT_PERIODS = ("surrender", "supplementary", "reappropriation")
LEDGER_FIELDS = ("total_allocation", "surrenders", "supplementary", "reappropriation")

ZERO = Decimal("0")


@dataclass(frozen=True)
class AllocationDelta:
    allocation_id: UUID
    total_allocation: Decimal = ZERO
    surrenders: Decimal = ZERO
    supplementary: Decimal = ZERO
    reappropriation: Decimal = ZERO

    def inverted(self) -> "AllocationDelta":
        return AllocationDelta(
            self.allocation_id,
            total_allocation=-self.total_allocation,
            surrenders=-self.surrenders,
            supplementary=-self.supplementary,
            reappropriation=-self.reappropriation,
        )

    def __add__(self, other: "AllocationDelta") -> "AllocationDelta":
        if other.allocation_id != self.allocation_id:
            raise ValueError("Cannot add deltas of different allocations")
        return AllocationDelta(
            self.allocation_id,
            **{f: getattr(self, f) + getattr(other, f) for f in LEDGER_FIELDS},
        )


# ── Pure delta arithmetic ────────────────────────────────────────────────────

def validate_adjustment(
    period: str,
    from_allocation: UUID | None,
    to_allocation: UUID | None,
    amount: Decimal | None,
) -> None:
    if period not in ADJUSTMENT_PERIODS:
        raise InvalidAdjustmentError(f"Unknown adjustment period {period!r}")
    if from_allocation is None:
        raise InvalidAdjustmentError("fromAllocation is required")
    if amount is None or amount <= 0:
        raise InvalidAdjustmentError("budgetReleased must be greater than zero")
    if period == "reappropriation":
        if to_allocation is None:
            raise InvalidAdjustmentError("toAllocation is required for reappropriation")
        if to_allocation == from_allocation:
            raise InvalidAdjustmentError("fromAllocation and toAllocation must differ")
    elif to_allocation is not None:
        raise InvalidAdjustmentError(f"toAllocation is not allowed for {period}")


def adjustment_deltas(
    period: str,
    from_allocation: UUID | None,
    to_allocation: UUID | None,
    amount: Decimal | None,
) -> list[AllocationDelta]:
    """Describe the effect of an adjustment on the allocations it references."""
    validate_adjustment(period, from_allocation, to_allocation, amount)
    if period == "surrender":
        return [AllocationDelta(from_allocation, total_allocation=-amount, surrenders=amount)]
    if period == "supplementary":
        return [AllocationDelta(from_allocation, total_allocation=amount, supplementary=amount)]
    return [
        AllocationDelta(from_allocation, total_allocation=-amount, reappropriation=-amount),
        AllocationDelta(to_allocation, total_allocation=amount, reappropriation=amount),
    ]


def invert(deltas: list[AllocationDelta]) -> list[AllocationDelta]:
    return [d.inverted() for d in deltas]


def combine(deltas: list[AllocationDelta]) -> list[AllocationDelta]:
    """Net deltas per allocation, keeping first-seen order."""
    net: dict[UUID, AllocationDelta] = {}
    for delta in deltas:
        current = net.get(delta.allocation_id)
        net[delta.allocation_id] = delta if current is None else current + delta
    return list(net.values())


def deltas_for(adjustment: BudgetAdjustment) -> list[AllocationDelta]:
    return adjustment_deltas(
        adjustment.period,
        adjustment.from_allocation_id,
        adjustment.to_allocation_id,
        adjustment.budget_released,
    )


def apply_deltas(
    allocations: dict[UUID, BudgetAllocation],
    deltas: list[AllocationDelta],
) -> list[BudgetAllocation]:
    """Add deltas to allocations. Nothing is mutated unless every delta fits."""
    for delta in deltas:
        allocation = allocations.get(delta.allocation_id)
        if allocation is None:
            raise AllocationNotFoundError(delta.allocation_id)
        if allocation.total_allocation + delta.total_allocation < 0:
            raise InsufficientBudgetError(
                allocation.id, allocation.total_allocation, -delta.total_allocation,
            )

    touched = []
    for delta in deltas:
        allocation = allocations[delta.allocation_id]
        for field in LEDGER_FIELDS:
            setattr(allocation, field, getattr(allocation, field) + getattr(delta, field))
        touched.append(allocation)
    return touched


# ── Storage helpers ──────────────────────────────────────────────────────────

async def _lock_allocations(
    db: AsyncSession, allocation_ids: list[UUID],
) -> dict[UUID, BudgetAllocation]:
    try:
        allocations = await allocation_repo.lock_many(db, allocation_ids)
    except SQLAlchemyError as e:
        logger.exception("Failed to lock budget allocations %s", allocation_ids)
        raise StorageError() from e
    for allocation_id in allocation_ids:
        if allocation_id not in allocations:
            raise AllocationNotFoundError(allocation_id)
    return allocations


async def _get_adjustment_for_update(
    db: AsyncSession, adjustment_id: UUID,
) -> BudgetAdjustment:
    try:
        adjustment = await db.get(BudgetAdjustment, adjustment_id, with_for_update=True)
    except SQLAlchemyError as e:
        logger.exception("Failed to load budget adjustment %s", adjustment_id)
        raise StorageError() from e
    if not adjustment:
        raise AdjustmentNotFoundError(adjustment_id)
    return adjustment


async def _flush(db: AsyncSession) -> None:
    try:
        await db.flush()
    except StaleDataError as e:
        logger.warning("Concurrent modification of a budget allocation: %s", e)
        raise ConcurrentModificationError() from e
    except SQLAlchemyError as e:
        logger.exception("Failed to write budget ledger changes")
        raise StorageError() from e


async def _refresh(db: AsyncSession, *objects) -> None:
    """Reload server-side defaults (timestamps, version) so callers can serialize."""
    try:
        for obj in objects:
            await db.refresh(obj)
    except SQLAlchemyError as e:
        logger.exception("Failed to reload budget ledger rows")
        raise StorageError() from e


def _check_financial_year(body, allocations: dict[UUID, BudgetAllocation]) -> str:
    source = allocations[body.from_allocation]
    if body.financial_year and body.financial_year != source.financial_year:
        raise InvalidAdjustmentError(
            f"financialYear {body.financial_year} does not match allocation "
            f"financial year {source.financial_year}"
        )
    to_id = getattr(body, "to_allocation", None)
    if to_id is not None and allocations[to_id].financial_year != source.financial_year:
        raise InvalidAdjustmentError(
            "Reappropriation must move budget within one financial year"
        )
    return source.financial_year


def _fill_adjustment(
    adjustment: BudgetAdjustment,
    body,
    allocations: dict[UUID, BudgetAllocation],
    financial_year: str,
    total_before: Decimal,
) -> None:
    """Copy request fields onto the record, denormalizing codes from allocations."""
    source = allocations[body.from_allocation]
    to_id = getattr(body, "to_allocation", None)

    adjustment.period = body.period
    adjustment.from_allocation_id = body.from_allocation
    adjustment.to_allocation_id = to_id
    adjustment.budget_released = body.budget_released
    adjustment.amount_allocated = (
        body.amount_allocated if body.amount_allocated is not None else total_before
    )
    adjustment.financial_year = financial_year
    adjustment.from_object_code = body.from_object_code or source.object_code
    adjustment.from_cost_center_id = body.from_cost_center_id
    adjustment.from_cost_center = body.from_cost_center or source.cost_center
    if to_id is not None:
        target = allocations[to_id]
        adjustment.to_object_code = body.to_object_code or target.object_code
        adjustment.to_cost_center_id = body.to_cost_center_id
        adjustment.to_cost_center = body.to_cost_center or target.cost_center
    else:
        adjustment.to_object_code = None
        adjustment.to_cost_center_id = None
        adjustment.to_cost_center = None
    adjustment.remarks = body.remarks
    adjustment.date_created = body.date_created or adjustment.date_created or date.today()


# ── Public operations ────────────────────────────────────────────────────────

async def apply_adjustment(
    db: AsyncSession, body,
) -> tuple[BudgetAdjustment, list[BudgetAllocation]]:
    """Record an adjustment and apply its effect to the referenced allocation(s).

    ``body`` is one of the tagged adjustment inputs (surrender, supplementary,
    reappropriation). All writes share the caller's transaction.
    """
    to_id = getattr(body, "to_allocation", None)
    deltas = adjustment_deltas(body.period, body.from_allocation, to_id, body.budget_released)

    allocations = await _lock_allocations(db, [d.allocation_id for d in deltas])
    financial_year = _check_financial_year(body, allocations)
    total_before = allocations[body.from_allocation].total_allocation
    touched = apply_deltas(allocations, deltas)

    adjustment = BudgetAdjustment(id=uuid.uuid4())
    _fill_adjustment(adjustment, body, allocations, financial_year, total_before)
    db.add(adjustment)
    await _flush(db)
    await _refresh(db, adjustment, *touched)

    logger.info(
        "Applied %s of %s to allocation %s", body.period, body.budget_released,
        body.from_allocation,
        extra={
            "adjustment_id": adjustment.id,
            "allocation_id": body.from_allocation,
            "to_allocation_id": to_id,
            "financial_year": financial_year,
        },
    )
    return adjustment, touched


async def reverse_adjustment(
    db: AsyncSession, adjustment_id: UUID,
) -> list[BudgetAllocation]:
    """Undo an adjustment's effect on current allocation state and delete it."""
    adjustment = await _get_adjustment_for_update(db, adjustment_id)
    deltas = invert(deltas_for(adjustment))

    allocations = await _lock_allocations(db, [d.allocation_id for d in deltas])
    touched = apply_deltas(allocations, deltas)

    await db.delete(adjustment)
    await _flush(db)

    logger.info(
        "Reversed %s of %s on allocation %s", adjustment.period,
        adjustment.budget_released, adjustment.from_allocation_id,
        extra={"adjustment_id": adjustment_id, "allocation_id": adjustment.from_allocation_id},
    )
    return touched


async def update_adjustment(
    db: AsyncSession, adjustment_id: UUID, body,
) -> tuple[BudgetAdjustment, list[BudgetAllocation]]:
    """Replace an adjustment: reverse the old effect and apply the new one.

    The net change is checked as a whole before any allocation is touched.
    """
    adjustment = await _get_adjustment_for_update(db, adjustment_id)
    to_id = getattr(body, "to_allocation", None)
    new_deltas = adjustment_deltas(body.period, body.from_allocation, to_id, body.budget_released)
    undo = invert(deltas_for(adjustment))
    net = combine(undo + new_deltas)

    allocations = await _lock_allocations(db, [d.allocation_id for d in net])
    financial_year = _check_financial_year(body, allocations)
    # the source total as it stands without the adjustment being replaced
    total_before = allocations[body.from_allocation].total_allocation + sum(
        (d.total_allocation for d in undo if d.allocation_id == body.from_allocation), ZERO,
    )
    touched = apply_deltas(allocations, net)

    _fill_adjustment(adjustment, body, allocations, financial_year, total_before)
    await _flush(db)
    await _refresh(db, adjustment, *touched)

    logger.info(
        "Re-applied adjustment %s as %s of %s", adjustment_id, body.period,
        body.budget_released,
        extra={"adjustment_id": adjustment_id, "allocation_id": body.from_allocation},
    )
    return adjustment, touched


async def get_adjustment(db: AsyncSession, adjustment_id: UUID) -> BudgetAdjustment:
    adjustment = await db.get(BudgetAdjustment, adjustment_id)
    if not adjustment:
        raise AdjustmentNotFoundError(adjustment_id)
    return adjustment


async def list_adjustments(
    db: AsyncSession,
    *,
    financial_year: str | None = None,
    allocation_id: UUID | None = None,
    period: str | None = None,
    q: str | None = None,
    sort: str = "newest",
    page: int = 1,
    per_page: int = 50,
) -> tuple[list[BudgetAdjustment], int]:
    conditions = []
    if financial_year:
        conditions.append(BudgetAdjustment.financial_year == financial_year)
    if allocation_id:
        conditions.append(
            or_(
                BudgetAdjustment.from_allocation_id == allocation_id,
                BudgetAdjustment.to_allocation_id == allocation_id,
            )
        )
    if period:
        conditions.append(BudgetAdjustment.period == period)
    if q:
        conditions.append(
            ilike_any(
                [
                    BudgetAdjustment.remarks,
                    BudgetAdjustment.from_cost_center,
                    BudgetAdjustment.to_cost_center,
                    BudgetAdjustment.from_object_code,
                    BudgetAdjustment.to_object_code,
                ],
                q,
            )
        )
    where = and_(*conditions) if conditions else True

    count_result = await db.execute(
        select(func.count()).select_from(BudgetAdjustment).where(where)
    )
    total = count_result.scalar() or 0

    order_clause = {
        "newest": BudgetAdjustment.created_at.desc(),
        "oldest": BudgetAdjustment.created_at.asc(),
        "amount_asc": BudgetAdjustment.budget_released.asc(),
        "amount_desc": BudgetAdjustment.budget_released.desc(),
    }.get(sort, BudgetAdjustment.created_at.desc())

    result = await db.execute(
        select(BudgetAdjustment)
        .where(where)
        .order_by(order_clause)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(result.scalars().all()), total
