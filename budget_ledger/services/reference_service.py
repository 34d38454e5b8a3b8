"""Reference data allocations and purchases point at.

Cost centers, object codes and scheme codes are keyed by ``code``, vendors by
``vendor_number``. Keys are fixed once created. Codes still used by an
allocation cannot be deleted; vendors are only ever deactivated.
"""
import logging
from typing import TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.core.exceptions import ConflictError, NotFoundError
from budget_ledger.core.search import ilike_any
from budget_ledger.models.orm.budget_allocation import BudgetAllocation
from budget_ledger.models.orm.reference import CostCenter, ObjectCode, SchemeCode, Vendor

logger = logging.getLogger(__name__)

RefModel = TypeVar("RefModel", CostCenter, ObjectCode, SchemeCode, Vendor)

_LABELS = {
    CostCenter: "Cost center",
    ObjectCode: "Object code",
    SchemeCode: "Scheme code",
    Vendor: "Vendor",
}
_KEY_FIELDS = {
    CostCenter: "code",
    ObjectCode: "code",
    SchemeCode: "code",
    Vendor: "vendor_number",
}
_ALLOCATION_COLUMNS = {
    CostCenter: BudgetAllocation.cost_center,
    ObjectCode: BudgetAllocation.object_code,
}
_MUTABLE_FIELDS = {
    CostCenter: {"name", "description", "is_active"},
    ObjectCode: {"name", "description", "is_active", "category"},
    SchemeCode: {"name", "description", "is_active"},
    Vendor: {"name", "contact_person", "email", "phone", "address", "notes", "is_active"},
}
_NOT_NULL_FIELDS = {"name", "is_active"}
_SOFT_DELETE = {Vendor}


def _key_column(model: type[RefModel]):
    return getattr(model, _KEY_FIELDS[model])


async def list_all(
    db: AsyncSession,
    model: type[RefModel],
    *,
    q: str | None = None,
    is_active: bool | None = None,
) -> list[RefModel]:
    query = select(model)
    if q:
        query = query.where(ilike_any([_key_column(model), model.name], q))
    if is_active is not None:
        query = query.where(model.is_active == is_active)
    result = await db.execute(query.order_by(_key_column(model)))
    return list(result.scalars().all())


async def get(db: AsyncSession, model: type[RefModel], item_id: UUID) -> RefModel:
    item = await db.get(model, item_id)
    if not item:
        raise NotFoundError(f"{_LABELS[model]} not found")
    return item


async def get_by_code(db: AsyncSession, model: type[RefModel], code: str) -> RefModel | None:
    result = await db.execute(select(model).where(_key_column(model) == code))
    return result.scalar_one_or_none()


async def create(db: AsyncSession, model: type[RefModel], data: dict) -> RefModel:
    key = data[_KEY_FIELDS[model]]
    if await get_by_code(db, model, key):
        raise ConflictError(f"{_LABELS[model]} {key!r} already exists")
    item = model(**data)
    db.add(item)
    await db.flush()
    await db.refresh(item)
    logger.info("Created %s %s", _LABELS[model].lower(), key)
    return item


async def update(
    db: AsyncSession, model: type[RefModel], item_id: UUID, data: dict,
) -> tuple[RefModel, dict]:
    item = await get(db, model, item_id)
    changes = {}
    for field, value in data.items():
        if field not in _MUTABLE_FIELDS[model]:
            continue
        if value is None and field in _NOT_NULL_FIELDS:
            continue
        if getattr(item, field) != value:
            changes[field] = value
            setattr(item, field, value)
    await db.flush()
    await db.refresh(item)
    return item, changes


async def delete(db: AsyncSession, model: type[RefModel], item_id: UUID) -> str:
    item = await get(db, model, item_id)
    key = getattr(item, _KEY_FIELDS[model])

    if model in _SOFT_DELETE:
        item.is_active = False
        await db.flush()
        logger.info("Deactivated %s %s", _LABELS[model].lower(), key)
        return key

    column = _ALLOCATION_COLUMNS.get(model)
    if column is not None:
        count_result = await db.execute(
            select(func.count()).select_from(BudgetAllocation).where(column == key)
        )
        if count_result.scalar() or 0:
            raise ConflictError(
                f"{_LABELS[model]} {key!r} is used by budget allocations"
            )
    await db.delete(item)
    await db.flush()
    logger.info("Deleted %s %s", _LABELS[model].lower(), key)
    return key
