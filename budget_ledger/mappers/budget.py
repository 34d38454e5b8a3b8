from budget_ledger.models.orm.budget_adjustment import BudgetAdjustment
from budget_ledger.models.orm.budget_allocation import BudgetAllocation


def allocation_to_dict(allocation: BudgetAllocation) -> dict:
    return {
        "id": allocation.id,
        "financial_year": allocation.financial_year,
        "cost_center": allocation.cost_center,
        "object_code": allocation.object_code,
        "total_allocation": allocation.total_allocation,
        "surrenders": allocation.surrenders,
        "supplementary": allocation.supplementary,
        "reappropriation": allocation.reappropriation,
        "base_allocation": allocation.base_allocation,
        "notes": allocation.notes,
        "date_created": allocation.date_created,
        "version": allocation.version,
        "created_at": allocation.created_at,
        "updated_at": allocation.updated_at,
    }


def adjustment_to_dict(
    adjustment: BudgetAdjustment,
    allocations: list[BudgetAllocation] | None = None,
) -> dict:
    data = {
        "id": adjustment.id,
        "period": adjustment.period,
        "from_allocation": adjustment.from_allocation_id,
        "to_allocation": adjustment.to_allocation_id,
        "budget_released": adjustment.budget_released,
        "amount_allocated": adjustment.amount_allocated,
        "financial_year": adjustment.financial_year,
        "from_object_code": adjustment.from_object_code,
        "from_cost_center_id": adjustment.from_cost_center_id,
        "from_cost_center": adjustment.from_cost_center,
        "to_object_code": adjustment.to_object_code,
        "to_cost_center_id": adjustment.to_cost_center_id,
        "to_cost_center": adjustment.to_cost_center,
        "remarks": adjustment.remarks,
        "date_created": adjustment.date_created,
        "created_at": adjustment.created_at,
        "updated_at": adjustment.updated_at,
    }
    if allocations is not None:
        data["allocations"] = [allocation_to_dict(a) for a in allocations]
    return data
