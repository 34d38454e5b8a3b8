from typing import Any

from fastapi import Body
from pydantic import TypeAdapter, ValidationError

from budget_ledger.core.exceptions import InvalidAdjustmentError
from budget_ledger.models.dto.budget import BudgetAdjustmentCreate, BudgetAdjustmentInput

_adjustment_adapter = TypeAdapter(BudgetAdjustmentCreate)


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


async def adjustment_body(payload: dict[str, Any] = Body(...)) -> BudgetAdjustmentInput:
    """Parse a surrender / supplementary / reappropriation request.

    Malformed adjustments answer ``invalid_adjustment`` (400) rather than the
    generic 422, which is reserved for ``insufficient_budget`` on this resource.
    """
    try:
        return _adjustment_adapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidAdjustmentError(_describe(e)) from e
