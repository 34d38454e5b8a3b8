from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


# ── Ledger errors ────────────────────────────────────────────────────────────
# detail is {"code": ..., "message": ...} so clients can branch on the code.


class LedgerError(HTTPException):
    code: str = "ledger_error"
    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(
            status_code=self.status_code_default,
            detail={"code": self.code, "message": message},
        )


class AllocationNotFoundError(LedgerError):
    code = "allocation_not_found"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, allocation_id=None):
        self.allocation_id = allocation_id
        if allocation_id is None:
            super().__init__("Budget allocation not found")
        else:
            super().__init__(f"Budget allocation {allocation_id} not found")


class AdjustmentNotFoundError(LedgerError):
    code = "adjustment_not_found"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, adjustment_id=None):
        self.adjustment_id = adjustment_id
        super().__init__("Budget adjustment not found")


class InvalidAdjustmentError(LedgerError):
    code = "invalid_adjustment"
    status_code_default = status.HTTP_400_BAD_REQUEST


class InsufficientBudgetError(LedgerError):
    code = "insufficient_budget"
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, allocation_id, available, requested):
        self.allocation_id = allocation_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient budget on allocation {allocation_id}. "
            f"Available: {available}, requested: {requested}"
        )


class ConcurrentModificationError(LedgerError):
    code = "concurrent_modification"
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Budget allocation was modified concurrently, retry the request"):
        super().__init__(message)


class StorageError(LedgerError):
    code = "storage_failure"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)
