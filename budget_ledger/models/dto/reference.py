from datetime import datetime
from uuid import UUID

from pydantic import Field

from budget_ledger.models.dto.common import CamelModel

CODE_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9\-_./]*$"


class CostCenterCreate(CamelModel):
    code: str = Field(min_length=1, max_length=50, pattern=CODE_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool = True


class CostCenterUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None


class CostCenterResponse(CamelModel):
    id: UUID
    code: str
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None


class ObjectCodeCreate(CostCenterCreate):
    category: str | None = Field(default=None, max_length=100)


class ObjectCodeUpdate(CostCenterUpdate):
    category: str | None = Field(default=None, max_length=100)


class ObjectCodeResponse(CostCenterResponse):
    category: str | None = None


class SchemeCodeCreate(CostCenterCreate):
    pass


class SchemeCodeUpdate(CostCenterUpdate):
    pass


class SchemeCodeResponse(CostCenterResponse):
    pass


class VendorCreate(CamelModel):
    vendor_number: str = Field(min_length=1, max_length=50, pattern=CODE_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    contact_person: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool = True


class VendorUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_person: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None


class VendorResponse(CamelModel):
    id: UUID
    vendor_number: str
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime | None = None
