from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator


LocationType = Literal["main_store", "camp_store", "department"]
Role = Literal["manager", "staff"]


class OrganizationCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class OrganizationOut(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class LocationCreate(BaseModel):
    name: str
    type: LocationType
    parent_location_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class LocationOut(BaseModel):
    id: UUID
    organization_id: UUID
    name: str
    type: str
    parent_location_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class StaffOut(BaseModel):
    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    assigned_location_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class StaffAssignment(BaseModel):
    location_id: Optional[UUID] = None
    role: Optional[Role] = None


class StaffInvite(BaseModel):
    profile_id: UUID


class ProductCreate(BaseModel):
    name: str
    unit: str
    selling_price: Decimal = Decimal("0")
    cost_price: Decimal = Decimal("0")
    category: Optional[str] = None

    @field_validator("name", "unit")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("selling_price", "cost_price")
    @classmethod
    def _not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("prices must be >= 0")
        return v


class ProductOut(BaseModel):
    id: UUID
    name: str
    unit: str
    category: Optional[str] = None
    selling_price: float
    cost_price: float

    class Config:
        from_attributes = True
