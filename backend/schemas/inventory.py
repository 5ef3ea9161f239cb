from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator


def _positive(v) -> Decimal:
    try:
        v = Decimal(str(v))
    except Exception:
        raise ValueError("quantity must be a number")
    if v <= 0:
        raise ValueError("quantity must be > 0")
    return v


class InventoryTransferCreate(BaseModel):
    product_id: UUID
    from_location_id: UUID
    to_location_id: UUID
    quantity: Decimal

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_positive(cls, v) -> Decimal:
        return _positive(v)

    @model_validator(mode="after")
    def _distinct_locations(self):
        if self.from_location_id == self.to_location_id:
            raise ValueError("from_location_id and to_location_id must differ")
        return self


class StockReceiptCreate(BaseModel):
    product_id: UUID
    location_id: UUID
    quantity: Decimal

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_positive(cls, v) -> Decimal:
        return _positive(v)


class TransactionOut(BaseModel):
    id: UUID
    organization_id: UUID
    user_id: Optional[UUID] = None
    product_id: UUID
    from_location_id: Optional[UUID] = None
    to_location_id: Optional[UUID] = None
    type: str
    quantity: float
    total_value: float
    profit: Optional[float] = None
    approved_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
