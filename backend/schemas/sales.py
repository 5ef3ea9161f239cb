from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator


class SaleItem(BaseModel):
    product_id: UUID
    quantity: Decimal
    price: Decimal
    name: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @field_validator("price")
    @classmethod
    def _price_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("price must be >= 0")
        return v


class SaleCreate(BaseModel):
    location_id: UUID
    items: List[SaleItem]

    @field_validator("items")
    @classmethod
    def _items_required(cls, v: List[SaleItem]) -> List[SaleItem]:
        if not v:
            raise ValueError("cart is empty")
        return v


class SaleOut(BaseModel):
    success: bool = True
    total: float
    total_display: str
