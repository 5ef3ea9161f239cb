from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class ApprovalResponse(BaseModel):
    status: Literal["approved", "rejected"]


class NameOut(BaseModel):
    name: Optional[str] = None


class PendingApprovalOut(BaseModel):
    id: UUID
    product_id: UUID
    from_location_id: Optional[UUID] = None
    to_location_id: Optional[UUID] = None
    quantity: float
    requested_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    products: NameOut
    from_loc: NameOut
    to_loc: NameOut
