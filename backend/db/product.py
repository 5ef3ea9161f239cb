import uuid
from sqlalchemy import Column, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from .database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    organization_id = Column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    category = Column(Text, nullable=True)
    unit = Column(Text, nullable=False, default="pcs")

    selling_price = Column(Numeric(14, 2), nullable=False, default=0)
    cost_price = Column(Numeric(14, 2), nullable=False, default=0)
