from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base
from .users import GUID


class Profile(Base):
    """Per-user profile, provisioned right after registration.

    The primary key is the fastapi-users user id, so it uses the same GUID type.
    """
    __tablename__ = "profiles"

    id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String, nullable=True)
    full_name = Column(String, nullable=True)
    role = Column(Text, nullable=False, default="staff")  # 'manager' | 'staff'

    organization_id = Column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    assigned_location_id = Column(
        UUID(as_uuid=True),
        ForeignKey("locations.id", ondelete="SET NULL"),
        nullable=True,
    )

    organization = relationship("Organization")
    location = relationship("Location")

    @property
    def is_manager(self) -> bool:
        return self.role == "manager"
