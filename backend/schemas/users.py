# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; full_name is carried into the profile.

from typing import Optional
from uuid import UUID

from fastapi_users import schemas
from pydantic import BaseModel


class UserRead(schemas.BaseUser[UUID]):
    full_name: Optional[str] = None


class UserCreate(schemas.BaseUserCreate):
    full_name: Optional[str] = None


class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None


class NamedRef(BaseModel):
    name: Optional[str] = None


class LocationRef(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None


class ProfileRead(BaseModel):
    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    organization_id: Optional[UUID] = None
    assigned_location_id: Optional[UUID] = None
    organization: Optional[NamedRef] = None
    location: Optional[LocationRef] = None

    class Config:
        from_attributes = True


class SessionRead(BaseModel):
    access_token: str
    user: UserRead
