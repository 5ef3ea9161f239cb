from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_manager, current_profile
from core.errors import StockServiceError, to_http_exception
from db.database import get_async_session
from db.profile import Profile
from db.users import User
from schemas.setup import (
    LocationCreate,
    LocationOut,
    OrganizationCreate,
    OrganizationOut,
    ProductCreate,
    ProductOut,
    StaffAssignment,
    StaffInvite,
    StaffOut,
)
from services import setup as setup_service

router = APIRouter()


@router.post("/organizations", response_model=OrganizationOut, status_code=status.HTTP_201_CREATED)
async def create_organization(
    payload: OrganizationCreate,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """First-run setup: the caller becomes manager of a new organization."""
    profile = await db.get(Profile, user.id)
    if profile is not None and profile.organization_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Organization already set up")
    try:
        return await setup_service.create_organization(db, payload.name, user.id)
    except StockServiceError as e:
        raise to_http_exception(e)


@router.get("/locations", response_model=List[LocationOut])
async def list_locations(
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    return await setup_service.get_locations(db, profile.organization_id)


@router.post("/locations", response_model=LocationOut, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await setup_service.create_location(
            db, profile.organization_id, payload.name, payload.type, payload.parent_location_id
        )
    except StockServiceError as e:
        raise to_http_exception(e)


@router.get("/staff", response_model=List[StaffOut])
async def list_staff(
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    return await setup_service.get_staff(db, profile.organization_id)


@router.post("/staff", response_model=StaffOut, status_code=status.HTTP_201_CREATED)
async def add_staff(
    payload: StaffInvite,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await setup_service.add_staff_member(db, profile.organization_id, payload.profile_id)
    except StockServiceError as e:
        raise to_http_exception(e)


@router.patch("/staff/{profile_id}", response_model=StaffOut)
async def assign_staff(
    profile_id: UUID,
    payload: StaffAssignment,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await setup_service.assign_staff(
            db, profile.organization_id, profile_id, payload.location_id, payload.role
        )
    except StockServiceError as e:
        raise to_http_exception(e)


@router.get("/products", response_model=List[ProductOut])
async def list_products(
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    return await setup_service.get_products(db, profile.organization_id)


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    return await setup_service.create_product(
        db,
        profile.organization_id,
        payload.name,
        payload.unit,
        selling_price=payload.selling_price,
        cost_price=payload.cost_price,
        category=payload.category,
    )
