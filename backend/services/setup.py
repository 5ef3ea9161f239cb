import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InvalidOperationError, NotFoundError
from db.organization import Location, Organization
from db.product import Product
from db.profile import Profile
from services.inventory import org_location

logger = logging.getLogger(__name__)

LOCATION_TYPES = ("main_store", "camp_store", "department")
ROLES = ("manager", "staff")


async def get_locations(db: AsyncSession, organization_id: UUID) -> List[Location]:
    res = await db.execute(
        select(Location)
        .where(Location.organization_id == organization_id)
        .order_by(Location.name.asc())
    )
    return list(res.scalars().all())


async def get_staff(db: AsyncSession, organization_id: UUID) -> List[Profile]:
    res = await db.execute(
        select(Profile)
        .where(Profile.organization_id == organization_id)
        .order_by(func.lower(Profile.full_name).asc())
    )
    return list(res.scalars().all())


async def create_location(
    db: AsyncSession,
    organization_id: UUID,
    name: str,
    type: str,
    parent_id: Optional[UUID] = None,
) -> Location:
    """Insert a location; the name is stored upper-case. Duplicate names are allowed."""
    name = (name or "").strip()
    if not name:
        raise InvalidOperationError("Location name is required")
    if type not in LOCATION_TYPES:
        raise InvalidOperationError(f"Unknown location type: {type}")
    if parent_id is not None:
        await org_location(db, organization_id, parent_id)

    model = Location(
        organization_id=organization_id,
        name=name.upper(),
        type=type,
        parent_location_id=parent_id,
    )
    db.add(model)
    await db.commit()
    await db.refresh(model)
    logger.info("created location %s (%s) in organization %s", model.name, model.type, organization_id)
    return model


async def create_organization(db: AsyncSession, name: str, owner_id: UUID) -> Organization:
    """Create a tenant and make the owner's profile its manager."""
    name = (name or "").strip()
    if not name:
        raise InvalidOperationError("Organization name is required")

    try:
        profile = await db.get(Profile, owner_id)
        if profile is None:
            raise NotFoundError("Profile not found")

        org = Organization(name=name)
        db.add(org)
        await db.flush()

        profile.organization_id = org.id
        profile.role = "manager"
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("created organization %s owned by %s", org.id, owner_id)
    return org


async def assign_staff(
    db: AsyncSession,
    organization_id: UUID,
    profile_id: UUID,
    location_id: Optional[UUID],
    role: Optional[str] = None,
) -> Profile:
    """Set a staff member's assigned location (and optionally role)."""
    if role is not None and role not in ROLES:
        raise InvalidOperationError(f"Unknown role: {role}")

    profile = await db.get(Profile, profile_id)
    if profile is None or profile.organization_id != organization_id:
        raise NotFoundError("Staff member not found")

    if location_id is not None:
        loc = await db.get(Location, location_id)
        if loc is None or loc.organization_id != organization_id:
            raise NotFoundError("Location not found")

    profile.assigned_location_id = location_id
    if role is not None:
        profile.role = role
    await db.commit()
    return profile


async def add_staff_member(db: AsyncSession, organization_id: UUID, profile_id: UUID) -> Profile:
    """Attach a registered user without an organization to this one as staff."""
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    if profile.organization_id and profile.organization_id != organization_id:
        raise InvalidOperationError("User already belongs to another organization")

    profile.organization_id = organization_id
    await db.commit()
    logger.info("added %s to organization %s", profile_id, organization_id)
    return profile


async def get_products(db: AsyncSession, organization_id: UUID) -> List[Product]:
    res = await db.execute(
        select(Product)
        .where(Product.organization_id == organization_id)
        .order_by(func.lower(Product.name).asc())
    )
    return list(res.scalars().all())


async def create_product(
    db: AsyncSession,
    organization_id: UUID,
    name: str,
    unit: str,
    selling_price=0,
    cost_price=0,
    category: Optional[str] = None,
) -> Product:
    model = Product(
        organization_id=organization_id,
        name=name,
        unit=unit,
        selling_price=selling_price,
        cost_price=cost_price,
        category=category,
    )
    db.add(model)
    await db.commit()
    await db.refresh(model)
    logger.info("created product %s in organization %s", model.id, organization_id)
    return model
