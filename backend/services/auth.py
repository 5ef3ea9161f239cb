"""Account and session operations on top of fastapi-users."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import UserManager, auth_backend, get_jwt_strategy
from core.errors import InvalidCredentialsError
from db.organization import Location, Organization
from db.profile import Profile
from db.users import User
from schemas.users import UserCreate

logger = logging.getLogger(__name__)


async def login(user_manager: UserManager, email: str, password: str) -> dict:
    """Check credentials and return session data holding a fresh JWT."""
    credentials = OAuth2PasswordRequestForm(username=email, password=password)
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        logger.warning("login rejected for %s", email)
        raise InvalidCredentialsError("LOGIN_BAD_CREDENTIALS")

    token = await get_jwt_strategy().write_token(user)
    logger.info("user %s signed in", user.id)
    return {"access_token": token, "token_type": "bearer", "user_id": user.id}


async def register(user_manager: UserManager, email: str, password: str, full_name: str) -> User:
    """
    Create an account.

    The profile row is provisioned by UserManager.on_after_register, not here.
    UserAlreadyExists / InvalidPasswordException propagate to the caller.
    """
    return await user_manager.create(
        UserCreate(email=email, password=password, full_name=full_name)
    )


async def logout(user: User, token: str) -> Response:
    # JWTs are stateless: the backend only answers 204, the client drops the token.
    response = await auth_backend.logout(get_jwt_strategy(), user, token)
    logger.info("user %s signed out", user.id)
    return response


async def get_session(user_manager: UserManager, token: Optional[str]) -> Optional[dict]:
    """Session for a bearer token, or None when the token is missing, expired or forged."""
    user = await get_jwt_strategy().read_token(token, user_manager)
    if user is None or not user.is_active:
        return None
    return {"access_token": token, "user": user}


async def get_current_profile(db: AsyncSession, user_id: UUID) -> Optional[dict]:
    """Profile joined with organization name and location name/type; None if absent."""
    stmt = (
        select(Profile, Organization.name, Location.name, Location.type)
        .outerjoin(Organization, Profile.organization_id == Organization.id)
        .outerjoin(Location, Profile.assigned_location_id == Location.id)
        .where(Profile.id == user_id)
    )
    row = (await db.execute(stmt)).first()
    if row is None:
        return None

    profile, org_name, loc_name, loc_type = row
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "role": profile.role,
        "organization_id": profile.organization_id,
        "assigned_location_id": profile.assigned_location_id,
        "organization": {"name": org_name} if profile.organization_id else None,
        "location": {"name": loc_name, "type": loc_type} if profile.assigned_location_id else None,
    }
