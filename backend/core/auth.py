import logging
import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.database import get_async_session
from db.profile import Profile
from db.users import User

logger = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.jwt_secret
    verification_token_secret = settings.jwt_secret

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        # Provision the profile row; organization and location are set during setup.
        session = self.user_db.session
        session.add(Profile(id=user.id, email=user.email, full_name=user.full_name, role="staff"))
        await session.commit()
        logger.info("registered user %s and provisioned profile", user.id)


async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(secret=settings.jwt_secret, lifetime_seconds=settings.jwt_lifetime_seconds)


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)


async def current_profile(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
) -> Profile:
    """Profile of the signed-in user; requires organization setup to be done."""
    profile = await db.get(Profile, user.id)
    if not profile or not profile.organization_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Organization setup required")
    return profile


async def current_manager(profile: Profile = Depends(current_profile)) -> Profile:
    if not profile.is_manager:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return profile
