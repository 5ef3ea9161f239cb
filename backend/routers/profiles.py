from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import UserManager, bearer_transport, current_active_user, get_user_manager
from db.database import get_async_session
from db.users import User
from schemas.users import ProfileRead, SessionRead
from services.auth import get_current_profile, get_session

router = APIRouter()


@router.get("/auth/session", response_model=Optional[SessionRead])
async def read_session(
    token: Optional[str] = Depends(bearer_transport.scheme),
    user_manager: UserManager = Depends(get_user_manager),
):
    """Current session, or null when the caller has no valid token."""
    return await get_session(user_manager, token)


@router.get("/profiles/me", response_model=ProfileRead)
async def read_my_profile(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    profile = await get_current_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
