"""
User API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user, require_admin
from app.core.security import TokenUser
from app.models.user import User
from app.schemas.user import UserResponse, UserSettings, UserSettingsUpdate, UserStatusUpdate

router = APIRouter()

async def _get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the authenticated user's profile
    """
    return await _get_user(db, current_user.id)

@router.get("/me/settings", response_model=UserSettings)
async def get_my_settings(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await _get_user(db, current_user.id)

@router.put("/me/settings", response_model=UserSettings)
async def update_my_settings(
    update_data: UserSettingsUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update notification preferences; with budget alerts off, budget
    warnings are still returned but no notification is stored
    """
    user = await _get_user(db, current_user.id)
    for key, value in update_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, key, value)
    await db.commit()
    await db.refresh(user)
    return user

@router.get("/", response_model=List[UserResponse])
async def get_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    _: TokenUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List users (admin only)
    """
    result = await db.execute(select(User).order_by(User.id).offset(skip).limit(limit))
    return result.scalars().all()

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    _: TokenUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await _get_user(db, user_id)

@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    update_data: UserStatusUpdate,
    _: TokenUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Activate or deactivate a user (admin only)
    """
    user = await _get_user(db, user_id)
    user.is_active = update_data.is_active
    await db.commit()
    await db.refresh(user)
    return user
