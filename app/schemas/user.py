"""
User Pydantic schemas
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    username: str
    email: str
    role: str = "user"

class UserResponse(UserBase):
    id: int
    telegram_user_id: Optional[str] = None
    telegram_username: Optional[str] = None
    telegram_linked_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class UserStatusUpdate(BaseModel):
    is_active: bool

class UserSettings(BaseModel):
    budget_alerts: bool

    class Config:
        from_attributes = True

class UserSettingsUpdate(BaseModel):
    budget_alerts: Optional[bool] = None
