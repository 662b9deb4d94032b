from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.config import settings

class AccountBase(BaseModel):
    account_name: str = Field(..., min_length=1, max_length=100)
    account_type: str = Field(..., min_length=1, max_length=30)
    currency_code: str = Field(settings.DEFAULT_CURRENCY, min_length=3, max_length=3)
    account_color: Optional[str] = None

class AccountCreate(AccountBase):
    current_balance: float = 0

class AccountUpdate(BaseModel):
    account_name: Optional[str] = Field(None, min_length=1, max_length=100)
    account_type: Optional[str] = Field(None, min_length=1, max_length=30)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    account_color: Optional[str] = None

class AccountResponse(AccountBase):
    id: int
    user_id: int
    current_balance: float
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
