from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from app.schemas.budget import BudgetWarningResponse

class TransactionBase(BaseModel):
    account_id: int
    category_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    transaction_type: str = Field(..., pattern="^(income|expense)$")
    description: Optional[str] = None
    transaction_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(BaseModel):
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)
    transaction_type: Optional[str] = Field(None, pattern="^(income|expense)$")
    description: Optional[str] = None
    transaction_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)

class TransactionResponse(TransactionBase):
    id: int
    user_id: int
    transaction_date: datetime
    source: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TransactionResultResponse(TransactionResponse):
    budget_warning: Optional[BudgetWarningResponse] = None

class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
