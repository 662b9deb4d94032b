from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class CategoryBase(BaseModel):
    category_name: str = Field(..., min_length=1, max_length=100)
    transaction_type: str = Field(..., pattern="^(income|expense)$")
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    parent_category_id: Optional[int] = None

class CategoryCreate(CategoryBase):
    pass

class CategoryResponse(CategoryBase):
    id: int
    user_id: Optional[int] = None
    is_default: bool
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
