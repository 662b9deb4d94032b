from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

class GoalBase(BaseModel):
    goal_name: str = Field(..., min_length=1, max_length=100)
    target_amount: float = Field(..., ge=0)
    target_date: date
    description: Optional[str] = None
    priority: str = Field("Medium", pattern="^(High|Medium|Low)$")

class GoalCreate(GoalBase):
    current_amount: float = Field(0, ge=0)

class GoalUpdate(BaseModel):
    goal_name: Optional[str] = Field(None, min_length=1, max_length=100)
    target_amount: Optional[float] = Field(None, ge=0)
    target_date: Optional[date] = None
    description: Optional[str] = None
    priority: Optional[str] = Field(None, pattern="^(High|Medium|Low)$")

class AddMoneyRequest(BaseModel):
    amount: float = Field(..., gt=0)

class GoalResponse(GoalBase):
    id: int
    user_id: int
    current_amount: float
    progress_percentage: float
    remaining_amount: float
    days_remaining: int
    is_completed: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime
