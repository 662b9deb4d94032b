from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List

from app.services.budget_evaluator import BudgetWarning

class BudgetBase(BaseModel):
    category_id: int
    amount: float = Field(..., ge=0)
    start_date: date
    end_date: date
    is_recurring: bool = False
    notification_threshold: float = Field(90.0, ge=0, le=100)

class BudgetCreate(BudgetBase):
    pass

class BudgetUpdate(BudgetBase):
    pass

class BudgetResponse(BudgetBase):
    id: int
    user_id: int
    category_name: Optional[str] = None
    spent_amount: float
    remaining_amount: float
    progress_percentage: float
    status: str
    period_start: date
    period_end: date
    created_at: datetime
    updated_at: datetime

class BudgetListResponse(BaseModel):
    budgets: List[BudgetResponse]
    total_count: int
    total_budget_amount: float
    total_spent_amount: float
    overall_progress_percentage: float

class BudgetAlertResponse(BaseModel):
    budget_id: int
    category_name: str
    budget_amount: float
    spent_amount: float
    progress_percentage: float
    alert_type: str  # Threshold, Exceeded
    alert_date: datetime

class BudgetWarningResponse(BaseModel):
    budget_id: Optional[int] = None
    category_name: str
    budget_amount: float
    current_spent: float
    new_spent: float
    progress_percentage: float
    warning_level: str
    message: str
    overage: Optional[float] = None

    @classmethod
    def from_warning(cls, warning: Optional[BudgetWarning]) -> Optional["BudgetWarningResponse"]:
        if warning is None:
            return None
        return cls(
            budget_id=warning.budget_id,
            category_name=warning.category_name,
            budget_amount=warning.budget_amount,
            current_spent=warning.current_spent,
            new_spent=warning.new_spent,
            progress_percentage=warning.progress_percentage,
            warning_level=warning.warning_level.value,
            message=warning.message,
            overage=warning.overage
        )
