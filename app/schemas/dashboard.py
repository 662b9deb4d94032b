from pydantic import BaseModel
from typing import Optional, List

from app.schemas.budget import BudgetAlertResponse

class FinancialSummary(BaseModel):
    total_balance: float
    monthly_income: float
    monthly_expense: float
    monthly_savings: float
    total_budget: float
    budget_spent: float
    budget_remaining: float
    budget_progress: float

class TopCategory(BaseModel):
    category_id: int
    category_name: str
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    amount: float
    percentage: float
    transaction_count: int
    has_budget: bool = False
    budget_amount: Optional[float] = None
    budget_progress: Optional[float] = None
    budget_status: Optional[str] = None

class BudgetProgress(BaseModel):
    budget_id: int
    category_id: int
    category_name: str
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    progress_percentage: float
    status: str  # Good, Warning, Critical, Exceeded
    status_color: str

class DashboardStats(BaseModel):
    total_transactions_this_month: int
    active_budgets: int
    over_budget_count: int
    account_count: int
    average_daily_spending: float

class DashboardOverview(BaseModel):
    financial_summary: FinancialSummary
    top_categories: List[TopCategory]
    budget_progress: List[BudgetProgress]
    stats: DashboardStats
    alerts: List[BudgetAlertResponse]

class CategorySpending(BaseModel):
    category_name: str
    amount: float

class DashboardSummary(BaseModel):
    total_income: float
    total_expense: float
    net_balance: float
    transaction_count: int
    top_categories: List[CategorySpending]

class MonthlyTrendPoint(BaseModel):
    month: str  # YYYY-MM
    income: float
    expense: float
    net: float
