from pydantic import BaseModel
from typing import List

class MonthlyData(BaseModel):
    month: str  # YYYY-MM
    income: float
    expenses: float
    savings: float

class CategoryBreakdown(BaseModel):
    category_id: int
    name: str
    value: float
    percentage: float

class AnalyticsOverview(BaseModel):
    time_range: str
    total_income: float
    total_expenses: float
    total_savings: float
    savings_rate: float
    avg_monthly_expenses: float
    monthly_data: List[MonthlyData]
    category_breakdown: List[CategoryBreakdown]
