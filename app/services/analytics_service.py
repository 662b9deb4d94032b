"""
Analytics Service
Income, expense and savings over a selectable window of calendar months
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import add_months, month_bounds
from app.models.transaction import Transaction
from app.services.budget_evaluator import progress_percentage, to_decimal
from app.services.dashboard_service import DashboardService

TIME_RANGES = {
    '3months': 3,
    '6months': 6,
    '1year': 12,
    '2years': 24,
}

DEFAULT_TIME_RANGE = '6months'

BREAKDOWN_SIZE = 6


class AnalyticsService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.dashboard = DashboardService(db)

    async def _categorized_expense(self, user_id: int, since: datetime) -> Decimal:
        total = await self.db.scalar(
            select(func.sum(Transaction.amount)).where(
                and_(
                    Transaction.user_id == user_id,
                    Transaction.transaction_type == 'expense',
                    Transaction.category_id.isnot(None),
                    Transaction.transaction_date >= since
                )
            )
        )
        return to_decimal(total or 0)

    async def get_overview(self, user_id: int, time_range: str = DEFAULT_TIME_RANGE) -> Dict:
        """
        The window covers the current month and the ``months - 1`` before
        it, so the totals equal the sum of ``monthly_data``.

        Category shares are relative to all categorized expenses in the
        window, not only the top six.
        """
        months = TIME_RANGES[time_range]
        current_month_start, _ = month_bounds(date.today())
        since = datetime.combine(add_months(current_month_start, -(months - 1)), datetime.min.time())

        income, expense, _ = await self.dashboard._totals(user_id, since)
        savings = income - expense

        categorized = await self._categorized_expense(user_id, since)
        rows = await self.dashboard._category_spending(user_id, since, limit=BREAKDOWN_SIZE)

        monthly_data = [
            {
                'month': point['month'],
                'income': point['income'],
                'expenses': point['expense'],
                'savings': point['net']
            }
            for point in await self.dashboard.get_monthly_trend(user_id, months)
        ]

        return {
            'time_range': time_range,
            'total_income': income,
            'total_expenses': expense,
            'total_savings': savings,
            'savings_rate': round(progress_percentage(savings, income), 2),
            'avg_monthly_expenses': round(expense / months, 2),
            'monthly_data': monthly_data,
            'category_breakdown': [
                {
                    'category_id': row.id,
                    'name': row.category_name,
                    'value': to_decimal(row.amount),
                    'percentage': round(progress_percentage(row.amount, categorized), 2)
                }
                for row in rows
            ]
        }
