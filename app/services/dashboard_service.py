"""
Dashboard Service
Aggregates balances, monthly totals, category spending and budget status
for the dashboard endpoints
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import add_months, day_range, month_bounds
from app.models.account import Account
from app.models.category import Category
from app.models.transaction import Transaction
from app.services.budget_evaluator import (
    STATUS_COLORS,
    STATUS_LABELS,
    WarningLevel,
    progress_percentage,
    to_decimal,
)
from app.services.budget_service import BudgetService

ZERO = Decimal("0")


class DashboardService:
    """
    Read-only aggregations over one user's data
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.budgets = BudgetService(db)

    async def _totals(self, user_id: int, lower: datetime, upper: Optional[datetime] = None) -> Tuple[Decimal, Decimal, int]:
        """(income, expense, transaction count) for transactions in [lower, upper)"""
        conditions = [
            Transaction.user_id == user_id,
            Transaction.transaction_date >= lower
        ]
        if upper is not None:
            conditions.append(Transaction.transaction_date < upper)

        stmt = select(
            Transaction.transaction_type,
            func.sum(Transaction.amount),
            func.count(Transaction.id)
        ).where(and_(*conditions)).group_by(Transaction.transaction_type)

        result = await self.db.execute(stmt)

        income, expense, count = ZERO, ZERO, 0
        for transaction_type, total, n in result.all():
            count += n
            if transaction_type == 'income':
                income += to_decimal(total)
            elif transaction_type == 'expense':
                expense += to_decimal(total)
        return income, expense, count

    async def _total_balance(self, user_id: int) -> Tuple[Decimal, int]:
        stmt = select(
            func.sum(Account.current_balance),
            func.count(Account.id)
        ).where(
            and_(
                Account.user_id == user_id,
                Account.is_active == True
            )
        )
        total, count = (await self.db.execute(stmt)).one()
        return to_decimal(total or 0), count

    async def _category_spending(self, user_id: int, since: datetime, limit: int = 5) -> List:
        stmt = select(
            Category.id,
            Category.category_name,
            Category.category_icon,
            Category.category_color,
            func.sum(Transaction.amount).label('amount'),
            func.count(Transaction.id).label('transaction_count')
        ).join(
            Category, Transaction.category_id == Category.id
        ).where(
            and_(
                Transaction.user_id == user_id,
                Transaction.transaction_type == 'expense',
                Transaction.transaction_date >= since
            )
        ).group_by(
            Category.id, Category.category_name, Category.category_icon, Category.category_color
        ).order_by(desc('amount')).limit(limit)

        result = await self.db.execute(stmt)
        return result.all()

    async def get_financial_summary(self, user_id: int) -> Dict:
        today = date.today()
        month_start, month_end = day_range(*month_bounds(today))

        total_balance, _ = await self._total_balance(user_id)
        income, expense, _ = await self._totals(user_id, month_start, month_end)

        active = await self.budgets.get_active_budgets(user_id)
        total_budget = sum((b['amount'] for b in active), ZERO)
        budget_spent = sum((b['spent_amount'] for b in active), ZERO)

        return {
            'total_balance': total_balance,
            'monthly_income': income,
            'monthly_expense': expense,
            'monthly_savings': income - expense,
            'total_budget': total_budget,
            'budget_spent': budget_spent,
            'budget_remaining': total_budget - budget_spent,
            'budget_progress': round(progress_percentage(budget_spent, total_budget), 2)
        }

    async def get_top_categories(self, user_id: int, months: int = 1) -> List[Dict]:
        """
        Top five expense categories over the last ``months`` months

        Percentages are shares of the top-five total.
        """
        since = datetime.combine(add_months(date.today(), -months), datetime.min.time())
        rows = await self._category_spending(user_id, since)
        total = sum((to_decimal(row.amount) for row in rows), ZERO)

        budgets_by_category = {
            b['category_id']: b for b in await self.budgets.get_active_budgets(user_id)
        }

        categories = []
        for row in rows:
            amount = to_decimal(row.amount)
            budget = budgets_by_category.get(row.id)
            categories.append({
                'category_id': row.id,
                'category_name': row.category_name,
                'category_icon': row.category_icon,
                'category_color': row.category_color,
                'amount': amount,
                'percentage': round(progress_percentage(amount, total), 2),
                'transaction_count': row.transaction_count,
                'has_budget': budget is not None,
                'budget_amount': budget['amount'] if budget else None,
                'budget_progress': budget['progress_percentage'] if budget else None,
                'budget_status': STATUS_LABELS[WarningLevel(budget['status'])] if budget else None
            })

        return categories

    async def get_budget_progress(self, user_id: int) -> List[Dict]:
        progress = []
        for budget in await self.budgets.get_active_budgets(user_id):
            level = WarningLevel(budget['status'])
            progress.append({
                'budget_id': budget['id'],
                'category_id': budget['category_id'],
                'category_name': budget['category_name'],
                'budget_amount': budget['amount'],
                'spent_amount': budget['spent_amount'],
                'remaining_amount': budget['remaining_amount'],
                'progress_percentage': budget['progress_percentage'],
                'status': STATUS_LABELS[level],
                'status_color': STATUS_COLORS[level]
            })
        return progress

    async def get_stats(self, user_id: int) -> Dict:
        today = date.today()
        month_start, month_end = day_range(*month_bounds(today))

        _, expense, count = await self._totals(user_id, month_start, month_end)
        _, account_count = await self._total_balance(user_id)
        active = await self.budgets.get_active_budgets(user_id)

        return {
            'total_transactions_this_month': count,
            'active_budgets': len(active),
            'over_budget_count': sum(1 for b in active if b['status'] == WarningLevel.EXCEEDED.value),
            'account_count': account_count,
            'average_daily_spending': round(expense / max(today.day, 1), 2)
        }

    async def get_overview(self, user_id: int) -> Dict:
        return {
            'financial_summary': await self.get_financial_summary(user_id),
            'top_categories': await self.get_top_categories(user_id),
            'budget_progress': await self.get_budget_progress(user_id),
            'stats': await self.get_stats(user_id),
            'alerts': await self.budgets.get_budget_alerts(user_id)
        }

    async def get_summary(self, user_id: int) -> Dict:
        """Totals for the last 30 days; net balance is the sum of account balances"""
        since = datetime.now() - timedelta(days=30)

        income, expense, count = await self._totals(user_id, since)
        net_balance, _ = await self._total_balance(user_id)
        rows = await self._category_spending(user_id, since)

        return {
            'total_income': income,
            'total_expense': expense,
            'net_balance': net_balance,
            'transaction_count': count,
            'top_categories': [
                {'category_name': row.category_name, 'amount': to_decimal(row.amount)}
                for row in rows
            ]
        }

    async def get_monthly_trend(self, user_id: int, months: int = 6) -> List[Dict]:
        """Income, expense and net per calendar month, oldest first"""
        current_month_start, _ = month_bounds(date.today())

        trend = []
        for offset in range(months - 1, -1, -1):
            first_day = add_months(current_month_start, -offset)
            lower, upper = day_range(*month_bounds(first_day))
            income, expense, _ = await self._totals(user_id, lower, upper)
            trend.append({
                'month': first_day.strftime("%Y-%m"),
                'income': income,
                'expense': expense,
                'net': income - expense
            })
        return trend
