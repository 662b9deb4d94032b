"""
Budget Service
Budget periods, spent-to-date, progress listings, alerts and the
post-transaction budget check
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import add_months, day_range
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.budget import Budget
from app.models.category import Category
from app.models.transaction import Transaction
from app.services.budget_evaluator import (
    BudgetWarning,
    WarningLevel,
    classify_progress,
    evaluate_budget,
    progress_percentage,
    to_decimal,
)

logger = logging.getLogger(__name__)

Period = Tuple[date, date]

AVERAGE_MONTH_DAYS = 30.44


def recurrence_step(budget: Budget) -> int:
    """Whole months a recurring budget advances by, from its length in days (at least one)"""
    length = (budget.end_date - budget.start_date).days + 1
    return max(1, round(length / AVERAGE_MONTH_DAYS))


def current_period(budget: Budget, on_date: date) -> Optional[Period]:
    """
    Period of ``budget`` that contains ``on_date``

    Non-recurring budgets only cover their stored range. Recurring budgets
    repeat from the day after ``end_date``: cycle ``n`` starts ``n * step``
    months after that anchor and ends the day before the next cycle starts,
    so consecutive periods never leave a gap.
    """
    start, end = budget.start_date, budget.end_date
    if start <= on_date <= end:
        return start, end
    if not budget.is_recurring or on_date < start:
        return None

    step = recurrence_step(budget)
    anchor = end + timedelta(days=1)
    months = (on_date.year - anchor.year) * 12 + (on_date.month - anchor.month)

    # Month clamping can put the estimate one cycle late, never early
    cycle = max(0, months // step - 1)
    period_start = add_months(anchor, cycle * step)
    while period_start <= on_date:
        next_start = add_months(anchor, (cycle + 1) * step)
        if on_date < next_start:
            return period_start, next_start - timedelta(days=1)
        cycle += 1
        period_start = next_start

    return None


def visible_category_clause(user_id: int):
    """Categories a user may reference: their own and the shared defaults"""
    return and_(
        or_(Category.user_id == user_id, Category.user_id.is_(None)),
        Category.is_active == True
    )


class BudgetService:
    """
    Budget CRUD, progress and alerting for one user at a time
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def calculate_spent(
        self,
        user_id: int,
        category_id: int,
        start_date: date,
        end_date: date,
        exclude_transaction_id: Optional[int] = None
    ) -> Decimal:
        """
        Sum of expense transactions in a category within an inclusive date range
        """
        lower, upper = day_range(start_date, end_date)

        conditions = [
            Transaction.user_id == user_id,
            Transaction.category_id == category_id,
            Transaction.transaction_type == 'expense',
            Transaction.transaction_date >= lower,
            Transaction.transaction_date < upper
        ]
        if exclude_transaction_id is not None:
            conditions.append(Transaction.id != exclude_transaction_id)

        stmt = select(func.sum(Transaction.amount)).where(and_(*conditions))
        result = await self.db.execute(stmt)
        return to_decimal(result.scalar() or 0)

    async def find_active_budget(
        self,
        user_id: int,
        category_id: int,
        on_date: date
    ) -> Optional[Tuple[Budget, str, Period]]:
        """
        Budget (with category name and period) covering a category on a date
        """
        stmt = select(Budget, Category.category_name).join(
            Category, Budget.category_id == Category.id
        ).where(
            and_(
                Budget.user_id == user_id,
                Budget.category_id == category_id,
                Budget.start_date <= on_date
            )
        ).order_by(Budget.start_date.desc())

        result = await self.db.execute(stmt)
        for budget, category_name in result.all():
            period = current_period(budget, on_date)
            if period:
                return budget, category_name, period
        return None

    async def check_budget_after_transaction(
        self,
        user_id: int,
        category_id: Optional[int],
        amount,
        transaction_date: datetime,
        transaction_type: str,
        exclude_transaction_id: Optional[int] = None
    ) -> Optional[BudgetWarning]:
        """
        Evaluate the budget affected by a transaction

        ``exclude_transaction_id`` keeps the transaction itself out of the
        current spent, since it is already stored when this runs.

        Returns:
            BudgetWarning, or None for income, uncategorised transactions,
            categories without an active budget and Normal progress
        """
        if transaction_type != 'expense' or category_id is None:
            return None

        on_date = transaction_date.date() if isinstance(transaction_date, datetime) else transaction_date
        match = await self.find_active_budget(user_id, category_id, on_date)
        if not match:
            return None

        budget, category_name, (start, end) = match
        current_spent = await self.calculate_spent(
            user_id, category_id, start, end, exclude_transaction_id=exclude_transaction_id
        )

        return evaluate_budget(
            budget_amount=budget.amount,
            current_spent=current_spent,
            transaction_amount=amount,
            notification_threshold=budget.notification_threshold,
            category_name=category_name,
            budget_id=budget.id
        )

    async def _budget_to_dict(self, budget: Budget, category_name: str, today: date) -> Dict:
        start, end = current_period(budget, today) or (budget.start_date, budget.end_date)
        spent = await self.calculate_spent(budget.user_id, budget.category_id, start, end)
        amount = to_decimal(budget.amount)
        threshold = to_decimal(budget.notification_threshold)
        percentage = progress_percentage(spent, amount)

        return {
            'id': budget.id,
            'user_id': budget.user_id,
            'category_id': budget.category_id,
            'category_name': category_name,
            'amount': amount,
            'spent_amount': spent,
            'remaining_amount': amount - spent,
            'progress_percentage': round(percentage, 2),
            'status': classify_progress(percentage, threshold).value,
            'start_date': budget.start_date,
            'end_date': budget.end_date,
            'period_start': start,
            'period_end': end,
            'is_recurring': bool(budget.is_recurring),
            'notification_threshold': threshold,
            'created_at': budget.created_at,
            'updated_at': budget.updated_at
        }

    async def get_budgets(
        self,
        user_id: int,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_active: Optional[bool] = None
    ) -> Dict:
        """
        List budgets with spent/progress and overall totals
        """
        today = date.today()

        stmt = select(Budget, Category.category_name).join(
            Category, Budget.category_id == Category.id
        ).where(Budget.user_id == user_id)

        if category_id is not None:
            stmt = stmt.where(Budget.category_id == category_id)
        if start_date is not None:
            stmt = stmt.where(Budget.end_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Budget.start_date <= end_date)

        stmt = stmt.order_by(Budget.start_date.asc(), Budget.id.asc())
        result = await self.db.execute(stmt)

        budgets = []
        for budget, category_name in result.all():
            if is_active and current_period(budget, today) is None:
                continue
            budgets.append(await self._budget_to_dict(budget, category_name, today))

        total_amount = sum((b['amount'] for b in budgets), Decimal("0"))
        total_spent = sum((b['spent_amount'] for b in budgets), Decimal("0"))

        return {
            'budgets': budgets,
            'total_count': len(budgets),
            'total_budget_amount': total_amount,
            'total_spent_amount': total_spent,
            'overall_progress_percentage': round(progress_percentage(total_spent, total_amount), 2)
        }

    async def get_active_budgets(self, user_id: int) -> List[Dict]:
        result = await self.get_budgets(user_id, is_active=True)
        return result['budgets']

    async def _get_owned_budget(self, budget_id: int, user_id: int) -> Budget:
        stmt = select(Budget).where(
            and_(
                Budget.id == budget_id,
                Budget.user_id == user_id
            )
        )
        result = await self.db.execute(stmt)
        budget = result.scalar_one_or_none()
        if not budget:
            raise NotFoundError("Budget not found")
        return budget

    async def get_budget(self, budget_id: int, user_id: int) -> Dict:
        budget = await self._get_owned_budget(budget_id, user_id)
        category_name = await self.db.scalar(
            select(Category.category_name).where(Category.id == budget.category_id)
        )
        return await self._budget_to_dict(budget, category_name, date.today())

    async def _validate(self, user_id: int, data: Dict, exclude_budget_id: Optional[int] = None):
        if data['start_date'] >= data['end_date']:
            raise BadRequestError("Start date must be before end date")

        category = await self.db.scalar(
            select(Category.id).where(
                and_(
                    Category.id == data['category_id'],
                    visible_category_clause(user_id)
                )
            )
        )
        if category is None:
            raise BadRequestError("Category not found or doesn't belong to user")

        conditions = [
            Budget.user_id == user_id,
            Budget.category_id == data['category_id'],
            Budget.start_date <= data['end_date'],
            Budget.end_date >= data['start_date']
        ]
        if exclude_budget_id is not None:
            conditions.append(Budget.id != exclude_budget_id)

        overlapping = await self.db.scalar(select(func.count(Budget.id)).where(and_(*conditions)))
        if overlapping:
            raise BadRequestError("Budget already exists for this category in the specified period")

    async def create_budget(self, user_id: int, data: Dict) -> Dict:
        """Create a category budget after date, ownership and overlap checks"""
        await self._validate(user_id, data)

        budget = Budget(user_id=user_id, **data)
        self.db.add(budget)
        await self.db.commit()
        await self.db.refresh(budget)

        logger.info("Budget %s created for user %s (category %s)", budget.id, user_id, budget.category_id)
        return await self.get_budget(budget.id, user_id)

    async def update_budget(self, budget_id: int, user_id: int, data: Dict) -> Dict:
        budget = await self._get_owned_budget(budget_id, user_id)
        await self._validate(user_id, data, exclude_budget_id=budget_id)

        for key, value in data.items():
            setattr(budget, key, value)
        budget.updated_at = datetime.utcnow()

        await self.db.commit()
        return await self.get_budget(budget_id, user_id)

    async def delete_budget(self, budget_id: int, user_id: int) -> None:
        budget = await self._get_owned_budget(budget_id, user_id)
        await self.db.delete(budget)
        await self.db.commit()

    async def get_budget_alerts(self, user_id: int) -> List[Dict]:
        """
        Alerts for active budgets at or past their notification threshold
        """
        alerts = []
        now = datetime.now()

        for budget in await self.get_active_budgets(user_id):
            level = WarningLevel(budget['status'])
            if level not in (WarningLevel.CRITICAL, WarningLevel.EXCEEDED):
                continue

            alerts.append({
                'budget_id': budget['id'],
                'category_name': budget['category_name'],
                'budget_amount': budget['amount'],
                'spent_amount': budget['spent_amount'],
                'progress_percentage': budget['progress_percentage'],
                'alert_type': 'Exceeded' if level == WarningLevel.EXCEEDED else 'Threshold',
                'alert_date': now
            })

        return alerts
