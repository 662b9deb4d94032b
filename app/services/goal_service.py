"""
Goal Service
Savings goals with progress tracking
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List

from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.goal import Goal
from app.services.budget_evaluator import progress_percentage, to_decimal


def goal_to_dict(goal: Goal, today: date = None) -> Dict:
    """Goal fields plus the computed progress values"""
    today = today or date.today()
    target = to_decimal(goal.target_amount)
    current = to_decimal(goal.current_amount)

    return {
        'id': goal.id,
        'user_id': goal.user_id,
        'goal_name': goal.goal_name,
        'target_amount': target,
        'current_amount': current,
        'target_date': goal.target_date,
        'description': goal.description,
        'priority': goal.priority,
        'progress_percentage': round(progress_percentage(current, target), 2),
        'remaining_amount': max(target - current, Decimal("0")),
        'days_remaining': max((goal.target_date - today).days, 0),
        'is_completed': target > 0 and current >= target,
        'is_active': goal.is_active,
        'created_at': goal.created_at,
        'updated_at': goal.updated_at
    }


class GoalService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_goals(self, user_id: int) -> List[Goal]:
        stmt = select(Goal).where(
            and_(
                Goal.user_id == user_id,
                Goal.is_active == True
            )
        ).order_by(desc(Goal.created_at), desc(Goal.id))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_goal(self, goal_id: int, user_id: int) -> Goal:
        stmt = select(Goal).where(
            and_(
                Goal.id == goal_id,
                Goal.user_id == user_id,
                Goal.is_active == True
            )
        )
        result = await self.db.execute(stmt)
        goal = result.scalar_one_or_none()
        if not goal:
            raise NotFoundError("Goal not found")
        return goal

    async def create_goal(self, user_id: int, data: Dict) -> Goal:
        goal = Goal(user_id=user_id, **data)
        goal.target_amount = to_decimal(goal.target_amount)
        goal.current_amount = min(to_decimal(goal.current_amount), goal.target_amount)
        self.db.add(goal)
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    async def update_goal(self, goal_id: int, user_id: int, data: Dict) -> Goal:
        goal = await self.get_goal(goal_id, user_id)
        for key, value in data.items():
            if value is not None:
                setattr(goal, key, value)
        goal.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    async def delete_goal(self, goal_id: int, user_id: int) -> None:
        goal = await self.get_goal(goal_id, user_id)
        goal.is_active = False
        goal.updated_at = datetime.utcnow()
        await self.db.commit()

    async def add_money(self, goal_id: int, user_id: int, amount) -> Goal:
        """Add to the saved amount, capped at the target"""
        goal = await self.get_goal(goal_id, user_id)
        target = to_decimal(goal.target_amount)
        goal.current_amount = min(to_decimal(goal.current_amount) + to_decimal(amount), target)
        goal.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(goal)
        return goal
