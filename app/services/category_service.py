"""
Category Service
Default categories are shared by every user (user_id NULL); users can add
their own on top of them
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError
from app.models.category import Category
from app.services.budget_service import visible_category_clause

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    # (name, type, icon, color)
    ("Food & Drinks", "expense", "utensils", "#f97316"),
    ("Transport", "expense", "car", "#3b82f6"),
    ("Shopping", "expense", "shopping-bag", "#ec4899"),
    ("Entertainment", "expense", "film", "#8b5cf6"),
    ("Bills & Utilities", "expense", "file-text", "#64748b"),
    ("Health", "expense", "heart", "#ef4444"),
    ("Education", "expense", "book", "#14b8a6"),
    ("Other", "expense", "more-horizontal", "#94a3b8"),
    ("Salary", "income", "briefcase", "#22c55e"),
    ("Bonus", "income", "gift", "#84cc16"),
    ("Other Income", "income", "plus-circle", "#10b981"),
]


async def seed_default_categories(db: AsyncSession) -> int:
    """Insert the shared default categories once; returns how many were added"""
    existing = await db.scalar(
        select(func.count(Category.id)).where(Category.user_id.is_(None))
    )
    if existing:
        return 0

    for name, transaction_type, icon, color in DEFAULT_CATEGORIES:
        db.add(Category(
            user_id=None,
            category_name=name,
            transaction_type=transaction_type,
            category_icon=icon,
            category_color=color,
            is_default=True
        ))
    await db.commit()
    logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
    return len(DEFAULT_CATEGORIES)


class CategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self, user_id: int, transaction_type: Optional[str] = None) -> List[Category]:
        stmt = select(Category).where(visible_category_clause(user_id))
        if transaction_type:
            stmt = stmt.where(Category.transaction_type == transaction_type)
        stmt = stmt.order_by(Category.transaction_type, Category.category_name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def find_by_name(self, user_id: int, name: str, transaction_type: Optional[str] = None) -> Optional[Category]:
        """Case-insensitive lookup; the user's own category wins over a default"""
        stmt = select(Category).where(
            and_(
                visible_category_clause(user_id),
                func.lower(Category.category_name) == name.lower()
            )
        )
        if transaction_type:
            stmt = stmt.where(Category.transaction_type == transaction_type)
        stmt = stmt.order_by(Category.user_id.is_(None), Category.id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_category(self, user_id: int, data: Dict) -> Category:
        parent_id = data.get('parent_category_id')
        if parent_id is not None:
            stmt = select(Category).where(
                and_(
                    Category.id == parent_id,
                    visible_category_clause(user_id)
                )
            )
            parent = (await self.db.execute(stmt)).scalar_one_or_none()
            if not parent:
                raise BadRequestError("Parent category not found")
            if parent.transaction_type != data['transaction_type']:
                raise BadRequestError("Parent category must have the same transaction type")

        category = Category(user_id=user_id, is_default=False, **data)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category
