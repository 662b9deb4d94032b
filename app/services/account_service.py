"""
Account Service
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.account import Account
from app.services.budget_evaluator import to_decimal

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_accounts(self, user_id: int) -> List[Account]:
        stmt = select(Account).where(
            and_(
                Account.user_id == user_id,
                Account.is_active == True
            )
        ).order_by(Account.account_name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def first_active_account(self, user_id: int) -> Optional[Account]:
        """Account used for chat-entered transactions"""
        stmt = select(Account).where(
            and_(
                Account.user_id == user_id,
                Account.is_active == True
            )
        ).order_by(Account.id).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_account(self, account_id: int, user_id: int) -> Account:
        stmt = select(Account).where(
            and_(
                Account.id == account_id,
                Account.user_id == user_id,
                Account.is_active == True
            )
        )
        result = await self.db.execute(stmt)
        account = result.scalar_one_or_none()
        if not account:
            raise NotFoundError("Account not found")
        return account

    async def create_account(self, user_id: int, data: Dict) -> Account:
        account = Account(user_id=user_id, **data)
        account.current_balance = to_decimal(account.current_balance)
        self.db.add(account)
        await self.db.commit()
        await self.db.refresh(account)
        logger.info("Account %s created for user %s", account.id, user_id)
        return account

    async def update_account(self, account_id: int, user_id: int, data: Dict) -> Account:
        account = await self.get_account(account_id, user_id)
        for key, value in data.items():
            if value is not None:
                setattr(account, key, value)
        account.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(account)
        return account

    async def delete_account(self, account_id: int, user_id: int) -> None:
        """Soft delete; transactions keep pointing at the account"""
        account = await self.get_account(account_id, user_id)
        account.is_active = False
        account.updated_at = datetime.utcnow()
        await self.db.commit()
