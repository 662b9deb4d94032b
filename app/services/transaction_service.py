"""
Transaction Recorder
Persists transactions together with their account balance effect and runs
the budget check once the write is committed
"""

import logging
import math
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from sqlalchemy import select, func, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import convert_timezone_aware_datetimes, day_range
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.account import Account
from app.models.category import Category
from app.models.notification import Notification
from app.models.transaction import Transaction
from app.models.user import User
from app.services.budget_evaluator import BudgetWarning, WarningLevel, to_decimal
from app.services.budget_service import BudgetService, visible_category_clause

logger = logging.getLogger(__name__)

NOTIFICATION_TITLES = {
    WarningLevel.WARNING: "Budget warning",
    WarningLevel.CRITICAL: "Budget almost used up",
    WarningLevel.EXCEEDED: "Budget exceeded",
}


def balance_effect(amount, transaction_type: str):
    """Signed change a transaction applies to its account balance"""
    amount = to_decimal(amount)
    return amount if transaction_type == 'income' else -amount


class TransactionService:
    """
    Create, update, delete and query transactions for a user
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_owned_account(self, account_id: int, user_id: int) -> Account:
        stmt = select(Account).where(
            and_(
                Account.id == account_id,
                Account.user_id == user_id
            )
        )
        result = await self.db.execute(stmt)
        account = result.scalar_one_or_none()
        if not account:
            raise BadRequestError("Account not found or doesn't belong to user")
        return account

    async def _validate_category(self, category_id: Optional[int], user_id: int) -> None:
        if category_id is None:
            return
        found = await self.db.scalar(
            select(Category.id).where(
                and_(
                    Category.id == category_id,
                    visible_category_clause(user_id)
                )
            )
        )
        if found is None:
            raise BadRequestError("Category not found or doesn't belong to user")

    async def _get_owned_transaction(self, transaction_id: int, user_id: int) -> Transaction:
        stmt = select(Transaction).where(
            and_(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id
            )
        )
        result = await self.db.execute(stmt)
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise NotFoundError("Transaction not found")
        return transaction

    async def create_transaction(
        self,
        user_id: int,
        data: Dict,
        source: str = "web",
        evaluate: bool = True
    ) -> Tuple[Transaction, Optional[BudgetWarning]]:
        """
        Record a transaction and apply it to the account balance

        With ``evaluate=False`` the caller is responsible for running the
        budget check (the quick-add endpoint schedules it in the background).

        Returns:
            (transaction, budget warning or None)
        """
        data = convert_timezone_aware_datetimes(dict(data))
        if data.get('transaction_date') is None:
            data['transaction_date'] = datetime.utcnow()

        account = await self._get_owned_account(data['account_id'], user_id)
        await self._validate_category(data.get('category_id'), user_id)

        transaction = Transaction(user_id=user_id, source=source, **data)
        transaction.amount = to_decimal(transaction.amount)
        self.db.add(transaction)

        account.current_balance = to_decimal(account.current_balance) + balance_effect(
            transaction.amount, transaction.transaction_type
        )
        account.updated_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(transaction)

        logger.info(
            "Transaction %s recorded for user %s (%s %s, source=%s)",
            transaction.id, user_id, transaction.transaction_type, transaction.amount, source
        )

        warning = await self.evaluate_budget_safely(transaction) if evaluate else None
        return transaction, warning

    async def evaluate_budget_safely(self, transaction: Transaction) -> Optional[BudgetWarning]:
        """
        Run the budget check for a stored transaction

        Failures are logged and reported as "no warning"; the transaction
        itself is already committed. A produced warning is also stored as a
        notification unless the user turned budget alerts off.
        """
        transaction_id = transaction.id
        try:
            warning = await BudgetService(self.db).check_budget_after_transaction(
                user_id=transaction.user_id,
                category_id=transaction.category_id,
                amount=transaction.amount,
                transaction_date=transaction.transaction_date,
                transaction_type=transaction.transaction_type,
                exclude_transaction_id=transaction.id
            )
            if warning:
                user = await self.db.get(User, transaction.user_id)
                if user is not None and not user.budget_alerts:
                    logger.debug("Budget alerts disabled for user %s", transaction.user_id)
                    return warning

                self.db.add(Notification(
                    user_id=transaction.user_id,
                    title=NOTIFICATION_TITLES[warning.warning_level],
                    message=warning.message,
                    type="budget_warning"
                ))
                await self.db.commit()
                logger.info(
                    "Budget %s reached %s for user %s (%s%%)",
                    warning.budget_id, warning.warning_level.value,
                    transaction.user_id, warning.progress_percentage
                )
            return warning
        except Exception:
            logger.exception("Budget check failed for transaction %s", transaction_id)
            await self.db.rollback()
            # rollback expires loaded objects; reload the committed row for the caller
            await self.db.refresh(transaction)
            return None

    async def update_transaction(
        self,
        transaction_id: int,
        user_id: int,
        data: Dict
    ) -> Tuple[Transaction, Optional[BudgetWarning]]:
        """
        Update a transaction, moving its balance effect if amount, type or
        account changed
        """
        transaction = await self._get_owned_transaction(transaction_id, user_id)
        data = convert_timezone_aware_datetimes(dict(data))

        old_account = await self._get_owned_account(transaction.account_id, user_id)
        new_account = old_account
        if data.get('account_id') is not None and data['account_id'] != transaction.account_id:
            new_account = await self._get_owned_account(data['account_id'], user_id)
        if 'category_id' in data:
            await self._validate_category(data['category_id'], user_id)

        # Revert old effect
        old_account.current_balance = to_decimal(old_account.current_balance) - balance_effect(
            transaction.amount, transaction.transaction_type
        )

        for key, value in data.items():
            if value is None and key in ('account_id', 'amount', 'transaction_type', 'transaction_date'):
                continue
            setattr(transaction, key, value)
        transaction.amount = to_decimal(transaction.amount)
        transaction.updated_at = datetime.utcnow()

        # Apply new effect
        new_account.current_balance = to_decimal(new_account.current_balance) + balance_effect(
            transaction.amount, transaction.transaction_type
        )

        await self.db.commit()
        await self.db.refresh(transaction)

        warning = await self.evaluate_budget_safely(transaction)
        return transaction, warning

    async def delete_transaction(self, transaction_id: int, user_id: int) -> None:
        transaction = await self._get_owned_transaction(transaction_id, user_id)

        account = await self.db.get(Account, transaction.account_id)
        if account:
            account.current_balance = to_decimal(account.current_balance) - balance_effect(
                transaction.amount, transaction.transaction_type
            )

        await self.db.delete(transaction)
        await self.db.commit()
        logger.info("Transaction %s deleted for user %s", transaction_id, user_id)

    async def get_transaction(self, transaction_id: int, user_id: int) -> Transaction:
        return await self._get_owned_transaction(transaction_id, user_id)

    async def list_transactions(
        self,
        user_id: int,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Dict:
        """
        Filtered, newest-first page of a user's transactions
        """
        query = select(Transaction).where(Transaction.user_id == user_id)

        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if account_id is not None:
            query = query.where(Transaction.account_id == account_id)
        if start_date is not None:
            query = query.where(Transaction.transaction_date >= day_range(start_date, start_date)[0])
        if end_date is not None:
            query = query.where(Transaction.transaction_date < day_range(end_date, end_date)[1])
        if transaction_type:
            query = query.where(Transaction.transaction_type == transaction_type)
        if min_amount is not None:
            query = query.where(Transaction.amount >= to_decimal(min_amount))
        if max_amount is not None:
            query = query.where(Transaction.amount <= to_decimal(max_amount))
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Transaction.description.ilike(pattern),
                    Transaction.location.ilike(pattern)
                )
            )

        total_count = await self.db.scalar(
            select(func.count()).select_from(query.subquery())
        )

        query = query.order_by(desc(Transaction.transaction_date), desc(Transaction.id))
        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await self.db.execute(query)

        return {
            'transactions': result.scalars().all(),
            'total_count': total_count or 0,
            'page': page,
            'page_size': page_size,
            'total_pages': math.ceil((total_count or 0) / page_size) if page_size else 0
        }


async def evaluate_in_background(session_factory, transaction_id: int) -> None:
    """
    Budget check for an already committed transaction, on its own session
    """
    try:
        async with session_factory() as session:
            transaction = await session.get(Transaction, transaction_id)
            if transaction is None:
                logger.warning("Transaction %s vanished before budget check", transaction_id)
                return
            await TransactionService(session).evaluate_budget_safely(transaction)
    except Exception:
        logger.exception("Background budget check failed for transaction %s", transaction_id)
