"""
Quick-Add Service
Records a transaction or answers a spending question from one chat message
"""

import logging
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.ml.models.category_classifier import CategoryClassifier
from app.models.category import Category
from app.services.account_service import AccountService
from app.services.category_service import CategoryService
from app.services.message_parser import MessageParser, QueryIntent
from app.services.query_service import QueryService, format_money
from app.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

MESSAGES = {
    'vi': {
        'recorded': "Đã ghi nhận {kind} {amount}: {description} ({category}).",
        'income': "khoản thu",
        'expense': "khoản chi",
        'uncategorized': "chưa phân loại",
        'not_understood': "Mình chưa hiểu. Hãy thử \"cà phê 25k\" hoặc \"hôm nay tôi chi bao nhiêu?\".",
        'no_account': "Bạn chưa có tài khoản nào. Vui lòng tạo tài khoản trước.",
        'save_failed': "Đã phân tích giao dịch nhưng không thể lưu. Vui lòng thử lại.",
    },
    'en': {
        'recorded': "Recorded {kind} of {amount}: {description} ({category}).",
        'income': "income",
        'expense': "expense",
        'uncategorized': "uncategorized",
        'not_understood': "I couldn't understand that. Try \"coffee 25k\" or \"how much did I spend today?\".",
        'no_account': "You don't have an account yet. Please create one first.",
        'save_failed': "Transaction parsed but failed to save. Please try again.",
    },
}


class QuickAddService:
    def __init__(
        self,
        db: AsyncSession,
        classifier: Optional[CategoryClassifier] = None,
        parser: Optional[MessageParser] = None
    ):
        self.db = db
        self.classifier = classifier
        self.parser = parser or MessageParser()

    async def _resolve_category(self, user_id: int, parsed: Dict) -> Optional[Category]:
        """
        Keyword category first, then the trained classifier when it is
        confident enough
        """
        categories = CategoryService(self.db)
        name = parsed['category']

        if not name and self.classifier is not None and parsed['transaction_type'] == 'expense':
            try:
                predicted, confidence, _ = self.classifier.predict(parsed['description'], parsed['amount'])
            except Exception:
                logger.exception("Category prediction failed")
            else:
                logger.debug("Classifier suggested %s (%.2f)", predicted, confidence)
                if confidence >= settings.CLASSIFIER_MIN_CONFIDENCE:
                    name = predicted

        if not name:
            return None
        return await categories.find_by_name(user_id, name, parsed['transaction_type'])

    async def process(self, user_id: int, message: str, language: str = "vi", evaluate: bool = True) -> Dict:
        """
        Returns:
            Dictionary with ``type`` ("transaction" or "query"), ``response``,
            ``transaction`` and ``budget_warning`` (both None for queries)
        """
        texts = MESSAGES.get(language, MESSAGES['vi'])
        result = {'type': 'query', 'response': '', 'transaction': None, 'budget_warning': None}

        parsed = self.parser.parse(message)

        if parsed['intent']:
            result['response'] = await QueryService(self.db).answer(user_id, QueryIntent(parsed['intent']), language)
            return result

        if parsed['amount'] is None:
            result['response'] = texts['not_understood']
            return result

        account = await AccountService(self.db).first_active_account(user_id)
        if not account:
            result['response'] = texts['no_account']
            return result

        category = await self._resolve_category(user_id, parsed)
        result['type'] = 'transaction'

        try:
            transaction, warning = await TransactionService(self.db).create_transaction(
                user_id,
                {
                    'account_id': account.id,
                    'category_id': category.id if category else None,
                    'amount': parsed['amount'],
                    'transaction_type': parsed['transaction_type'],
                    'description': parsed['description']
                },
                source="quick_add",
                evaluate=evaluate
            )
        except Exception:
            logger.exception("Failed to create transaction via quick-add for user %s", user_id)
            await self.db.rollback()
            result['response'] = texts['save_failed']
            return result

        logger.info("Quick-add transaction %s created for user %s", transaction.id, user_id)

        result['transaction'] = transaction
        result['budget_warning'] = warning
        result['response'] = texts['recorded'].format(
            kind=texts[transaction.transaction_type],
            amount=format_money(transaction.amount),
            description=transaction.description,
            category=category.category_name if category else texts['uncategorized']
        )
        if warning:
            result['response'] += f" {warning.message}"
        return result
