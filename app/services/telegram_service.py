"""
Telegram Service
Account linking and processing of messages relayed by the Telegram bot
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, NotFoundError
from app.models.telegram import TelegramMessage, TelegramUser
from app.models.user import User
from app.services.account_service import AccountService
from app.services.category_service import CategoryService
from app.services.message_parser import MessageParser, QueryIntent
from app.services.query_service import QueryService, format_money
from app.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

START_TEXT = (
    "🎉 Chào mừng đến với FinTrack Bot!\n\n"
    "✅ Ghi chép thu chi tự động\n"
    "✅ Xem thống kê tài chính\n"
    "✅ Hỏi đáp về chi tiêu\n\n"
    "📝 Ví dụ:\n"
    "• \"Mua cafe 25k\"\n"
    "• \"Hôm nay tôi chi bao nhiêu?\"\n"
    "• \"Số dư tài khoản của tôi?\"\n\n"
    "💡 Dùng /help để xem thêm hướng dẫn."
)

HELP_TEXT = (
    "📖 Hướng dẫn sử dụng Bot\n\n"
    "1️⃣ Ghi chép thu chi:\n"
    "• \"Mua cà phê 25000\"\n"
    "• \"Đổ xăng 150k\"\n"
    "• \"Nhận lương 10tr\"\n\n"
    "2️⃣ Xem thống kê:\n"
    "• \"Hôm nay tôi chi bao nhiêu?\"\n"
    "• \"Tuần này tôi chi bao nhiêu?\"\n"
    "• \"Thu nhập tháng này?\"\n"
    "• \"Tôi chi nhiều nhất vào danh mục nào?\"\n\n"
    "3️⃣ Lệnh:\n"
    "• /start - Bắt đầu sử dụng\n"
    "• /help - Xem hướng dẫn\n"
    "• /stats - Thống kê tổng quan"
)

STATS_TEXT = (
    "📊 Thống kê nhanh\n\n"
    "Gửi tin nhắn:\n"
    "• \"Tuần này tôi chi bao nhiêu?\"\n"
    "• \"Tháng này tôi chi bao nhiêu?\"\n"
    "• \"Số dư tài khoản?\""
)

COMMANDS = {
    '/start': START_TEXT,
    '/help': HELP_TEXT,
    '/stats': STATS_TEXT,
}

UNKNOWN_COMMAND_TEXT = "❓ Lệnh không hợp lệ. Sử dụng /help để xem hướng dẫn."
NOT_LINKED_TEXT = "❌ Bạn chưa liên kết tài khoản. Vui lòng liên kết Telegram trong phần cài đặt của ứng dụng."
NO_ACCOUNT_TEXT = "❌ Không tìm thấy tài khoản mặc định. Vui lòng tạo tài khoản trước."
NOT_UNDERSTOOD_TEXT = "🤔 Mình chưa hiểu tin nhắn. Thử \"Mua cafe 25k\" hoặc gõ /help."
ERROR_TEXT = "❌ Không thể xử lý. Vui lòng thử lại."


class TelegramService:
    def __init__(self, db: AsyncSession, parser: Optional[MessageParser] = None):
        self.db = db
        self.parser = parser or MessageParser()

    async def get_linked_user(self, telegram_user_id: int) -> Optional[TelegramUser]:
        stmt = select(TelegramUser).where(
            and_(
                TelegramUser.telegram_user_id == telegram_user_id,
                TelegramUser.is_active == True
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def link_account(self, user_id: int, data: Dict) -> TelegramUser:
        """
        Link a Telegram id to a user; a Telegram id can have one active link
        """
        telegram_user_id = data['telegram_user_id']

        stmt = select(TelegramUser).where(TelegramUser.telegram_user_id == telegram_user_id)
        link = (await self.db.execute(stmt)).scalar_one_or_none()

        if link and link.is_active:
            raise BadRequestError("Telegram account is already linked")

        # A user keeps a single active Telegram link
        stmt = select(TelegramUser).where(
            and_(
                TelegramUser.user_id == user_id,
                TelegramUser.is_active == True
            )
        )
        for previous in (await self.db.execute(stmt)).scalars().all():
            previous.is_active = False

        if link is None:
            link = TelegramUser(telegram_user_id=telegram_user_id)
            self.db.add(link)

        link.user_id = user_id
        link.chat_id = data['chat_id']
        link.first_name = data.get('first_name')
        link.last_name = data.get('last_name')
        link.username = data.get('username')
        link.is_active = True

        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.telegram_user_id = str(telegram_user_id)
        user.telegram_username = data.get('username')
        user.telegram_first_name = data.get('first_name')
        user.telegram_last_name = data.get('last_name')
        user.telegram_linked_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(link)

        logger.info("Telegram user %s linked to user %s", telegram_user_id, user_id)
        return link

    async def unlink_account(self, user_id: int) -> None:
        stmt = select(TelegramUser).where(
            and_(
                TelegramUser.user_id == user_id,
                TelegramUser.is_active == True
            )
        )
        links = (await self.db.execute(stmt)).scalars().all()
        if not links:
            raise NotFoundError("No linked Telegram account")

        for link in links:
            link.is_active = False

        user = await self.db.get(User, user_id)
        if user:
            user.telegram_user_id = None
            user.telegram_username = None
            user.telegram_first_name = None
            user.telegram_last_name = None
            user.telegram_linked_at = None

        await self.db.commit()
        logger.info("Telegram unlinked for user %s", user_id)

    async def get_status(self, telegram_user_id: int) -> Dict:
        link = await self.get_linked_user(telegram_user_id)
        if not link:
            return {'telegram_user_id': telegram_user_id, 'is_linked': False}

        user = await self.db.get(User, link.user_id)
        return {
            'telegram_user_id': telegram_user_id,
            'is_linked': True,
            'user_id': link.user_id,
            'username': user.username if user else None,
            'linked_at': user.telegram_linked_at if user else link.created_at
        }

    async def _find_duplicate(self, telegram_user_id: int, message_id: int) -> Optional[TelegramMessage]:
        stmt = select(TelegramMessage).where(
            and_(
                TelegramMessage.telegram_user_id == telegram_user_id,
                TelegramMessage.telegram_message_id == message_id
            )
        ).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _handle(self, telegram_user_id: int, text: str):
        """(response, processed) for one message"""
        if text.startswith('/'):
            command = text.split()[0].lower().split('@')[0]
            return COMMANDS.get(command, UNKNOWN_COMMAND_TEXT), command in COMMANDS

        link = await self.get_linked_user(telegram_user_id)
        if not link:
            return NOT_LINKED_TEXT, False

        parsed = self.parser.parse(text)

        if parsed['intent']:
            answer = await QueryService(self.db).answer(link.user_id, QueryIntent(parsed['intent']), "vi")
            return answer, True

        if parsed['amount'] is None:
            return NOT_UNDERSTOOD_TEXT, False

        account = await AccountService(self.db).first_active_account(link.user_id)
        if not account:
            return NO_ACCOUNT_TEXT, False

        category = None
        if parsed['category']:
            category = await CategoryService(self.db).find_by_name(
                link.user_id, parsed['category'], parsed['transaction_type']
            )

        transaction, warning = await TransactionService(self.db).create_transaction(
            link.user_id,
            {
                'account_id': account.id,
                'category_id': category.id if category else None,
                'amount': parsed['amount'],
                'transaction_type': parsed['transaction_type'],
                'description': parsed['description']
            },
            source="telegram"
        )

        kind = "thu" if transaction.transaction_type == 'income' else "chi"
        response = (
            f"✅ Ghi nhận {kind} '{transaction.description} - {format_money(transaction.amount)}' "
            f"(Danh mục: {category.category_name if category else 'Chưa phân loại'})"
        )
        if warning:
            response += f"\n⚠️ {warning.message}"
        return response, True

    async def process_message(self, telegram_user_id: int, text: str, message_id: Optional[int] = None) -> Dict:
        """
        Handle one bot message and log it

        Redelivered messages (same sender and message id) return the stored
        response without being processed again.
        """
        if message_id is not None:
            previous = await self._find_duplicate(telegram_user_id, message_id)
            if previous:
                logger.info("Duplicate Telegram message %s from %s", message_id, telegram_user_id)
                return {'response': previous.response or "", 'processed': bool(previous.processed), 'duplicate': True}

        text = (text or "").strip()
        logger.info("Processing Telegram message %s from %s", message_id, telegram_user_id)

        try:
            response, processed = await self._handle(telegram_user_id, text)
        except Exception:
            logger.exception("Error processing message from %s", telegram_user_id)
            await self.db.rollback()
            response, processed = ERROR_TEXT, False

        self.db.add(TelegramMessage(
            telegram_user_id=telegram_user_id,
            telegram_message_id=message_id,
            message_text=text,
            processed=processed,
            response=response
        ))
        await self.db.commit()

        return {'response': response, 'processed': processed, 'duplicate': False}
