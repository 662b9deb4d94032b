"""Database models initialization."""

# Import all models to ensure they're registered with SQLAlchemy
from .user import User
from .account import Account
from .category import Category
from .transaction import Transaction
from .budget import Budget
from .goal import Goal
from .notification import Notification
from .telegram import TelegramUser, TelegramMessage

__all__ = [
    "User",
    "Account",
    "Category",
    "Transaction",
    "Budget",
    "Goal",
    "Notification",
    "TelegramUser",
    "TelegramMessage"
]
