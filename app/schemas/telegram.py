from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class TelegramLinkRequest(BaseModel):
    telegram_user_id: int
    chat_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

class TelegramStatusResponse(BaseModel):
    telegram_user_id: int
    is_linked: bool
    user_id: Optional[int] = None
    username: Optional[str] = None
    linked_at: Optional[datetime] = None

class TelegramMessageRequest(BaseModel):
    telegram_user_id: int
    text: str
    message_id: Optional[int] = None

class TelegramMessageResponse(BaseModel):
    response: str
    processed: bool
    duplicate: bool = False
