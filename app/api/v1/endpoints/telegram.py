"""
Telegram API Endpoints
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.config import settings
from app.core.security import TokenUser
from app.schemas.telegram import (
    TelegramLinkRequest,
    TelegramMessageRequest,
    TelegramMessageResponse,
    TelegramStatusResponse
)
from app.services.telegram_service import TelegramService

router = APIRouter()

def verify_bot_secret(
    x_telegram_bot_api_secret_token: Optional[str] = Header(None)
):
    """Reject bot calls without the configured secret token"""
    expected = settings.TELEGRAM_SECRET_TOKEN
    if expected and not hmac.compare_digest(x_telegram_bot_api_secret_token or "", expected):
        raise HTTPException(status_code=401, detail="Invalid bot secret token")

@router.post("/link", response_model=TelegramStatusResponse)
async def link_telegram(
    request: TelegramLinkRequest,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Link a Telegram account to the current user
    """
    service = TelegramService(db)
    await service.link_account(current_user.id, request.model_dump())
    return await service.get_status(request.telegram_user_id)

@router.delete("/link")
async def unlink_telegram(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await TelegramService(db).unlink_account(current_user.id)
    return {"message": "Telegram account unlinked"}

@router.get("/status/{telegram_user_id}", response_model=TelegramStatusResponse)
async def get_link_status(
    telegram_user_id: int,
    _: None = Depends(verify_bot_secret),
    db: AsyncSession = Depends(get_db)
):
    return await TelegramService(db).get_status(telegram_user_id)

@router.post("/messages", response_model=TelegramMessageResponse)
async def process_message(
    request: TelegramMessageRequest,
    _: None = Depends(verify_bot_secret),
    db: AsyncSession = Depends(get_db)
):
    """
    Handle a message relayed by the bot and return the reply text
    """
    return await TelegramService(db).process_message(
        request.telegram_user_id, request.text, request.message_id
    )
