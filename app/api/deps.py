"""
FastAPI Dependencies
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import async_session
from app.core.exceptions import ForbiddenError
from app.core.security import TokenUser, decode_access_token
from app.ml.inference.model_loader import model_loader
from app.ml.models.category_classifier import CategoryClassifier
from app.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency"""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()

def get_session_factory():
    """Session factory for work that outlives the request (background tasks)"""
    return async_session

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> TokenUser:
    """Authenticated user from the bearer token; the user must still exist and be active"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_user = decode_access_token(credentials.credentials)
    if token_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get(User, token_user.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise ForbiddenError("Inactive user")
    return token_user

async def require_admin(current_user: TokenUser = Depends(get_current_user)) -> TokenUser:
    if not current_user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return current_user

def get_category_classifier() -> Optional[CategoryClassifier]:
    """ML category classifier dependency (None until a model is trained)"""
    return model_loader.get_category_classifier()
