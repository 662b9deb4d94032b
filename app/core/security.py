"""
Bearer token handling

Tokens are issued by the identity service; this API only verifies them.
Claims: ``sub`` is the numeric user id, ``role`` is ``user`` or ``admin``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from app.config import settings

ADMIN_ROLE = "admin"


@dataclass
class TokenUser:
    id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == ADMIN_ROLE


def create_access_token(user_id: int, role: str = "user", expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token with the claims this API expects (used by tooling and tests)."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenUser]:
    """Return the token's user, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        return None

    return TokenUser(id=user_id, role=payload.get("role") or "user")
