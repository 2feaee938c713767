"""
Authentication dependencies and utilities
"""

from typing import Optional
import uuid
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from wishlist_app.core.database import get_db
from wishlist_app.core.security import SecurityUtils
from wishlist_app.core.exceptions import UnauthorizedException
from wishlist_app.models import User

security = HTTPBearer(auto_error=False)

def user_id_from_token(token: str) -> uuid.UUID:
    """Validate an access token and return the user id it was issued for"""
    payload = SecurityUtils.decode_token(token)

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedException("Token is not valid")

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user (required)
    Raises 401 if not authenticated or user not found
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("No token, authorization denied")

    user_id = user_id_from_token(credentials.credentials)
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthorizedException("Token is not valid")

    return user
