"""
Authentication service layer
Handles business logic for registration, login and profile updates
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from wishlist_app.models import User
from wishlist_app.core.security import SecurityUtils
from wishlist_app.core.config import get_settings
from wishlist_app.core.exceptions import (
    BadRequestException,
    UnauthorizedException,
    DuplicateResourceException,
)
from .schemas import RegisterRequest, ProfileUpdateRequest, AuthResponse, UserResponse

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_by(self, **filters) -> Optional[User]:
        query = select(User)
        for field, value in filters.items():
            query = query.where(getattr(User, field) == value)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new user

        Raises:
            BadRequestException: If the password is too weak
            DuplicateResourceException: If username/email already exists
        """
        is_valid, error = SecurityUtils.validate_password(request.password)
        if not is_valid:
            raise BadRequestException(error, error_code="WEAK_PASSWORD")

        if await self._find_by(email=request.email):
            raise DuplicateResourceException("User", "email", request.email)
        if await self._find_by(username=request.username):
            raise DuplicateResourceException("User", "username", request.username)

        user = User(
            username=request.username,
            email=request.email,
            password_hash=SecurityUtils.hash_password(request.password),
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Registered user {user.username} ({user.id})")
        return user

    async def login(self, email: str, password: str) -> User:
        """
        Check credentials

        Raises:
            UnauthorizedException: If email unknown or password wrong
        """
        user = await self._find_by(email=email)

        if not user or not SecurityUtils.verify_password(password, user.password_hash):
            raise UnauthorizedException("Invalid credentials", error_code="INVALID_CREDENTIALS")

        return user

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        """Apply profile changes, keeping username and email unique"""
        if request.username and request.username != user.username:
            existing = await self._find_by(username=request.username)
            if existing and existing.id != user.id:
                raise DuplicateResourceException("User", "username", request.username)
            user.username = request.username

        if request.email and request.email != user.email:
            existing = await self._find_by(email=request.email)
            if existing and existing.id != user.id:
                raise DuplicateResourceException("User", "email", request.email)
            user.email = request.email

        if request.avatar is not None:
            user.avatar = request.avatar or None

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    def build_auth_response(self, user: User) -> AuthResponse:
        """Issue an access token for user"""
        token = SecurityUtils.create_access_token({
            "sub": str(user.id),
            "username": user.username,
        })

        return AuthResponse(
            token=token,
            token_type="bearer",
            expires_in=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user)
        )
