"""
Security utilities for authentication
Handles JWT tokens, password hashing and invite code generation
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import secrets
import string

from .config import get_settings
from .exceptions import UnauthorizedException

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

INVITE_CODE_ALPHABET = string.ascii_lowercase + string.digits

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def validate_password(password: str) -> tuple[bool, str]:
        """
        Validate password strength
        Returns (is_valid, error_message)
        """
        min_length = get_settings().PASSWORD_MIN_LENGTH
        if len(password) < min_length:
            return False, f"Password must be at least {min_length} characters long"

        # bcrypt ignores everything past 72 bytes
        if len(password.encode("utf-8")) > 72:
            return False, "Password must be at most 72 bytes long"

        return True, ""

    @staticmethod
    def create_access_token(data: Dict[str, Any]) -> str:
        """Create JWT access token"""
        settings = get_settings()
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Decode and validate JWT token"""
        settings = get_settings()
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise UnauthorizedException("Token is not valid")

    @staticmethod
    def generate_invite_code(length: int = 16) -> str:
        """Generate an opaque lowercase alphanumeric invite token"""
        return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))
