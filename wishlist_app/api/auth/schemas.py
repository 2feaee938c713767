"""
Authentication schemas for request/response validation
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from wishlist_app.utils.validators import validate_username

class RegisterRequest(BaseModel):
    """User registration request"""
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator('username')
    @classmethod
    def check_username(cls, v):
        return validate_username(v)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "janedoe",
                "email": "jane@wishlists.io",
                "password": "s3cret-pass"
            }
        }
    }

class LoginRequest(BaseModel):
    """User login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class ProfileUpdateRequest(BaseModel):
    """Profile fields a user may change"""
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = Field(None, max_length=500)

    @field_validator('username')
    @classmethod
    def check_username(cls, v):
        return validate_username(v) if v is not None else v

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v is not None else v

class UserSummary(BaseModel):
    """Public view of a user embedded in other payloads"""
    id: uuid.UUID
    username: str
    email: str
    avatar: Optional[str] = None

    model_config = {
        "from_attributes": True
    }

class UserResponse(UserSummary):
    """User information response"""
    created_at: datetime
    updated_at: datetime

class AuthResponse(BaseModel):
    """Authentication response with token and user info"""
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiry in seconds")
    user: UserResponse
