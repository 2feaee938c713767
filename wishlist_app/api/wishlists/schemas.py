"""Wishlist Pydantic schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from wishlist_app.models import CollaboratorRole
from wishlist_app.api.auth.schemas import UserSummary
from wishlist_app.api.products.schemas import ProductResponse
from wishlist_app.utils.validators import clean_tags, sanitize_text, strip_or_none

DESCRIPTION_MAX_LENGTH = 500

class WishlistCreate(BaseModel):
    """Schema for creating a wishlist"""
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator('tags')
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return strip_or_none(sanitize_text(v, max_length=DESCRIPTION_MAX_LENGTH)) if v is not None else v

class WishlistUpdate(BaseModel):
    """Schema for updating a wishlist; omitted fields are left untouched"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator('title')
    @classmethod
    def strip_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator('tags')
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return strip_or_none(sanitize_text(v, max_length=DESCRIPTION_MAX_LENGTH)) if v is not None else v

class CollaboratorUpdate(BaseModel):
    role: CollaboratorRole

class CollaboratorResponse(BaseModel):
    user: UserSummary
    role: CollaboratorRole
    joined_at: datetime

    model_config = {
        "from_attributes": True
    }

class WishlistResponse(BaseModel):
    """Wishlist with owner, collaborators and products"""
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    owner: UserSummary
    collaborators: List[CollaboratorResponse] = Field(default_factory=list)
    products: List[ProductResponse] = Field(default_factory=list)
    is_public: bool
    invite_code: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    total_value: float = 0
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True
    }

class JoinWishlistResponse(BaseModel):
    message: str
    wishlist: WishlistResponse

class InviteCodeResponse(BaseModel):
    invite_code: str

class MessageResponse(BaseModel):
    message: str
