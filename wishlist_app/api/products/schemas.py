"""Product Pydantic schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid

from wishlist_app.models import ProductPriority, ProductStatus, REACTION_EMOJIS
from wishlist_app.models.product import COMMENT_MAX_LENGTH
from wishlist_app.api.auth.schemas import UserSummary
from wishlist_app.utils.validators import strip_or_none, sanitize_text, clean_tags

DESCRIPTION_MAX_LENGTH = 1000

class ProductBase(BaseModel):
    """Fields shared by create and update"""
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    price: Optional[Decimal] = Field(None, ge=0, lt=Decimal("100000000"))
    image_url: Optional[str] = Field(None, max_length=500)
    product_url: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)

    @field_validator("image_url", "product_url", "category", "brand")
    @classmethod
    def strip_text(cls, v):
        return strip_or_none(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return strip_or_none(sanitize_text(v, max_length=DESCRIPTION_MAX_LENGTH)) if v is not None else v

    @field_validator("tags", check_fields=False)
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        if v is not None:
            # Ensure price has at most 2 decimal places
            return round(v, 2)
        return v

class ProductCreate(ProductBase):
    """Schema for adding a product to a wishlist"""
    name: str = Field(..., min_length=1, max_length=200)
    wishlist_id: uuid.UUID
    currency: str = Field("USD", min_length=3, max_length=3)
    priority: ProductPriority = ProductPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v):
        return v.upper()

class ProductUpdate(ProductBase):
    """
    Schema for updating a product

    The owning wishlist and creator are not part of the schema and
    therefore cannot be changed.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    priority: Optional[ProductPriority] = None
    status: Optional[ProductStatus] = None
    tags: Optional[List[str]] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v):
        v = sanitize_text(v, max_length=COMMENT_MAX_LENGTH)
        if not v:
            raise ValueError("Comment text is required")
        return v

class ReactionCreate(BaseModel):
    emoji: str

    @field_validator('emoji')
    @classmethod
    def known_emoji(cls, v):
        if v not in REACTION_EMOJIS:
            raise ValueError(f"Emoji must be one of {' '.join(REACTION_EMOJIS)}")
        return v

class CommentResponse(BaseModel):
    id: uuid.UUID
    user: UserSummary
    text: str
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class ReactionResponse(BaseModel):
    id: uuid.UUID
    user: UserSummary
    emoji: str
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class ProductResponse(BaseModel):
    """Schema for product response"""
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    currency: str
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    wishlist_id: uuid.UUID
    added_by: UserSummary
    priority: ProductPriority
    status: ProductStatus
    purchased_by: Optional[UserSummary] = None
    purchased_at: Optional[datetime] = None
    comments: List[CommentResponse] = Field(default_factory=list)
    reactions: List[ReactionResponse] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True
    }
