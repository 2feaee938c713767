"""Upload request/response schemas"""

from pydantic import BaseModel
from typing import Any, Dict, Optional

from wishlist_app.api.auth.schemas import UserSummary

class AvatarUploadResponse(BaseModel):
    message: str
    avatar_url: str
    user: UserSummary

class ProductImageUploadResponse(BaseModel):
    message: str
    image_url: str
    public_id: str
    filename: Optional[str] = None
    content_type: Optional[str] = None
    size: int

class ImageDeleteRequest(BaseModel):
    image_url: Optional[str] = None

class StorageStatusResponse(BaseModel):
    message: str
    cloudinary_configured: bool
    cloudinary_connection: str
    ping_result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
