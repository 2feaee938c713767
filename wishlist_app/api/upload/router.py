"""
Image upload API routes
Avatars and product images are stored on Cloudinary through StorageService
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from wishlist_app.core.config import get_settings
from wishlist_app.core.database import get_db
from wishlist_app.core.exceptions import (
    BadRequestException,
    PayloadTooLargeException,
    WishlistAppException,
)
from wishlist_app.api.auth.dependencies import get_current_user
from wishlist_app.api.auth.schemas import UserSummary
from wishlist_app.api.wishlists.schemas import MessageResponse
from wishlist_app.models import User
from wishlist_app.services.storage import (
    StorageService,
    get_storage,
    derive_public_id,
    AVATAR_FOLDER,
    AVATAR_TRANSFORMATION,
    PRODUCT_IMAGE_FOLDER,
    PRODUCT_IMAGE_TRANSFORMATION,
)
from .schemas import (
    AvatarUploadResponse,
    ProductImageUploadResponse,
    ImageDeleteRequest,
    StorageStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

async def read_image(file: UploadFile, max_size: int) -> bytes:
    """
    Read an uploaded image, enforcing type and size limits

    Raises:
        BadRequestException: Missing file or not an image
        PayloadTooLargeException: File exceeds max_size bytes
    """
    if file is None or not file.filename:
        raise BadRequestException("No file uploaded", error_code="NO_FILE")

    if not (file.content_type or "").startswith("image/"):
        raise BadRequestException("Only image files are allowed", error_code="INVALID_FILE_TYPE")

    # Read one byte past the limit so oversized files are detected without loading them whole
    contents = await file.read(max_size + 1)
    if len(contents) > max_size:
        raise PayloadTooLargeException(f"File too large, limit is {max_size // (1024 * 1024)}MB")
    if not contents:
        raise BadRequestException("Uploaded file is empty", error_code="EMPTY_FILE")

    return contents

@router.get(
    "/test",
    response_model=StorageStatusResponse,
    summary="Check image storage",
    description="Report whether Cloudinary is configured and reachable"
)
async def test_storage(
    storage: StorageService = Depends(get_storage)
):
    try:
        ping_result = await storage.ping()
    except WishlistAppException as e:
        logger.warning(f"Cloudinary check failed: {e.detail}")
        body = StorageStatusResponse(
            message="Upload routes are working but Cloudinary is not available",
            cloudinary_configured=storage.is_configured,
            cloudinary_connection="failed" if storage.is_configured else "not_configured",
            error=e.detail
        )
        return JSONResponse(status_code=e.status_code, content=body.model_dump())

    return StorageStatusResponse(
        message="Upload routes are working",
        cloudinary_configured=True,
        cloudinary_connection="success",
        ping_result=dict(ping_result or {})
    )

@router.post(
    "/avatar",
    response_model=AvatarUploadResponse,
    summary="Upload avatar",
    description="Replace the current user's avatar; the previous hosted avatar is removed"
)
async def upload_avatar(
    avatar: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
):
    storage.ensure_configured("Avatar upload service not configured")
    contents = await read_image(avatar, get_settings().MAX_AVATAR_SIZE)

    stored = await storage.store(
        contents,
        folder=AVATAR_FOLDER,
        transformation=AVATAR_TRANSFORMATION
    )

    old_avatar = current_user.avatar
    current_user.avatar = stored["url"]
    db.add(current_user)
    await db.commit()

    if old_avatar and old_avatar != stored["url"]:
        await storage.delete_quietly(old_avatar)

    logger.info(f"User {current_user.id} uploaded avatar {stored['public_id']}")

    return AvatarUploadResponse(
        message="Avatar uploaded successfully",
        avatar_url=stored["url"],
        user=UserSummary.model_validate(current_user)
    )

@router.post(
    "/product-image",
    response_model=ProductImageUploadResponse,
    summary="Upload product image",
    description="Store an image and return its URL for use as a product image_url"
)
async def upload_product_image(
    image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage)
):
    storage.ensure_configured("Image upload service not configured")
    contents = await read_image(image, get_settings().MAX_PRODUCT_IMAGE_SIZE)

    stored = await storage.store(
        contents,
        folder=PRODUCT_IMAGE_FOLDER,
        transformation=PRODUCT_IMAGE_TRANSFORMATION
    )

    logger.info(f"User {current_user.id} uploaded product image {stored['public_id']}")

    return ProductImageUploadResponse(
        message="Product image uploaded successfully",
        image_url=stored["url"],
        public_id=stored["public_id"],
        filename=image.filename,
        content_type=image.content_type,
        size=len(contents)
    )

@router.delete(
    "/image",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete image",
    description="Remove a hosted image by its Cloudinary URL"
)
async def delete_image(
    payload: ImageDeleteRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage)
):
    if not payload.image_url:
        raise BadRequestException("Image URL is required")

    public_id = derive_public_id(payload.image_url)
    if not public_id:
        raise BadRequestException("Invalid Cloudinary URL")

    if not await storage.delete(public_id):
        raise BadRequestException("Failed to delete image", error_code="DELETE_FAILED")

    logger.info(f"User {current_user.id} deleted image {public_id}")
    return MessageResponse(message="Image deleted successfully")
