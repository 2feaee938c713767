"""
File storage service using Cloudinary
"""

from fastapi import Request
import cloudinary
import cloudinary.api
import cloudinary.uploader
from typing import Optional, Dict, Any, List
import asyncio
import io
import logging
import re

from wishlist_app.core.config import Settings
from wishlist_app.core.exceptions import (
    StorageNotConfiguredException,
    UpstreamServiceException,
)

logger = logging.getLogger(__name__)

# Cloudinary delivery URLs look like .../upload/<transforms>/v1712345678/<public_id>.<ext>
PUBLIC_ID_PATTERN = re.compile(r"/v\d+/(.+)\.")

AVATAR_FOLDER = "wishlist-app/avatars"
PRODUCT_IMAGE_FOLDER = "wishlist-app/products"

AVATAR_TRANSFORMATION: List[Dict[str, Any]] = [
    {"width": 200, "height": 200, "crop": "fill", "gravity": "face"},
    {"quality": "auto", "fetch_format": "auto"},
]

PRODUCT_IMAGE_TRANSFORMATION: List[Dict[str, Any]] = [
    {"width": 800, "height": 600, "crop": "limit"},
    {"quality": "auto", "fetch_format": "auto"},
]

def derive_public_id(url: Optional[str]) -> Optional[str]:
    """Extract the Cloudinary public id from a delivery URL, None if it has none"""
    if not url:
        return None
    match = PUBLIC_ID_PATTERN.search(url)
    return match.group(1) if match else None

def is_managed_url(url: Optional[str]) -> bool:
    """True for images hosted on Cloudinary (the only ones we may delete)"""
    return bool(url) and "cloudinary.com" in url

class StorageService:
    """Storage service for image uploads"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.timeout = settings.STORAGE_TIMEOUT_SECONDS
        self.allowed_formats = settings.ALLOWED_IMAGE_FORMATS

        if self.is_configured:
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_API_SECRET,
                secure=True
            )
        else:
            logger.warning("Cloudinary credentials not configured. Image uploads will not work.")

    @property
    def is_configured(self) -> bool:
        return self.settings.cloudinary_configured

    def ensure_configured(self, detail: str = "Image upload service not configured"):
        if not self.is_configured:
            raise StorageNotConfiguredException(detail)

    async def _run(self, func, *args, **kwargs):
        """Run a blocking Cloudinary call in the thread pool, bounded by the timeout"""
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, lambda: func(*args, **kwargs)),
            timeout=self.timeout
        )

    async def store(
        self,
        file_bytes: bytes,
        folder: str,
        transformation: Optional[List[Dict[str, Any]]] = None,
        public_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Upload image to Cloudinary

        Args:
            file_bytes: Raw image content
            folder: Cloudinary folder
            transformation: Image transformations applied on upload
            public_id: Custom public ID

        Returns:
            Upload result with URL and public id

        Raises:
            StorageNotConfiguredException: If credentials are missing
            UpstreamServiceException: If Cloudinary fails or times out
        """
        self.ensure_configured()

        options = {
            "folder": folder,
            "resource_type": "image",
            "allowed_formats": self.allowed_formats,
        }
        if public_id:
            options["public_id"] = public_id
        if transformation:
            options["transformation"] = transformation

        try:
            result = await self._run(cloudinary.uploader.upload, io.BytesIO(file_bytes), **options)
        except asyncio.TimeoutError:
            logger.error(f"Image upload to {folder} timed out after {self.timeout}s")
            raise UpstreamServiceException("Image upload timed out")
        except Exception as e:
            logger.error(f"Failed to upload image: {str(e)}")
            raise UpstreamServiceException(f"Upload failed: {str(e)}")

        return {
            "url": result["secure_url"],
            "public_id": result["public_id"],
            "width": result.get("width"),
            "height": result.get("height"),
            "format": result.get("format"),
            "size": result.get("bytes")
        }

    async def delete(self, public_id: str) -> bool:
        """
        Delete image from Cloudinary

        Returns True when Cloudinary reports the image removed.
        Raises UpstreamServiceException on transport errors or timeout.
        """
        self.ensure_configured()

        try:
            result = await self._run(cloudinary.uploader.destroy, public_id)
        except asyncio.TimeoutError:
            logger.error(f"Deleting image {public_id} timed out")
            raise UpstreamServiceException("Image deletion timed out")
        except Exception as e:
            logger.error(f"Error deleting image from Cloudinary: {str(e)}")
            raise UpstreamServiceException("Image deletion failed")

        return result.get("result") == "ok"

    async def delete_quietly(self, url: Optional[str]) -> bool:
        """Best-effort removal of a previously stored image; never raises"""
        if not is_managed_url(url):
            return False

        public_id = derive_public_id(url)
        if not public_id:
            return False

        try:
            return await self.delete(public_id)
        except Exception as e:
            logger.warning(f"Ignoring failed cleanup of image {public_id}: {str(e)}")
            return False

    async def ping(self) -> Dict[str, Any]:
        """Check Cloudinary credentials and connectivity"""
        self.ensure_configured()
        try:
            return await self._run(cloudinary.api.ping)
        except Exception as e:
            raise UpstreamServiceException(f"Cloudinary connection failed: {str(e)}")

    derive_public_id = staticmethod(derive_public_id)

def get_storage(request: Request) -> StorageService:
    """FastAPI dependency returning the application's storage collaborator"""
    return request.app.state.storage
