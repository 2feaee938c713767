"""API routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .wishlists.router import router as wishlists_router
from .products.router import router as products_router
from .upload.router import router as upload_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(wishlists_router, prefix="/wishlists", tags=["Wishlists"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(upload_router, prefix="/upload", tags=["Upload"])
