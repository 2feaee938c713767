"""Main FastAPI application"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from typing import Optional
import time

from wishlist_app.core.config import Settings, get_settings
from wishlist_app.core.database import Database
from wishlist_app.core.events import lifespan
from wishlist_app.core.exceptions import register_exception_handlers
from wishlist_app.core.middleware import setup_middleware
from wishlist_app.core.websocket import ConnectionManager, router as websocket_router
from wishlist_app.middleware.rate_limit import limiter, custom_rate_limit_handler
from wishlist_app.services.storage import StorageService
from wishlist_app.api import api_router
from wishlist_app.api.health import router as health_router

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application

    The database handle, storage client and realtime connection manager are
    created here and kept on ``app.state`` so each app instance owns its own.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Collaborative wishlist API",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.db = Database(settings)
    app.state.storage = StorageService(settings)
    app.state.realtime = ConnectionManager()

    # Add rate limiter
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)

    register_exception_handlers(app)
    setup_middleware(app, settings)

    # Include routers
    app.include_router(health_router)
    app.include_router(api_router, prefix="/api")
    app.include_router(websocket_router)

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "wishlist_app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
