"""Health check and root endpoints"""

from fastapi import APIRouter, Request
from datetime import datetime, timezone
import time

router = APIRouter(tags=["Health"])

@router.get("/health")
async def health_check(request: Request):
    """Liveness probe with process uptime"""
    settings = request.app.state.settings
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "environment": settings.ENVIRONMENT,
    }

@router.get("/")
async def root(request: Request):
    settings = request.app.state.settings
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "status": "running",
    }
