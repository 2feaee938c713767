"""Rate limiting using slowapi"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from wishlist_app.core.config import get_settings

def get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on forwarded client or peer address"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"

def auth_rate_limit() -> str:
    return get_settings().RATE_LIMIT_AUTH

# Create limiter instance
limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri=get_settings().RATE_LIMIT_STORAGE_URI,
    enabled=get_settings().RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)

async def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    return JSONResponse(
        status_code=429,
        content={
            "message": f"Too many requests. {exc.detail}",
            "code": "RATE_LIMIT_EXCEEDED",
        }
    )
