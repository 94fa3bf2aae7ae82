"""Rate limiting using slowapi"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# Custom key function that considers user authentication
def get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on user or IP"""
    # Set by AuthContextMiddleware from the session cookie
    user_id = getattr(request.state, "user_id", None)

    if user_id:
        return f"user:{user_id}"

    # Fall back to IP address
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = "unknown"

    return f"ip:{ip}"

# Create limiter instance
limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Rate limit exceeded handler
async def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    logger.warning(f"Rate limit hit for {get_rate_limit_key(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Too many requests. {exc.detail}",
            "error_code": "RATE_LIMIT_EXCEEDED"
        }
    )

# Rate limiting decorators for different endpoints
auth_limiter = limiter.shared_limit(settings.RATE_LIMIT_AUTH, scope="auth")
contact_limiter = limiter.limit(settings.RATE_LIMIT_CONTACT)
