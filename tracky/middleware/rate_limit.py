from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from tracky.config import settings


def get_user_id_or_ip(request: Request) -> str:
    """
    Key requests by the asserted user id, falling back to the client IP.
    """
    user_id = request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def rate_limit_write(func):
    """Rate limit for endpoints that record facts."""
    return limiter.limit(settings.RATE_LIMIT_WRITE)(func)
