from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from vitae.core.config import settings


def _owner_or_address(request: Request) -> str:
    user_id = (request.headers.get("X-User-ID") or "").strip()
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=_owner_or_address)


def rate_limit(limit: str | None = None):
    """Apply the configured limit, keyed by owner when the request names one."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
