from __future__ import annotations

from fastapi import Header, HTTPException, status

from vitae.core.config import settings


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "Please provide a valid API key."},
        )


def require_owner(
    x_user_id: str | None = Header(default=None, alias="X-User-ID"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str:
    """Resolve the calling user; token verification happens upstream."""
    check_api_key(x_api_key)
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "X-User-ID header is required."},
        )
    return user_id
