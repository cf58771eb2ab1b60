"""
Admin authentication for the dashboard endpoints.
"""
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException

from inkbook.core.config import Settings, get_settings


def require_admin_key(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Require the admin API key in the X-API-Key header.

    With no ADMIN_API_KEY configured every admin request is refused.
    """
    expected = settings.ADMIN_API_KEY or ""
    if not x_api_key:
        raise HTTPException(
            status_code=401,
            detail={
                "error": "API key required",
                "message": "Provide the admin API key via the 'X-API-Key' header",
            },
        )

    if not expected or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(
            status_code=401,
            detail={"error": "Invalid API key", "message": "The provided API key is not valid"},
        )

    return x_api_key
