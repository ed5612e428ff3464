from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from ipmatcher.services.matcher import Matcher
from ipmatcher.settings import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        settings = get_settings()
    return settings


def require_admin(
    x_admin_key: str | None = Header(default=None, alias="X-Admin-Key"),
    settings: Settings = Depends(get_app_settings),
) -> None:
    # Return 403 if admin key is not configured instead of 500
    if not settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin key not configured on server",
        )
    if not secrets.compare_digest(x_admin_key or "", settings.admin_api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin key")


def get_matcher(request: Request) -> Matcher:
    matcher = getattr(request.app.state, "matcher", None)
    if matcher is None:
        raise RuntimeError("Matcher not initialized")
    return matcher
