"""
FastAPI dependency injection for settings, services and the current user.

Services are created once during application startup and stored on
app.state. The dependencies below hand them to route handlers so tests
can swap any of them by replacing the app.state attribute.
"""

from typing import Optional

import structlog
from fastapi import Depends, Request

from api.src.config import Settings
from api.src.middleware.auth import (
    get_current_user_from_request,
    get_optional_user_from_request,
)
from api.src.models.auth import CurrentUser
from api.src.services.auth_service import AuthService
from api.src.services.oauth_service import OAuthService
from api.src.services.user_service import UserService

logger = structlog.get_logger(__name__)


# ============================================================================
# SETTINGS AND SERVICES
# ============================================================================


def get_settings_dependency(request: Request) -> Settings:
    """
    Get the settings the application was created with.

    Example:
        @router.get("/config")
        async def get_config(settings: Settings = Depends(get_settings_dependency)):
            return {"environment": settings.environment}
    """
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    """Get the authentication service."""
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    """Get the user and comment service."""
    return request.app.state.user_service


def get_oauth_service(request: Request) -> OAuthService:
    """Get the external login service."""
    return request.app.state.oauth_service


# ============================================================================
# AUTHENTICATION DEPENDENCIES
# ============================================================================


async def get_current_user(
    user: CurrentUser = Depends(get_current_user_from_request)
) -> CurrentUser:
    """
    Get current authenticated user.

    Raises 401 when the request carries no valid bearer token or auth
    cookie.

    Example:
        @router.get("/profile")
        async def get_profile(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    return user


async def get_optional_user(
    user: Optional[CurrentUser] = Depends(get_optional_user_from_request)
) -> Optional[CurrentUser]:
    """Get current user if authenticated, None otherwise."""
    return user


async def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Checks X-Forwarded-For first, then falls back to the socket address.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return request.client.host if request.client else "unknown"
