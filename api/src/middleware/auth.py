"""
JWT authentication middleware for FastAPI.

Provides:
- Token extraction from the auth cookie used by the browser flow, falling
  back to the Authorization header
- Request context enrichment with the authenticated principal
- Dependencies that require or optionally read the current user

The middleware never rejects a request itself. Routes decide whether a
principal is required through the dependencies below.
"""

from typing import Callable, Optional, Tuple

import structlog
from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.src.models.auth import CurrentUser

logger = structlog.get_logger(__name__)

BEARER = "Bearer"
COOKIE = "Cookie"


def extract_token(request: Request, cookie_name: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Find the JWT presented with a request.

    The auth cookie wins over the Authorization header when both are
    present; the header is only read when the cookie is missing or empty.

    Args:
        request: HTTP request
        cookie_name: Name of the auth cookie

    Returns:
        (token, authentication type) or (None, None) if absent
    """
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token:
        return cookie_token, COOKIE

    authorization = request.headers.get("Authorization")
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
            return parts[1].strip(), BEARER
        logger.warning("auth_malformed_header", path=request.url.path)

    return None, None


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves the current user for every request.

    Sets request.state.user to a CurrentUser when a valid token is
    presented, and to None otherwise.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request and attach the authenticated user.

        Args:
            request: HTTP request
            call_next: Next middleware in chain

        Returns:
            HTTP response
        """
        request.state.user = None
        auth_service = getattr(request.app.state, "auth_service", None)

        token, auth_type = extract_token(request, request.app.state.settings.auth_cookie_name)

        if token and auth_service is not None:
            user = auth_service.get_current_user(token, authentication_type=auth_type)

            if user is None:
                logger.warning(
                    "auth_invalid_token",
                    path=request.url.path,
                    method=request.method,
                    authentication_type=auth_type
                )
            else:
                request.state.user = user
                logger.debug(
                    "request_authenticated",
                    path=request.url.path,
                    user_id=user.id,
                    roles=user.roles,
                    authentication_type=auth_type
                )

        return await call_next(request)


async def get_current_user_from_request(request: Request) -> CurrentUser:
    """
    Get current authenticated user from request.

    Args:
        request: HTTP request

    Returns:
        Current user

    Raises:
        HTTPException: If user not authenticated
    """
    user = getattr(request.state, "user", None)

    if not user:
        logger.warning("user_not_authenticated", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user


async def get_optional_user_from_request(request: Request) -> Optional[CurrentUser]:
    """
    Get current authenticated user from request (optional).

    Args:
        request: HTTP request

    Returns:
        Current user or None if not authenticated
    """
    return getattr(request.state, "user", None)
