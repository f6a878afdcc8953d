"""
Anti-forgery (CSRF) protection for the cookie based browser flow.

A signed token is issued in an HttpOnly, SameSite=Strict cookie and
returned in the response body. The client must echo it in the
X-CSRF-TOKEN header on state-changing requests. Both values must match
and carry a valid signature.
"""

import structlog
from fastapi import HTTPException, Request, Response, status

from api.src.config import Settings
from api.src.middleware.auth import COOKIE
from shared.security import generate_csrf_token, verify_csrf_token

logger = structlog.get_logger(__name__)


def issue_csrf_token(response: Response, settings: Settings) -> str:
    """
    Create a token and set it as the anti-forgery cookie.

    Args:
        response: Response to attach the cookie to
        settings: Application settings

    Returns:
        The token the client must echo back
    """
    token = generate_csrf_token(settings.jwt_secret_key)
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/"
    )
    logger.debug("csrf_token_issued")
    return token


async def validate_csrf(request: Request) -> None:
    """
    FastAPI dependency rejecting requests without a valid token pair.

    Raises:
        HTTPException: 403 if the cookie or header is missing, they differ,
            or the signature is invalid
    """
    settings = request.app.state.settings
    cookie_token = request.cookies.get(settings.csrf_cookie_name)
    header_token = request.headers.get(settings.csrf_header_name)

    if not verify_csrf_token(cookie_token, header_token, settings.jwt_secret_key):
        logger.warning(
            "csrf_validation_failed",
            path=request.url.path,
            method=request.method,
            has_cookie=cookie_token is not None,
            has_header=header_token is not None
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid anti-forgery token"
        )


async def validate_csrf_for_cookie_auth(request: Request) -> None:
    """
    Apply the anti-forgery check to callers signed in through the auth cookie.

    Bearer clients send the token explicitly, so a browser cannot be tricked
    into presenting it and they are let through unchecked.

    Raises:
        HTTPException: 403 if a cookie principal lacks a valid token pair
    """
    user = getattr(request.state, "user", None)
    if user is not None and user.authentication_type == COOKIE:
        await validate_csrf(request)
