"""
Browser (cookie) flow router.

Provides endpoints for:
- Anti-forgery token issuance
- Login, registration and logout that set or clear the AuthToken cookie
- Comments posted from the browser
- Pages protected by role and age policies
- Reflected XSS demonstration returning encoded input

Every state-changing endpoint requires a valid anti-forgery token pair.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from api.src.config import Settings
from api.src.dependencies import (
    get_auth_service,
    get_client_ip,
    get_current_user,
    get_optional_user,
    get_settings_dependency,
    get_user_service,
)
from api.src.middleware.csrf import issue_csrf_token, validate_csrf
from api.src.middleware.rbac import require_admin, require_adult, require_manager_or_admin
from api.src.models.auth import (
    AuthResult,
    CommentRequest,
    CommentResponse,
    CurrentUser,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    UserSummary,
    XssDemoRequest,
)
from api.src.services.auth_service import AuthService
from api.src.services.user_service import UserService
from shared.models import ApiResponse
from shared.security import html_encode

logger = structlog.get_logger(__name__)

auth_router = APIRouter(
    prefix="/auth",
    tags=["Browser Authentication"],
    responses={
        403: {"model": ErrorResponse, "description": "Invalid anti-forgery token"},
        422: {"model": ErrorResponse, "description": "Validation Error"}
    }
)

home_router = APIRouter(
    tags=["Browser Pages"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Forbidden"}
    }
)


def _signed_in_redirect(result: AuthResult, settings: Settings, persistent: bool) -> RedirectResponse:
    """
    Redirect home with the JWT stored in the auth cookie.

    Args:
        result: Successful auth result
        settings: Application settings
        persistent: Keep the cookie for auth_cookie_max_age_hours instead of
            the browser session
    """
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=result.token,
        max_age=settings.auth_cookie_max_age_hours * 3600 if persistent else None,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/"
    )
    return response


# ============================================================================
# AUTHENTICATION ENDPOINTS
# ============================================================================


@auth_router.get("/csrf-token", response_model=ApiResponse[Dict[str, str]], summary="Issue anti-forgery token")
async def get_csrf_token(
    response: Response,
    settings: Settings = Depends(get_settings_dependency)
):
    """
    Set the anti-forgery cookie and return the token to echo in the header.
    """
    token = issue_csrf_token(response, settings)
    return ApiResponse[Dict[str, str]](
        success=True,
        message="Anti-forgery token issued",
        data={"token": token, "header_name": settings.csrf_header_name}
    )


@auth_router.post("/login", dependencies=[Depends(validate_csrf)], summary="Cookie login")
async def login(
    login_request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency),
    client_ip: str = Depends(get_client_ip)
):
    """
    Authenticate and store the JWT in an HttpOnly cookie.

    Returns:
        303 redirect to / on success, 400 envelope on failure
    """
    logger.info("cookie_login_attempt", email=login_request.email, ip_address=client_ip)
    result = await auth_service.login(login_request.email, login_request.password)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ApiResponse[Any](success=False, message=result.message).model_dump()
        )

    return _signed_in_redirect(result, settings, persistent=login_request.remember_me)


@auth_router.post("/register", dependencies=[Depends(validate_csrf)], summary="Cookie registration")
async def register(
    register_request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency)
):
    """
    Register and sign in with a persistent auth cookie.

    Returns:
        303 redirect to / on success, 400 envelope on failure
    """
    result = await auth_service.register(register_request)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ApiResponse[Any](success=False, message=result.message).model_dump()
        )

    return _signed_in_redirect(result, settings, persistent=True)


@auth_router.post("/logout", dependencies=[Depends(validate_csrf)], summary="Cookie logout")
async def logout(settings: Settings = Depends(get_settings_dependency)):
    """Clear the auth cookie and redirect home."""
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.auth_cookie_name, path="/")
    logger.info("cookie_logout")
    return response


@auth_router.get("/profile", response_model=ApiResponse[Dict[str, Any]], summary="Cookie profile")
async def profile(user: CurrentUser = Depends(get_current_user)):
    return ApiResponse[Dict[str, Any]](
        success=True,
        message="Profile retrieved successfully",
        data={
            "user_id": str(user.id),
            "email": user.email,
            "name": user.name,
            "age": user.age,
            "roles": user.roles
        }
    )


# ============================================================================
# PAGES
# ============================================================================


@home_router.get("/", response_model=ApiResponse[List[CommentResponse]], summary="Home page comments")
async def index(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    user_service: UserService = Depends(get_user_service)
):
    """Public comment list, greeting the visitor when signed in."""
    comments = await user_service.get_comments()
    message = f"Signed in as {user.email}" if user else ""
    return ApiResponse[List[CommentResponse]](success=True, message=message, data=comments)


@home_router.post(
    "/comments",
    dependencies=[Depends(validate_csrf)],
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Add a comment from the browser"
)
async def add_comment(
    comment: CommentRequest,
    user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Store an encoded comment and redirect home."""
    if not await user_service.add_comment(user.id, comment.content):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ApiResponse[Any](success=False, message="Failed to add comment.").model_dump()
        )
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@home_router.get("/admin-panel", response_model=ApiResponse[List[UserResponse]], summary="Admin panel")
async def admin_panel(
    admin: CurrentUser = Depends(require_admin()),
    user_service: UserService = Depends(get_user_service)
):
    users = await user_service.list_users()
    return ApiResponse[List[UserResponse]](
        success=True,
        message="Admin panel",
        data=[
            UserResponse(**UserSummary.from_user(u).model_dump(), created_at=u.created_at)
            for u in users
        ]
    )


@home_router.get("/manager-area", response_model=ApiResponse[Any], summary="Manager area")
async def manager_area(user: CurrentUser = Depends(require_manager_or_admin())):
    return ApiResponse[Any](success=True, message="Welcome to the manager area")


@home_router.get("/restricted-content", response_model=ApiResponse[Any], summary="Age restricted page")
async def restricted_content(user: CurrentUser = Depends(require_adult())):
    return ApiResponse[Any](success=True, message="Access granted to restricted content")


@home_router.post(
    "/xss-demo",
    response_model=ApiResponse[Dict[str, str]],
    dependencies=[Depends(validate_csrf)],
    summary="Reflected XSS prevention"
)
async def xss_demo(payload: XssDemoRequest):
    """Echo untrusted input back HTML-encoded."""
    return ApiResponse[Dict[str, str]](
        success=True,
        data={"safe_output": html_encode(payload.user_input)}
    )
