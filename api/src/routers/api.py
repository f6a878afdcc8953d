"""
JSON API router for token based clients.

Provides REST API endpoints for:
- Login and registration returning a JWT
- Profile and claims inspection
- Comments (read and create)
- Admin-only user listing
- Age restricted content

Every response uses the {success, message, data} envelope.
"""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.src.dependencies import get_auth_service, get_current_user, get_user_service
from api.src.middleware.csrf import validate_csrf_for_cookie_auth
from api.src.middleware.rbac import require_adult, require_any_role
from api.src.models.auth import (
    AuthResult,
    CommentRequest,
    CommentResponse,
    CurrentUser,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    Role,
    UserResponse,
    UserSummary,
)
from api.src.services.auth_service import AuthService
from api.src.services.user_service import UserService
from shared.models import ApiResponse

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["API"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        422: {"model": ErrorResponse, "description": "Validation Error"}
    }
)


def _auth_payload(result: AuthResult) -> Dict[str, Any]:
    """Token plus a minimal user summary."""
    summary = UserSummary.from_user(result.user)
    return {
        "token": result.token,
        "user": {
            "id": summary.id,
            "email": summary.email,
            "first_name": summary.first_name
        }
    }


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse[Any](success=False, message=message).model_dump()
    )


# ============================================================================
# AUTHENTICATION ENDPOINTS
# ============================================================================


@router.post(
    "/login",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Login with email and password",
    responses={401: {"model": ApiResponse[Any], "description": "Invalid credentials"}}
)
async def login(
    login_request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate and return a bearer token.

    Args:
        login_request: Login credentials
        auth_service: Authentication service

    Returns:
        Envelope with token and user summary, or 401 envelope
    """
    result = await auth_service.login(login_request.email, login_request.password)

    if not result.success:
        return _failure(status.HTTP_401_UNAUTHORIZED, result.message)

    return ApiResponse[Dict[str, Any]](
        success=True,
        message=result.message,
        data=_auth_payload(result)
    )


@router.post(
    "/register",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Create an account",
    responses={400: {"model": ApiResponse[Any], "description": "Registration rejected"}}
)
async def register(
    register_request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new account with the default role and return a token.

    Args:
        register_request: Registration data
        auth_service: Authentication service

    Returns:
        Envelope with token and user summary, or 400 envelope
    """
    result = await auth_service.register(register_request)

    if not result.success:
        return _failure(status.HTTP_400_BAD_REQUEST, result.message)

    return ApiResponse[Dict[str, Any]](
        success=True,
        message=result.message,
        data=_auth_payload(result)
    )


# ============================================================================
# PROFILE AND CLAIMS
# ============================================================================


@router.get("/profile", response_model=ApiResponse[Dict[str, Any]], summary="Current user profile")
async def get_profile(user: CurrentUser = Depends(get_current_user)):
    """Profile fields read from the token claims."""
    return ApiResponse[Dict[str, Any]](
        success=True,
        message="Profile retrieved successfully",
        data={
            "user_id": str(user.id),
            "email": user.email,
            "name": user.name,
            "age": user.age,
            "roles": user.roles,
            "claims": user.claim_list()
        }
    )


@router.get("/claims-demo", response_model=ApiResponse[Dict[str, Any]], summary="Inspect token claims")
async def claims_demo(user: CurrentUser = Depends(get_current_user)):
    """All claims, the well-known ones picked out, and how the user authenticated."""
    return ApiResponse[Dict[str, Any]](
        success=True,
        message="Claims information retrieved",
        data={
            "all_claims": user.claim_list(),
            "specific_claims": {
                "user_id": str(user.id),
                "email": user.email,
                "name": user.name,
                "given_name": user.given_name,
                "surname": user.family_name,
                "age": user.age,
                "roles": user.roles
            },
            "authentication_info": {
                "is_authenticated": True,
                "authentication_type": user.authentication_type,
                "name": user.name
            }
        }
    )


# ============================================================================
# COMMENTS
# ============================================================================


@router.get("/comments", response_model=ApiResponse[List[CommentResponse]], summary="List comments")
async def get_comments(
    user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Comments, newest first. Content is already HTML-encoded."""
    comments = await user_service.get_comments()
    return ApiResponse[List[CommentResponse]](
        success=True,
        message="Comments retrieved successfully",
        data=comments
    )


@router.post(
    "/comments",
    response_model=ApiResponse[Any],
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment",
    dependencies=[Depends(validate_csrf_for_cookie_auth)],
    responses={403: {"model": ErrorResponse, "description": "Invalid anti-forgery token"}}
)
async def add_comment(
    comment: CommentRequest,
    user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Store a comment for the current user.

    Callers signed in through the auth cookie must also send the
    anti-forgery token.
    """
    if not await user_service.add_comment(user.id, comment.content):
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add comment.")
    return ApiResponse[Any](success=True, message="Comment added successfully!")


# ============================================================================
# RESTRICTED ENDPOINTS
# ============================================================================


@router.get(
    "/users",
    response_model=ApiResponse[List[UserResponse]],
    summary="List users (Admin)",
    responses={403: {"model": ErrorResponse, "description": "Forbidden"}}
)
async def get_users(
    admin: CurrentUser = Depends(require_any_role(Role.ADMIN)),
    user_service: UserService = Depends(get_user_service)
):
    """All users, newest first, with password hashes hidden."""
    users = await user_service.list_users()

    logger.info("users_listed", admin_id=admin.id, count=len(users))
    return ApiResponse[List[UserResponse]](
        success=True,
        message="Users retrieved successfully",
        data=[
            UserResponse(**UserSummary.from_user(u).model_dump(), created_at=u.created_at)
            for u in users
        ]
    )


@router.get(
    "/restricted",
    response_model=ApiResponse[str],
    summary="Content for users 18 and older",
    responses={403: {"model": ErrorResponse, "description": "Forbidden"}}
)
async def get_restricted_content(user: CurrentUser = Depends(require_adult())):
    return ApiResponse[str](
        success=True,
        message="Access granted to restricted content",
        data="This content is only available to users 18 and older."
    )
