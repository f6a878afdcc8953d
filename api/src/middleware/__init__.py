"""FastAPI middleware components.

This package contains custom middleware and dependencies for
authentication, policy based authorization, anti-forgery validation,
security headers and request logging.
"""

from api.src.middleware.auth import (
    AuthMiddleware,
    extract_token,
    get_current_user_from_request,
    get_optional_user_from_request,
)
from api.src.middleware.csrf import issue_csrf_token, validate_csrf, validate_csrf_for_cookie_auth
from api.src.middleware.rbac import (
    PolicyChecker,
    RoleChecker,
    require_admin,
    require_adult,
    require_any_role,
    require_manager_or_admin,
)
from api.src.middleware.security import RequestLoggingMiddleware, SecurityHeadersMiddleware

__all__ = [
    # Auth middleware
    "AuthMiddleware",
    "extract_token",
    "get_current_user_from_request",
    "get_optional_user_from_request",
    # Anti-forgery
    "issue_csrf_token",
    "validate_csrf",
    "validate_csrf_for_cookie_auth",
    # Policies
    "PolicyChecker",
    "RoleChecker",
    "require_admin",
    "require_adult",
    "require_any_role",
    "require_manager_or_admin",
    # Response hardening
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
