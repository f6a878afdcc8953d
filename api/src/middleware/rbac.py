"""
Role and policy based access control for FastAPI endpoints.

Provides:
- RoleChecker: requires at least one of a set of roles
- PolicyChecker: requires a named policy (AdminOnly, ManagerOrAdmin,
  MinimumAge18) to pass
- Convenience dependencies for the common cases

Both checkers answer 401 when no user is attached to the request and 403
when the user is known but not allowed.
"""

from typing import List, Union

import structlog
from fastapi import HTTPException, Request, status

from api.src.models.auth import CurrentUser, Policy, Role

logger = structlog.get_logger(__name__)


def _require_user(request: Request, **context) -> CurrentUser:
    user = getattr(request.state, "user", None)

    if not user:
        logger.warning("access_check_not_authenticated", path=request.url.path, **context)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user


class RoleChecker:
    """
    Dependency class for checking user roles in FastAPI endpoints.

    Example:
        @router.get("/users")
        async def list_users(user: CurrentUser = Depends(RoleChecker([Role.ADMIN]))):
            ...
    """

    def __init__(self, required_roles: Union[Role, List[Role]]):
        """
        Initialize role checker.

        Args:
            required_roles: List of roles, user must have at least one
        """
        self.required_roles = required_roles if isinstance(required_roles, list) else [required_roles]

    async def __call__(self, request: Request) -> CurrentUser:
        """
        Check if user has required role.

        Args:
            request: HTTP request

        Returns:
            Current user

        Raises:
            HTTPException: If user doesn't have required role
        """
        required = [r.value for r in self.required_roles]
        user = _require_user(request, required_roles=required)

        if not user.has_any_role(*self.required_roles):
            logger.warning(
                "role_checker_access_denied",
                user_id=user.id,
                user_roles=user.roles,
                required_roles=required
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role(s): {required}"
            )

        logger.debug("role_checker_access_granted", user_id=user.id, required_roles=required)
        return user


class PolicyChecker:
    """
    Dependency class evaluating a named policy.

    Policies are evaluated by the AuthService stored on the application.

    Example:
        @router.get("/restricted")
        async def restricted(user: CurrentUser = Depends(PolicyChecker(Policy.MINIMUM_AGE_18))):
            ...
    """

    def __init__(self, policy: Policy):
        self.policy = policy

    async def __call__(self, request: Request) -> CurrentUser:
        """
        Check the policy for the current user.

        Raises:
            HTTPException: 401 without a user, 403 when the policy fails
        """
        user = _require_user(request, policy=self.policy.value)
        auth_service = request.app.state.auth_service

        if not auth_service.satisfies_policy(user, self.policy):
            logger.warning(
                "policy_access_denied",
                user_id=user.id,
                policy=self.policy.value,
                user_roles=user.roles,
                age=user.age
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied by policy '{self.policy.value}'"
            )

        return user


# ============================================================================
# CONVENIENCE DEPENDENCIES
# ============================================================================


def require_admin() -> PolicyChecker:
    """Dependency that requires the AdminOnly policy."""
    return PolicyChecker(Policy.ADMIN_ONLY)


def require_manager_or_admin() -> PolicyChecker:
    """Dependency that requires the ManagerOrAdmin policy."""
    return PolicyChecker(Policy.MANAGER_OR_ADMIN)


def require_adult() -> PolicyChecker:
    """Dependency that requires the MinimumAge18 policy."""
    return PolicyChecker(Policy.MINIMUM_AGE_18)


def require_any_role(*roles: Role) -> RoleChecker:
    """
    Dependency that requires any of the specified roles.

    Args:
        *roles: Variable number of roles

    Returns:
        RoleChecker for specified roles
    """
    return RoleChecker(list(roles))
