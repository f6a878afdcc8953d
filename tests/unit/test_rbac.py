"""
Unit tests for role and policy based access control.

Tests cover:
- Role checks on the principal
- AdminOnly, ManagerOrAdmin and MinimumAge18 policies
- RoleChecker and PolicyChecker dependencies (401 vs 403)
"""

from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi import HTTPException

from api.src.config import Settings
from api.src.middleware.rbac import (
    PolicyChecker,
    RoleChecker,
    require_admin,
    require_adult,
    require_any_role,
    require_manager_or_admin,
)
from api.src.models.auth import CurrentUser, Policy, Role
from api.src.services.auth_service import AuthService


def make_user(roles: List[str], age: Optional[int] = 30) -> CurrentUser:
    return CurrentUser(id=1, email="user@example.com", name="Test User", age=age, roles=roles)


@pytest.fixture
def auth_service() -> AuthService:
    return AuthService(user_repo=None, settings=Settings(password_bcrypt_rounds=4))


def make_request(user: Optional[CurrentUser], auth_service: AuthService) -> SimpleNamespace:
    """Minimal stand-in for a request that has passed through AuthMiddleware."""
    return SimpleNamespace(
        state=SimpleNamespace(user=user),
        url=SimpleNamespace(path="/test"),
        app=SimpleNamespace(state=SimpleNamespace(auth_service=auth_service))
    )


# ============================================================================
# PRINCIPAL ROLE CHECKS
# ============================================================================


class TestPrincipalRoles:
    """Test role helpers on CurrentUser."""

    def test_has_role(self):
        """Test a carried role is found."""
        assert make_user(["Admin"]).has_role(Role.ADMIN)

    def test_missing_role(self):
        """Test an absent role is not found."""
        assert not make_user(["User"]).has_role(Role.ADMIN)

    def test_has_any_role(self):
        """Test one matching role is enough."""
        assert make_user(["Manager"]).has_any_role(Role.ADMIN, Role.MANAGER)

    def test_no_roles(self):
        """Test a user without roles has none of them."""
        assert not make_user([]).has_any_role(Role.ADMIN, Role.MANAGER, Role.USER)


# ============================================================================
# POLICIES
# ============================================================================


class TestPolicies:
    """Test named policy evaluation."""

    def test_admin_only_grants_admin(self, auth_service):
        """Test AdminOnly passes for admins."""
        assert auth_service.satisfies_policy(make_user(["User", "Admin"]), Policy.ADMIN_ONLY)

    def test_admin_only_denies_manager(self, auth_service):
        """Test AdminOnly fails for managers."""
        assert not auth_service.satisfies_policy(make_user(["Manager"]), Policy.ADMIN_ONLY)

    @pytest.mark.parametrize("roles", [["Manager"], ["Admin"], ["User", "Manager"]])
    def test_manager_or_admin_grants(self, auth_service, roles):
        """Test ManagerOrAdmin passes for either role."""
        assert auth_service.satisfies_policy(make_user(roles), Policy.MANAGER_OR_ADMIN)

    def test_manager_or_admin_denies_user(self, auth_service):
        """Test ManagerOrAdmin fails for plain users."""
        assert not auth_service.satisfies_policy(make_user(["User"]), Policy.MANAGER_OR_ADMIN)

    @pytest.mark.parametrize("age", [18, 19, 25, 26, 64, 90])
    def test_minimum_age_grants_adults(self, auth_service, age):
        """Test every age from 18 up passes, not only a fixed list."""
        assert auth_service.satisfies_policy(make_user(["User"], age=age), Policy.MINIMUM_AGE_18)

    @pytest.mark.parametrize("age", [13, 17])
    def test_minimum_age_denies_minors(self, auth_service, age):
        """Test ages below 18 fail."""
        assert not auth_service.satisfies_policy(make_user(["User"], age=age), Policy.MINIMUM_AGE_18)

    def test_minimum_age_denies_unknown_age(self, auth_service):
        """Test a missing age claim fails."""
        assert not auth_service.satisfies_policy(make_user(["Admin"], age=None), Policy.MINIMUM_AGE_18)


# ============================================================================
# DEPENDENCIES
# ============================================================================


class TestRoleChecker:
    """Test the RoleChecker dependency."""

    async def test_allows_matching_role(self, auth_service):
        """Test the user is returned when a role matches."""
        user = make_user(["Admin"])

        assert await RoleChecker([Role.ADMIN])(make_request(user, auth_service)) is user

    async def test_accepts_single_role(self, auth_service):
        """Test a bare role is accepted instead of a list."""
        checker = RoleChecker(Role.MANAGER)

        assert checker.required_roles == [Role.MANAGER]

    async def test_forbidden_without_role(self, auth_service):
        """Test 403 lists the required roles."""
        with pytest.raises(HTTPException) as exc_info:
            await RoleChecker([Role.ADMIN])(make_request(make_user(["User"]), auth_service))

        assert exc_info.value.status_code == 403
        assert "Admin" in exc_info.value.detail

    async def test_unauthenticated(self, auth_service):
        """Test 401 when no user is attached."""
        with pytest.raises(HTTPException) as exc_info:
            await RoleChecker([Role.ADMIN])(make_request(None, auth_service))

        assert exc_info.value.status_code == 401

    async def test_require_any_role(self, auth_service):
        """Test the convenience builder accepts any listed role."""
        user = make_user(["Manager"])

        assert await require_any_role(Role.ADMIN, Role.MANAGER)(make_request(user, auth_service)) is user


class TestPolicyChecker:
    """Test the PolicyChecker dependency."""

    async def test_admin_policy(self, auth_service):
        """Test require_admin passes admins."""
        user = make_user(["Admin"])

        assert await require_admin()(make_request(user, auth_service)) is user

    async def test_manager_policy_forbidden(self, auth_service):
        """Test require_manager_or_admin rejects users with 403."""
        with pytest.raises(HTTPException) as exc_info:
            await require_manager_or_admin()(make_request(make_user(["User"]), auth_service))

        assert exc_info.value.status_code == 403
        assert "ManagerOrAdmin" in exc_info.value.detail

    async def test_adult_policy_forbidden_for_minor(self, auth_service):
        """Test require_adult rejects a 16 year old."""
        with pytest.raises(HTTPException) as exc_info:
            await require_adult()(make_request(make_user(["User"], age=16), auth_service))

        assert exc_info.value.status_code == 403

    async def test_policy_unauthenticated(self, auth_service):
        """Test 401 before the policy is evaluated."""
        with pytest.raises(HTTPException) as exc_info:
            await PolicyChecker(Policy.ADMIN_ONLY)(make_request(None, auth_service))

        assert exc_info.value.status_code == 401
