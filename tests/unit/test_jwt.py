"""
Unit tests for JWT token generation and validation.

Tests cover:
- Token creation with identity, profile and role claims
- Issuer, audience and lifetime validation
- Tampered and foreign tokens
- Building the current user from a token
"""

from datetime import timedelta

import pytest
from jose import jwt

from api.src.config import Settings
from api.src.models.auth import UserDB
from api.src.services.auth_service import AuthService

SECRET = "unit-test-secret-key-with-at-least-32-chars"


@pytest.fixture
def jwt_settings() -> Settings:
    return Settings(
        jwt_secret_key=SECRET,
        jwt_issuer="test-issuer",
        jwt_audience="test-audience",
        jwt_expiry_hours=2,
        password_bcrypt_rounds=4,
        database_url="sqlite+aiosqlite:///:memory:"
    )


@pytest.fixture
def auth_service(jwt_settings) -> AuthService:
    # Token handling never touches the repository
    return AuthService(user_repo=None, settings=jwt_settings)


@pytest.fixture
def user() -> UserDB:
    return UserDB(
        id=7,
        email="grace@example.com",
        password_hash="unused",
        first_name="Grace",
        last_name="Hopper",
        age=45,
        roles=["User", "Manager"]
    )


def _decode(token: str) -> dict:
    return jwt.decode(
        token,
        SECRET,
        algorithms=["HS256"],
        audience="test-audience",
        issuer="test-issuer"
    )


# ============================================================================
# TOKEN CREATION
# ============================================================================


class TestTokenCreation:
    """Test the claims written into access tokens."""

    def test_token_has_three_parts(self, auth_service, user):
        """Test token is a compact JWS."""
        token = auth_service.generate_token(user)

        assert len(token.split(".")) == 3

    def test_token_contains_identity_claims(self, auth_service, user):
        """Test subject, email and user id claims."""
        claims = _decode(auth_service.generate_token(user))

        assert claims["sub"] == "7"
        assert claims["user_id"] == 7
        assert claims["email"] == "grace@example.com"

    def test_token_contains_profile_claims(self, auth_service, user):
        """Test name parts and age claims."""
        claims = _decode(auth_service.generate_token(user))

        assert claims["name"] == "Grace Hopper"
        assert claims["given_name"] == "Grace"
        assert claims["family_name"] == "Hopper"
        assert claims["age"] == 45

    def test_token_contains_roles(self, auth_service, user):
        """Test every role is carried in the roles claim."""
        claims = _decode(auth_service.generate_token(user))

        assert claims["roles"] == ["User", "Manager"]

    def test_token_lifetime_follows_settings(self, auth_service, user):
        """Test expiry is issued-at plus the configured hours."""
        claims = _decode(auth_service.generate_token(user))

        assert claims["exp"] - claims["iat"] == 2 * 3600

    def test_custom_lifetime(self, auth_service, user):
        """Test an explicit lifetime overrides the configured one."""
        claims = _decode(auth_service.generate_token(user, expires_delta=timedelta(minutes=5)))

        assert claims["exp"] - claims["iat"] == 300

    def test_name_without_last_name(self, auth_service, user):
        """Test the name claim has no trailing space when a part is missing."""
        user.last_name = None
        claims = _decode(auth_service.generate_token(user))

        assert claims["name"] == "Grace"
        assert claims["family_name"] == ""


# ============================================================================
# TOKEN VALIDATION
# ============================================================================


class TestTokenValidation:
    """Test decode_token rejects anything not issued by this service."""

    def test_valid_token_decodes(self, auth_service, user):
        """Test a fresh token validates."""
        payload = auth_service.decode_token(auth_service.generate_token(user))

        assert payload is not None
        assert payload.user_id == 7
        assert payload.roles == ["User", "Manager"]

    def test_expired_token_rejected(self, auth_service, user):
        """Test expired tokens are rejected with no clock skew allowance."""
        token = auth_service.generate_token(user, expires_delta=timedelta(seconds=-1))

        assert auth_service.decode_token(token) is None

    def test_wrong_audience_rejected(self, auth_service, user, jwt_settings):
        """Test tokens for another audience are rejected."""
        other = AuthService(None, jwt_settings.model_copy(update={"jwt_audience": "someone-else"}))

        assert auth_service.decode_token(other.generate_token(user)) is None

    def test_wrong_issuer_rejected(self, auth_service, user, jwt_settings):
        """Test tokens from another issuer are rejected."""
        other = AuthService(None, jwt_settings.model_copy(update={"jwt_issuer": "someone-else"}))

        assert auth_service.decode_token(other.generate_token(user)) is None

    def test_wrong_secret_rejected(self, auth_service, user, jwt_settings):
        """Test tokens signed with another key are rejected."""
        other = AuthService(
            None,
            jwt_settings.model_copy(update={"jwt_secret_key": "another-secret-key-with-32-characters!!"})
        )

        assert auth_service.decode_token(other.generate_token(user)) is None

    def test_tampered_token_rejected(self, auth_service, user):
        """Test modifying the payload breaks the signature."""
        header, payload, signature = auth_service.generate_token(user).split(".")
        tampered = f"{header}.{payload[:-2]}xx.{signature}"

        assert auth_service.decode_token(tampered) is None

    def test_garbage_rejected(self, auth_service):
        """Test non-JWT input is rejected."""
        assert auth_service.decode_token("not-a-token") is None

    def test_missing_claims_rejected(self, auth_service):
        """Test a correctly signed token without user claims is rejected."""
        token = jwt.encode(
            {"sub": "1", "iss": "test-issuer", "aud": "test-audience", "exp": 4102444800},
            SECRET,
            algorithm="HS256"
        )

        assert auth_service.decode_token(token) is None


# ============================================================================
# CURRENT USER
# ============================================================================


class TestCurrentUser:
    """Test building the principal from a token."""

    def test_current_user_from_bearer_token(self, auth_service, user):
        """Test all principal fields come from the claims."""
        current = auth_service.get_current_user(auth_service.generate_token(user))

        assert current.id == 7
        assert current.email == "grace@example.com"
        assert current.name == "Grace Hopper"
        assert current.age == 45
        assert current.roles == ["User", "Manager"]
        assert current.authentication_type == "Bearer"

    def test_current_user_records_cookie_authentication(self, auth_service, user):
        """Test the authentication type is passed through."""
        current = auth_service.get_current_user(auth_service.generate_token(user), authentication_type="Cookie")

        assert current.authentication_type == "Cookie"

    def test_claim_list_expands_roles(self, auth_service, user):
        """Test each role becomes its own claim entry."""
        current = auth_service.get_current_user(auth_service.generate_token(user))
        role_claims = [c["value"] for c in current.claim_list() if c["type"] == "roles"]

        assert role_claims == ["User", "Manager"]

    def test_invalid_token_gives_no_user(self, auth_service):
        """Test invalid tokens produce no principal."""
        assert auth_service.get_current_user("invalid") is None
