"""
Authentication service for user authentication and JWT token management.

Provides:
- Password hashing and verification (passlib + bcrypt)
- JWT token creation and validation (issuer, audience, lifetime)
- Login and registration returning an AuthResult
- Role assignment and policy evaluation on token claims
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from api.src.config import Settings, get_settings
from api.src.models.auth import (
    AuthResult,
    CurrentUser,
    Policy,
    RegisterRequest,
    Role,
    TokenPayload,
    UserDB,
)
from api.src.repositories.user_repo import UserRepository

logger = structlog.get_logger(__name__)

DEFAULT_ROLE = Role.USER
MINIMUM_AGE = 18


class AuthService:
    """Service for authentication and authorization operations."""

    def __init__(self, user_repo: UserRepository, settings: Optional[Settings] = None):
        """
        Initialize auth service.

        Args:
            user_repo: User repository
            settings: Settings override (defaults to cached settings)
        """
        self.user_repo = user_repo
        self.settings = settings or get_settings()

        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self.settings.password_bcrypt_rounds
        )

    # ========================================================================
    # PASSWORDS
    # ========================================================================

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        hashed = self.pwd_context.hash(password)
        logger.debug("password_hashed")
        return hashed

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password

        Returns:
            True if password matches, False otherwise
        """
        try:
            verified = self.pwd_context.verify(plain_password, hashed_password)
            logger.debug("password_verified", verified=verified)
            return verified
        except (ValueError, TypeError) as e:
            logger.warning("password_verify_failed", error=str(e))
            return False

    # ========================================================================
    # TOKENS
    # ========================================================================

    def generate_token(self, user: UserDB, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed JWT carrying the user's identity, profile and roles.

        Args:
            user: User with roles resolved
            expires_delta: Custom lifetime (defaults to jwt_expiry_hours)

        Returns:
            JWT token string
        """
        if expires_delta is None:
            expires_delta = timedelta(hours=self.settings.jwt_expiry_hours)

        now = datetime.now(timezone.utc)
        expire = now + expires_delta

        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "name": f"{user.first_name or ''} {user.last_name or ''}".strip(),
            "given_name": user.first_name or "",
            "family_name": user.last_name or "",
            "age": user.age,
            "user_id": user.id,
            "roles": list(user.roles),
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp())
        }

        token = jwt.encode(
            payload,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm
        )

        logger.info(
            "access_token_created",
            user_id=user.id,
            roles=user.roles,
            expires_in=expires_delta.total_seconds()
        )
        return token

    def decode_token(self, token: str) -> Optional[TokenPayload]:
        """
        Decode and validate a JWT.

        Signature, issuer, audience and expiry are all checked, with no
        clock skew allowance.

        Args:
            token: JWT token string

        Returns:
            Token payload or None if invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                audience=self.settings.jwt_audience,
                issuer=self.settings.jwt_issuer,
                options={"leeway": 0}
            )
            token_payload = TokenPayload(**payload)

            logger.debug("token_decoded", user_id=token_payload.sub)
            return token_payload

        except JWTError as e:
            logger.warning("token_decode_failed", error=str(e))
            return None
        except ValueError as e:
            logger.warning("token_claims_invalid", error=str(e))
            return None

    def get_current_user(self, token: str, authentication_type: str = "Bearer") -> Optional[CurrentUser]:
        """
        Build the authenticated principal from a token.

        Args:
            token: JWT token string
            authentication_type: How the token was presented (Bearer or Cookie)

        Returns:
            Current user or None if the token is invalid
        """
        payload = self.decode_token(token)
        if payload is None:
            return None

        return CurrentUser(
            id=payload.user_id,
            email=payload.email,
            name=payload.name,
            given_name=payload.given_name,
            family_name=payload.family_name,
            age=payload.age,
            roles=payload.roles,
            authentication_type=authentication_type,
            claims=payload.model_dump(exclude_none=True)
        )

    # ========================================================================
    # LOGIN / REGISTRATION
    # ========================================================================

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate with email and password.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            AuthResult with a token on success
        """
        try:
            user = await self.user_repo.get_user_by_email(email)

            if user is None or not self.verify_password(password, user.password_hash):
                logger.warning("authentication_failed", email=email)
                return AuthResult(success=False, message="Invalid email or password")

            user.roles = await self.user_repo.get_user_roles(user.id)
            token = self.generate_token(user)

            logger.info("login_success", user_id=user.id, email=email)
            return AuthResult(success=True, token=token, user=user, message="Login successful")

        except Exception as e:
            logger.error("login_error", error=str(e), email=email)
            return AuthResult(success=False, message=f"Login failed: {e}")

    async def register(self, model: RegisterRequest) -> AuthResult:
        """
        Create an account with the default role and sign the user in.

        Args:
            model: Registration data

        Returns:
            AuthResult with a token on success
        """
        try:
            existing = await self.user_repo.get_user_by_email(model.email)
            if existing is not None:
                logger.warning("registration_duplicate_email", email=model.email)
                return AuthResult(success=False, message="User with this email already exists")

            created = await self.user_repo.create_user(
                email=model.email,
                password_hash=self.hash_password(model.password),
                first_name=model.first_name,
                last_name=model.last_name,
                age=model.age
            )

            await self.assign_role(created.id, DEFAULT_ROLE.value)

            user = await self.user_repo.get_user_by_id(created.id)
            if user is None:
                return AuthResult(success=False, message="Registration failed")

            user.roles = await self.user_repo.get_user_roles(user.id)
            token = self.generate_token(user)

            logger.info("registration_success", user_id=user.id, email=user.email)
            return AuthResult(success=True, token=token, user=user, message="Registration successful")

        except Exception as e:
            logger.error("registration_error", error=str(e), email=model.email)
            return AuthResult(success=False, message=f"Registration failed: {e}")

    async def assign_role(self, user_id: int, role_name: str) -> bool:
        """
        Assign a role to a user if not already assigned.

        Args:
            user_id: User ID
            role_name: Role name

        Returns:
            True if the role was newly assigned
        """
        try:
            return await self.user_repo.assign_role(user_id, role_name)
        except Exception as e:
            logger.error("role_assign_failed", error=str(e), user_id=user_id, role=role_name)
            return False

    # ========================================================================
    # POLICIES
    # ========================================================================

    def satisfies_policy(self, user: CurrentUser, policy: Policy) -> bool:
        """
        Evaluate a named policy against the user's claims.

        Args:
            user: Authenticated principal
            policy: Policy to evaluate

        Returns:
            True if the policy grants access
        """
        if policy == Policy.ADMIN_ONLY:
            granted = user.has_role(Role.ADMIN)
        elif policy == Policy.MANAGER_OR_ADMIN:
            granted = user.has_any_role(Role.MANAGER, Role.ADMIN)
        elif policy == Policy.MINIMUM_AGE_18:
            granted = user.age is not None and user.age >= MINIMUM_AGE
        else:
            granted = False

        logger.debug("policy_check", policy=policy.value, user_id=user.id, granted=granted)
        return granted
