"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- Database connection (SQLite or SQL Server connection strings)
- Authentication (JWT and cookie settings)
- Anti-forgery (CSRF) settings
- OAuth external login providers
- Security headers
- Logging

All settings support environment variable overrides and .env file loading.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "AUTH_DEMO_" (e.g., AUTH_DEMO_DATABASE_URL).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_DEMO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Auth Security Demo",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    api_prefix: str = Field(
        default="/api",
        description="JSON API URL prefix"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="development",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=8000,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Database Settings
    # =========================================================================

    database_url: str = Field(
        default="Data Source=auth_demo.db",
        description=(
            "SQLAlchemy URL or ADO-style connection string. "
            "'Data Source=<file>.db' selects SQLite, anything else SQL Server"
        )
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL queries to logs (useful for debugging)"
    )

    # =========================================================================
    # JWT Authentication Settings
    # =========================================================================

    jwt_secret_key: str = Field(
        default="change-this-secret-key-in-production-minimum-32-chars",
        description="Secret key for JWT token signing (MUST be changed in production)",
        min_length=32
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    jwt_expiry_hours: int = Field(
        default=24,
        description="Access token lifetime in hours",
        gt=0,
        le=168
    )
    jwt_issuer: str = Field(
        default="auth-security-demo",
        description="JWT issuer claim"
    )
    jwt_audience: str = Field(
        default="auth-security-demo-users",
        description="JWT audience claim"
    )

    # =========================================================================
    # Password Hashing Settings
    # =========================================================================

    password_bcrypt_rounds: int = Field(
        default=12,
        description="BCrypt hash rounds (higher = slower but more secure)",
        ge=4,
        le=14
    )

    # =========================================================================
    # Cookie Settings
    # =========================================================================

    auth_cookie_name: str = Field(
        default="AuthToken",
        description="Cookie carrying the JWT for browser flows"
    )
    auth_cookie_max_age_hours: int = Field(
        default=24,
        description="Persistent auth cookie lifetime in hours",
        gt=0
    )
    cookie_secure: bool = Field(
        default=True,
        description="Mark auth cookies Secure (HTTPS only)"
    )

    # =========================================================================
    # Anti-forgery Settings
    # =========================================================================

    csrf_cookie_name: str = Field(
        default="__RequestVerificationToken",
        description="Anti-forgery cookie name"
    )
    csrf_header_name: str = Field(
        default="X-CSRF-TOKEN",
        description="Header the client echoes the anti-forgery token in"
    )

    # =========================================================================
    # OAuth External Login Settings
    # =========================================================================

    oauth_session_cookie_name: str = Field(
        default="OAuthSession",
        description="Cookie holding the external login session"
    )
    oauth_state_cookie_name: str = Field(
        default="OAuthState",
        description="Cookie holding the signed OAuth state during a challenge"
    )
    oauth_session_hours: int = Field(
        default=24,
        description="External login session lifetime in hours",
        gt=0
    )
    oauth_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP timeout for provider token and userinfo calls",
        gt=0
    )

    google_client_id: Optional[str] = Field(default=None, description="Google OAuth client id")
    google_client_secret: Optional[str] = Field(default=None, description="Google OAuth client secret")
    microsoft_client_id: Optional[str] = Field(default=None, description="Microsoft OAuth client id")
    microsoft_client_secret: Optional[str] = Field(default=None, description="Microsoft OAuth client secret")
    facebook_app_id: Optional[str] = Field(default=None, description="Facebook app id")
    facebook_app_secret: Optional[str] = Field(default=None, description="Facebook app secret")

    # =========================================================================
    # CORS / Security Settings
    # =========================================================================

    cors_enabled: bool = Field(
        default=False,
        description="Enable CORS middleware"
    )
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    security_headers_enabled: bool = Field(
        default=True,
        description="Enable security headers (X-Frame-Options, etc.)"
    )
    security_require_https: bool = Field(
        default=False,
        description="Emit HSTS header (enable in production)"
    )
    security_hsts_max_age: int = Field(
        default=31536000,
        description="HSTS max age (seconds)"
    )

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level name."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(valid)}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance (cached for the process lifetime)
    """
    return Settings()
