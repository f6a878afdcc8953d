"""
External login (OAuth 2.0 authorization code flow) for Google, Microsoft
and Facebook.

Provides:
- Provider registry with endpoints and scopes
- Authorization URL construction with a state parameter
- Code exchange and userinfo retrieval via httpx
- Mapping of provider-specific userinfo into ExternalProfile
- Signed session tokens for the external login cookie
"""

import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import httpx
import structlog
from jose import JWTError, jwt
from pydantic import BaseModel, Field

from api.src.config import Settings, get_settings
from api.src.models.auth import ExternalProfile, OAuthProviderInfo

logger = structlog.get_logger(__name__)

SESSION_AUDIENCE = "external-login"


class ExternalLoginError(Exception):
    """Raised when a provider is unavailable or the login exchange fails."""


class OAuthProvider(BaseModel):
    """Static description of an OAuth provider plus its credentials."""
    name: str
    display_name: str
    icon: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: List[str] = Field(default_factory=list)
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def enabled(self) -> bool:
        """A provider is usable once a client id is configured."""
        return bool(self.client_id)


# ============================================================================
# USERINFO MAPPING
# ============================================================================


def _map_google(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(data.get("sub") or data.get("id") or ""),
        "email": data.get("email"),
        "name": data.get("name"),
        "given_name": data.get("given_name"),
        "family_name": data.get("family_name"),
        "picture": data.get("picture"),
        "locale": data.get("locale"),
        "email_verified": data.get("email_verified"),
    }


def _map_microsoft(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(data.get("id") or ""),
        "email": data.get("mail") or data.get("userPrincipalName"),
        "name": data.get("displayName"),
        "given_name": data.get("givenName"),
        "family_name": data.get("surname"),
        "picture": None,
        "locale": data.get("preferredLanguage"),
        "email_verified": None,
    }


def _map_facebook(data: Dict[str, Any]) -> Dict[str, Any]:
    picture = data.get("picture")
    if isinstance(picture, dict):
        picture = picture.get("data", {}).get("url")

    return {
        "id": str(data.get("id") or ""),
        "email": data.get("email"),
        "name": data.get("name"),
        "given_name": data.get("first_name"),
        "family_name": data.get("last_name"),
        "picture": picture,
        "locale": data.get("locale"),
        "email_verified": None,
    }


USERINFO_MAPPERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "Google": _map_google,
    "Microsoft": _map_microsoft,
    "Facebook": _map_facebook,
}


def build_providers(settings: Settings) -> Dict[str, OAuthProvider]:
    """
    Build the provider registry from settings.

    Args:
        settings: Application settings holding client credentials

    Returns:
        Providers keyed by name, in display order
    """
    return {
        "Google": OAuthProvider(
            name="Google",
            display_name="Google",
            icon="fab fa-google",
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
            scopes=["openid", "profile", "email"],
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
        ),
        "Microsoft": OAuthProvider(
            name="Microsoft",
            display_name="Microsoft",
            icon="fab fa-microsoft",
            authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
            token_url="https://login.microsoftonline.com/common/oauth2/v2.0/token",
            userinfo_url="https://graph.microsoft.com/v1.0/me",
            scopes=["openid", "profile", "email", "User.Read"],
            client_id=settings.microsoft_client_id,
            client_secret=settings.microsoft_client_secret,
        ),
        "Facebook": OAuthProvider(
            name="Facebook",
            display_name="Facebook",
            icon="fab fa-facebook",
            authorize_url="https://www.facebook.com/v18.0/dialog/oauth",
            token_url="https://graph.facebook.com/v18.0/oauth/access_token",
            userinfo_url=(
                "https://graph.facebook.com/me"
                "?fields=id,name,email,first_name,last_name,picture"
            ),
            scopes=["email", "public_profile"],
            client_id=settings.facebook_app_id,
            client_secret=settings.facebook_app_secret,
        ),
    }


def is_local_url(url: Optional[str]) -> bool:
    """
    Whether a return URL stays on this site.

    Only absolute paths are accepted. Protocol-relative ("//host") and
    backslash variants are rejected.
    """
    if not url or not url.startswith("/"):
        return False
    return not (url.startswith("//") or url.startswith("/\\"))


# ============================================================================
# SERVICE
# ============================================================================


class OAuthService:
    """Runs the authorization code flow against external providers."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the OAuth service.

        Args:
            settings: Settings override (defaults to cached settings)
            http_client: Shared HTTP client; a short-lived client is created
                per exchange when omitted
        """
        self.settings = settings or get_settings()
        self.http_client = http_client
        self.providers = build_providers(self.settings)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return

        async with httpx.AsyncClient(timeout=self.settings.oauth_timeout_seconds) as client:
            yield client

    def list_providers(self) -> List[OAuthProviderInfo]:
        """All known providers with their enabled flag."""
        return [
            OAuthProviderInfo(
                name=provider.name,
                display_name=provider.display_name,
                icon=provider.icon,
                enabled=provider.enabled
            )
            for provider in self.providers.values()
        ]

    def get_provider(self, name: str) -> OAuthProvider:
        """
        Look up an enabled provider by name (case-insensitive).

        Raises:
            ExternalLoginError: If the provider is unknown or not configured
        """
        for provider in self.providers.values():
            if provider.name.lower() == name.lower():
                if not provider.enabled:
                    raise ExternalLoginError(f"Provider '{provider.name}' is not configured")
                return provider
        raise ExternalLoginError(f"Unknown provider '{name}'")

    @staticmethod
    def generate_state() -> str:
        """Random value binding a callback to the browser that started it."""
        return secrets.token_urlsafe(32)

    def build_authorization_url(self, provider_name: str, redirect_uri: str, state: str) -> str:
        """
        Build the provider URL the browser is redirected to.

        Args:
            provider_name: Provider name
            redirect_uri: Callback URL registered with the provider
            state: Anti-forgery state value

        Returns:
            Absolute authorization URL
        """
        provider = self.get_provider(provider_name)
        url = httpx.URL(
            provider.authorize_url,
            params={
                "client_id": provider.client_id,
                "redirect_uri": redirect_uri,
                "response_type": "code",
                "scope": " ".join(provider.scopes),
                "state": state,
            }
        )

        logger.info("oauth_challenge_built", provider=provider.name)
        return str(url)

    async def complete_login(self, provider_name: str, code: str, redirect_uri: str) -> ExternalProfile:
        """
        Exchange an authorization code and fetch the user's profile.

        Args:
            provider_name: Provider name
            code: Authorization code from the callback
            redirect_uri: Same redirect URI used for the challenge

        Returns:
            Mapped external profile

        Raises:
            ExternalLoginError: On any provider error
        """
        provider = self.get_provider(provider_name)

        try:
            async with self._client() as client:
                token_response = await client.post(
                    provider.token_url,
                    data={
                        "client_id": provider.client_id,
                        "client_secret": provider.client_secret or "",
                        "code": code,
                        "redirect_uri": redirect_uri,
                        "grant_type": "authorization_code",
                    },
                    headers={"Accept": "application/json"}
                )
                token_response.raise_for_status()

                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise ExternalLoginError("Provider returned no access token")

                userinfo_response = await client.get(
                    provider.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"}
                )
                userinfo_response.raise_for_status()
                userinfo = userinfo_response.json()

        except httpx.HTTPStatusError as e:
            logger.warning(
                "oauth_exchange_rejected",
                provider=provider.name,
                status_code=e.response.status_code
            )
            raise ExternalLoginError(
                f"{provider.name} rejected the login (HTTP {e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            logger.error("oauth_exchange_failed", provider=provider.name, error=str(e))
            raise ExternalLoginError(f"Could not reach {provider.name}") from e
        except ValueError as e:
            logger.error("oauth_response_invalid", provider=provider.name, error=str(e))
            raise ExternalLoginError(f"{provider.name} returned an invalid response") from e

        fields = USERINFO_MAPPERS[provider.name](userinfo)
        if not fields["id"]:
            raise ExternalLoginError(f"{provider.name} returned no user id")

        profile = ExternalProfile(provider=provider.name, raw_claims=userinfo, **fields)
        logger.info("oauth_login_completed", provider=provider.name, external_id=profile.id)
        return profile

    # ========================================================================
    # SESSION TOKENS
    # ========================================================================

    def create_session_token(self, profile: ExternalProfile) -> str:
        """Sign an external profile into a session cookie value."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": profile.id,
            "profile": profile.model_dump(mode="json"),
            "iss": self.settings.jwt_issuer,
            "aud": SESSION_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=self.settings.oauth_session_hours)).timestamp()),
        }
        return jwt.encode(payload, self.settings.jwt_secret_key, algorithm=self.settings.jwt_algorithm)

    def read_session_token(self, token: Optional[str]) -> Optional[ExternalProfile]:
        """Return the profile stored in a session token, or None if invalid."""
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                audience=SESSION_AUDIENCE,
                issuer=self.settings.jwt_issuer
            )
            return ExternalProfile(**payload["profile"])
        except (JWTError, KeyError, ValueError) as e:
            logger.warning("oauth_session_invalid", error=str(e))
            return None


def profile_claims(profile: ExternalProfile) -> List[Dict[str, str]]:
    """
    Flatten a profile into (type, value) claims.

    Standard fields come first; provider-specific keys follow unless they
    repeat a standard claim type.
    """
    claims: List[Dict[str, str]] = []
    standard = {
        "id": profile.id,
        "name": profile.name or "",
        "email": profile.email or "",
        "given_name": profile.given_name or "",
        "family_name": profile.family_name or "",
        "provider": profile.provider,
        "picture": profile.picture or "",
    }
    for claim_type, value in standard.items():
        claims.append({"type": claim_type, "value": value})

    for claim_type, value in profile.raw_claims.items():
        if claim_type not in standard:
            claims.append({"type": claim_type, "value": str(value)})

    return claims
