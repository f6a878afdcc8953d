"""
Unit tests for the external login service.

Provider HTTP calls go through httpx.MockTransport so no network is used.

Tests cover:
- Provider registry and enablement
- Authorization URL parameters
- Code exchange and userinfo mapping per provider
- Provider failures surfacing as ExternalLoginError
- Session token round trip and local URL checks
"""

from typing import Callable, Dict, List

import httpx
import pytest

from api.src.config import Settings
from api.src.models.auth import ExternalProfile
from api.src.services.oauth_service import (
    ExternalLoginError,
    OAuthService,
    is_local_url,
    profile_claims,
)

REDIRECT_URI = "http://testserver/oauth/callback/Google"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google_client_id="google-client",
        google_client_secret="google-secret",
        microsoft_client_id="microsoft-client",
        microsoft_client_secret="microsoft-secret",
        facebook_app_id=None,
        facebook_app_secret=None
    )


def service_with(settings: Settings, handler: Callable[[httpx.Request], httpx.Response]) -> OAuthService:
    return OAuthService(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def provider_handler(userinfo: Dict, seen: List[httpx.Request]) -> Callable[[httpx.Request], httpx.Response]:
    """Answer token requests with an access token and userinfo requests with ``userinfo``."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "POST":
            return httpx.Response(200, json={"access_token": "provider-access-token", "token_type": "Bearer"})
        if request.headers.get("Authorization") != "Bearer provider-access-token":
            return httpx.Response(401, json={"error": "invalid_token"})
        return httpx.Response(200, json=userinfo)

    return handler


# ============================================================================
# PROVIDERS
# ============================================================================


class TestProviders:
    """Test the provider registry."""

    def test_all_providers_listed(self, settings):
        """Test Google, Microsoft and Facebook are listed in order."""
        names = [p.name for p in OAuthService(settings).list_providers()]

        assert names == ["Google", "Microsoft", "Facebook"]

    def test_enabled_follows_client_id(self, settings):
        """Test only configured providers are enabled."""
        enabled = {p.name: p.enabled for p in OAuthService(settings).list_providers()}

        assert enabled == {"Google": True, "Microsoft": True, "Facebook": False}

    def test_lookup_is_case_insensitive(self, settings):
        """Test provider names match regardless of case."""
        assert OAuthService(settings).get_provider("gOoGlE").name == "Google"

    def test_unknown_provider(self, settings):
        """Test unknown providers raise."""
        with pytest.raises(ExternalLoginError, match="Unknown provider"):
            OAuthService(settings).get_provider("Twitter")

    def test_unconfigured_provider(self, settings):
        """Test known but unconfigured providers raise."""
        with pytest.raises(ExternalLoginError, match="not configured"):
            OAuthService(settings).get_provider("Facebook")


class TestAuthorizationUrl:
    """Test the challenge redirect."""

    def test_google_parameters(self, settings):
        """Test the URL carries client id, redirect, scopes and state."""
        url = httpx.URL(OAuthService(settings).build_authorization_url("Google", REDIRECT_URI, "state-123"))

        assert url.host == "accounts.google.com"
        assert url.params["client_id"] == "google-client"
        assert url.params["redirect_uri"] == REDIRECT_URI
        assert url.params["response_type"] == "code"
        assert url.params["scope"] == "openid profile email"
        assert url.params["state"] == "state-123"

    def test_microsoft_scope(self, settings):
        """Test Microsoft asks for Graph access."""
        url = httpx.URL(OAuthService(settings).build_authorization_url("Microsoft", REDIRECT_URI, "s"))

        assert "User.Read" in url.params["scope"].split()

    def test_states_are_random(self, settings):
        """Test every state is unique."""
        assert OAuthService.generate_state() != OAuthService.generate_state()


# ============================================================================
# CODE EXCHANGE
# ============================================================================


class TestCompleteLogin:
    """Test exchanging a code for a profile."""

    async def test_google_profile(self, settings):
        """Test Google OpenID claims map onto the profile."""
        seen: List[httpx.Request] = []
        userinfo = {
            "sub": "g-123",
            "email": "ada@gmail.com",
            "email_verified": True,
            "name": "Ada Lovelace",
            "given_name": "Ada",
            "family_name": "Lovelace",
            "picture": "https://example.com/ada.png",
            "locale": "en"
        }
        service = service_with(settings, provider_handler(userinfo, seen))

        profile = await service.complete_login("Google", "auth-code", REDIRECT_URI)

        assert profile.provider == "Google"
        assert profile.id == "g-123"
        assert profile.email == "ada@gmail.com"
        assert profile.given_name == "Ada"
        assert profile.email_verified is True
        assert profile.raw_claims == userinfo

    async def test_token_request_form(self, settings):
        """Test the token request sends the code and client credentials."""
        seen: List[httpx.Request] = []
        service = service_with(settings, provider_handler({"sub": "1"}, seen))

        await service.complete_login("Google", "auth-code", REDIRECT_URI)

        token_request = seen[0]
        form = dict(httpx.QueryParams(token_request.content.decode()))
        assert str(token_request.url) == "https://oauth2.googleapis.com/token"
        assert form["code"] == "auth-code"
        assert form["grant_type"] == "authorization_code"
        assert form["client_secret"] == "google-secret"
        assert form["redirect_uri"] == REDIRECT_URI

    async def test_microsoft_profile(self, settings):
        """Test Graph field names map onto the profile."""
        userinfo = {
            "id": "ms-1",
            "displayName": "Grace Hopper",
            "givenName": "Grace",
            "surname": "Hopper",
            "userPrincipalName": "grace@contoso.com",
            "mail": None
        }
        service = service_with(settings, provider_handler(userinfo, []))

        profile = await service.complete_login("microsoft", "code", REDIRECT_URI)

        assert profile.provider == "Microsoft"
        assert profile.email == "grace@contoso.com"
        assert profile.family_name == "Hopper"

    async def test_facebook_picture(self, settings):
        """Test the nested Facebook picture URL is flattened."""
        settings = settings.model_copy(update={"facebook_app_id": "fb-app", "facebook_app_secret": "fb-secret"})
        userinfo = {
            "id": "fb-9",
            "name": "Alan Turing",
            "first_name": "Alan",
            "last_name": "Turing",
            "picture": {"data": {"url": "https://example.com/alan.jpg"}}
        }
        service = service_with(settings, provider_handler(userinfo, []))

        profile = await service.complete_login("Facebook", "code", REDIRECT_URI)

        assert profile.picture == "https://example.com/alan.jpg"
        assert profile.given_name == "Alan"

    async def test_rejected_code(self, settings):
        """Test a provider error status becomes ExternalLoginError."""
        service = service_with(settings, lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(ExternalLoginError, match="HTTP 400"):
            await service.complete_login("Google", "bad-code", REDIRECT_URI)

    async def test_missing_access_token(self, settings):
        """Test a token response without an access token is rejected."""
        service = service_with(settings, lambda request: httpx.Response(200, json={}))

        with pytest.raises(ExternalLoginError, match="no access token"):
            await service.complete_login("Google", "code", REDIRECT_URI)

    async def test_invalid_json(self, settings):
        """Test non-JSON provider responses are rejected."""
        service = service_with(settings, lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(ExternalLoginError, match="invalid response"):
            await service.complete_login("Google", "code", REDIRECT_URI)

    async def test_network_failure(self, settings):
        """Test transport errors are reported as unreachable provider."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = service_with(settings, handler)

        with pytest.raises(ExternalLoginError, match="Could not reach Google"):
            await service.complete_login("Google", "code", REDIRECT_URI)

    async def test_missing_user_id(self, settings):
        """Test a profile without an id is rejected."""
        service = service_with(settings, provider_handler({"email": "x@example.com"}, []))

        with pytest.raises(ExternalLoginError, match="no user id"):
            await service.complete_login("Google", "code", REDIRECT_URI)


# ============================================================================
# SESSION AND HELPERS
# ============================================================================


class TestSessionToken:
    """Test the external login session cookie value."""

    def test_round_trip(self, settings):
        """Test the stored profile comes back unchanged."""
        service = OAuthService(settings)
        profile = ExternalProfile(provider="Google", id="g-1", email="ada@gmail.com", raw_claims={"hd": "x"})

        assert service.read_session_token(service.create_session_token(profile)) == profile

    def test_access_token_is_not_a_session(self, settings):
        """Test tokens for another audience are rejected."""
        assert OAuthService(settings).read_session_token("a.b.c") is None

    def test_empty_cookie(self, settings):
        """Test a missing cookie gives no session."""
        assert OAuthService(settings).read_session_token(None) is None


class TestHelpers:
    """Test URL and claim helpers."""

    @pytest.mark.parametrize("url", ["/", "/oauth/dashboard", "/home?x=1"])
    def test_local_urls(self, url):
        """Test absolute paths are local."""
        assert is_local_url(url)

    @pytest.mark.parametrize("url", [
        "https://evil.example.com",
        "//evil.example.com",
        "/\\evil.example.com",
        "",
        None,
        "relative/path",
    ])
    def test_non_local_urls(self, url):
        """Test external, protocol-relative and empty URLs are rejected."""
        assert not is_local_url(url)

    def test_profile_claims(self):
        """Test standard claims come first and provider extras follow once."""
        profile = ExternalProfile(
            provider="Google",
            id="g-1",
            name="Ada",
            raw_claims={"sub": "g-1", "name": "Ada", "hd": "example.com"}
        )

        claims = profile_claims(profile)
        types = [c["type"] for c in claims]

        assert types[:7] == ["id", "name", "email", "given_name", "family_name", "provider", "picture"]
        assert types.count("name") == 1
        assert {"type": "hd", "value": "example.com"} in claims
