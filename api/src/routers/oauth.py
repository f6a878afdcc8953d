"""
External login router (Google, Microsoft, Facebook).

Flow:
1. GET /oauth/login/{provider} stores a signed state cookie and redirects
   the browser to the provider.
2. GET /oauth/callback/{provider} checks the state, exchanges the code,
   stores the profile in the OAuthSession cookie and redirects to the
   local return URL.
"""

import json
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from api.src.config import Settings
from api.src.dependencies import get_oauth_service, get_settings_dependency
from api.src.models.auth import ErrorResponse, ExternalProfile, OAuthProviderInfo
from api.src.services.oauth_service import (
    ExternalLoginError,
    OAuthService,
    is_local_url,
    profile_claims,
)
from shared.models import ApiResponse
from shared.security import sign_value, unsign_value

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/oauth",
    tags=["External Login"],
    responses={
        400: {"model": ErrorResponse, "description": "Login rejected"},
        401: {"model": ErrorResponse, "description": "Unauthorized"}
    }
)


def _callback_url(request: Request, provider: str) -> str:
    return str(request.url_for("oauth_callback", provider=provider))


async def get_external_profile(
    request: Request,
    oauth_service: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_settings_dependency)
) -> ExternalProfile:
    """
    Dependency resolving the external login session cookie.

    Raises:
        HTTPException: 401 if there is no valid session
    """
    profile = oauth_service.read_session_token(
        request.cookies.get(settings.oauth_session_cookie_name)
    )
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in with an external provider"
        )
    return profile


# ============================================================================
# CHALLENGE AND CALLBACK
# ============================================================================


@router.get("/providers", response_model=ApiResponse[List[OAuthProviderInfo]], summary="List providers")
async def list_providers(oauth_service: OAuthService = Depends(get_oauth_service)):
    return ApiResponse[List[OAuthProviderInfo]](
        success=True,
        data=oauth_service.list_providers()
    )


@router.get("/login/{provider}", summary="Start an external login")
async def external_login(
    provider: str,
    request: Request,
    return_url: str = Query(default="/"),
    oauth_service: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_settings_dependency)
):
    """
    Redirect the browser to the provider's consent page.

    Args:
        provider: Provider name (case-insensitive)
        return_url: Local URL to land on after login

    Returns:
        302 redirect to the provider
    """
    if not is_local_url(return_url):
        logger.warning("oauth_non_local_return_url", provider=provider)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Return URL must be local")

    try:
        canonical = oauth_service.get_provider(provider).name
        state = oauth_service.generate_state()
        authorize_url = oauth_service.build_authorization_url(
            canonical, _callback_url(request, canonical), state
        )
    except ExternalLoginError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    response = RedirectResponse(url=authorize_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=sign_value(json.dumps({"state": state, "return_url": return_url}), settings.jwt_secret_key),
        max_age=600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/oauth"
    )
    return response


@router.get("/callback/{provider}", name="oauth_callback", summary="Provider callback")
async def external_login_callback(
    provider: str,
    request: Request,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    oauth_service: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_settings_dependency)
):
    """
    Finish an external login.

    Returns:
        302 redirect to the stored local return URL with the session cookie
    """
    if error:
        logger.warning("oauth_provider_error", provider=provider, error=error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="External authentication failed.")

    stored = unsign_value(
        request.cookies.get(settings.oauth_state_cookie_name, ""),
        settings.jwt_secret_key
    )
    stored_state: Dict[str, Any] = json.loads(stored) if stored else {}

    if not code or not state or stored_state.get("state") != state:
        logger.warning("oauth_state_mismatch", provider=provider)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="External authentication failed.")

    try:
        canonical = oauth_service.get_provider(provider).name
        profile = await oauth_service.complete_login(canonical, code, _callback_url(request, canonical))
    except ExternalLoginError as e:
        logger.warning("oauth_login_failed", provider=provider, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="External authentication failed.")

    return_url = stored_state.get("return_url", "/")
    if not is_local_url(return_url):
        return_url = "/"

    response = RedirectResponse(url=return_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.oauth_session_cookie_name,
        value=oauth_service.create_session_token(profile),
        max_age=settings.oauth_session_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/"
    )
    response.delete_cookie(settings.oauth_state_cookie_name, path="/oauth")

    logger.info("oauth_signed_in", provider=profile.provider, external_id=profile.id)
    return response


# ============================================================================
# SESSION ENDPOINTS
# ============================================================================


@router.get("/profile", response_model=ApiResponse[Dict[str, Any]], summary="External profile")
async def profile(external: ExternalProfile = Depends(get_external_profile)):
    return ApiResponse[Dict[str, Any]](
        success=True,
        data={
            "id": external.id,
            "email": external.email or "",
            "name": external.name or "",
            "first_name": external.given_name or "",
            "last_name": external.family_name or "",
            "picture": external.picture or "",
            "provider": external.provider,
            "locale": external.locale or "",
            "email_verified": bool(external.email_verified),
            "claims": profile_claims(external)
        }
    )


@router.get("/dashboard", response_model=ApiResponse[Dict[str, Any]], summary="Signed-in dashboard")
async def dashboard(external: ExternalProfile = Depends(get_external_profile)):
    return ApiResponse[Dict[str, Any]](
        success=True,
        message=f"Welcome, {external.name or external.email or external.id}",
        data={"provider": external.provider, "name": external.name, "email": external.email}
    )


@router.post("/logout", summary="End the external login session")
async def logout(settings: Settings = Depends(get_settings_dependency)):
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.oauth_session_cookie_name, path="/")
    return response
