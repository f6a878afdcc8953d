"""
FastAPI application entry point for the Auth Security Demo.

This module provides the FastAPI application with:
- Health endpoint
- JSON API, cookie based browser flow and external (OAuth) login
- Token resolution from bearer header or auth cookie
- Request logging, security headers and optional CORS
- Database engine and schema management
- Graceful startup and shutdown
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.src.config import Settings, get_settings
from api.src.database import create_engine, create_session_factory, init_schema
from api.src.middleware.auth import AuthMiddleware
from api.src.middleware.security import RequestLoggingMiddleware, SecurityHeadersMiddleware
from api.src.repositories.comment_repo import CommentRepository
from api.src.repositories.user_repo import UserRepository
from api.src.routers import api as api_routes
from api.src.routers import oauth as oauth_routes
from api.src.routers import web as web_routes
from api.src.services.auth_service import AuthService
from api.src.services.oauth_service import OAuthService
from api.src.services.user_service import UserService
from shared.logging import configure_logging
from shared.models import HealthStatus, ServiceInfo

logger = structlog.get_logger(__name__)


# ============================================================================
# Exception Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc)}
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the non-serializable ctx objects."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg", "input")}
        for error in exc.errors()
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    oauth_http_client: Optional[httpx.AsyncClient] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings override (defaults to cached settings)
        oauth_http_client: HTTP client for provider calls (tests inject a
            mock transport here)

    Returns:
        Configured application; resources are created in the lifespan
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager for startup and shutdown events.

        Handles:
        - Database engine creation and schema initialization
        - Service and repository initialization
        - Engine disposal on shutdown
        """
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        engine = create_engine(settings.database_url, echo=settings.database_echo)

        try:
            await init_schema(engine)
            session_factory = create_session_factory(engine)

            user_repo = UserRepository(session_factory)
            comment_repo = CommentRepository(session_factory)

            app.state.engine = engine
            app.state.auth_service = AuthService(user_repo, settings)
            app.state.user_service = UserService(user_repo, comment_repo)
            app.state.oauth_service = OAuthService(settings, oauth_http_client)

            logger.info("application_started", app_name=settings.app_name)
            yield

        except Exception as e:
            logger.error("application_startup_failed", error=str(e), exc_info=True)
            raise

        finally:
            logger.info("application_shutting_down")
            await engine.dispose()
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Authentication and authorization demo: JWT bearer and cookie "
            "login, role and age policies, CSRF and XSS protection, and "
            "external login with Google, Microsoft and Facebook."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    # Middleware runs in reverse order of registration
    app.add_middleware(AuthMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    async def health_check() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic health status without checking dependencies.
        """
        return ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            status=HealthStatus.HEALTHY,
            environment=settings.environment
        ).model_dump()

    app.include_router(api_routes.router, prefix=settings.api_prefix)
    app.include_router(web_routes.auth_router)
    app.include_router(web_routes.home_router)
    app.include_router(oauth_routes.router)

    return app


configure_logging(
    log_level=get_settings().log_level,
    json_logs=get_settings().log_format == "json",
    service_name="auth-security-demo",
    environment=get_settings().environment
)

app = create_app()


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
