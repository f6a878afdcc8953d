"""
Response hardening and request logging middleware.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from api.src.config import Settings
from shared.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to responses.

    Unhandled errors are turned into the 500 response here so that it
    carries the same headers as every other response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "unhandled_exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True
            )
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "Internal server error"}
            )

        apply_security_headers(response, request.app.state.settings)
        return response


def apply_security_headers(response: Response, settings: Settings) -> None:
    """Set the hardening headers enabled in settings."""
    if not settings.security_headers_enabled:
        return

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    if settings.security_require_https:
        response.headers["Strict-Transport-Security"] = (
            f"max-age={settings.security_hsts_max_age}; includeSubDomains"
        )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging with a correlation ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        method = request.method
        path = request.url.path

        clear_context()
        bind_context(correlation_id=correlation_id)

        start_time = time.time()
        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{time.time() - start_time:.3f}s",
                exc_info=True
            )
            raise

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration=f"{time.time() - start_time:.3f}s"
        )

        response.headers["X-Correlation-ID"] = correlation_id
        return response
