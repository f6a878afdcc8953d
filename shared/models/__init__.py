"""Shared Pydantic models for the demo services."""

from .common import (
    ApiResponse,
    HealthStatus,
    ServiceInfo,
)

__all__ = [
    "ApiResponse",
    "HealthStatus",
    "ServiceInfo",
]
