"""Common Pydantic models shared across services."""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class HealthStatus(str, Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope returned by every JSON endpoint.

    Mirrors the success/message/data triple used by the auth demo so
    clients can branch on ``success`` without inspecting status codes.
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(default="", description="Human readable outcome")
    data: Optional[T] = Field(default=None, description="Operation payload")


class ServiceInfo(BaseModel):
    """Service information model."""

    service_name: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    status: HealthStatus = Field(..., description="Service health status")
    environment: str = Field(..., description="Deployment environment")

    model_config = {"use_enum_values": True}
