"""Health check response models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Result of one component check (``catalog`` or ``default_provider``).

    ``provider`` names the adapter that was probed, when there was one.
    """

    model_config = ConfigDict(use_enum_values=True)

    status: HealthStatus
    provider: str | None = None
    latency_ms: int | None = None
    error: str | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Body of ``/health`` and ``/health/ready``."""

    model_config = ConfigDict(use_enum_values=True)

    status: HealthStatus
    version: str
    timestamp: datetime
    checks: dict[str, ComponentHealth]
