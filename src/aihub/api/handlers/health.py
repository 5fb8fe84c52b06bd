"""Health check endpoint handler."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response

from aihub import __version__
from aihub.ai.catalog import ConfigurationSource
from aihub.ai.crypto import CredentialCipher
from aihub.ai.errors import AIError
from aihub.ai.failover import get_default_ai_service
from aihub.api.deps import CatalogDep, SettingsDep
from aihub.config import Settings
from aihub.models.health import ComponentHealth, HealthResponse, HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Thresholds for health status determination
LATENCY_DEGRADED_MS = 2000  # Above this is considered degraded


async def check_catalog_health(catalog: ConfigurationSource) -> ComponentHealth:
    """Check that a default or backup model is configured."""
    site = await catalog.get_site_config()
    model_ids = site.priority_model_ids()
    if not model_ids:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error="No AI models configured",
        )
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message=f"{len(model_ids)} model(s) in priority list",
    )


async def check_default_provider_health(
    settings: Settings, catalog: ConfigurationSource
) -> ComponentHealth:
    """Probe the default model's provider with ``test_connection``.

    Args:
        settings: Application settings.
        catalog: Source of the stored providers and models.

    Returns:
        ComponentHealth indicating the default provider's status.
    """
    if not settings.health.provider_check_enabled:
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Check disabled",
        )

    try:
        cipher = CredentialCipher(settings.security.encryption_key)
        service = await get_default_ai_service(
            catalog, cipher, settings.ai.request_timeout_seconds
        )
    except AIError as e:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error=str(e),
        )

    try:
        start_time = time.perf_counter()
        connected = await service.provider.test_connection()
        latency_ms = int((time.perf_counter() - start_time) * 1000)
    except Exception as e:
        logger.exception("Unexpected error during provider health check")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error=f"Unexpected error: {type(e).__name__}",
        )

    provider_name = service.provider.get_provider_name()
    if not connected:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            latency_ms=latency_ms,
            provider=provider_name,
            error="Connection test failed",
        )
    if latency_ms > LATENCY_DEGRADED_MS:
        return ComponentHealth(
            status=HealthStatus.DEGRADED,
            provider=provider_name,
            latency_ms=latency_ms,
            message="High latency detected",
        )
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        provider=provider_name,
        latency_ms=latency_ms,
    )


def determine_overall_status(checks: dict[str, ComponentHealth]) -> HealthStatus:
    """Determine overall health status from component checks.

    Args:
        checks: Dictionary of component health results.

    Returns:
        Overall health status.
    """
    if not checks:
        return HealthStatus.HEALTHY

    statuses = [check.status for check in checks.values()]

    if any(s == HealthStatus.UNHEALTHY for s in statuses):
        return HealthStatus.UNHEALTHY
    elif any(s == HealthStatus.DEGRADED for s in statuses):
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: SettingsDep, catalog: CatalogDep, response: Response
) -> HealthResponse:
    """Health check endpoint for Kubernetes probes.

    Returns service health status including component checks.
    - HTTP 200: Service is healthy or degraded
    - HTTP 503: Service is unhealthy
    """
    try:
        provider_check = await asyncio.wait_for(
            check_default_provider_health(settings, catalog),
            timeout=settings.health.timeout_seconds,
        )
    except asyncio.TimeoutError:
        provider_check = ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error="Health check timeout",
        )

    checks = {
        "catalog": await check_catalog_health(catalog),
        "default_provider": provider_check,
    }
    overall_status = determine_overall_status(checks)

    if overall_status == HealthStatus.UNHEALTHY:
        response.status_code = 503

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """Kubernetes liveness probe - checks if process is running.

    This should be a very fast check with no dependencies.
    """
    return {"status": "alive"}


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(
    settings: SettingsDep, catalog: CatalogDep, response: Response
) -> HealthResponse:
    """Kubernetes readiness probe - same checks as ``/health``."""
    return await health_check(settings, catalog, response)
