"""Health check and metrics routes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from formation_orchestrator.api.dependencies.services import (
    get_service_container,
    ServiceContainer,
)


router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "0.1.0",
    }


@router.get("/health/ready")
async def readiness_check(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> dict[str, Any]:
    """Readiness check - the service can run deployments once its config loads."""
    checks: dict[str, str] = {}

    try:
        container.deploy_config
    except ValueError:
        checks["deploy_config"] = "invalid"
    else:
        checks["deploy_config"] = "ok"

    try:
        await container.record_repository.list_all()
    except OSError:
        checks["record_store"] = "unavailable"
    else:
        checks["record_store"] = "ok"

    all_ok = all(v == "ok" for v in checks.values())
    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness check - verifies the service is running."""
    return {"status": "alive"}


@router.get("/metrics")
async def metrics(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> Response:
    """Prometheus exposition of the orchestrator metrics."""
    if not container.settings.observability.metrics_enabled:
        return Response(status_code=404)
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
