"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from formation_orchestrator.api.middleware.correlation import CorrelationIdMiddleware
from formation_orchestrator.api.routes import (
    deployment_routes,
    health_routes,
)
from formation_orchestrator.config import get_settings, Settings
from formation_orchestrator.infrastructure.observability.tracing import setup_tracing


logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    tracing = setup_tracing(settings.observability)
    logger.info(
        "application_starting",
        environment=settings.environment.value,
        debug=settings.debug,
        tracing=tracing,
        storage=settings.storage.backend.value,
    )

    yield

    logger.info("application_shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Formation Deployment Orchestrator",
        description="Deploys container images as formations on the compute platform",
        version="0.1.0",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(CorrelationIdMiddleware)

    # Routes
    app.include_router(health_routes.router)
    app.include_router(deployment_routes.router, prefix=settings.api_prefix)

    return app
