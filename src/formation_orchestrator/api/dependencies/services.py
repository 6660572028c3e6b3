"""Service dependencies for FastAPI dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, status
from pydantic import ValidationError

from formation_orchestrator.config import (
    DeployConfig,
    get_settings,
    load_deploy_config,
    Settings,
    StorageBackend,
)
from formation_orchestrator.domain.models.base import generate_id
from formation_orchestrator.domain.ports.repositories import DeploymentRecordRepository
from formation_orchestrator.domain.ports.services import PlatformConnector, Reporter
from formation_orchestrator.domain.services.deployment_service import DeploymentOrchestrator
from formation_orchestrator.infrastructure.persistence.records import (
    FileDeploymentRecordRepository,
    InMemoryDeploymentRecordRepository,
)
from formation_orchestrator.infrastructure.platform.connector import HttpPlatformConnector
from formation_orchestrator.infrastructure.reporting.reporter import (
    RecordingReporter,
    StructlogReporter,
)


class ServiceContainer:
    """Simple dependency injection container.

    Implements the Composition Root pattern for assembling
    dependencies and managing their lifecycle.
    """

    _instance: ServiceContainer | None = None

    def __init__(
        self,
        settings: Settings | None = None,
        deploy_config: DeployConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        record_repository: DeploymentRecordRepository | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._deploy_config = deploy_config
        self._connector = HttpPlatformConnector(self._settings.platform, transport=transport)
        self._record_repository = record_repository or self._build_repository()

    def _build_repository(self) -> DeploymentRecordRepository:
        storage = self._settings.storage
        if storage.backend == StorageBackend.FILE:
            return FileDeploymentRecordRepository(Path(storage.directory))
        return InMemoryDeploymentRecordRepository()

    @classmethod
    def get_instance(cls) -> ServiceContainer:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connector(self) -> PlatformConnector:
        return self._connector

    @property
    def record_repository(self) -> DeploymentRecordRepository:
        return self._record_repository

    @property
    def deploy_config(self) -> DeployConfig:
        """Deployment values, read from the environment on first use."""
        if self._deploy_config is None:
            self._deploy_config = load_deploy_config()
        return self._deploy_config

    def orchestrator(self, reporter: Reporter) -> DeploymentOrchestrator:
        """A fresh orchestrator for a single run."""
        return DeploymentOrchestrator(connector=self._connector, reporter=reporter)


def get_service_container() -> ServiceContainer:
    return ServiceContainer.get_instance()


def get_deploy_config(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> DeployConfig:
    try:
        return container.deploy_config
    except ValidationError as e:
        # Only field locations and messages: input values may hold the API key.
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors(include_input=False)
        ]
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": "Deployment configuration is invalid", "errors": problems},
        ) from e


def get_reporter() -> RecordingReporter:
    """Per-request reporter that also logs every step."""
    return RecordingReporter(forward_to=StructlogReporter(run=generate_id()))
