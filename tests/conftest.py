"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest
from pydantic import SecretStr

from formation_orchestrator.config import DeployConfig, Environment, PlatformSettings, Settings
from formation_orchestrator.domain.models.formation import SessionToken
from formation_orchestrator.domain.services.deployment_service import DeploymentOrchestrator
from formation_orchestrator.infrastructure.persistence.records import (
    InMemoryDeploymentRecordRepository,
)
from formation_orchestrator.infrastructure.platform.connector import HttpPlatformConnector
from formation_orchestrator.infrastructure.reporting.reporter import RecordingReporter


IDENTITY_URL = "https://identity.test/identity/token"
COMPUTE_URL = "https://compute.test/v1"
FORMATIONS_URL = f"{COMPUTE_URL}/formations"

Handler = Callable[[httpx.Request], httpx.Response]


class FakePlatform:
    """Scriptable stand-in for the identity and compute endpoints.

    Every request is recorded. Responses default to success and can be
    replaced per operation.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token = "session-token-123"
        self.identity: Handler = lambda _: httpx.Response(200, text=self.token)
        self.create: Handler = lambda _: httpx.Response(200, json={})
        self.read: Handler = lambda _: httpx.Response(200, json={"url": "https://demoapp.on.cplane.test"})
        self.delete: Handler = lambda _: httpx.Response(200, json={})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == IDENTITY_URL:
            return self.identity(request)
        if request.url.path.startswith("/v1/formations/"):
            if request.method == "POST":
                return self.create(request)
            if request.method == "GET":
                return self.read(request)
            if request.method == "DELETE":
                return self.delete(request)
        return httpx.Response(500, text=f"unexpected {request.method} {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self) -> list[tuple[str, str]]:
        """(method, path) of every request, in order."""
        return [(r.method, r.url.path) for r in self.requests]

    def bodies(self, method: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == method and r.content]


@pytest.fixture(autouse=True)
def clear_stores() -> None:
    """Clear in-memory stores before each test."""
    InMemoryDeploymentRecordRepository.clear()


@pytest.fixture
def platform_settings() -> PlatformSettings:
    return PlatformSettings(
        identity_url=IDENTITY_URL,
        compute_url=COMPUTE_URL,
        request_timeout_seconds=5.0,
        connect_timeout_seconds=1.0,
    )


@pytest.fixture
def settings(platform_settings: PlatformSettings) -> Settings:
    return Settings(environment=Environment.TESTING, debug=True, platform=platform_settings)


@pytest.fixture
def deploy_config() -> DeployConfig:
    return DeployConfig(
        formation_name="demoapp",
        flight_name="web",
        api_key=SecretStr("api-key-secret"),
    )


@pytest.fixture
def session_token() -> SessionToken:
    return SessionToken(value=SecretStr("session-token-123"))


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def connector(
    platform_settings: PlatformSettings, fake_platform: FakePlatform
) -> HttpPlatformConnector:
    return HttpPlatformConnector(platform_settings, transport=fake_platform.transport)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def orchestrator(
    connector: HttpPlatformConnector, reporter: RecordingReporter
) -> DeploymentOrchestrator:
    return DeploymentOrchestrator(connector=connector, reporter=reporter)


@pytest.fixture
def sample_image() -> str:
    return "registry.example/demoapp:latest"
