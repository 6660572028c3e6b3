"""Application configuration using pydantic-settings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings

from formation_orchestrator.domain.models.formation import validate_resource_name


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    FILE = "file"


class PlatformSettings(BaseSettings):
    """Remote compute platform endpoints."""

    identity_url: str = Field(
        default="https://flightdeck.cplane.cloud/identity/token",
        alias="PLATFORM_IDENTITY_URL",
    )
    compute_url: str = Field(
        default="https://compute.cplane.cloud/v1", alias="PLATFORM_COMPUTE_URL"
    )
    request_timeout_seconds: float = Field(default=30.0, alias="PLATFORM_REQUEST_TIMEOUT")
    connect_timeout_seconds: float = Field(default=10.0, alias="PLATFORM_CONNECT_TIMEOUT")

    @property
    def formations_url(self) -> str:
        return f"{self.compute_url.rstrip('/')}/formations"

    model_config = {"env_prefix": "PLATFORM_", "extra": "ignore", "populate_by_name": True}


class DeployConfig(BaseSettings):
    """Per-run deployment values: which formation and flight to launch, and the API key."""

    formation_name: str = Field(alias="DEPLOY_FORMATION_NAME")
    flight_name: str = Field(alias="DEPLOY_FLIGHT_NAME")
    api_key: SecretStr = Field(alias="DEPLOY_API_KEY")

    @field_validator("formation_name")
    @classmethod
    def _check_formation_name(cls, value: str) -> str:
        return validate_resource_name(value, kind="formation")

    @field_validator("flight_name")
    @classmethod
    def _check_flight_name(cls, value: str) -> str:
        return validate_resource_name(value, kind="flight")

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("api key is required")
        return value

    def with_overrides(
        self, formation_name: str | None = None, flight_name: str | None = None
    ) -> DeployConfig:
        """Return a validated copy with the given names replaced."""
        return DeployConfig(
            formation_name=formation_name or self.formation_name,
            flight_name=flight_name or self.flight_name,
            api_key=self.api_key,
        )

    model_config = {"env_prefix": "DEPLOY_", "extra": "ignore", "populate_by_name": True}


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    service_name: str = Field(default="formation-orchestrator", alias="SERVICE_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")
    tracing_enabled: bool = Field(default=False, alias="TRACING_ENABLED")

    model_config = {"env_prefix": "OBS_", "extra": "ignore", "populate_by_name": True}


class StorageSettings(BaseSettings):
    """Where deployment records are kept between runs."""

    backend: StorageBackend = Field(default=StorageBackend.MEMORY, alias="STATE_BACKEND")
    directory: str = Field(default=".formation-state", alias="STATE_DIRECTORY")

    model_config = {"env_prefix": "STATE_", "extra": "ignore", "populate_by_name": True}


class Settings(BaseSettings):
    """Main application settings."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_prefix: str = Field(default="/api/v1", alias="API_PREFIX")
    host: str = Field(default="0.0.0.0", alias="HOST")  # noqa: S104
    port: int = Field(default=8000, alias="PORT")

    platform: PlatformSettings = Field(default_factory=PlatformSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def load_deploy_config() -> DeployConfig:
    """Load the deployment values from ``DEPLOY_*`` environment variables."""
    return DeployConfig()  # type: ignore[call-arg]
