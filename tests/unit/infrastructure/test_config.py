"""Unit tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import SecretStr, ValidationError

from formation_orchestrator.config import (
    DeployConfig,
    load_deploy_config,
    PlatformSettings,
    Settings,
    StorageBackend,
)


@pytest.fixture
def deploy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEPLOY_FORMATION_NAME", "envapp")
    monkeypatch.setenv("DEPLOY_FLIGHT_NAME", "envflight")
    monkeypatch.setenv("DEPLOY_API_KEY", "env-secret")


class TestDeployConfig:
    def test_loads_from_environment(self, deploy_env: None) -> None:
        config = load_deploy_config()
        assert config.formation_name == "envapp"
        assert config.flight_name == "envflight"
        assert config.api_key.get_secret_value() == "env-secret"

    def test_missing_values_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("DEPLOY_FORMATION_NAME", "DEPLOY_FLIGHT_NAME", "DEPLOY_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ValidationError):
            load_deploy_config()

    def test_formation_name_validated(self) -> None:
        with pytest.raises(ValidationError, match="formation name can not be longer"):
            DeployConfig(formation_name="x" * 28, flight_name="web", api_key=SecretStr("k"))

    def test_flight_name_validated_independently(self) -> None:
        with pytest.raises(ValidationError, match="flight names can not contain double hyphens"):
            DeployConfig(formation_name="demoapp", flight_name="we--b", api_key=SecretStr("k"))

    def test_trailing_newline_rejected(self) -> None:
        with pytest.raises(ValidationError, match="can only contain"):
            DeployConfig(
                formation_name="demoapp\n", flight_name="web", api_key=SecretStr("k")
            )

    def test_blank_api_key_rejected(self) -> None:
        with pytest.raises(ValidationError, match="api key is required"):
            DeployConfig(formation_name="demoapp", flight_name="web", api_key=SecretStr("  "))

    def test_api_key_hidden(self, deploy_config: DeployConfig) -> None:
        assert "api-key-secret" not in repr(deploy_config)
        assert "api-key-secret" not in deploy_config.model_dump_json()

    def test_with_overrides(self, deploy_config: DeployConfig) -> None:
        overridden = deploy_config.with_overrides(formation_name="other")
        assert overridden.formation_name == "other"
        assert overridden.flight_name == "web"
        assert overridden.api_key == deploy_config.api_key
        assert deploy_config.formation_name == "demoapp"

    def test_overrides_are_validated(self, deploy_config: DeployConfig) -> None:
        with pytest.raises(ValidationError):
            deploy_config.with_overrides(flight_name="bad name")


class TestPlatformSettings:
    def test_defaults(self) -> None:
        settings = PlatformSettings()
        assert settings.identity_url == "https://flightdeck.cplane.cloud/identity/token"
        assert settings.formations_url == "https://compute.cplane.cloud/v1/formations"

    def test_formations_url_strips_trailing_slash(self) -> None:
        settings = PlatformSettings(compute_url="https://compute.test/v1/")
        assert settings.formations_url == "https://compute.test/v1/formations"

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLATFORM_REQUEST_TIMEOUT", "2.5")
        assert PlatformSettings().request_timeout_seconds == 2.5


class TestSettings:
    def test_nested_defaults(self) -> None:
        settings = Settings()
        assert settings.api_prefix == "/api/v1"
        assert settings.storage.backend == StorageBackend.MEMORY
        assert settings.observability.service_name == "formation-orchestrator"
