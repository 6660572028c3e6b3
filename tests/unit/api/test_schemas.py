"""Unit tests for API schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from formation_orchestrator.api.schemas.deployment_schemas import (
    CreateDeploymentRequest,
    DeploymentResponse,
    HealthReportResponse,
    StepResponse,
)
from formation_orchestrator.domain.models.deployment import (
    CreateOutcome,
    DeploymentRecord,
    HealthReport,
    HealthStatus,
)


class TestCreateDeploymentRequest:
    def test_image_only(self) -> None:
        req = CreateDeploymentRequest(image="registry.example/app:1")
        assert req.formation_name is None
        assert req.flight_name is None

    def test_empty_image_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateDeploymentRequest(image="")


class TestDeploymentResponse:
    def test_from_record(self) -> None:
        record = DeploymentRecord(
            name="demoapp",
            url="https://demoapp.test",
            created=True,
            outcome=CreateOutcome.CREATED,
        )
        steps = [StepResponse(status="ok", message="done")]

        response = DeploymentResponse.from_record(record, steps)

        assert response.name == "demoapp"
        assert response.outcome == CreateOutcome.CREATED
        assert response.resource_state is None
        assert response.steps == steps

    def test_steps_default_empty(self) -> None:
        response = DeploymentResponse.from_record(DeploymentRecord.legacy("demoapp"))
        assert response.steps == []
        assert response.created is False


class TestHealthReportResponse:
    def test_from_report(self) -> None:
        report = HealthReport(health=HealthStatus.DOWN, message="Formation demoapp removed")
        response = HealthReportResponse.from_report(report)
        assert response.health == HealthStatus.DOWN
        assert response.message == "Formation demoapp removed"
        assert response.external is True
