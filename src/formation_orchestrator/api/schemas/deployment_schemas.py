"""API schemas for deployment endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from formation_orchestrator.domain.models.deployment import (
    CreateOutcome,
    DeploymentRecord,
    HealthReport,
    HealthStatus,
)
from formation_orchestrator.domain.models.resource_state import ResourceStateV2


class CreateDeploymentRequest(BaseModel):
    image: str = Field(..., min_length=1, max_length=512)
    formation_name: str | None = Field(default=None, max_length=64)
    flight_name: str | None = Field(default=None, max_length=64)


class StepResponse(BaseModel):
    status: str
    message: str


class DeploymentResponse(BaseModel):
    name: str
    url: str
    created: bool
    outcome: CreateOutcome
    deployed_at: datetime
    resource_state: ResourceStateV2 | None = None
    steps: list[StepResponse] = Field(default_factory=list)

    @classmethod
    def from_record(
        cls, record: DeploymentRecord, steps: list[StepResponse] | None = None
    ) -> DeploymentResponse:
        return cls(
            name=record.name,
            url=record.url,
            created=record.created,
            outcome=record.outcome,
            deployed_at=record.deployed_at,
            resource_state=record.resource_state,
            steps=steps or [],
        )


class DeploymentListResponse(BaseModel):
    items: list[DeploymentResponse]
    total: int


class HealthReportResponse(BaseModel):
    health: HealthStatus
    message: str
    generated_at: datetime
    external: bool
    steps: list[StepResponse] = Field(default_factory=list)

    @classmethod
    def from_report(
        cls, report: HealthReport, steps: list[StepResponse] | None = None
    ) -> HealthReportResponse:
        return cls(
            health=report.health,
            message=report.message,
            generated_at=report.generated_at,
            external=report.external,
            steps=steps or [],
        )
