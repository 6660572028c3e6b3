"""Deployment record, create outcomes and health reports."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from formation_orchestrator.domain.models.base import utc_now, ValueObject
from formation_orchestrator.domain.models.resource_state import (
    load_resource_state,
    ResourceStateError,
    ResourceStateV2,
)


class CreateOutcome(str, Enum):
    """Classification of the formation create response."""

    CREATED = "created"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNREPORTED = "unreported"

    @classmethod
    def from_status_code(cls, status_code: int) -> CreateOutcome:
        return _STATUS_OUTCOMES.get(status_code, cls.UNREPORTED)

    @property
    def message(self) -> str | None:
        """User-facing message, or None when the outcome is not reported."""
        return CREATE_OUTCOME_MESSAGES.get(self)


_STATUS_OUTCOMES: dict[int, CreateOutcome] = {
    200: CreateOutcome.CREATED,
    400: CreateOutcome.BAD_REQUEST,
    401: CreateOutcome.UNAUTHORIZED,
    403: CreateOutcome.FORBIDDEN,
    404: CreateOutcome.NOT_FOUND,
    409: CreateOutcome.CONFLICT,
}

CREATE_OUTCOME_MESSAGES: dict[CreateOutcome, str] = {
    CreateOutcome.CREATED: "Application deployed successfully",
    CreateOutcome.BAD_REQUEST: (
        "There was something wrong with your request "
        "(this is usually caused by an issue with your included configuration)"
    ),
    CreateOutcome.UNAUTHORIZED: (
        "You are not logged in (try setting the `Authorization` header)"
    ),
    CreateOutcome.FORBIDDEN: "You have insufficient permissions to perform this action",
    CreateOutcome.NOT_FOUND: "The source for the clone operation was not found",
    CreateOutcome.CONFLICT: (
        "There is already a formation with this name, "
        "formation names must be unique within your organization"
    ),
}


class HealthStatus(str, Enum):
    """Health values a status report can carry."""

    UNKNOWN = "unknown"
    ALIVE = "alive"
    READY = "ready"
    DOWN = "down"
    ERROR = "error"


class HealthReport(ValueObject):
    """Platform-agnostic health of a deployment."""

    health: HealthStatus
    message: str = ""
    generated_at: datetime = Field(default_factory=utc_now)
    external: bool = True

    @property
    def is_up(self) -> bool:
        return self.health in {HealthStatus.ALIVE, HealthStatus.READY}


class DeploymentRecord(ValueObject):
    """Output of a deploy; the input to status and destroy.

    ``resource_state`` is None for records written before resource state
    was tracked; those are reconstructed from ``name`` alone.
    """

    name: str
    url: str = ""
    resource_state: ResourceStateV2 | None = None
    created: bool = False
    outcome: CreateOutcome = CreateOutcome.UNREPORTED
    deployed_at: datetime = Field(default_factory=utc_now)

    @field_validator("resource_state", mode="before")
    @classmethod
    def _upgrade_state(cls, value: Any) -> Any:
        if value is None or isinstance(value, ResourceStateV2):
            return value
        try:
            return load_resource_state(value)
        except ResourceStateError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def legacy(cls, name: str) -> DeploymentRecord:
        """A record carrying nothing but the formation name."""
        return cls(name=name)
