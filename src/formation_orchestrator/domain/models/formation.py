"""Formation and flight specifications sent to the compute platform."""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, field_validator, model_validator, SecretStr

from formation_orchestrator.domain.models.base import ValueObject


MAX_NAME_LENGTH = 27

_NAME_CHARSET = re.compile(r"[A-Za-z0-9-]+")


def validate_resource_name(value: str, kind: str = "formation") -> str:
    """Check a formation or flight name against the platform naming rules.

    Names are at most 27 characters of ASCII letters, digits and hyphens,
    and never contain two hyphens in a row. Returns the name unchanged.
    """
    if not value:
        raise ValueError(f"{kind} name is required")
    if len(value) > MAX_NAME_LENGTH:
        raise ValueError(f"{kind} name can not be longer than {MAX_NAME_LENGTH} characters")
    if not _NAME_CHARSET.fullmatch(value):
        raise ValueError(f"{kind} names can only contain [a-z] [A-Z] [0-9] and hyphens")
    if "--" in value:
        raise ValueError(f"{kind} names can not contain double hyphens --")
    return value


class SessionToken(ValueObject):
    """Short-lived bearer token returned by the identity endpoint."""

    value: SecretStr

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value.get_secret_value()}"


class FlightSpec(ValueObject):
    """A single workload (image plus replica bounds) inside a formation."""

    name: str
    image: str = Field(..., min_length=1)
    minimum: int = Field(default=1, ge=0)
    maximum: int = Field(default=1, ge=0)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_resource_name(value, kind="flight")

    @model_validator(mode="after")
    def _check_bounds(self) -> FlightSpec:
        if self.minimum > self.maximum:
            raise ValueError(
                f"flight {self.name} minimum ({self.minimum}) exceeds maximum ({self.maximum})"
            )
        return self


class FormationSpec(ValueObject):
    """Named collection of flights, created as one remote resource."""

    name: str
    flights: list[FlightSpec] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_resource_name(value, kind="formation")

    @classmethod
    def single_flight(cls, formation_name: str, flight_name: str, image: str) -> FormationSpec:
        """Build the one-flight, one-replica formation launched by every deploy."""
        return cls(
            name=formation_name,
            flights=[FlightSpec(name=flight_name, image=image, minimum=1, maximum=1)],
        )

    def payload(self) -> dict[str, Any]:
        """Request body for the formation create call."""
        return {"flights": [flight.model_dump() for flight in self.flights]}
