"""Versioned, serializable record of the resources a deployment created.

Two shapes exist on disk:

* version 1: ``{"version": 1, "name": "<formation>"}``, written when a
  deployment managed exactly one resource and only its name was kept.
* version 2: ``{"version": 2, "resources": {"<resource>": {...}}}``, one
  entry per declared resource with its lifecycle and attributes.

Every loader returns version 2; version 1 blobs are upgraded on load.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from formation_orchestrator.domain.models.base import DomainModel, ValueObject


DEPLOYMENT_RESOURCE = "deployment"


class ResourceLifecycle(str, Enum):
    """Lifecycle of a single managed resource."""

    DECLARED = "declared"
    CREATED = "created"
    DESTROYED = "destroyed"
    ORPHANED = "orphaned"


VALID_LIFECYCLE_TRANSITIONS: dict[ResourceLifecycle, set[ResourceLifecycle]] = {
    ResourceLifecycle.DECLARED: {ResourceLifecycle.CREATED, ResourceLifecycle.ORPHANED},
    ResourceLifecycle.CREATED: {ResourceLifecycle.DESTROYED, ResourceLifecycle.ORPHANED},
    ResourceLifecycle.ORPHANED: {ResourceLifecycle.DESTROYED},
    ResourceLifecycle.DESTROYED: set(),
}


class ResourceEntry(DomainModel):
    """State kept for one declared resource."""

    name: str
    lifecycle: ResourceLifecycle = ResourceLifecycle.DECLARED
    attributes: dict[str, Any] = Field(default_factory=dict)
    error_message: str = ""

    def transition_to(self, new_lifecycle: ResourceLifecycle) -> None:
        """Validate and apply a lifecycle transition."""
        valid = VALID_LIFECYCLE_TRANSITIONS.get(self.lifecycle, set())
        if new_lifecycle not in valid:
            raise InvalidLifecycleTransitionError(
                f"Resource {self.name}: cannot transition from {self.lifecycle.value} "
                f"to {new_lifecycle.value}. Valid transitions: {[s.value for s in valid]}"
            )
        self.lifecycle = new_lifecycle


class LegacyResourceState(ValueObject):
    """Version 1 blob: only the formation name was recorded."""

    version: Literal[1] = 1
    name: str

    def upgrade(self) -> ResourceStateV2:
        return ResourceStateV2(
            resources={
                DEPLOYMENT_RESOURCE: ResourceEntry(
                    name=self.name,
                    lifecycle=ResourceLifecycle.CREATED,
                ),
            },
        )


class ResourceStateV2(ValueObject):
    """Version 2 blob: one entry per declared resource."""

    version: Literal[2] = 2
    resources: dict[str, ResourceEntry] = Field(default_factory=dict)

    def entry(self, resource_name: str) -> ResourceEntry | None:
        return self.resources.get(resource_name)

    @property
    def formation_name(self) -> str:
        """Name of the remote formation tracked by the deployment resource."""
        entry = self.resources.get(DEPLOYMENT_RESOURCE)
        return entry.name if entry is not None else ""


ResourceState = Annotated[
    Union[LegacyResourceState, ResourceStateV2],
    Field(discriminator="version"),
]

_state_adapter: TypeAdapter[LegacyResourceState | ResourceStateV2] = TypeAdapter(ResourceState)


def load_resource_state(
    blob: ResourceStateV2 | dict[str, Any] | str | bytes,
) -> ResourceStateV2:
    """Parse a persisted state blob of any known version into the current shape."""
    if isinstance(blob, ResourceStateV2):
        return blob.model_copy(deep=True)
    try:
        if isinstance(blob, (str, bytes)):
            state = _state_adapter.validate_json(blob)
        else:
            state = _state_adapter.validate_python(blob)
    except ValidationError as e:
        raise ResourceStateError(f"Unreadable resource state: {e}") from e

    if isinstance(state, LegacyResourceState):
        return state.upgrade()
    return state


def dump_resource_state(state: ResourceStateV2) -> bytes:
    """Serialize state to JSON bytes for the persistence layer."""
    return state.model_dump_json().encode("utf-8")


class ResourceStateError(Exception):
    """Raised when a persisted resource state blob cannot be interpreted."""


class InvalidLifecycleTransitionError(Exception):
    """Raised when a resource lifecycle transition is not allowed."""
