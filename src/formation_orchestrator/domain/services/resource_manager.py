"""Declared-resource registry tracking what a deployment created."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import structlog

from formation_orchestrator.domain.models.base import ValueObject
from formation_orchestrator.domain.models.deployment import HealthStatus
from formation_orchestrator.domain.models.resource_state import (
    DEPLOYMENT_RESOURCE,
    load_resource_state,
    ResourceEntry,
    ResourceLifecycle,
    ResourceStateV2,
)


logger = structlog.get_logger(__name__)


class ResourceContext(ValueObject):
    """What a create callback knows about the deployment it belongs to."""

    formation_name: str
    flight_name: str
    image: str
    url: str = ""


class ManagedResource(ABC):
    """A named resource with create, destroy and status callbacks."""

    name: str

    @abstractmethod
    async def create(self, context: ResourceContext) -> dict[str, Any]:
        """Create the resource and return attributes to keep in its state."""

    @abstractmethod
    async def destroy(self, entry: ResourceEntry) -> None:
        """Tear down the resource described by ``entry``."""

    @abstractmethod
    async def describe_status(self, entry: ResourceEntry) -> HealthStatus | None:
        """Contribute a health value, or None to abstain."""


class DeploymentResource(ManagedResource):
    """The formation itself.

    The formation is created and deleted by the orchestrator's own calls to
    the platform, so these callbacks only keep the recorded attributes
    current. Additional sub-resources register alongside this one.
    """

    name = DEPLOYMENT_RESOURCE

    async def create(self, context: ResourceContext) -> dict[str, Any]:
        return {
            "formation": context.formation_name,
            "flight": context.flight_name,
            "image": context.image,
            "url": context.url,
        }

    async def destroy(self, entry: ResourceEntry) -> None:
        logger.debug("deployment_resource_destroyed", formation=entry.name)

    async def describe_status(self, entry: ResourceEntry) -> HealthStatus | None:  # noqa: ARG002
        return None


class ResourceManager:
    """Registry of managed resources keyed by name, with their lifecycle state.

    Every declared resource starts in ``DECLARED``. ``create_all`` moves each
    one to ``CREATED`` (or ``ORPHANED`` when its callback fails),
    ``destroy_all`` moves each one to ``DESTROYED``. ``state()`` returns a
    detached copy suitable for a deployment record.
    """

    def __init__(self, resources: Sequence[ManagedResource]) -> None:
        self._resources: dict[str, ManagedResource] = {}
        for resource in resources:
            if resource.name in self._resources:
                raise DuplicateResourceError(f"Resource {resource.name} declared twice")
            self._resources[resource.name] = resource
        self._entries: dict[str, ResourceEntry] = {
            name: ResourceEntry(name=name) for name in self._resources
        }

    @classmethod
    def for_deployment(cls) -> ResourceManager:
        """Manager with the single ``deployment`` resource every run declares."""
        return cls([DeploymentResource()])

    @property
    def resource_names(self) -> list[str]:
        return list(self._resources)

    def resource(self, name: str) -> ManagedResource:
        try:
            return self._resources[name]
        except KeyError as e:
            raise UnknownResourceError(f"Resource {name} is not declared") from e

    def entry(self, name: str) -> ResourceEntry:
        self.resource(name)
        return self._entries[name]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def state(self) -> ResourceStateV2:
        """Snapshot of every resource entry."""
        return ResourceStateV2(
            resources={
                name: entry.model_copy(deep=True) for name, entry in self._entries.items()
            },
        )

    def load_state(self, blob: ResourceStateV2 | dict[str, Any] | str | bytes) -> None:
        """Replace the tracked entries with a previously recorded state.

        Entries for resources that are no longer declared are ignored;
        declared resources absent from the blob keep their current entry.
        """
        state = load_resource_state(blob)
        for name, entry in state.resources.items():
            if name not in self._resources:
                logger.warning("resource_state_entry_ignored", resource=name)
                continue
            self._entries[name] = entry

    def bind_formation(self, formation_name: str) -> None:
        """Name the deployment resource after the formation it tracks."""
        self.entry(DEPLOYMENT_RESOURCE).name = formation_name

    def reconstruct(self, formation_name: str) -> None:
        """Rebuild state for a record that predates resource state tracking."""
        self._entries[DEPLOYMENT_RESOURCE] = ResourceEntry(
            name=formation_name,
            lifecycle=ResourceLifecycle.CREATED,
        )
        logger.info("resource_state_reconstructed", formation=formation_name)

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    async def create_all(self, context: ResourceContext) -> None:
        """Invoke every create callback in declaration order."""
        for name, resource in self._resources.items():
            entry = self._entries[name]
            try:
                attributes = await resource.create(context)
            except Exception as e:
                entry.error_message = str(e)
                entry.transition_to(ResourceLifecycle.ORPHANED)
                logger.exception("resource_create_failed", resource=name)
                raise ResourceCreateError(f"Resource {name} failed to create: {e}") from e

            entry.attributes = attributes
            entry.transition_to(ResourceLifecycle.CREATED)
            logger.info("resource_created", resource=name)

    def mark_orphaned(self, reason: str) -> None:
        """Flag every not-yet-finished resource as orphaned."""
        for name, entry in self._entries.items():
            if entry.lifecycle in {ResourceLifecycle.DECLARED, ResourceLifecycle.CREATED}:
                entry.error_message = reason
                entry.transition_to(ResourceLifecycle.ORPHANED)
                logger.info("resource_orphaned", resource=name, reason=reason)

    async def destroy_all(self) -> None:
        """Invoke every destroy callback, in reverse declaration order."""
        for name in reversed(self._resources):
            entry = self._entries[name]
            if entry.lifecycle == ResourceLifecycle.DESTROYED:
                continue
            if entry.lifecycle == ResourceLifecycle.DECLARED:
                # Never created; recorded as orphaned before its teardown hook runs.
                entry.transition_to(ResourceLifecycle.ORPHANED)
            await self._resources[name].destroy(entry)
            entry.transition_to(ResourceLifecycle.DESTROYED)
            logger.info("resource_destroyed", resource=name)

    async def status_all(self) -> dict[str, HealthStatus | None]:
        """Collect each resource's own health contribution."""
        return {
            name: await resource.describe_status(self._entries[name])
            for name, resource in self._resources.items()
        }


class DuplicateResourceError(Exception):
    """Raised when two resources are declared under the same name."""


class UnknownResourceError(Exception):
    """Raised when a resource name is not declared."""


class ResourceCreateError(Exception):
    """Raised when a resource create callback fails."""
