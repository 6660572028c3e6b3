"""Repository port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from formation_orchestrator.domain.models.deployment import DeploymentRecord


class DeploymentRecordRepository(ABC):
    """Port for persisting deployment records between runs."""

    @abstractmethod
    async def save(self, record: DeploymentRecord) -> DeploymentRecord:
        """Persist a record, replacing any record with the same name."""

    @abstractmethod
    async def get(self, formation_name: str) -> DeploymentRecord | None:
        """Retrieve the record for a formation.

        Raises ResourceStateError when a stored record cannot be read.
        """

    @abstractmethod
    async def delete(self, formation_name: str) -> bool:
        """Remove the record. Returns False when none existed."""

    @abstractmethod
    async def list_all(self) -> list[DeploymentRecord]:
        """List every readable stored record, newest first."""
