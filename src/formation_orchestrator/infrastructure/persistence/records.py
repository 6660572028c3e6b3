"""Deployment record repository implementations."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from formation_orchestrator.domain.models.deployment import DeploymentRecord
from formation_orchestrator.domain.models.resource_state import ResourceStateError
from formation_orchestrator.domain.ports.repositories import DeploymentRecordRepository


logger = structlog.get_logger(__name__)


# Module-level shared store enables cross-instance access in the API
# while keeping a single clear point for test isolation.
_record_store: dict[str, DeploymentRecord] = {}


class InMemoryDeploymentRecordRepository(DeploymentRecordRepository):
    """In-memory record repository for testing and development."""

    def __init__(self) -> None:
        self._store = _record_store

    async def save(self, record: DeploymentRecord) -> DeploymentRecord:
        self._store[record.name] = record
        return record

    async def get(self, formation_name: str) -> DeploymentRecord | None:
        return self._store.get(formation_name)

    async def delete(self, formation_name: str) -> bool:
        return self._store.pop(formation_name, None) is not None

    async def list_all(self) -> list[DeploymentRecord]:
        return sorted(self._store.values(), key=lambda r: r.deployed_at, reverse=True)

    @classmethod
    def clear(cls) -> None:
        """Clear the shared store. Used by test fixtures for isolation."""
        _record_store.clear()


class FileDeploymentRecordRepository(DeploymentRecordRepository):
    """One JSON document per formation under a state directory.

    Writes go through a temporary file and an atomic rename so a crashed
    run never leaves a half-written record behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path(self, formation_name: str) -> Path:
        return self._directory / f"{formation_name}.json"

    def _write(self, record: DeploymentRecord) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(record.model_dump_json(indent=2))
            os.replace(tmp_path, self._path(record.name))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _read(self, formation_name: str) -> DeploymentRecord | None:
        path = self._path(formation_name)
        if not path.exists():
            return None
        try:
            return DeploymentRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ResourceStateError(
                f"Unreadable deployment record {formation_name}: {e.error_count()} error(s)"
            ) from e

    async def save(self, record: DeploymentRecord) -> DeploymentRecord:
        await asyncio.to_thread(self._write, record)
        logger.info("deployment_record_saved", formation=record.name)
        return record

    async def get(self, formation_name: str) -> DeploymentRecord | None:
        return await asyncio.to_thread(self._read, formation_name)

    async def delete(self, formation_name: str) -> bool:
        path = self._path(formation_name)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        logger.info("deployment_record_deleted", formation=formation_name)
        return True

    async def list_all(self) -> list[DeploymentRecord]:
        if not self._directory.exists():
            return []
        records: list[DeploymentRecord] = []
        for path in sorted(self._directory.glob("*.json")):
            try:
                record = await self.get(path.stem)
            except ResourceStateError:
                logger.warning("deployment_record_unreadable", formation=path.stem)
                continue
            if record is not None:
                records.append(record)
        return sorted(records, key=lambda r: r.deployed_at, reverse=True)
