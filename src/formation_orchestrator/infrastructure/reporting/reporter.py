"""Reporter implementations."""

from __future__ import annotations

import structlog

from formation_orchestrator.domain.models.deployment import HealthStatus
from formation_orchestrator.domain.ports.services import Reporter, StepStatus


logger = structlog.get_logger(__name__)


class StructlogReporter(Reporter):
    """Writes progress as structured log events."""

    def __init__(self, run: str = "") -> None:
        self._log = logger.bind(run=run) if run else logger

    def update(self, message: str) -> None:
        self._log.info("progress_update", message=message)

    def step(self, status: StepStatus, message: str) -> None:
        if status == StepStatus.ERROR:
            self._log.error("progress_step", status=status.value, message=message)
        elif status == StepStatus.WARNING:
            self._log.warning("progress_step", status=status.value, message=message)
        else:
            self._log.info("progress_step", status=status.value, message=message)

    def report_health(self, health: HealthStatus) -> None:
        self._log.info("health_reported", health=health.value)


class RecordingReporter(Reporter):
    """Keeps everything reported so it can be returned to the caller.

    Optionally forwards each call to another reporter.
    """

    def __init__(self, forward_to: Reporter | None = None) -> None:
        self._forward_to = forward_to
        self._updates: list[str] = []
        self._steps: list[tuple[StepStatus, str]] = []
        self._health: list[HealthStatus] = []

    def update(self, message: str) -> None:
        self._updates.append(message)
        if self._forward_to is not None:
            self._forward_to.update(message)

    def step(self, status: StepStatus, message: str) -> None:
        self._steps.append((status, message))
        if self._forward_to is not None:
            self._forward_to.step(status, message)

    def report_health(self, health: HealthStatus) -> None:
        self._health.append(health)
        if self._forward_to is not None:
            self._forward_to.report_health(health)

    @property
    def updates(self) -> list[str]:
        return list(self._updates)

    @property
    def steps(self) -> list[tuple[StepStatus, str]]:
        return list(self._steps)

    @property
    def health_reports(self) -> list[HealthStatus]:
        return list(self._health)

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self._steps]

    def clear(self) -> None:
        self._updates.clear()
        self._steps.clear()
        self._health.clear()
