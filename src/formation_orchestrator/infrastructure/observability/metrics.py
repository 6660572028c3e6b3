"""Prometheus metrics configuration."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
)


# Application info
APP_INFO = Info("formation_orchestrator", "Formation deployment orchestrator info")
APP_INFO.info({
    "version": "0.1.0",
    "service": "formation-orchestrator",
})

# Remote platform metrics
PLATFORM_REQUESTS_TOTAL = Counter(
    "formation_orchestrator_platform_requests_total",
    "Requests sent to the compute platform",
    ["operation", "status_code"],  # status_code is "error" for transport failures
)

PLATFORM_REQUEST_DURATION = Histogram(
    "formation_orchestrator_platform_request_duration_seconds",
    "Compute platform request duration",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Lifecycle metrics
DEPLOYMENTS_TOTAL = Counter(
    "formation_orchestrator_deployments_total",
    "Deploy runs by create outcome",
    ["outcome"],
)

DESTROYS_TOTAL = Counter(
    "formation_orchestrator_destroys_total",
    "Destroy runs by result",
    ["result"],  # "removed", "failed"
)

RUN_FAILURES_TOTAL = Counter(
    "formation_orchestrator_run_failures_total",
    "Runs aborted by an error",
    ["operation", "error"],
)

RUN_DURATION = Histogram(
    "formation_orchestrator_run_duration_seconds",
    "Wall time of a deploy, status or destroy run",
    ["operation"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
)
