"""OpenTelemetry tracing configuration."""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
)

from formation_orchestrator.config import ObservabilitySettings


def setup_tracing(settings: ObservabilitySettings) -> bool:
    """Install a tracer provider exporting deploy/destroy/status spans.

    Returns False when tracing is disabled; spans are then no-ops.
    """
    if not settings.tracing_enabled:
        return False

    resource = Resource.create({
        "service.name": settings.service_name,
        "service.version": "0.1.0",
    })

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    return True
