"""Application entrypoint."""

from __future__ import annotations

import uvicorn

from formation_orchestrator.api.app import create_app
from formation_orchestrator.config import get_settings
from formation_orchestrator.infrastructure.observability.logging import setup_logging


def main() -> None:
    """Run the application."""
    settings = get_settings()
    setup_logging(settings.observability.log_level, json_logs=not settings.debug)

    uvicorn.run(
        "formation_orchestrator.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.observability.log_level.lower(),
    )


if __name__ == "__main__":
    main()
