"""Formation endpoint client: create, read URL and delete."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from formation_orchestrator.domain.models.deployment import CreateOutcome
from formation_orchestrator.domain.models.formation import FormationSpec, SessionToken
from formation_orchestrator.domain.ports.services import (
    FormationController,
    FormationDeleteError,
    FormationRequestError,
)
from formation_orchestrator.infrastructure.observability.metrics import (
    PLATFORM_REQUEST_DURATION,
    PLATFORM_REQUESTS_TOTAL,
)


logger = structlog.get_logger(__name__)


class FormationUrlResponse(BaseModel):
    """Body of a formation read."""

    url: str

    model_config = {"extra": "ignore"}


@asynccontextmanager
async def _timed(operation: str) -> AsyncIterator[None]:
    start = time.monotonic()
    try:
        yield
    finally:
        PLATFORM_REQUEST_DURATION.labels(operation=operation).observe(time.monotonic() - start)


class HttpFormationController(FormationController):
    """Formation operations against ``{compute_url}/formations/{name}``."""

    def __init__(self, client: httpx.AsyncClient, formations_url: str) -> None:
        self._client = client
        self._formations_url = formations_url.rstrip("/")

    def _url(self, formation_name: str) -> str:
        return f"{self._formations_url}/{formation_name}"

    async def _send(
        self,
        operation: str,
        method: str,
        token: SessionToken,
        formation_name: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one authorized request; transport errors propagate as httpx errors."""
        headers = {"Authorization": token.authorization_header}
        async with _timed(operation):
            try:
                response = await self._client.request(
                    method, self._url(formation_name), headers=headers, **kwargs
                )
            except httpx.HTTPError:
                PLATFORM_REQUESTS_TOTAL.labels(operation=operation, status_code="error").inc()
                raise
        PLATFORM_REQUESTS_TOTAL.labels(
            operation=operation, status_code=str(response.status_code)
        ).inc()
        return response

    async def create(self, token: SessionToken, spec: FormationSpec) -> CreateOutcome:
        log = logger.bind(formation=spec.name)
        log.info("formation_create_requested", flights=[f.name for f in spec.flights])
        try:
            response = await self._send(
                "create", "POST", token, spec.name, json=spec.payload()
            )
        except httpx.HTTPError as e:
            log.error("formation_create_transport_failed", error=str(e))
            raise FormationRequestError(
                f"Could not send create request for formation {spec.name}: {e}"
            ) from e

        outcome = CreateOutcome.from_status_code(response.status_code)
        if outcome == CreateOutcome.CREATED:
            log.info("formation_created")
        else:
            log.warning(
                "formation_create_rejected",
                status_code=response.status_code,
                outcome=outcome.value,
            )
        return outcome

    async def read_url(self, token: SessionToken, formation_name: str) -> str:
        log = logger.bind(formation=formation_name)
        try:
            response = await self._send("read", "GET", token, formation_name)
        except httpx.HTTPError as e:
            log.warning("formation_url_unavailable", error=str(e))
            return ""

        if response.status_code != httpx.codes.OK:
            log.warning("formation_url_unavailable", status_code=response.status_code)
            return ""

        try:
            body = FormationUrlResponse.model_validate_json(response.content)
        except ValidationError as e:
            log.warning("formation_url_unparseable", error_count=e.error_count())
            return ""

        log.info("formation_url_read", url=body.url)
        return body.url

    async def delete(self, token: SessionToken, formation_name: str) -> None:
        log = logger.bind(formation=formation_name)
        log.info("formation_delete_requested")
        try:
            response = await self._send(
                "delete", "DELETE", token, formation_name, params={"force": "true"}
            )
        except httpx.HTTPError as e:
            log.error("formation_delete_transport_failed", error=str(e))
            raise FormationDeleteError(formation_name, str(e)) from e

        if response.status_code != httpx.codes.OK:
            log.error("formation_delete_rejected", status_code=response.status_code)
            raise FormationDeleteError(
                formation_name, f"platform returned status {response.status_code}"
            )

        log.info("formation_deleted")
