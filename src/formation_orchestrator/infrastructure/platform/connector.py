"""HTTP platform connector: one pooled client per orchestration run."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from formation_orchestrator.config import PlatformSettings
from formation_orchestrator.domain.ports.services import (
    Authenticator,
    FormationController,
    PlatformConnector,
    PlatformSession,
)
from formation_orchestrator.infrastructure.platform.formations import HttpFormationController
from formation_orchestrator.infrastructure.platform.identity import HttpAuthenticator


class HttpPlatformSession(PlatformSession):
    def __init__(self, client: httpx.AsyncClient, settings: PlatformSettings) -> None:
        self._authenticator = HttpAuthenticator(client, settings.identity_url)
        self._formations = HttpFormationController(client, settings.formations_url)

    @property
    def authenticator(self) -> Authenticator:
        return self._authenticator

    @property
    def formations(self) -> FormationController:
        return self._formations


class HttpPlatformConnector(PlatformConnector):
    """Opens an ``httpx.AsyncClient`` with the configured timeouts per session.

    ``transport`` replaces the network transport; tests pass an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: PlatformSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PlatformSession]:
        timeout = httpx.Timeout(
            self._settings.request_timeout_seconds,
            connect=self._settings.connect_timeout_seconds,
        )
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            yield HttpPlatformSession(client, self._settings)
