"""Identity endpoint client: exchanges an API key for a session token."""

from __future__ import annotations

import time

import httpx
import structlog
from pydantic import SecretStr

from formation_orchestrator.domain.models.formation import SessionToken
from formation_orchestrator.domain.ports.services import AuthenticationError, Authenticator
from formation_orchestrator.infrastructure.observability.metrics import (
    PLATFORM_REQUEST_DURATION,
    PLATFORM_REQUESTS_TOTAL,
)


logger = structlog.get_logger(__name__)


class HttpAuthenticator(Authenticator):
    """Token exchange against the platform identity endpoint.

    Sends an empty-body POST authorized with the API key; the raw response
    body is the bearer token. Nothing is retried.
    """

    def __init__(self, client: httpx.AsyncClient, identity_url: str) -> None:
        self._client = client
        self._identity_url = identity_url

    async def authenticate(self, credential: SecretStr) -> SessionToken:
        headers = {
            "Authorization": f"Bearer {credential.get_secret_value()}",
            "Content-Length": "0",
        }
        start = time.monotonic()
        try:
            response = await self._client.post(self._identity_url, headers=headers)
        except httpx.HTTPError as e:
            PLATFORM_REQUESTS_TOTAL.labels(operation="authenticate", status_code="error").inc()
            logger.error("authentication_transport_failed", error_type=type(e).__name__)
            raise AuthenticationError(
                f"Could not reach identity endpoint: {type(e).__name__}"
            ) from e
        finally:
            PLATFORM_REQUEST_DURATION.labels(operation="authenticate").observe(
                time.monotonic() - start
            )

        PLATFORM_REQUESTS_TOTAL.labels(
            operation="authenticate", status_code=str(response.status_code)
        ).inc()

        if response.status_code != httpx.codes.OK:
            logger.error("authentication_rejected", status_code=response.status_code)
            raise AuthenticationError(
                f"Identity endpoint returned status {response.status_code}"
            )

        token = response.text.strip()
        if not token:
            logger.error("authentication_empty_token")
            raise AuthenticationError("Identity endpoint returned an empty token")

        logger.info("authenticated")
        return SessionToken(value=SecretStr(token))
