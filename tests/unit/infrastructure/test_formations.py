"""Unit tests for the formation endpoint client."""

from __future__ import annotations

import json

import httpx
import pytest

from formation_orchestrator.domain.models.deployment import CreateOutcome
from formation_orchestrator.domain.models.formation import FormationSpec, SessionToken
from formation_orchestrator.domain.ports.services import (
    FormationDeleteError,
    FormationRequestError,
)
from formation_orchestrator.infrastructure.platform.formations import HttpFormationController


FORMATIONS_URL = "https://compute.test/v1/formations"


def _controller(handler) -> HttpFormationController:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpFormationController(client, FORMATIONS_URL + "/")


@pytest.fixture
def spec() -> FormationSpec:
    return FormationSpec.single_flight("demoapp", "web", "registry.example/demoapp:latest")


class TestCreate:
    @pytest.mark.asyncio
    async def test_posts_flights(self, spec: FormationSpec, session_token: SessionToken) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        outcome = await _controller(handler).create(session_token, spec)

        assert outcome == CreateOutcome.CREATED
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"{FORMATIONS_URL}/demoapp"
        assert request.headers["authorization"] == "Bearer session-token-123"
        assert json.loads(request.content) == spec.payload()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "outcome"),
        [
            (400, CreateOutcome.BAD_REQUEST),
            (401, CreateOutcome.UNAUTHORIZED),
            (403, CreateOutcome.FORBIDDEN),
            (404, CreateOutcome.NOT_FOUND),
            (409, CreateOutcome.CONFLICT),
            (502, CreateOutcome.UNREPORTED),
        ],
    )
    async def test_classifies_status(
        self,
        spec: FormationSpec,
        session_token: SessionToken,
        status_code: int,
        outcome: CreateOutcome,
    ) -> None:
        controller = _controller(lambda _: httpx.Response(status_code))
        assert await controller.create(session_token, spec) == outcome

    @pytest.mark.asyncio
    async def test_transport_error(self, spec: FormationSpec, session_token: SessionToken) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FormationRequestError, match="demoapp"):
            await _controller(handler).create(session_token, spec)


class TestReadUrl:
    @pytest.mark.asyncio
    async def test_returns_url(self, session_token: SessionToken) -> None:
        controller = _controller(
            lambda _: httpx.Response(200, json={"url": "https://demoapp.test", "flights": []})
        )
        assert await controller.read_url(session_token, "demoapp") == "https://demoapp.test"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>"),
            httpx.Response(200, json={"address": "elsewhere"}),
            httpx.Response(404),
        ],
    )
    async def test_degrades_to_empty(
        self, session_token: SessionToken, response: httpx.Response
    ) -> None:
        controller = _controller(lambda _: response)
        assert await controller.read_url(session_token, "demoapp") == ""

    @pytest.mark.asyncio
    async def test_transport_error_degrades_to_empty(self, session_token: SessionToken) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        assert await _controller(handler).read_url(session_token, "demoapp") == ""


class TestDelete:
    @pytest.mark.asyncio
    async def test_forced_delete(self, session_token: SessionToken) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        await _controller(handler).delete(session_token, "demoapp")

        request = seen[0]
        assert request.method == "DELETE"
        assert request.url.path == "/v1/formations/demoapp"
        assert request.url.params["force"] == "true"
        assert request.headers["authorization"] == "Bearer session-token-123"

    @pytest.mark.asyncio
    async def test_rejected_delete_raises(self, session_token: SessionToken) -> None:
        controller = _controller(lambda _: httpx.Response(404))
        with pytest.raises(FormationDeleteError) as exc_info:
            await controller.delete(session_token, "demoapp")
        assert exc_info.value.formation_name == "demoapp"
        assert str(exc_info.value).startswith("Unable to remove formation demoapp")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, session_token: SessionToken) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FormationDeleteError):
            await _controller(handler).delete(session_token, "demoapp")
