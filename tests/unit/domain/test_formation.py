"""Unit tests for formation and flight specifications."""

from __future__ import annotations

import pytest
from pydantic import SecretStr, ValidationError

from formation_orchestrator.domain.models.formation import (
    FlightSpec,
    FormationSpec,
    MAX_NAME_LENGTH,
    SessionToken,
    validate_resource_name,
)


class TestValidateResourceName:
    @pytest.mark.parametrize(
        "name",
        [
            "demoapp",
            "web",
            "a",
            "my-app",
            "app-2-web",
            "ABCdef123",
            "a" * MAX_NAME_LENGTH,
            "-leading",
            "trailing-",
        ],
    )
    def test_accepts_alphanumeric_and_single_hyphens(self, name: str) -> None:
        assert validate_resource_name(name) == name

    def test_rejects_double_hyphen(self) -> None:
        with pytest.raises(ValueError, match="double hyphens"):
            validate_resource_name("my--app")

    def test_rejects_too_long(self) -> None:
        with pytest.raises(ValueError, match="longer than 27"):
            validate_resource_name("a" * (MAX_NAME_LENGTH + 1))

    @pytest.mark.parametrize(
        "name", ["my_app", "my app", "app.io", "café", "app/x", "demoapp\n", "web\n"]
    )
    def test_rejects_other_characters(self, name: str) -> None:
        with pytest.raises(ValueError, match="can only contain"):
            validate_resource_name(name)

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="required"):
            validate_resource_name("")

    def test_message_names_the_kind(self) -> None:
        with pytest.raises(ValueError, match="^flight name"):
            validate_resource_name("x" * 40, kind="flight")


class TestFlightSpec:
    def test_defaults_to_single_replica(self) -> None:
        flight = FlightSpec(name="web", image="registry.example/app:1")
        assert flight.minimum == 1
        assert flight.maximum == 1

    def test_minimum_above_maximum_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FlightSpec(name="web", image="img", minimum=3, maximum=2)

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FlightSpec(name="web--1", image="img")

    def test_empty_image_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FlightSpec(name="web", image="")

    def test_immutable(self) -> None:
        flight = FlightSpec(name="web", image="img")
        with pytest.raises(ValidationError):
            flight.image = "other"  # type: ignore[misc]


class TestFormationSpec:
    def test_single_flight_payload(self) -> None:
        spec = FormationSpec.single_flight("demoapp", "web", "registry.example/demoapp:latest")
        assert spec.payload() == {
            "flights": [
                {
                    "name": "web",
                    "image": "registry.example/demoapp:latest",
                    "minimum": 1,
                    "maximum": 1,
                },
            ],
        }

    def test_payload_keeps_flight_order(self) -> None:
        spec = FormationSpec(
            name="demoapp",
            flights=[
                FlightSpec(name="web", image="img-a"),
                FlightSpec(name="worker", image="img-b", minimum=0, maximum=3),
            ],
        )
        assert [f["name"] for f in spec.payload()["flights"]] == ["web", "worker"]

    def test_requires_a_flight(self) -> None:
        with pytest.raises(ValidationError):
            FormationSpec(name="demoapp", flights=[])

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FormationSpec.single_flight("demo--app", "web", "img")


class TestSessionToken:
    def test_authorization_header(self) -> None:
        token = SessionToken(value=SecretStr("abc"))
        assert token.authorization_header == "Bearer abc"

    def test_value_hidden_from_repr(self) -> None:
        token = SessionToken(value=SecretStr("abc"))
        assert "abc" not in repr(token)
        assert "abc" not in str(token)
