"""Service port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from enum import Enum

from pydantic import SecretStr

from formation_orchestrator.domain.models.deployment import CreateOutcome, HealthStatus
from formation_orchestrator.domain.models.formation import FormationSpec, SessionToken


class Authenticator(ABC):
    """Port for exchanging the API key for a session token."""

    @abstractmethod
    async def authenticate(self, credential: SecretStr) -> SessionToken:
        """Return a bearer token. Raises AuthenticationError on any failure."""


class FormationController(ABC):
    """Port for create, read and delete of a remote formation."""

    @abstractmethod
    async def create(self, token: SessionToken, spec: FormationSpec) -> CreateOutcome:
        """Create the formation and classify the response."""

    @abstractmethod
    async def read_url(self, token: SessionToken, formation_name: str) -> str:
        """Return the public URL of a formation, or "" when it cannot be read."""

    @abstractmethod
    async def delete(self, token: SessionToken, formation_name: str) -> None:
        """Force-delete a formation. Raises FormationDeleteError on failure."""


class PlatformSession(ABC):
    """Authenticator and formation controller sharing one connection pool."""

    @property
    @abstractmethod
    def authenticator(self) -> Authenticator:
        """Identity exchange for this session."""

    @property
    @abstractmethod
    def formations(self) -> FormationController:
        """Formation operations for this session."""


class PlatformConnector(ABC):
    """Port that opens a platform session scoped to a single run."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[PlatformSession]:
        """Open a session; it is closed when the context exits."""


class StepStatus(str, Enum):
    """Outcome attached to a reported step."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class Reporter(ABC):
    """Port for human-readable progress of a run."""

    @abstractmethod
    def update(self, message: str) -> None:
        """Replace the current in-progress message."""

    @abstractmethod
    def step(self, status: StepStatus, message: str) -> None:
        """Record a completed step."""

    @abstractmethod
    def report_health(self, health: HealthStatus) -> None:
        """Publish the health of the deployment as observed by this run."""


class OrchestrationError(Exception):
    """Base class for errors that end an orchestration run."""


class AuthenticationError(OrchestrationError):
    """Raised when the identity exchange fails. Fatal for the run."""


class FormationRequestError(OrchestrationError):
    """Raised when a formation create request could not be sent. Fatal for the run."""


class FormationDeleteError(OrchestrationError):
    """Raised when the platform did not confirm a formation delete."""

    def __init__(self, formation_name: str, detail: str) -> None:
        super().__init__(f"Unable to remove formation {formation_name}: {detail}")
        self.formation_name = formation_name
        self.detail = detail
