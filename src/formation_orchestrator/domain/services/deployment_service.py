"""Domain service driving the deploy, status and destroy lifecycle of a formation."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from opentelemetry import trace

from formation_orchestrator.config import DeployConfig
from formation_orchestrator.domain.models.deployment import (
    CreateOutcome,
    DeploymentRecord,
    HealthReport,
    HealthStatus,
)
from formation_orchestrator.domain.models.formation import FormationSpec
from formation_orchestrator.domain.ports.services import (
    FormationDeleteError,
    PlatformConnector,
    Reporter,
    StepStatus,
)
from formation_orchestrator.domain.services.resource_manager import (
    ResourceContext,
    ResourceManager,
)


logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

STATUS_MESSAGE = "Application successfully deployed"


class DeploymentOrchestrator:
    """Coordinates one formation deployment against the compute platform.

    Each call is an independent run: it opens its own platform session,
    authenticates before any other remote call, and closes the session
    before returning. Nothing is retried; the caller re-runs an operation
    to retry it.
    """

    def __init__(
        self,
        connector: PlatformConnector,
        reporter: Reporter,
        resource_manager_factory: Callable[[], ResourceManager] = ResourceManager.for_deployment,
    ) -> None:
        self._connector = connector
        self._reporter = reporter
        self._resource_manager_factory = resource_manager_factory

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_resources(self, record: DeploymentRecord) -> ResourceManager:
        """Resource manager primed with the record's state, or rebuilt from its name."""
        manager = self._resource_manager_factory()
        if record.resource_state is None:
            manager.reconstruct(record.name)
        else:
            manager.load_state(record.resource_state)
        return manager

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    async def deploy(self, config: DeployConfig, image: str) -> DeploymentRecord:
        """Create the formation for ``image`` and return the deployment record.

        Create responses other than 200 are reported and produce a record
        with ``created=False`` rather than an error. Authentication failures
        and unsendable requests raise.
        """
        self._reporter.update("Deploy application")
        manager = self._resource_manager_factory()
        spec = FormationSpec.single_flight(config.formation_name, config.flight_name, image)
        manager.bind_formation(spec.name)
        log = logger.bind(formation=spec.name, flight=config.flight_name)

        with tracer.start_as_current_span("formation.deploy") as span:
            span.set_attribute("formation.name", spec.name)

            async with self._connector.session() as session:
                self._reporter.update("Authenticating with Seaplane")
                token = await session.authenticator.authenticate(config.api_key)
                self._reporter.step(StepStatus.OK, "Successfully authenticated with Seaplane")

                self._reporter.update("Launching Formation")
                outcome = await session.formations.create(token, spec)
                span.set_attribute("formation.outcome", outcome.value)

                url = ""
                if outcome == CreateOutcome.CREATED:
                    self._reporter.step(StepStatus.OK, outcome.message or "")
                    self._reporter.report_health(HealthStatus.ALIVE)
                    url = await session.formations.read_url(token, spec.name)
                    self._reporter.step(
                        StepStatus.OK,
                        f"We are launching your formation on {url} "
                        "give it a minute if the URL does not immediately load",
                    )
                else:
                    if outcome.message is not None:
                        self._reporter.step(StepStatus.ERROR, outcome.message)
                    log.warning("formation_not_created", outcome=outcome.value)

        if outcome == CreateOutcome.CREATED:
            await manager.create_all(
                ResourceContext(
                    formation_name=spec.name,
                    flight_name=config.flight_name,
                    image=image,
                    url=url,
                )
            )
        else:
            manager.mark_orphaned(f"formation create returned {outcome.value}")

        record = DeploymentRecord(
            name=spec.name,
            url=url,
            created=outcome == CreateOutcome.CREATED,
            outcome=outcome,
            resource_state=manager.state(),
        )
        log.info("deployment_recorded", created=record.created, url=record.url)
        return record

    async def status(self, record: DeploymentRecord) -> HealthReport:
        """Report the health of a deployment without contacting the platform.

        The report only states that the deploy call completed; per-resource
        status callbacks run but do not change the result.
        """
        if record is None:
            raise ValueError("A deployment record is required to report status")

        with tracer.start_as_current_span("formation.status"):
            manager = self._load_resources(record)
            contributions = await manager.status_all()
            logger.debug(
                "resource_status_collected",
                formation=record.name,
                statuses={k: v.value if v else None for k, v in contributions.items()},
            )

        return HealthReport(
            health=HealthStatus.READY,
            message=STATUS_MESSAGE,
            external=True,
        )

    async def destroy(self, record: DeploymentRecord, config: DeployConfig) -> HealthReport:
        """Delete the remote formation, then tear down every declared resource.

        A failed delete raises FormationDeleteError and leaves the recorded
        state untouched so the destroy can be re-run.
        """
        manager = self._load_resources(record)
        formation_name = manager.state().formation_name or record.name
        log = logger.bind(formation=formation_name)

        with tracer.start_as_current_span("formation.destroy") as span:
            span.set_attribute("formation.name", formation_name)

            async with self._connector.session() as session:
                self._reporter.update("Authenticating with Seaplane")
                token = await session.authenticator.authenticate(config.api_key)

                self._reporter.update(f"Removing formation {formation_name}")
                try:
                    await session.formations.delete(token, formation_name)
                except FormationDeleteError:
                    self._reporter.step(
                        StepStatus.ERROR, f"Unable to remove formation {formation_name}"
                    )
                    raise

            self._reporter.step(StepStatus.OK, f"Removed formation {formation_name}")
            self._reporter.report_health(HealthStatus.DOWN)

            await manager.destroy_all()

        log.info("deployment_destroyed")
        return HealthReport(
            health=HealthStatus.DOWN,
            message=f"Formation {formation_name} removed",
            external=True,
        )
