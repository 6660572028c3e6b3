"""Deployment API routes."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Response,
    status,
)
from pydantic import ValidationError

from formation_orchestrator.api.dependencies.services import (
    get_deploy_config,
    get_reporter,
    get_service_container,
    ServiceContainer,
)
from formation_orchestrator.api.schemas.deployment_schemas import (
    CreateDeploymentRequest,
    DeploymentListResponse,
    DeploymentResponse,
    HealthReportResponse,
    StepResponse,
)
from formation_orchestrator.config import DeployConfig
from formation_orchestrator.domain.models.deployment import DeploymentRecord
from formation_orchestrator.domain.models.formation import validate_resource_name
from formation_orchestrator.domain.models.resource_state import ResourceStateError
from formation_orchestrator.domain.ports.services import (
    AuthenticationError,
    FormationDeleteError,
    FormationRequestError,
)
from formation_orchestrator.domain.services.resource_manager import ResourceCreateError
from formation_orchestrator.infrastructure.observability.metrics import (
    DEPLOYMENTS_TOTAL,
    DESTROYS_TOTAL,
    RUN_DURATION,
    RUN_FAILURES_TOTAL,
)
from formation_orchestrator.infrastructure.reporting.reporter import RecordingReporter


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/deployments", tags=["deployments"])


def _steps(reporter: RecordingReporter) -> list[StepResponse]:
    return [
        StepResponse(status=step_status.value, message=message)
        for step_status, message in reporter.steps
    ]


def _checked_name(name: str) -> str:
    try:
        return validate_resource_name(name)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


async def _stored_record(container: ServiceContainer, name: str) -> DeploymentRecord | None:
    try:
        return await container.record_repository.get(_checked_name(name))
    except ResourceStateError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


async def _require_record(container: ServiceContainer, name: str) -> DeploymentRecord:
    record = await _stored_record(container, name)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No deployment recorded for {name}")
    return record


@router.post("", response_model=DeploymentResponse)
async def create_deployment(
    request: CreateDeploymentRequest,
    response: Response,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
    config: Annotated[DeployConfig, Depends(get_deploy_config)],
    reporter: Annotated[RecordingReporter, Depends(get_reporter)],
) -> DeploymentResponse:
    """Deploy an image as the configured formation."""
    try:
        run_config = config.with_overrides(request.formation_name, request.flight_name)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[err["msg"] for err in e.errors(include_input=False)],
        ) from e

    orchestrator = container.orchestrator(reporter)
    try:
        with RUN_DURATION.labels(operation="deploy").time():
            record = await orchestrator.deploy(run_config, request.image)
    except (AuthenticationError, FormationRequestError) as e:
        RUN_FAILURES_TOTAL.labels(operation="deploy", error=type(e).__name__).inc()
        raise HTTPException(status_code=502, detail=str(e)) from e
    except ResourceCreateError as e:
        RUN_FAILURES_TOTAL.labels(operation="deploy", error=type(e).__name__).inc()
        raise HTTPException(status_code=500, detail=str(e)) from e

    DEPLOYMENTS_TOTAL.labels(outcome=record.outcome.value).inc()
    if record.created:
        await container.record_repository.save(record)
    else:
        try:
            stored = await container.record_repository.get(record.name)
        except ResourceStateError:
            stored = None
        if stored is not None and stored.created:
            # A rejected create never replaces the record of a live formation.
            logger.warning(
                "deployment_record_kept",
                formation=record.name,
                outcome=record.outcome.value,
            )
        else:
            await container.record_repository.save(record)

    response.status_code = status.HTTP_201_CREATED if record.created else status.HTTP_200_OK
    return DeploymentResponse.from_record(record, _steps(reporter))


@router.get("", response_model=DeploymentListResponse)
async def list_deployments(
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> DeploymentListResponse:
    records = await container.record_repository.list_all()
    return DeploymentListResponse(
        items=[DeploymentResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/{name}", response_model=DeploymentResponse)
async def get_deployment(
    name: str,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> DeploymentResponse:
    record = await _require_record(container, name)
    return DeploymentResponse.from_record(record)


@router.get("/{name}/status", response_model=HealthReportResponse)
async def deployment_status(
    name: str,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
    reporter: Annotated[RecordingReporter, Depends(get_reporter)],
) -> HealthReportResponse:
    """Health of a recorded deployment. Does not contact the platform."""
    record = await _require_record(container, name)
    try:
        with RUN_DURATION.labels(operation="status").time():
            report = await container.orchestrator(reporter).status(record)
    except ResourceStateError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return HealthReportResponse.from_report(report, _steps(reporter))


@router.delete("/{name}", response_model=HealthReportResponse)
async def destroy_deployment(
    name: str,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
    config: Annotated[DeployConfig, Depends(get_deploy_config)],
    reporter: Annotated[RecordingReporter, Depends(get_reporter)],
) -> HealthReportResponse:
    """Remove the formation and forget its record.

    Without a stored record the formation is destroyed by name alone.
    """
    record = await _stored_record(container, name)
    if record is None:
        logger.info("destroy_without_record", formation=name)
        record = DeploymentRecord.legacy(name)

    orchestrator = container.orchestrator(reporter)
    try:
        with RUN_DURATION.labels(operation="destroy").time():
            report = await orchestrator.destroy(record, config)
    except ResourceStateError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except (AuthenticationError, FormationDeleteError) as e:
        DESTROYS_TOTAL.labels(result="failed").inc()
        RUN_FAILURES_TOTAL.labels(operation="destroy", error=type(e).__name__).inc()
        raise HTTPException(status_code=502, detail=str(e)) from e

    DESTROYS_TOTAL.labels(result="removed").inc()
    await container.record_repository.delete(name)
    return HealthReportResponse.from_report(report, _steps(reporter))
