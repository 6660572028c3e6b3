"""Domain models package."""

from formation_orchestrator.domain.models.base import (
    DomainModel,
    generate_id,
    utc_now,
    ValueObject,
)
from formation_orchestrator.domain.models.deployment import (
    CREATE_OUTCOME_MESSAGES,
    CreateOutcome,
    DeploymentRecord,
    HealthReport,
    HealthStatus,
)
from formation_orchestrator.domain.models.formation import (
    FlightSpec,
    FormationSpec,
    MAX_NAME_LENGTH,
    SessionToken,
    validate_resource_name,
)
from formation_orchestrator.domain.models.resource_state import (
    DEPLOYMENT_RESOURCE,
    dump_resource_state,
    InvalidLifecycleTransitionError,
    LegacyResourceState,
    load_resource_state,
    ResourceEntry,
    ResourceLifecycle,
    ResourceState,
    ResourceStateError,
    ResourceStateV2,
    VALID_LIFECYCLE_TRANSITIONS,
)


__all__ = [
    "CREATE_OUTCOME_MESSAGES",
    "CreateOutcome",
    "DEPLOYMENT_RESOURCE",
    "DeploymentRecord",
    "DomainModel",
    "FlightSpec",
    "FormationSpec",
    "HealthReport",
    "HealthStatus",
    "InvalidLifecycleTransitionError",
    "LegacyResourceState",
    "MAX_NAME_LENGTH",
    "ResourceEntry",
    "ResourceLifecycle",
    "ResourceState",
    "ResourceStateError",
    "ResourceStateV2",
    "SessionToken",
    "VALID_LIFECYCLE_TRANSITIONS",
    "ValueObject",
    "dump_resource_state",
    "generate_id",
    "load_resource_state",
    "utc_now",
    "validate_resource_name",
]
