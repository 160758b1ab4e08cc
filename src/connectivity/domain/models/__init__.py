"""Domain models package."""

from connectivity.domain.models.base import ValueObject
from connectivity.domain.models.endpoint import (
    AlloyDbProducer,
    CloudSqlProducer,
    PRODUCER_FIELDS,
    ProducerKind,
    PscEndpoint,
)
from connectivity.domain.models.terraform import (
    CommandResult,
    MaxRetriesExceededError,
    PlanExitCode,
    TerraformCommandError,
    TerraformError,
    TerraformNotFoundError,
    TerraformOptions,
    TerraformTimeoutError,
)
from connectivity.domain.models.validation import (
    ScenarioResult,
    ValidationReport,
)


__all__ = [
    "AlloyDbProducer",
    "CloudSqlProducer",
    "CommandResult",
    "MaxRetriesExceededError",
    "PRODUCER_FIELDS",
    "PlanExitCode",
    "ProducerKind",
    "PscEndpoint",
    "ScenarioResult",
    "TerraformCommandError",
    "TerraformError",
    "TerraformNotFoundError",
    "TerraformOptions",
    "TerraformTimeoutError",
    "ValidationReport",
    "ValueObject",
]
