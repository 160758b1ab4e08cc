"""Domain service validating the producer connectivity Terraform module."""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from connectivity.domain.models.retryable_errors import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIME_BETWEEN_RETRIES,
    with_default_retryable_errors,
)
from connectivity.domain.models.terraform import (
    CommandResult,
    PlanExitCode,
    TerraformError,
    TerraformOptions,
)
from connectivity.domain.models.validation import ScenarioResult, ValidationReport
from connectivity.domain.ports.services import TerraformExecutor


logger = structlog.get_logger(__name__)


class ModuleValidationService:
    """Runs the module checks: init+validate, and plan without inputs.

    Every call builds its own options, so no state is shared between
    scenarios apart from what Terraform keeps in the module directory.
    """

    def __init__(
        self,
        terraform_executor: TerraformExecutor,
        module_dir: str,
        *,
        binary: str = "terraform",
        plan_file: str = "terraform.tfplan",
        timeout_seconds: float | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        time_between_retries: float = DEFAULT_TIME_BETWEEN_RETRIES,
    ) -> None:
        self._terraform = terraform_executor
        self._module_dir = os.path.abspath(module_dir)
        self._binary = binary
        self._plan_file = plan_file
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._time_between_retries = time_between_retries

    @property
    def module_dir(self) -> str:
        return self._module_dir

    async def init_and_validate(self) -> CommandResult:
        """Initialize and validate the module, failing on any error."""
        options = self._options(no_color=True)
        try:
            result = await self._terraform.init_and_validate(options)
        except TerraformError as e:
            raise ModuleValidationError(
                f"Failed to initialize and validate Terraform: {e}"
            ) from e

        logger.info("module_validated", module_dir=self._module_dir, attempts=result.attempts)
        return result

    async def plan_without_variables(
        self, expected: PlanExitCode = PlanExitCode.ERROR
    ) -> PlanExitCode:
        """Plan with no inputs; the module's required variables must make it fail."""
        options = self._options(
            reconfigure=True,
            lock=True,
            plan_file_path=self._plan_file,
            no_color=True,
        )
        actual = await self._terraform.plan_exit_code(options)
        if actual != expected:
            raise PlanExitCodeMismatchError(expected, actual)
        return actual

    async def plan_with_variables(
        self, variables: dict[str, Any], plan_file_path: str | None = None
    ) -> PlanExitCode:
        """Plan with the given inputs and return the detailed exit code."""
        options = self._options(
            variables=variables,
            lock=True,
            plan_file_path=plan_file_path,
            no_color=True,
        )
        return await self._terraform.plan_exit_code(options)

    async def run_all(self) -> ValidationReport:
        """Run every scenario, recording failures instead of stopping at the first."""
        scenarios: list[tuple[str, Callable[[], Awaitable[Any]]]] = [
            ("init_and_validate", self.init_and_validate),
            ("plan_without_variables", self.plan_without_variables),
        ]

        results: list[ScenarioResult] = []
        for name, scenario in scenarios:
            try:
                await scenario()
            except (ModuleValidationError, PlanExitCodeMismatchError, TerraformError) as e:
                logger.error("scenario_failed", scenario=name, error=str(e))
                results.append(ScenarioResult(name=name, passed=False, error=str(e)))
            else:
                logger.info("scenario_passed", scenario=name)
                results.append(ScenarioResult(name=name, passed=True))

        return ValidationReport(module_dir=self._module_dir, results=results)

    def _options(self, **overrides: Any) -> TerraformOptions:
        options = TerraformOptions(
            terraform_dir=self._module_dir,
            binary=self._binary,
            timeout_seconds=self._timeout_seconds,
            **overrides,
        )
        # Configured retry budget wins over the defaults, including zero
        return with_default_retryable_errors(options).model_copy(
            update={
                "max_retries": self._max_retries,
                "time_between_retries": self._time_between_retries,
            }
        )


class ModuleValidationError(Exception):
    """Raised when the module fails to initialize or validate."""


class PlanExitCodeMismatchError(Exception):
    """Raised when terraform plan returns an unexpected detailed exit code."""

    def __init__(self, expected: PlanExitCode, actual: PlanExitCode) -> None:
        super().__init__(
            f"Expected plan exit code {expected.value} ({expected.name}), "
            f"but got exit code: {actual.value} ({actual.name})"
        )
        self.expected = expected
        self.actual = actual
