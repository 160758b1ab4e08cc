"""Terraform invocation domain models."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import Field

from connectivity.domain.models.base import ValueObject


class PlanExitCode(IntEnum):
    """Exit codes of ``terraform plan -detailed-exitcode``."""

    NO_CHANGES = 0
    ERROR = 1
    CHANGES_PRESENT = 2


class TerraformOptions(ValueObject):
    """How to invoke Terraform against one module directory."""

    terraform_dir: str
    binary: str = "terraform"
    variables: dict[str, Any] = Field(default_factory=dict)
    var_files: list[str] = Field(default_factory=list)
    env_vars: dict[str, str] = Field(default_factory=dict)
    reconfigure: bool = False
    upgrade: bool = False
    backend: bool = True
    lock: bool = False
    lock_timeout: str | None = None
    plan_file_path: str | None = None
    no_color: bool = False
    retryable_errors: dict[str, str] = Field(default_factory=dict)
    max_retries: int = 0
    time_between_retries: float = 0.0
    timeout_seconds: float | None = None


class CommandResult(ValueObject):
    """Outcome of one Terraform subcommand."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    attempts: int = 1

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class TerraformError(Exception):
    """Base class for Terraform invocation failures."""


class TerraformNotFoundError(TerraformError):
    """Raised when the terraform binary cannot be located."""


class TerraformTimeoutError(TerraformError):
    """Raised when a Terraform subcommand exceeds its timeout."""


class TerraformCommandError(TerraformError):
    """Raised when a Terraform subcommand exits unsuccessfully."""

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


class MaxRetriesExceededError(TerraformCommandError):
    """Raised when a retryable error persists past the retry budget."""
