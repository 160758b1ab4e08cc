"""Service port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from connectivity.domain.models.terraform import CommandResult, PlanExitCode, TerraformOptions


class TerraformExecutor(ABC):
    """Port for Terraform execution."""

    @abstractmethod
    async def init(self, options: TerraformOptions) -> CommandResult:
        """Run terraform init in the module directory."""

    @abstractmethod
    async def validate(self, options: TerraformOptions) -> CommandResult:
        """Run terraform validate in the module directory."""

    @abstractmethod
    async def plan_exit_code(self, options: TerraformOptions) -> PlanExitCode:
        """Run terraform plan with -detailed-exitcode and return the code."""

    async def init_and_validate(self, options: TerraformOptions) -> CommandResult:
        """Run init followed by validate, returning the validate result."""
        await self.init(options)
        return await self.validate(options)
