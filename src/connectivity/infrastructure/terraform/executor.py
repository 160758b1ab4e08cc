"""Terraform executor implementation."""

from __future__ import annotations

import asyncio
import json
import os
import shutil
import time
from typing import Any

import structlog

from connectivity.domain.models.retryable_errors import match_retryable_error
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
from connectivity.domain.ports.services import TerraformExecutor
from connectivity.infrastructure.observability.metrics import (
    TERRAFORM_COMMAND_DURATION,
    TERRAFORM_COMMANDS_TOTAL,
    TERRAFORM_RETRIES_TOTAL,
)


logger = structlog.get_logger(__name__)


def format_args(command: str, options: TerraformOptions) -> list[str]:
    """Build the argument list for a Terraform subcommand."""
    args = [command]

    if command == "init":
        args.append(f"-upgrade={_format_bool(options.upgrade)}")
        if options.reconfigure:
            args.append("-reconfigure")
        if not options.backend:
            args.append("-backend=false")
    elif command == "plan":
        args.extend(["-input=false", "-detailed-exitcode"])
        args.append(f"-lock={_format_bool(options.lock)}")
        if options.lock_timeout:
            args.append(f"-lock-timeout={options.lock_timeout}")
        for key, value in options.variables.items():
            args.extend(["-var", f"{key}={_format_var_value(value)}"])
        for var_file in options.var_files:
            args.append(f"-var-file={var_file}")
        if options.plan_file_path:
            args.append(f"-out={options.plan_file_path}")

    if options.no_color:
        args.append("-no-color")
    return args


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _outcome(command: str, exit_code: int) -> str:
    if exit_code == 0:
        return "success"
    if command == "plan" and exit_code == PlanExitCode.CHANGES_PRESENT:
        return "changes"
    return "failure"


def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass


def _format_var_value(value: Any) -> str:
    # Terraform parses -var values as HCL, which accepts JSON literals
    if isinstance(value, str):
        return value
    return json.dumps(value)


class SubprocessTerraformExecutor(TerraformExecutor):
    """Runs the terraform binary found on PATH (or at ``options.binary``).

    ``init`` and ``validate`` are retried when their output matches one of
    ``options.retryable_errors``. ``plan`` runs once: its exit code is the
    result, not a failure.
    """

    def __init__(self, record_metrics: bool = True) -> None:
        self._record_metrics = record_metrics

    async def init(self, options: TerraformOptions) -> CommandResult:
        return await self._run_with_retries("init", options)

    async def validate(self, options: TerraformOptions) -> CommandResult:
        return await self._run_with_retries("validate", options)

    async def plan_exit_code(self, options: TerraformOptions) -> PlanExitCode:
        result = await self.run_command("plan", options)
        try:
            exit_code = PlanExitCode(result.exit_code)
        except ValueError as e:
            raise TerraformCommandError(
                f"terraform plan returned unexpected exit code {result.exit_code}: {result.output}",
                result,
            ) from e

        logger.info(
            "terraform_plan_exit_code",
            working_dir=options.terraform_dir,
            exit_code=exit_code.value,
            outcome=exit_code.name.lower(),
        )
        return exit_code

    async def run_command(
        self, command: str, options: TerraformOptions, attempt: int = 1
    ) -> CommandResult:
        """Run one subcommand to completion and capture its output."""
        if not os.path.isdir(options.terraform_dir):
            raise TerraformError(f"Terraform directory not found: {options.terraform_dir}")

        binary = shutil.which(options.binary)
        if binary is None:
            raise TerraformNotFoundError(f"Terraform binary not found: {options.binary}")

        args = [binary, *format_args(command, options)]
        env = {**os.environ, "TF_IN_AUTOMATION": "1", **options.env_vars}

        logger.info(
            "terraform_command_started",
            command=command,
            args=args[1:],
            working_dir=options.terraform_dir,
            attempt=attempt,
        )

        start = time.perf_counter()
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                cwd=options.terraform_dir,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._observe(command, "failure", time.perf_counter() - start)
            raise TerraformError(f"Failed to start terraform {command}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=options.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            _kill(process)
            await process.wait()
            self._observe(command, "timeout", time.perf_counter() - start)
            raise TerraformTimeoutError(
                f"terraform {command} timed out after {options.timeout_seconds}s "
                f"in {options.terraform_dir}"
            ) from e
        except BaseException:
            # Cancelled or interrupted: never leave terraform holding the state lock
            _kill(process)
            logger.warning("terraform_command_interrupted", command=command, pid=process.pid)
            raise

        duration = time.perf_counter() - start
        result = CommandResult(
            args=args,
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            duration_seconds=duration,
            attempts=attempt,
        )
        self._observe(command, _outcome(command, result.exit_code), duration)

        logger.info(
            "terraform_command_finished",
            command=command,
            exit_code=result.exit_code,
            duration_seconds=round(duration, 3),
        )
        logger.debug("terraform_command_output", command=command, output=result.output)
        return result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _run_with_retries(self, command: str, options: TerraformOptions) -> CommandResult:
        attempts = options.max_retries + 1
        attempt = 1
        while True:
            result = await self.run_command(command, options, attempt=attempt)
            if result.succeeded:
                return result

            reason = match_retryable_error(result.output, options.retryable_errors)
            if reason is None or options.max_retries == 0:
                raise TerraformCommandError(
                    f"terraform {command} failed with exit code {result.exit_code}: {result.output}",
                    result,
                )
            if attempt >= attempts:
                raise MaxRetriesExceededError(
                    f"terraform {command} still failing after {attempts} attempts ({reason}): "
                    f"{result.output}",
                    result,
                )

            logger.warning(
                "terraform_command_retrying",
                command=command,
                attempt=attempt,
                max_retries=options.max_retries,
                reason=reason,
                sleep_seconds=options.time_between_retries,
            )
            if self._record_metrics:
                TERRAFORM_RETRIES_TOTAL.labels(command=command).inc()
            await asyncio.sleep(options.time_between_retries)
            attempt += 1

    def _observe(self, command: str, outcome: str, duration: float) -> None:
        if not self._record_metrics:
            return
        TERRAFORM_COMMANDS_TOTAL.labels(command=command, outcome=outcome).inc()
        TERRAFORM_COMMAND_DURATION.labels(command=command).observe(duration)
