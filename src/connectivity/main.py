"""Command-line entrypoint running the module checks."""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from connectivity.config import get_settings, TerraformSettings
from connectivity.domain.models.validation import ValidationReport
from connectivity.domain.ports.services import TerraformExecutor
from connectivity.domain.services.module_validation import ModuleValidationService
from connectivity.infrastructure.observability.logging import setup_logging
from connectivity.infrastructure.observability.metrics import SCENARIO_RESULTS_TOTAL
from connectivity.infrastructure.terraform.executor import SubprocessTerraformExecutor


logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check that the producer connectivity Terraform module initializes, "
        "validates, and rejects a plan without its required variables"
    )
    parser.add_argument(
        "--module-dir",
        type=str,
        help="Terraform module directory (defaults to TF_MODULE_DIR)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level (defaults to LOG_LEVEL)",
    )
    return parser


def build_service(
    terraform_executor: TerraformExecutor,
    settings: TerraformSettings,
    module_dir: str | None = None,
) -> ModuleValidationService:
    """Wire the validation service from Terraform settings."""
    return ModuleValidationService(
        terraform_executor,
        module_dir or settings.module_dir,
        binary=settings.binary,
        plan_file=settings.plan_file,
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
        time_between_retries=settings.time_between_retries,
    )


async def run_checks(service: ModuleValidationService, record_metrics: bool = True) -> ValidationReport:
    report = await service.run_all()
    if record_metrics:
        for result in report.results:
            SCENARIO_RESULTS_TOTAL.labels(
                scenario=result.name, passed=str(result.passed).lower()
            ).inc()
    return report


def main(argv: list[str] | None = None) -> int:
    """Run both scenarios and return the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    observability = settings.observability
    setup_logging(args.log_level or observability.log_level, observability.json_logs)

    service = build_service(
        SubprocessTerraformExecutor(record_metrics=observability.metrics_enabled),
        settings.terraform,
        module_dir=args.module_dir,
    )
    logger.info(
        "module_checks_started",
        module_dir=service.module_dir,
        environment=settings.environment.value,
    )

    report = asyncio.run(run_checks(service, record_metrics=observability.metrics_enabled))

    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        line = f"{status} {result.name}"
        if result.error:
            line += f": {result.error}"
        print(line)

    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
