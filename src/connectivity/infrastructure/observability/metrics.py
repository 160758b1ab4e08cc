"""Prometheus metrics configuration."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
)


# Application info
APP_INFO = Info("connectivity", "Producer connectivity module checks info")
APP_INFO.info({
    "version": "0.1.0",
    "service": "producer-connectivity-tests",
})

# Terraform CLI metrics
TERRAFORM_COMMANDS_TOTAL = Counter(
    "connectivity_terraform_commands_total",
    "Total number of Terraform subcommands run",
    ["command", "outcome"],
)

TERRAFORM_COMMAND_DURATION = Histogram(
    "connectivity_terraform_command_duration_seconds",
    "Wall-clock time of Terraform subcommands",
    ["command"],
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
)

TERRAFORM_RETRIES_TOTAL = Counter(
    "connectivity_terraform_retries_total",
    "Total number of retried Terraform subcommands",
    ["command"],
)

# Scenario metrics
SCENARIO_RESULTS_TOTAL = Counter(
    "connectivity_scenario_results_total",
    "Module validation scenario outcomes",
    ["scenario", "passed"],
)
