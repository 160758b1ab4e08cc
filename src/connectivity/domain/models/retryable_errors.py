"""Known transient Terraform errors worth retrying."""

from __future__ import annotations

import re

from connectivity.domain.models.terraform import TerraformOptions


DEFAULT_MAX_RETRIES = 3
DEFAULT_TIME_BETWEEN_RETRIES = 5.0

_PLUGIN_NETWORK_ERROR = "Failed to retrieve plugin due to transient network error."

# Regex (searched in combined stdout/stderr) -> why the error is transient
DEFAULT_RETRYABLE_ERRORS: dict[str, str] = {
    # Network contention when many modules pull charts or talk to clusters at once
    ".*read: connection reset by peer.*": "Failed to reach helm charts repository.",
    ".*transport is closing.*": "Failed to reach Kubernetes API.",
    # `terraform init` regularly fails in CI while downloading providers
    ".*unable to verify signature.*": _PLUGIN_NETWORK_ERROR,
    ".*unable to verify checksum.*": _PLUGIN_NETWORK_ERROR,
    ".*no provider exists with the given name.*": _PLUGIN_NETWORK_ERROR,
    ".*registry service is unreachable.*": _PLUGIN_NETWORK_ERROR,
    ".*Error installing provider.*": _PLUGIN_NETWORK_ERROR,
    ".*Failed to query available provider packages.*": _PLUGIN_NETWORK_ERROR,
    ".*timeout while waiting for plugin to start.*": _PLUGIN_NETWORK_ERROR,
    ".*timed out waiting for server handshake.*": _PLUGIN_NETWORK_ERROR,
    "could not query provider registry for": _PLUGIN_NETWORK_ERROR,
    # Eventual consistency in provider APIs
    ".*Provider produced inconsistent result after apply.*": "Provider eventual consistency error.",
}


def match_retryable_error(output: str, retryable_errors: dict[str, str]) -> str | None:
    """Return the description of the first pattern found in ``output``."""
    for pattern, description in retryable_errors.items():
        if re.search(pattern, output):
            return description
    return None


def with_default_retryable_errors(options: TerraformOptions) -> TerraformOptions:
    """Copy ``options`` so that init/validate retry on transient errors.

    Only retry settings the caller left empty are filled in.
    """
    update: dict[str, object] = {}
    if not options.retryable_errors:
        update["retryable_errors"] = dict(DEFAULT_RETRYABLE_ERRORS)
    if options.max_retries == 0:
        update["max_retries"] = DEFAULT_MAX_RETRIES
    if options.time_between_retries == 0:
        update["time_between_retries"] = DEFAULT_TIME_BETWEEN_RETRIES
    return options.model_copy(update=update)
