"""Harness configuration using pydantic-settings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    CI = "ci"
    TESTING = "testing"


class TerraformSettings(BaseSettings):
    """Terraform CLI configuration."""

    binary: str = Field(default="terraform", alias="TF_BINARY")
    module_dir: str = Field(default="../05-producer-connectivity", alias="TF_MODULE_DIR")
    plan_file: str = Field(default="terraform.tfplan", alias="TF_PLAN_FILE")
    timeout_seconds: float = Field(default=600.0, alias="TF_TIMEOUT_SECONDS")
    max_retries: int = Field(default=3, alias="TF_MAX_RETRIES")
    time_between_retries: float = Field(default=5.0, alias="TF_TIME_BETWEEN_RETRIES")

    model_config = {"env_prefix": "TF_", "extra": "ignore", "populate_by_name": True}


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(default=False, alias="JSON_LOGS")
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    model_config = {"env_prefix": "OBS_", "extra": "ignore", "populate_by_name": True}


class Settings(BaseSettings):
    """Main harness settings."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, alias="ENVIRONMENT")

    terraform: TerraformSettings = Field(default_factory=TerraformSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = {"env_prefix": "", "extra": "ignore", "populate_by_name": True}


@lru_cache
def get_settings() -> Settings:
    """Get cached harness settings."""
    return Settings()
