"""Shared test fixtures."""

from __future__ import annotations

import shutil
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from connectivity.config import Environment, Settings, TerraformSettings
from connectivity.domain.models.endpoint import PscEndpoint
from connectivity.domain.services.endpoint_config import sample_psc_endpoints
from connectivity.infrastructure.terraform.executor import SubprocessTerraformExecutor
from tests.fakes import FAKE_TERRAFORM_SCRIPT, FakeTerraform, RecordingTerraformExecutor


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: runs the real terraform binary against a fixture module"
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop any structlog configuration a test installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment=Environment.TESTING)


@pytest.fixture
def terraform_settings(tmp_path: Path) -> TerraformSettings:
    return TerraformSettings(
        module_dir=str(tmp_path),
        plan_file="terraform.tfplan",
        max_retries=3,
        time_between_retries=0.0,
        timeout_seconds=60.0,
    )


@pytest.fixture
def fake_terraform(tmp_path: Path) -> FakeTerraform:
    binary = tmp_path / "bin" / "terraform"
    binary.parent.mkdir()
    binary.write_text(FAKE_TERRAFORM_SCRIPT)
    binary.chmod(binary.stat().st_mode | stat.S_IEXEC)
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return FakeTerraform(binary, state_dir)


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    """An empty directory standing in for the module under test."""
    path = tmp_path / "module"
    path.mkdir()
    return path


@pytest.fixture
def producer_connectivity_module(tmp_path: Path) -> Path:
    """A private copy of the fixture module, so plan files and .terraform stay out of the tree."""
    destination = tmp_path / "producer-connectivity"
    shutil.copytree(FIXTURES_DIR / "producer-connectivity", destination)
    return destination


@pytest.fixture
def terraform_executor() -> SubprocessTerraformExecutor:
    return SubprocessTerraformExecutor(record_metrics=False)


@pytest.fixture
def recording_executor() -> RecordingTerraformExecutor:
    return RecordingTerraformExecutor()


@pytest.fixture
def sample_endpoints() -> list[PscEndpoint]:
    return sample_psc_endpoints()
