"""Unit tests for the command-line entrypoint."""

from __future__ import annotations

import stat
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from prometheus_client import REGISTRY

from connectivity.config import get_settings, TerraformSettings
from connectivity.main import build_parser, build_service, main, run_checks
from tests.fakes import FakeTerraform, RecordingTerraformExecutor


pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="fake terraform is a POSIX shell script"
)


@pytest.fixture
def cli_env(
    monkeypatch: pytest.MonkeyPatch, fake_terraform: FakeTerraform, module_dir: Path
) -> Iterator[FakeTerraform]:
    monkeypatch.setenv("TF_BINARY", str(fake_terraform.binary))
    monkeypatch.setenv("TF_MODULE_DIR", str(module_dir))
    monkeypatch.setenv("TF_TIME_BETWEEN_RETRIES", "0")
    monkeypatch.setenv("METRICS_ENABLED", "false")
    for name, value in fake_terraform.env(plan_exit="1").items():
        monkeypatch.setenv(name, value)
    get_settings.cache_clear()
    yield fake_terraform
    get_settings.cache_clear()


class TestBuildParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.module_dir is None
        assert args.log_level is None

    def test_overrides(self) -> None:
        args = build_parser().parse_args(["--module-dir", "/m", "--log-level", "DEBUG"])
        assert args.module_dir == "/m"
        assert args.log_level == "DEBUG"


class TestMain:
    def test_all_scenarios_pass(
        self, cli_env: FakeTerraform, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "PASS init_and_validate" in out
        assert "PASS plan_without_variables" in out
        assert [call[0] for call in cli_env.calls] == ["init", "validate", "plan"]

    def test_plan_mismatch_fails(
        self,
        cli_env: FakeTerraform,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("FAKE_TF_PLAN_EXIT", "2")
        assert main([]) == 1
        out = capsys.readouterr().out
        assert "PASS init_and_validate" in out
        assert "FAIL plan_without_variables: Expected plan exit code 1" in out

    def test_module_dir_flag(
        self, cli_env: FakeTerraform, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--module-dir", str(tmp_path / "missing"), "--log-level", "ERROR"]) == 1
        out = capsys.readouterr().out
        assert "FAIL init_and_validate" in out
        assert "directory not found" in out
        assert cli_env.calls == []

    def test_missing_binary(
        self,
        cli_env: FakeTerraform,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("TF_BINARY", "terraform-binary-that-does-not-exist")
        get_settings.cache_clear()
        assert main([]) == 1
        out = capsys.readouterr().out
        assert out.count("FAIL") == 2

    def test_unstartable_binary(
        self,
        cli_env: FakeTerraform,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        binary = tmp_path / "broken-terraform"
        binary.write_bytes(b"\x00\x01not-an-executable")
        binary.chmod(binary.stat().st_mode | stat.S_IEXEC)
        monkeypatch.setenv("TF_BINARY", str(binary))
        get_settings.cache_clear()

        assert main([]) == 1
        out = capsys.readouterr().out
        assert "FAIL init_and_validate: Failed to initialize and validate Terraform" in out
        assert "FAIL plan_without_variables: Failed to start terraform plan" in out


class TestRunChecks:
    @pytest.mark.asyncio
    async def test_records_scenario_metrics(
        self,
        recording_executor: RecordingTerraformExecutor,
        terraform_settings: TerraformSettings,
    ) -> None:
        labels = {"scenario": "plan_without_variables", "passed": "true"}
        before = REGISTRY.get_sample_value("connectivity_scenario_results_total", labels) or 0.0

        report = await run_checks(build_service(recording_executor, terraform_settings))

        assert report.passed
        after = REGISTRY.get_sample_value("connectivity_scenario_results_total", labels)
        assert after == before + 1
