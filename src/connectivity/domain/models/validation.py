"""Module validation outcome models."""

from __future__ import annotations

from pydantic import Field

from connectivity.domain.models.base import ValueObject


class ScenarioResult(ValueObject):
    """Outcome of one validation scenario."""

    name: str
    passed: bool
    error: str = ""


class ValidationReport(ValueObject):
    """Outcomes of every scenario run against one module directory."""

    module_dir: str
    results: list[ScenarioResult] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> list[ScenarioResult]:
        return [result for result in self.results if not result.passed]
