"""Test execution orchestration."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable

from steprunner.config import DiscoveryConfig
from steprunner.core.container import UnContainer
from steprunner.core.discovery import FindTestUnits
from steprunner.legacy.compliant import CompliantConfiguration
from steprunner.legacy.plugin import LegacyPlugin
from steprunner.testapi import Configuration, TestListener, TestResult, TestStatus, TestUnit

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of a whole test run."""

    results: list[TestResult] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return self._count(TestStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(TestStatus.FAILED)

    @property
    def errors(self) -> int:
        return self._count(TestStatus.ERROR)

    @property
    def skipped(self) -> int:
        return self._count(TestStatus.SKIPPED)

    @property
    def success(self) -> bool:
        """Check that nothing failed or errored."""
        return self.failed == 0 and self.errors == 0

    def _count(self, status: TestStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "errors": self.errors,
            "skipped": self.skipped,
            "duration_ms": self.duration_ms,
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunSummary":
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            results=[TestResult.from_dict(r) for r in data.get("results", [])],
            duration_ms=data.get("duration_ms") or 0,
        )


def build_configurations(settings: DiscoveryConfig) -> list[Configuration]:
    """Create the configurations selected by the discovery settings.

    The legacy base type is probed once, here.
    """
    configurations: list[Configuration] = []
    if settings.fast_path:
        configurations.append(LegacyPlugin().create_test_framework_configuration(settings))
    if settings.compliant_fallback:
        configurations.append(CompliantConfiguration())
    return configurations


class StepRunner:
    """Finds test units, runs them in a container and reports to a listener."""

    def __init__(self, listener: TestListener):
        """Initialize the runner."""
        self.listener = listener

    def run(
        self,
        container: UnContainer,
        configurations: Iterable[Configuration],
        classes: Iterable[type],
    ) -> RunSummary:
        """Find and run the tests of ``classes``.

        Raises:
            DiscoveryError: If a class cannot be searched by any configuration.
        """
        finder = FindTestUnits(configurations)
        units = finder.find_test_units_for_all_supplied_classes(classes)
        logger.debug("Found %d test units", len(units))
        return self.run_units(container, units)

    def run_units(self, container: UnContainer, units: Iterable[TestUnit]) -> RunSummary:
        """Run already discovered units."""
        summary = RunSummary()
        start_time = time.time()

        self.listener.on_run_start()
        for unit in units:
            self.listener.on_test_start(unit.description)
            for result in container.execute(unit):
                self._report(result)
                summary.results.append(result)
        self.listener.on_run_end()

        summary.duration_ms = int((time.time() - start_time) * 1000)
        return summary

    def _report(self, result: TestResult) -> None:
        if result.status == TestStatus.PASSED:
            self.listener.on_test_success(result)
        elif result.status == TestStatus.SKIPPED:
            self.listener.on_test_skipped(result)
        else:
            self.listener.on_test_failure(result)
