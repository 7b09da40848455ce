"""Containers run test units and hand back their results."""

from steprunner.core.listener import ResultCollector
from steprunner.testapi import TestResult, TestUnit


class UnContainer:
    """Runs each unit in the current process, one after another."""

    def execute(self, unit: TestUnit) -> list[TestResult]:
        collector = ResultCollector()
        unit.execute(collector)
        return collector.results
