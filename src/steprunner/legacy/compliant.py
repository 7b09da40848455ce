"""Framework-compliant discovery for classes the fast path declines.

Tests found here run through ``unittest``'s own life cycle, including
``setUp``, ``tearDown``, class fixtures and cleanups. This is slower than the
fast path but handles every class the framework itself can run.
"""

import inspect
import time
import unittest
from typing import Optional

from steprunner.errors import translate_exception
from steprunner.reflection import ClassDescriptor, type_name
from steprunner.testapi import (
    Configuration,
    Description,
    TestListener,
    TestResult,
    TestStatus,
    TestSuiteFinder,
    TestUnit,
    TestUnitFinder,
)


class CompliantTestUnit(TestUnit):
    """Runs one test method through ``unittest.TestCase.run``."""

    def __init__(self, test_class: type, method_name: str):
        self.test_class = test_class
        self.method_name = method_name
        self._description = Description(method_name, type_name(test_class))

    @property
    def description(self) -> Description:
        return self._description

    def execute(self, listener: TestListener) -> None:
        listener.on_test_start(self._description)
        start_time = time.time()

        try:
            case = self.test_class(self.method_name)
        except KeyboardInterrupt:
            raise
        except BaseException as ex:
            listener.on_test_failure(
                self._result(TestStatus.ERROR, start_time, ex, f"{type(ex).__name__}: {ex}")
            )
            return

        outcome = unittest.TestResult()
        case.run(outcome)

        problems = outcome.errors + outcome.failures
        if problems:
            listener.on_test_failure(
                self._result(TestStatus.FAILED, start_time, error_message=problems[-1][1])
            )
        elif outcome.unexpectedSuccesses:
            listener.on_test_failure(
                self._result(TestStatus.FAILED, start_time, error_message="Unexpected success")
            )
        elif outcome.skipped:
            listener.on_test_skipped(
                self._result(TestStatus.SKIPPED, start_time, error_message=outcome.skipped[-1][1])
            )
        else:
            listener.on_test_success(self._result(TestStatus.PASSED, start_time))

    def _result(
        self,
        status: TestStatus,
        start_time: float,
        error: Optional[BaseException] = None,
        error_message: str = "",
    ) -> TestResult:
        return TestResult(
            description=self._description,
            status=status,
            error=error,
            error_message=error_message,
            duration_ms=int((time.time() - start_time) * 1000),
        )


class CompliantTestFinder:
    """Finds ``unittest.TestCase`` tests the way ``unittest`` itself does."""

    def __init__(self, loader: Optional[unittest.TestLoader] = None):
        self.loader = loader or unittest.TestLoader()

    def find_test_units(self, test_class) -> list[TestUnit]:
        try:
            if isinstance(test_class, ClassDescriptor):
                test_class = test_class.target
            if (
                test_class is None
                or not issubclass(test_class, unittest.TestCase)
                or inspect.isabstract(test_class)
            ):
                return []

            names = self.loader.getTestCaseNames(test_class)
            if not names and hasattr(test_class, "runTest"):
                names = ["runTest"]
            return [CompliantTestUnit(test_class, name) for name in names]
        except Exception as ex:
            raise translate_exception(ex)


class CompliantConfiguration(Configuration):
    """Configuration for the framework-compliant slow path."""

    @property
    def priority(self) -> int:
        return 10

    def test_unit_finder(self) -> TestUnitFinder:
        return CompliantTestFinder().find_test_units

    def test_suite_finder(self) -> TestSuiteFinder:
        return lambda cls: []
