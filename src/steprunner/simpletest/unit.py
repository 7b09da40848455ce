"""Test units made of ordered steps."""

import time
import traceback
import unittest
from typing import Any, Iterable, Optional

from steprunner.errors import StepError
from steprunner.simpletest.steps import TestStep
from steprunner.testapi import Description, TestListener, TestResult, TestStatus, TestUnit


class SteppedTestUnit(TestUnit):
    """A test unit that runs its steps in order, stopping at the first failure.

    Instances are immutable once built.
    """

    def __init__(
        self,
        description: Description,
        steps: Iterable[TestStep],
        expected: Optional[type[BaseException]] = None,
    ):
        self._description = description
        self._steps = tuple(steps)
        self._expected = expected

    @property
    def description(self) -> Description:
        return self._description

    @property
    def steps(self) -> tuple[TestStep, ...]:
        return self._steps

    @property
    def expected(self) -> Optional[type[BaseException]]:
        return self._expected

    def execute(self, listener: TestListener) -> None:
        listener.on_test_start(self._description)
        start_time = time.time()

        try:
            self._run_steps()
        except unittest.SkipTest as ex:
            listener.on_test_skipped(
                self._result(TestStatus.SKIPPED, start_time, error_message=str(ex))
            )
        except StepError as ex:
            cause = ex.__cause__ or ex
            listener.on_test_failure(
                self._result(TestStatus.ERROR, start_time, cause, _format(ex))
            )
        except KeyboardInterrupt:
            raise
        except BaseException as ex:
            listener.on_test_failure(
                self._result(TestStatus.FAILED, start_time, ex, _format(ex))
            )
        else:
            listener.on_test_success(self._result(TestStatus.PASSED, start_time))

    def _run_steps(self) -> Any:
        target = None
        for step in self._steps:
            target = step.execute(self._description, target)
        return target

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

    def __repr__(self) -> str:
        return f"SteppedTestUnit({self._description}, steps={list(self._steps)})"


def _format(ex: BaseException) -> str:
    return "".join(traceback.format_exception_only(type(ex), ex)).strip()
