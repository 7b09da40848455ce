"""Contracts shared by test finders, executors and listeners."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class TestStatus(str, Enum):
    """Outcome of running a test unit."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Description:
    """Human readable identity of a test unit."""

    name: str
    test_class: str = ""

    @property
    def qualified_name(self) -> str:
        if not self.test_class:
            return self.name
        return f"{self.test_class}.{self.name}"

    def __str__(self) -> str:
        return self.qualified_name


@dataclass
class TestResult:
    """The result of running a single test unit."""

    __test__ = False

    description: Description
    status: TestStatus = TestStatus.PASSED
    error: Optional[BaseException] = None
    error_message: str = ""
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status in (TestStatus.PASSED, TestStatus.SKIPPED)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.description.name,
            "test_class": self.description.test_class,
            "status": self.status.value,
            "error_type": type(self.error).__name__ if self.error else None,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TestResult":
        """Create from a dictionary produced by ``to_dict``.

        The exception object itself does not survive the round trip.
        """
        try:
            status = TestStatus(data.get("status", "error"))
        except ValueError:
            status = TestStatus.ERROR

        return cls(
            description=Description(data.get("name", ""), data.get("test_class", "")),
            status=status,
            error_message=data.get("error_message") or "",
            duration_ms=data.get("duration_ms") or 0,
        )


class TestListener:
    """Receives events while test units run. All callbacks default to no-ops."""

    __test__ = False

    def on_run_start(self) -> None:
        pass

    def on_test_start(self, description: Description) -> None:
        pass

    def on_test_success(self, result: TestResult) -> None:
        pass

    def on_test_failure(self, result: TestResult) -> None:
        pass

    def on_test_skipped(self, result: TestResult) -> None:
        pass

    def on_run_end(self) -> None:
        pass


class TestUnit(ABC):
    """A runnable test."""

    __test__ = False

    @property
    @abstractmethod
    def description(self) -> Description:
        """Identity of the test."""
        pass

    @abstractmethod
    def execute(self, listener: TestListener) -> None:
        """Run the test, reporting its outcome to ``listener``."""
        pass


# Finds the test units of a class; returns an empty list when it finds none
TestUnitFinder = Callable[[type], list[TestUnit]]

# Finds the classes a suite class refers to
TestSuiteFinder = Callable[[type], list[type]]


class Configuration(ABC):
    """A test framework's way of finding tests."""

    @property
    def priority(self) -> int:
        """Lower values are consulted first."""
        return 100

    @abstractmethod
    def test_unit_finder(self) -> TestUnitFinder:
        pass

    def test_suite_finder(self) -> TestSuiteFinder:
        return lambda cls: []

    def verify_environment(self) -> Optional[str]:
        """Return a description of what is wrong with the environment, if anything."""
        return None
