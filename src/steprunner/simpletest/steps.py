"""Atomic actions a test unit is built from."""

import unittest
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from steprunner.errors import InstantiationError
from steprunner.reflection import ClassDescriptor
from steprunner.simpletest.method import TestMethod
from steprunner.testapi import Description


class TestStep(ABC):
    """One step of a test unit.

    Each step receives the value produced by the previous one.
    """

    __test__ = False

    @abstractmethod
    def execute(self, description: Description, target: Any) -> Any:
        pass


class InstantiateStep(TestStep):
    """Creates the test instance by calling a zero-argument constructor."""

    def __init__(self, class_name: str, factory: Optional[Callable[[], Any]]):
        self.class_name = class_name
        self.factory = factory

    @classmethod
    def for_class(cls, descriptor: ClassDescriptor) -> "InstantiateStep":
        """Create a step for the class's zero-argument constructor.

        Classes without one still get a step; it fails when executed.
        """
        constructor = descriptor.no_args_constructor()
        factory = constructor.factory if constructor else None
        return cls(descriptor.qualified_name, factory)

    def execute(self, description: Description, target: Any) -> Any:
        if self.factory is None:
            raise InstantiationError(
                f"{self.class_name} has no zero-argument constructor"
            )
        try:
            return self.factory()
        except KeyboardInterrupt:
            raise
        except BaseException as ex:
            raise InstantiationError(
                f"Could not instantiate {self.class_name}: {ex}"
            ) from ex

    def __repr__(self) -> str:
        return f"InstantiateStep({self.class_name})"


class CallStep(TestStep):
    """Calls a test method on the instance produced by the previous step.

    Raising the method's expected exception counts as success; returning
    normally when an exception was expected is a failure. Cleanups the test
    registered with ``addCleanup`` run afterwards, whatever the outcome, and
    a failing cleanup fails an otherwise passing test.
    """

    def __init__(self, method: TestMethod):
        self.method = method

    def execute(self, description: Description, target: Any) -> Any:
        try:
            self._invoke(description, target)
        except BaseException:
            _run_cleanups(target)
            raise

        if not _run_cleanups(target):
            raise AssertionError(f"{description}: a cleanup function raised an exception")
        return target

    def _invoke(self, description: Description, target: Any) -> None:
        expected = self.method.expected
        try:
            getattr(target, self.method.name)()
        except (KeyboardInterrupt, unittest.SkipTest):
            raise
        except BaseException as ex:
            if expected is not None and isinstance(ex, expected):
                return
            raise

        if expected is not None:
            raise AssertionError(
                f"{description}: expected exception {expected.__name__} was not raised"
            )

    def __repr__(self) -> str:
        return f"CallStep({self.method})"


def _run_cleanups(target: Any) -> bool:
    """Run the cleanups registered on a test case; False if any of them failed."""
    do_cleanups = getattr(target, "doCleanups", None)
    if do_cleanups is None:
        return True
    return do_cleanups() is not False
