"""Discovered test methods."""

from dataclasses import dataclass, field
from typing import Callable, Optional

from steprunner.reflection import MethodInfo


@dataclass(frozen=True)
class TestMethod:
    """A method that will be run as a test.

    Two test methods are equal when their signatures are equal; the declaring
    class, return type and expected exception do not take part.
    """

    __test__ = False

    name: str
    parameter_types: tuple[str, ...] = ()
    expected: Optional[type[BaseException]] = field(default=None, compare=False)
    declaring_class: str = field(default="", compare=False)

    @classmethod
    def from_method(cls, method: MethodInfo) -> "TestMethod":
        """Create from a reflected method."""
        return cls(
            name=method.name,
            parameter_types=method.parameter_types,
            expected=method.expected,
            declaring_class=method.declaring_class,
        )

    @property
    def signature(self) -> tuple[str, tuple[str, ...]]:
        return self.name, self.parameter_types

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.parameter_types)})"


# Decides whether a reflected method is a test
MethodFinder = Callable[[MethodInfo], Optional[TestMethod]]


def default_method_finder(method: MethodInfo) -> Optional[TestMethod]:
    """Accept zero-parameter methods whose name starts with ``test``."""
    if method.name.startswith("test") and method.arity == 0:
        return TestMethod.from_method(method)
    return None


def prefixed_method_finder(prefix: str) -> MethodFinder:
    """Build a finder accepting zero-parameter methods starting with ``prefix``."""

    def finder(method: MethodInfo) -> Optional[TestMethod]:
        if method.name.startswith(prefix) and method.arity == 0:
            return TestMethod.from_method(method)
        return None

    return finder
