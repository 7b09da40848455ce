"""Decides which classes the fast path can run."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from steprunner.reflection import ClassDescriptor, MethodInfo, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchMethod:
    """A life cycle method the fast path does not call.

    Classes that override one cannot be run faithfully without the framework.
    """

    name: str
    arity: int = 0

    def matches(self, method: MethodInfo) -> bool:
        return method.name == self.name and method.arity == self.arity


DEFAULT_DISPATCH_METHODS = (
    DispatchMethod("runTest"),
    DispatchMethod("runBare"),
    DispatchMethod("run", 1),
    DispatchMethod("debug"),
    DispatchMethod("setUp"),
    DispatchMethod("tearDown"),
    DispatchMethod("setUpClass"),
    DispatchMethod("tearDownClass"),
)


class EligibilityClassifier:
    """Decides whether a class can use fast-path discovery.

    A class is eligible when it:
    - is the legacy base type or inherits from it,
    - is not abstract,
    - has a public zero-argument constructor,
    - declares no dispatch method beyond the definitions the base type
      supplies itself,
    - has no test-named method that takes arguments.
    """

    def __init__(
        self,
        base_type: ClassDescriptor,
        dispatch_methods: Iterable[DispatchMethod] = DEFAULT_DISPATCH_METHODS,
        test_method_prefix: str = "test",
    ):
        self.base_type = base_type
        self.dispatch_methods = tuple(dispatch_methods)
        self.test_method_prefix = test_method_prefix

        base_methods = base_type.all_methods()
        self._supplied = {
            rule: _count_matches(base_methods, rule) for rule in self.dispatch_methods
        }

    @classmethod
    def for_base_type(
        cls,
        base_type: type,
        dispatch_methods: Iterable[DispatchMethod] = DEFAULT_DISPATCH_METHODS,
    ) -> "EligibilityClassifier":
        """Create a classifier for a live base class."""
        return cls(describe(base_type), dispatch_methods)

    def is_eligible(self, descriptor: ClassDescriptor) -> bool:
        """Check whether the fast path can run ``descriptor``."""
        reason = self.ineligibility_reason(descriptor)
        if reason is not None:
            logger.debug("%s is not eligible for the fast path: %s", descriptor, reason)
            return False
        return True

    def ineligibility_reason(self, descriptor: ClassDescriptor) -> Optional[str]:
        """Explain why ``descriptor`` is not eligible, or return None if it is."""
        if not descriptor.is_subtype_of(self.base_type.qualified_name):
            return f"not a subclass of {self.base_type}"

        if descriptor.is_abstract:
            return "abstract class"

        constructor = descriptor.no_args_constructor()
        if constructor is None:
            return "no zero-argument constructor"
        if not constructor.is_public:
            return "zero-argument constructor is not public"

        methods = descriptor.all_methods()
        for rule in self.dispatch_methods:
            if _count_matches(methods, rule) != self._supplied[rule]:
                return f"overrides {rule.name}"

        method = self._test_method_with_arguments(methods)
        if method is not None:
            return f"test method {method.name} takes arguments"

        return None

    def _test_method_with_arguments(self, methods: list[MethodInfo]) -> Optional[MethodInfo]:
        # Only the most-derived declaration of each name is called
        seen = set()
        for method in methods:
            if method.name in seen:
                continue
            seen.add(method.name)
            if method.name.startswith(self.test_method_prefix) and method.arity != 0:
                return method
        return None


def _count_matches(methods: list[MethodInfo], rule: DispatchMethod) -> int:
    return sum(1 for method in methods if rule.matches(method))
