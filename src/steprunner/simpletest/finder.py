"""Finding test methods on a class and turning them into test units."""

import logging
from typing import Optional, Union

from steprunner.errors import translate_exception
from steprunner.reflection import ClassDescriptor, describe
from steprunner.simpletest.equality import EqualitySet, EqualityStrategy, SignatureEqualityStrategy
from steprunner.simpletest.method import MethodFinder, TestMethod, default_method_finder
from steprunner.simpletest.steps import CallStep, InstantiateStep
from steprunner.simpletest.unit import SteppedTestUnit
from steprunner.testapi import Description, TestUnit

logger = logging.getLogger(__name__)

ClassLike = Union[type, ClassDescriptor]


def as_descriptor(test_class: ClassLike) -> ClassDescriptor:
    """Return a descriptor for a live class, or the descriptor itself."""
    if isinstance(test_class, ClassDescriptor):
        return test_class
    return describe(test_class)


def find_test_methods(
    descriptor: ClassDescriptor,
    method_finder: MethodFinder = default_method_finder,
    strategy: Optional[EqualityStrategy] = None,
) -> list[TestMethod]:
    """Find the unique test methods of a class, inherited ones included.

    Methods are visited most-derived class first, so when a subclass redeclares
    a test its own declaration is the one kept.
    """
    found: EqualitySet[TestMethod] = EqualitySet(strategy or SignatureEqualityStrategy())
    for method in descriptor.all_methods():
        test_method = method_finder(method)
        if test_method is None:
            continue
        if not found.add(test_method):
            logger.debug(
                "Ignoring %s declared by %s; already found", test_method, method.declaring_class
            )
    return found.to_list()


def compose_test_unit(
    descriptor: ClassDescriptor,
    instantiation: InstantiateStep,
    test_method: TestMethod,
    name_prefix: str = "",
) -> SteppedTestUnit:
    """Build a unit that instantiates the class and then calls ``test_method``."""
    return SteppedTestUnit(
        Description(name_prefix + test_method.name, descriptor.qualified_name),
        (instantiation, CallStep(test_method)),
        test_method.expected,
    )


class BasicTestUnitFinder:
    """Finds tests on plain classes using a pluggable method finder."""

    def __init__(
        self,
        method_finder: MethodFinder = default_method_finder,
        strategy: Optional[EqualityStrategy] = None,
        name_prefix: str = "",
    ):
        self.method_finder = method_finder
        self.strategy = strategy
        self.name_prefix = name_prefix

    def find_test_units(self, test_class: ClassLike) -> list[TestUnit]:
        """Return one unit per unique test method of ``test_class``.

        Raises:
            DiscoveryError: If the class cannot be introspected.
        """
        try:
            descriptor = as_descriptor(test_class)
            instantiation = InstantiateStep.for_class(descriptor)
            return [
                compose_test_unit(descriptor, instantiation, m, self.name_prefix)
                for m in find_test_methods(descriptor, self.method_finder, self.strategy)
            ]
        except Exception as ex:
            raise translate_exception(ex)
