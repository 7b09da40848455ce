"""Framework independent test discovery built from instantiate and call steps."""

from steprunner.simpletest.equality import EqualitySet, SignatureEqualityStrategy
from steprunner.simpletest.finder import (
    BasicTestUnitFinder,
    compose_test_unit,
    find_test_methods,
)
from steprunner.simpletest.method import (
    MethodFinder,
    TestMethod,
    default_method_finder,
    prefixed_method_finder,
)
from steprunner.simpletest.steps import CallStep, InstantiateStep, TestStep
from steprunner.simpletest.unit import SteppedTestUnit

__all__ = [
    "BasicTestUnitFinder",
    "CallStep",
    "EqualitySet",
    "InstantiateStep",
    "MethodFinder",
    "SignatureEqualityStrategy",
    "SteppedTestUnit",
    "TestMethod",
    "TestStep",
    "compose_test_unit",
    "default_method_finder",
    "find_test_methods",
    "prefixed_method_finder",
]
