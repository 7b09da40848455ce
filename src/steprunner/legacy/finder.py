"""Fast-path discovery for classes written against the legacy base type."""

from steprunner.errors import translate_exception
from steprunner.legacy.classifier import EligibilityClassifier
from steprunner.simpletest.finder import (
    ClassLike,
    as_descriptor,
    compose_test_unit,
    find_test_methods,
)
from steprunner.simpletest.method import default_method_finder
from steprunner.simpletest.steps import InstantiateStep
from steprunner.testapi import TestUnit


class LegacyTestFinder:
    """Finds tests without going through the legacy framework's life cycle.

    Each test is run by constructing a fresh instance and calling the test
    method on it. Classes the classifier rejects produce no units so that a
    framework-compliant finder can handle them instead.
    """

    def __init__(self, classifier: EligibilityClassifier):
        self.classifier = classifier

    def find_test_units(self, test_class: ClassLike) -> list[TestUnit]:
        """Return the units for an eligible class, or an empty list.

        Raises:
            DiscoveryError: If the class cannot be introspected.
        """
        try:
            descriptor = as_descriptor(test_class)
            if not self.classifier.is_eligible(descriptor):
                return []

            instantiation = InstantiateStep.for_class(descriptor)
            return [
                compose_test_unit(descriptor, instantiation, m)
                for m in find_test_methods(descriptor, default_method_finder)
            ]
        except Exception as ex:
            raise translate_exception(ex)
