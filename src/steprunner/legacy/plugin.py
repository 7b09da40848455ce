"""Configuration for fast-path discovery of legacy-style test classes.

The fast path handles simple classes written against the legacy base type
(``unittest.TestCase`` by default). It works without the framework, which is
faster and avoids corner cases of the framework's life cycle. Test instances
are created directly before each test is called. Classes it cannot handle
fall through to other configurations.
"""

import importlib
import logging
from typing import Optional

from steprunner.config import DiscoveryConfig
from steprunner.legacy.classifier import DispatchMethod, EligibilityClassifier
from steprunner.legacy.finder import LegacyTestFinder
from steprunner.testapi import Configuration, TestSuiteFinder, TestUnitFinder

logger = logging.getLogger(__name__)


class LegacyConfiguration(Configuration):
    """Finds tests with the fast path."""

    def __init__(self, classifier: EligibilityClassifier):
        self.classifier = classifier

    @property
    def priority(self) -> int:
        # Consulted before any other configuration
        return 0

    def test_unit_finder(self) -> TestUnitFinder:
        return LegacyTestFinder(self.classifier).find_test_units

    def test_suite_finder(self) -> TestSuiteFinder:
        return lambda cls: []

    def verify_environment(self) -> Optional[str]:
        return None


class NullConfiguration(Configuration):
    """Finds nothing. Used when the legacy base type is unavailable."""

    @property
    def priority(self) -> int:
        return 0

    def test_unit_finder(self) -> TestUnitFinder:
        return lambda cls: []


def resolve_type(dotted_name: str) -> type:
    """Import a class given its dotted name, e.g. ``unittest.TestCase``.

    Raises:
        ImportError: If no prefix of the name is an importable module.
        AttributeError: If the module lacks the named attribute.
    """
    parts = dotted_name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError:
            continue

        for attribute in parts[split:]:
            obj = getattr(obj, attribute)
        if not isinstance(obj, type):
            raise TypeError(f"{dotted_name} is not a class")
        return obj

    raise ImportError(f"No module found for {dotted_name}")


def legacy_base_type_present(dotted_name: str) -> bool:
    """Check whether the legacy base type can be loaded."""
    try:
        resolve_type(dotted_name)
        return True
    except (ImportError, AttributeError, TypeError, ValueError):
        return False


class LegacyPlugin:
    """Creates the fast-path configuration when the legacy base type exists."""

    NAME = "legacy"

    def description(self) -> str:
        return "Fast path for legacy test classes"

    def create_configuration(
        self, settings: DiscoveryConfig, base_type_present: bool
    ) -> Configuration:
        """Create the configuration given the result of the capability probe."""
        if not base_type_present:
            logger.info(
                "%s is not available; fast-path discovery disabled", settings.legacy_base_type
            )
            return NullConfiguration()

        logger.debug("%s plugin enabled: %s", self.NAME, self.description())
        classifier = EligibilityClassifier.for_base_type(
            resolve_type(settings.legacy_base_type),
            [DispatchMethod(m.name, m.arity) for m in settings.dispatch_methods],
        )
        return LegacyConfiguration(classifier)

    def create_test_framework_configuration(self, settings: DiscoveryConfig) -> Configuration:
        """Probe for the legacy base type once and create the configuration."""
        return self.create_configuration(
            settings, legacy_base_type_present(settings.legacy_base_type)
        )
