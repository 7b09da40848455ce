"""Discovery for classes written against the legacy test base type."""

from steprunner.legacy.classifier import (
    DEFAULT_DISPATCH_METHODS,
    DispatchMethod,
    EligibilityClassifier,
)
from steprunner.legacy.compliant import (
    CompliantConfiguration,
    CompliantTestFinder,
    CompliantTestUnit,
)
from steprunner.legacy.finder import LegacyTestFinder
from steprunner.legacy.plugin import (
    LegacyConfiguration,
    LegacyPlugin,
    NullConfiguration,
    legacy_base_type_present,
    resolve_type,
)

__all__ = [
    "DEFAULT_DISPATCH_METHODS",
    "CompliantConfiguration",
    "CompliantTestFinder",
    "CompliantTestUnit",
    "DispatchMethod",
    "EligibilityClassifier",
    "LegacyConfiguration",
    "LegacyPlugin",
    "LegacyTestFinder",
    "NullConfiguration",
    "legacy_base_type_present",
    "resolve_type",
]
