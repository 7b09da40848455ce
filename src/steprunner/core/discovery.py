"""Resolving targets to classes and classes to test units."""

import importlib
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Iterable, Optional

from steprunner.errors import DiscoveryError
from steprunner.testapi import Configuration, TestUnit

logger = logging.getLogger(__name__)

TEST_FILE_PATTERNS = ["test_*.py", "*_test.py"]


@dataclass
class DiscoveryResult:
    """Result of resolving targets to classes."""

    classes: list[type] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every target could be loaded."""
        return not self.errors


class ClassDiscovery:
    """Loads the classes named by command line or configuration targets.

    A target is one of:
    - a module name, ``package.module``: every class defined in it
    - ``package.module:ClassName``: that class only
    - a ``.py`` file: every class defined in it
    - a directory: every class in its ``test_*.py`` and ``*_test.py`` files
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """Initialize class discovery."""
        self.base_dir = base_dir or Path.cwd()

    def resolve(self, targets: Iterable[str]) -> DiscoveryResult:
        """Load the classes for all targets, in target order, without duplicates."""
        result = DiscoveryResult()

        for target in targets:
            try:
                classes = self._resolve_target(target)
            except Exception as e:
                logger.warning("Could not load %s: %s", target, e)
                result.errors.append(f"{target}: {e}")
                continue

            for cls in classes:
                if cls not in result.classes:
                    result.classes.append(cls)

        return result

    def _resolve_target(self, target: str) -> list[type]:
        path = self.base_dir / target
        if target.endswith(".py") or path.is_file():
            return classes_defined_in(self._load_file(path))
        if path.is_dir():
            return self._resolve_directory(path)

        module_name, _, class_name = target.partition(":")
        module = importlib.import_module(module_name)
        if not class_name:
            return classes_defined_in(module)

        obj = module
        for attribute in class_name.split("."):
            obj = getattr(obj, attribute)
        if not inspect.isclass(obj):
            raise TypeError(f"{target} is not a class")
        return [obj]

    def _resolve_directory(self, directory: Path) -> list[type]:
        classes = []
        for pattern in TEST_FILE_PATTERNS:
            for test_file in sorted(directory.rglob(pattern)):
                classes.extend(classes_defined_in(self._load_file(test_file)))
        return classes

    def _load_file(self, path: Path) -> ModuleType:
        path = path.resolve()
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        # Let the file import its siblings
        parent = str(path.parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)

        module_name = path.stem
        existing = sys.modules.get(module_name)
        if existing is not None and getattr(existing, "__file__", None) == str(path):
            return existing

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        return module


def classes_defined_in(module: ModuleType) -> list[type]:
    """Return the classes defined (not imported) by a module, in definition order."""
    return [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj) and obj.__module__ == module.__name__
    ]


class FindTestUnits:
    """Finds test units using several configurations.

    Configurations are consulted in priority order; for each class the first
    one that finds any units wins. A configuration whose finder fails is
    skipped; the failure is raised only if no other configuration finds units.
    """

    def __init__(self, configurations: Iterable[Configuration]):
        self.configurations = []
        for configuration in sorted(configurations, key=lambda c: c.priority):
            problem = configuration.verify_environment()
            if problem:
                logger.warning("Skipping %s: %s", type(configuration).__name__, problem)
                continue
            self.configurations.append(configuration)

        self._finders = [c.test_unit_finder() for c in self.configurations]
        self._suite_finders = [c.test_suite_finder() for c in self.configurations]

    def find_test_units_for_all_supplied_classes(self, classes: Iterable[type]) -> list[TestUnit]:
        """Return the units of all classes and of the suites they refer to."""
        units: list[TestUnit] = []
        visited: set[type] = set()
        for cls in classes:
            units.extend(self._find_within_class(cls, visited))
        return units

    def _find_within_class(self, cls: type, visited: set[type]) -> list[TestUnit]:
        if cls in visited:
            return []
        visited.add(cls)

        units = []
        for suite_finder in self._suite_finders:
            for suite_class in suite_finder(cls):
                units.extend(self._find_within_class(suite_class, visited))

        units.extend(self.find_test_units(cls))
        return units

    def find_test_units(self, cls: type) -> list[TestUnit]:
        """Return the units the first successful configuration finds for ``cls``."""
        failure: Optional[DiscoveryError] = None

        for configuration, finder in zip(self.configurations, self._finders):
            try:
                units = finder(cls)
            except DiscoveryError as e:
                logger.warning(
                    "%s could not search %s: %s", type(configuration).__name__, cls.__name__, e
                )
                failure = e
                continue

            if units:
                logger.debug(
                    "%s found %d tests in %s",
                    type(configuration).__name__,
                    len(units),
                    cls.__name__,
                )
                return units

        if failure is not None:
            raise failure
        return []
