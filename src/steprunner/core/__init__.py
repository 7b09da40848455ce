"""Core test running functionality."""

from steprunner.core.container import UnContainer
from steprunner.core.discovery import ClassDiscovery, FindTestUnits
from steprunner.core.executor import ExecutionError, ProcessLauncher, RawTestOutput
from steprunner.core.parser import ResultParser
from steprunner.core.runner import RunSummary, StepRunner, build_configurations

__all__ = [
    "ClassDiscovery",
    "ExecutionError",
    "FindTestUnits",
    "ProcessLauncher",
    "RawTestOutput",
    "ResultParser",
    "RunSummary",
    "StepRunner",
    "UnContainer",
    "build_configurations",
]
