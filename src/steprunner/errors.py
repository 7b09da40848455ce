"""Exceptions raised by steprunner."""


class StepRunnerError(Exception):
    """Base class for all steprunner errors."""

    pass


class DiscoveryError(StepRunnerError):
    """Raised when test units cannot be discovered for a class.

    Always chained to the exception that caused it.
    """

    pass


class StepError(StepRunnerError):
    """Raised when a non-invoke step of a test unit fails."""

    pass


class InstantiationError(StepError):
    """Raised when a test instance cannot be constructed."""

    pass


def translate_exception(ex: BaseException) -> DiscoveryError:
    """Translate any exception into a DiscoveryError carrying it as cause."""
    if isinstance(ex, DiscoveryError):
        return ex
    error = DiscoveryError(f"{type(ex).__name__}: {ex}")
    error.__cause__ = ex
    return error
