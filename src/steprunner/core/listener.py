"""Test listeners used by the runner and the CLI."""

from typing import Iterable, Optional

from rich.console import Console

from steprunner.testapi import Description, TestListener, TestResult


class ResultCollector(TestListener):
    """Collects every result it is told about."""

    def __init__(self):
        self.results: list[TestResult] = []
        self.started: list[Description] = []

    def on_test_start(self, description: Description) -> None:
        self.started.append(description)

    def on_test_success(self, result: TestResult) -> None:
        self.results.append(result)

    def on_test_failure(self, result: TestResult) -> None:
        self.results.append(result)

    def on_test_skipped(self, result: TestResult) -> None:
        self.results.append(result)


class CompositeListener(TestListener):
    """Forwards every event to several listeners."""

    def __init__(self, listeners: Iterable[TestListener]):
        self.listeners = list(listeners)

    def on_run_start(self) -> None:
        for listener in self.listeners:
            listener.on_run_start()

    def on_test_start(self, description: Description) -> None:
        for listener in self.listeners:
            listener.on_test_start(description)

    def on_test_success(self, result: TestResult) -> None:
        for listener in self.listeners:
            listener.on_test_success(result)

    def on_test_failure(self, result: TestResult) -> None:
        for listener in self.listeners:
            listener.on_test_failure(result)

    def on_test_skipped(self, result: TestResult) -> None:
        for listener in self.listeners:
            listener.on_test_skipped(result)

    def on_run_end(self) -> None:
        for listener in self.listeners:
            listener.on_run_end()


class ConsoleListener(TestListener):
    """Prints one line per finished test."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def on_test_success(self, result: TestResult) -> None:
        if self.verbose:
            self.console.print(f"  [green]✓[/green] {result.description}")

    def on_test_failure(self, result: TestResult) -> None:
        self.console.print(
            f"  [red]✗[/red] {result.description} [dim]({result.status.value})[/dim]"
        )
        if self.verbose and result.error_message:
            self.console.print(f"    {result.error_message}", style="dim", markup=False)

    def on_test_skipped(self, result: TestResult) -> None:
        if self.verbose:
            self.console.print(f"  [yellow]-[/yellow] {result.description} [dim](skipped)[/dim]")
