"""Command-line interface for steprunner."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from steprunner import __version__
from steprunner.config import SteprunnerConfig, create_example_config, find_config_file
from steprunner.errors import StepRunnerError
from steprunner.logging import configure_logging

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def print_banner() -> None:
    """Print the steprunner banner."""
    console.print(
        Panel.fit(
            "[bold blue]steprunner[/bold blue] - fast test discovery and execution",
            subtitle=f"v{__version__}",
        )
    )


@click.group()
@click.version_option(version=__version__, prog_name="steprunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: steprunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """steprunner - run unittest-style tests without the framework's life cycle.

    Simple test classes are run by constructing them and calling each test
    method directly; anything else falls back to unittest.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    configure_logging(verbose)


def _load_config(ctx: click.Context) -> tuple[SteprunnerConfig, Path]:
    """Load the configuration and the directory paths in it are relative to."""
    config_path = ctx.obj.get("config_path")
    try:
        if config_path:
            return SteprunnerConfig.from_file(config_path), Path(config_path).resolve().parent
        found = find_config_file()
        if found is not None:
            return SteprunnerConfig.from_file(found), found.parent
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        err_console.print("Run [bold]steprunner init[/bold] to create a configuration file")
        sys.exit(1)

    return SteprunnerConfig(), Path.cwd()


def _resolve_classes(config: SteprunnerConfig, base_dir: Path, targets: tuple[str, ...]) -> list[type]:
    from steprunner.core.discovery import ClassDiscovery

    targets = targets or tuple(config.discovery.targets)
    if not targets:
        err_console.print("[red]Error:[/red] No targets given and none configured")
        sys.exit(2)

    result = ClassDiscovery(base_dir).resolve(targets)
    for error in result.errors:
        err_console.print(f"[yellow]Warning:[/yellow] could not load {error}")
    return result.classes


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="steprunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new steprunner configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
        console.print("\nNext steps:")
        console.print("  1. List the modules or directories to test under discovery.targets")
        console.print("  2. Run [bold]steprunner list[/bold] to see which tests are found")
        console.print("  3. Run [bold]steprunner run[/bold] to execute them")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command(name="list")
@click.argument("targets", nargs=-1)
@click.pass_context
def list_tests(ctx: click.Context, targets: tuple[str, ...]) -> None:
    """List the tests found in TARGETS and how each will be run."""
    from steprunner.core.discovery import FindTestUnits
    from steprunner.core.runner import build_configurations
    from steprunner.simpletest.unit import SteppedTestUnit

    config, base_dir = _load_config(ctx)
    classes = _resolve_classes(config, base_dir, targets)

    try:
        units = FindTestUnits(build_configurations(config.discovery)).find_test_units_for_all_supplied_classes(classes)
    except StepRunnerError as e:
        err_console.print(f"[red]Error discovering tests:[/red] {e}")
        sys.exit(2)

    table = Table(title=f"{len(units)} tests")
    table.add_column("Class", style="cyan")
    table.add_column("Test")
    table.add_column("Path", style="dim")

    for unit in units:
        path = "fast" if isinstance(unit, SteppedTestUnit) else "compliant"
        table.add_row(unit.description.test_class, unit.description.name, path)

    console.print(table)


@main.command()
@click.argument("targets", nargs=-1)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format for the results",
)
@click.option(
    "--report/--no-report",
    default=False,
    help="Generate HTML report after tests",
)
@click.pass_context
def run(ctx: click.Context, targets: tuple[str, ...], output_format: str, report: bool) -> None:
    """Execute the tests in TARGETS."""
    from steprunner.core.container import UnContainer
    from steprunner.core.listener import ConsoleListener
    from steprunner.core.runner import StepRunner, build_configurations
    from steprunner.testapi import TestListener

    verbose = ctx.obj.get("verbose", False)
    config, base_dir = _load_config(ctx)

    if output_format == "table":
        print_banner()
        console.print(f"[dim]Project:[/dim] {config.project.name}")
        listener = ConsoleListener(console, verbose=verbose)
    else:
        listener = TestListener()

    classes = _resolve_classes(config, base_dir, targets)

    try:
        summary = StepRunner(listener).run(
            UnContainer(), build_configurations(config.discovery), classes
        )
    except StepRunnerError as e:
        err_console.print(f"[red]Error discovering tests:[/red] {e}")
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(summary.to_dict()))
    else:
        _display_results_summary(summary)

    if report:
        from steprunner.report.generator import ReportGenerator

        try:
            report_path = ReportGenerator(config, base_dir).generate(summary)
            err_console.print(f"[green]Report generated:[/green] {report_path}")
        except OSError as e:
            err_console.print(f"[red]Error generating report:[/red] {e}")

    if not summary.success:
        sys.exit(1)


@main.command()
@click.argument("targets", nargs=-1)
@click.pass_context
def launch(ctx: click.Context, targets: tuple[str, ...]) -> None:
    """Execute the tests in TARGETS in a separate Python process."""
    from steprunner.core.executor import ExecutionError, ProcessLauncher
    from steprunner.core.parser import ResultParser
    from steprunner.process import ProcessArgs

    print_banner()
    config, base_dir = _load_config(ctx)

    targets = targets or tuple(config.discovery.targets)
    if not targets:
        err_console.print("[red]Error:[/red] No targets given and none configured")
        sys.exit(2)

    args = (
        ProcessArgs.from_config(config.process, base_dir)
        .and_stdout(lambda line: logger.debug("child: %s", line))
        .and_stderr(lambda line: err_console.print(line, style="dim", markup=False))
    )
    launcher = ProcessLauncher(args, timeout_seconds=config.process.timeout_seconds)

    with console.status("Running tests in child process..."):
        output = launcher.launch(list(targets))

    try:
        summary = ResultParser().parse(output)
    except ExecutionError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    _display_results_summary(summary)
    if not summary.success:
        sys.exit(1)


def _display_results_summary(summary) -> None:
    """Display a summary of test results."""
    console.print("\n" + "=" * 50)
    console.print("[bold]Test Results Summary[/bold]")
    console.print("=" * 50)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Tests", str(summary.total))
    table.add_row("Passed", f"[green]{summary.passed}[/green]")
    table.add_row("Failed", f"[red]{summary.failed}[/red]")
    table.add_row("Errors", f"[red]{summary.errors}[/red]")
    table.add_row("Skipped", f"[yellow]{summary.skipped}[/yellow]")

    if summary.total > 0:
        pass_rate = (summary.passed / summary.total) * 100
        table.add_row("Pass Rate", f"{pass_rate:.1f}%")

    console.print(table)

    failures = [r for r in summary.results if not r.succeeded]
    if failures:
        console.print("\n[red]Some tests failed![/red]")
        console.print("\nFailed tests:")
        for result in failures[:10]:  # Show first 10
            console.print(f"  [red]✗[/red] {result.description}")
        if len(failures) > 10:
            console.print(f"  ... and {len(failures) - 10} more")
    else:
        console.print("\n[green]All tests passed![/green]")


if __name__ == "__main__":
    main()
