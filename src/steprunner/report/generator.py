"""HTML reports of test runs, rendered with Jinja2."""

from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from steprunner.config import SteprunnerConfig
from steprunner.core.runner import RunSummary
from steprunner.testapi import TestResult, TestStatus

TEMPLATE_NAME = "report.html"


class ReportGenerator:
    """Writes a run summary as a single static HTML page."""

    def __init__(self, config: SteprunnerConfig, base_dir: Path):
        """Initialize the report generator.

        Args:
            config: steprunner configuration; its ``report`` section says where to write
            base_dir: Directory the configured output directory is relative to
        """
        self.config = config
        self.base_dir = Path(base_dir)

        self.env = Environment(
            loader=PackageLoader("steprunner.report", "templates"),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["duration"] = format_duration
        self.env.filters["timestamp"] = lambda dt: dt.strftime("%Y-%m-%d %H:%M:%S")
        self.env.filters["percentage"] = lambda value: f"{value:.1f}%"

    @property
    def report_path(self) -> Path:
        report = self.config.report
        return self.base_dir / report.output_dir / report.filename

    def generate(self, summary: RunSummary) -> Path:
        """Render ``summary`` and write it to the configured report path.

        Returns:
            Path to the written report
        """
        html = self.env.get_template(TEMPLATE_NAME).render(**self._prepare_context(summary))

        path = self.report_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        return path

    def _prepare_context(self, summary: RunSummary) -> dict[str, Any]:
        by_status: dict[TestStatus, list[dict]] = defaultdict(list)
        for result in sorted(summary.results, key=lambda r: r.duration_ms, reverse=True):
            by_status[result.status].append(_row(result))

        return {
            "title": self.config.report.title,
            "project_name": self.config.project.name,
            "generated_at": datetime.now(),
            "summary": summary.to_dict(),
            "pass_rate": summary.passed * 100 / summary.total if summary.total else 0,
            "failed_tests": by_status[TestStatus.FAILED] + by_status[TestStatus.ERROR],
            "passed_tests": by_status[TestStatus.PASSED],
            "skipped_tests": by_status[TestStatus.SKIPPED],
            "classes": _class_breakdown(summary.results),
        }


def _row(result: TestResult) -> dict:
    row = result.to_dict()
    row["qualified_name"] = result.description.qualified_name
    return row


def _class_breakdown(results: list[TestResult]) -> list[dict]:
    """Count outcomes per test class, classes with problems first."""
    classes: dict[str, dict] = {}
    for result in results:
        entry = classes.setdefault(
            result.description.test_class,
            {"name": result.description.test_class, "total": 0, "problems": 0},
        )
        entry["total"] += 1
        if not result.succeeded:
            entry["problems"] += 1

    return sorted(classes.values(), key=lambda c: (-c["problems"], c["name"]))


def format_duration(ms: int) -> str:
    """Format milliseconds as e.g. ``250ms``, ``2.50s`` or ``2m 5.0s``."""
    if ms < 1000:
        return f"{ms}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes, rest = divmod(ms, 60000)
    return f"{minutes}m {rest / 1000:.1f}s"
