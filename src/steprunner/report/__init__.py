"""HTML reports of test runs."""

from steprunner.report.generator import ReportGenerator

__all__ = ["ReportGenerator"]
