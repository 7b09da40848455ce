"""Tests for parsing child process output."""

import json

import pytest

from steprunner.core.executor import ExecutionError, RawTestOutput
from steprunner.core.parser import ResultParser
from steprunner.testapi import TestStatus

SUMMARY = {
    "total": 2,
    "passed": 1,
    "failed": 1,
    "errors": 0,
    "skipped": 0,
    "duration_ms": 25,
    "results": [
        {
            "name": "testOne",
            "test_class": "pkg.Case",
            "status": "passed",
            "error_type": None,
            "error_message": "",
            "duration_ms": 5,
        },
        {
            "name": "testTwo",
            "test_class": "pkg.Case",
            "status": "failed",
            "error_type": "AssertionError",
            "error_message": "AssertionError: 1 != 2",
            "duration_ms": 20,
        },
    ],
}


def output(stdout="", stderr="", exit_code=0, duration_ms=100):
    return RawTestOutput(stdout, stderr, exit_code, duration_ms, ["python"])


class TestResultParser:
    """Tests for ResultParser."""

    def test_parse_summary(self):
        """Test parsing the JSON summary line."""
        summary = ResultParser().parse(output(json.dumps(SUMMARY), exit_code=1))

        assert summary.total == 2
        assert summary.passed == 1
        assert summary.failed == 1
        assert summary.duration_ms == 25
        assert summary.results[1].status == TestStatus.FAILED
        assert summary.results[1].description.qualified_name == "pkg.Case.testTwo"
        assert summary.results[1].error_message == "AssertionError: 1 != 2"

    def test_ignores_other_output(self):
        """Test output printed by the tests themselves is skipped."""
        stdout = "\n".join(["collecting...", '{"not": "a summary"}', json.dumps(SUMMARY), "bye"])

        assert ResultParser().parse(output(stdout)).total == 2

    def test_last_summary_wins(self):
        first = dict(SUMMARY, results=[])
        stdout = "\n".join([json.dumps(first), json.dumps(SUMMARY)])

        assert ResultParser().parse(output(stdout)).total == 2

    def test_duration_falls_back_to_process_time(self):
        data = dict(SUMMARY, duration_ms=0)

        summary = ResultParser().parse(output(json.dumps(data), duration_ms=321))

        assert summary.duration_ms == 321

    def test_unknown_status_becomes_error(self):
        data = dict(SUMMARY, results=[dict(SUMMARY["results"][0], status="exploded")])

        summary = ResultParser().parse(output(json.dumps(data)))

        assert summary.results[0].status == TestStatus.ERROR

    def test_no_summary_raises(self):
        """Test the last stderr line is reported when there is no summary."""
        with pytest.raises(ExecutionError, match="ModuleNotFoundError"):
            ResultParser().parse(
                output("", "Traceback\nModuleNotFoundError: No module named 'x'", exit_code=1)
            )

    def test_no_output_at_all(self):
        with pytest.raises(ExecutionError, match="no output"):
            ResultParser().parse(output(exit_code=-1))
