"""Parsing the output of child test runs."""

import json
from typing import Optional

from steprunner.core.executor import ExecutionError, RawTestOutput
from steprunner.core.runner import RunSummary


class ResultParser:
    """Turns a child process's JSON output into a run summary."""

    def parse(self, output: RawTestOutput) -> RunSummary:
        """Parse the summary printed by ``steprunner run --format json``.

        Raises:
            ExecutionError: If the output contains no summary.
        """
        data = self._find_summary(output.stdout)
        if data is None:
            detail = output.stderr.strip().splitlines()[-1:] or ["no output"]
            raise ExecutionError(
                f"Child process exited with code {output.exit_code}: {detail[0]}"
            )

        summary = RunSummary.from_dict(data)
        if not summary.duration_ms:
            summary.duration_ms = output.duration_ms
        return summary

    def _find_summary(self, stdout: str) -> Optional[dict]:
        # The summary is the last JSON object printed
        for line in reversed(stdout.strip().splitlines()):
            line = line.strip()
            if not line.startswith("{"):
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict) and "results" in data:
                return data
        return None
