"""Runs tests in a child Python process.

The child is ``python -m steprunner run --format json``; its output is
captured and handed to the sinks configured in ``ProcessArgs``.
"""

import os
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Optional

from steprunner.errors import StepRunnerError
from steprunner.process import ProcessArgs


@dataclass
class RawTestOutput:
    """Raw output from the child process."""

    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    command: list[str]

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "command": self.command,
        }


class ProcessLauncher:
    """Launches test runs in child processes."""

    def __init__(
        self,
        args: ProcessArgs,
        timeout_seconds: int = 300,
        python_executable: Optional[str] = None,
    ):
        """Initialize the launcher.

        Args:
            args: Import path, interpreter flags, working directory and output sinks
            timeout_seconds: Maximum time to allow for the child
            python_executable: Interpreter to launch (default: the current one)
        """
        self.args = args
        self.timeout_seconds = timeout_seconds
        self.python_executable = python_executable or sys.executable

    def build_command(self, targets: list[str]) -> list[str]:
        """Build the command line for the child process."""
        return [
            self.python_executable,
            *self.args.interpreter_args,
            "-m",
            "steprunner",
            "run",
            "--format",
            "json",
            "--no-report",
            *targets,
        ]

    def build_environment(self) -> dict[str, str]:
        """Build the child's environment, prepending the configured import path."""
        env = {**os.environ, **self.args.environment}
        python_path = list(self.args.python_path)
        if env.get("PYTHONPATH"):
            python_path.append(env["PYTHONPATH"])
        if python_path:
            env["PYTHONPATH"] = os.pathsep.join(python_path)
        return env

    def launch(self, targets: list[str]) -> RawTestOutput:
        """Run the targets in a child process and capture its output.

        Timeouts and launch failures are reported through the returned
        output's exit code and stderr rather than raised.
        """
        command = self.build_command(targets)
        start_time = time.time()

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=self.args.working_dir,
                timeout=self.timeout_seconds,
                env=self.build_environment(),
            )
            output = RawTestOutput(
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.returncode,
                duration_ms=int((time.time() - start_time) * 1000),
                command=command,
            )

        except subprocess.TimeoutExpired:
            output = RawTestOutput(
                stdout="",
                stderr=f"Test execution timed out after {self.timeout_seconds} seconds",
                exit_code=-1,
                duration_ms=self.timeout_seconds * 1000,
                command=command,
            )

        except OSError as e:
            output = RawTestOutput(
                stdout="",
                stderr=f"Error launching test process: {e}",
                exit_code=-1,
                duration_ms=int((time.time() - start_time) * 1000),
                command=command,
            )

        self._forward(output)
        return output

    def _forward(self, output: RawTestOutput) -> None:
        for line in output.stdout.splitlines():
            self.args.stdout(line)
        for line in output.stderr.splitlines():
            self.args.stderr(line)


class ExecutionError(StepRunnerError):
    """Raised when a child test run produced no usable results."""

    pass
