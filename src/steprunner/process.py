"""Arguments for launching tests in a child Python process."""

import sys
from pathlib import Path
from typing import Callable, Optional

from steprunner.config import ProcessConfig

OutputSink = Callable[[str], None]


def _print_to(stream) -> OutputSink:
    def sink(line: str) -> None:
        print(line, file=stream)

    return sink


class ProcessArgs:
    """Launch settings for a child process: import path, interpreter flags,
    working directory, environment and where its output goes.
    """

    def __init__(self, python_path: list[str]):
        self.python_path = list(python_path)
        self.stdout: OutputSink = _print_to(sys.stdout)
        self.stderr: OutputSink = _print_to(sys.stderr)
        self.interpreter_args: list[str] = []
        self.environment: dict[str, str] = {}
        self.working_dir: Optional[Path] = None

    @classmethod
    def with_python_path(cls, python_path: list[str | Path]) -> "ProcessArgs":
        return cls([str(p) for p in python_path])

    @classmethod
    def from_config(cls, config: ProcessConfig, base_dir: Path) -> "ProcessArgs":
        """Build launch arguments from the ``process`` configuration section."""
        return (
            cls.with_python_path([(base_dir / p).resolve() for p in config.python_path])
            .and_base_dir((base_dir / config.working_directory).resolve())
            .and_interpreter_args(config.interpreter_args)
            .and_environment(config.environment)
        )

    def and_base_dir(self, base_dir: Path) -> "ProcessArgs":
        self.working_dir = base_dir
        return self

    def and_stdout(self, stdout: OutputSink) -> "ProcessArgs":
        self.stdout = stdout
        return self

    def and_stderr(self, stderr: OutputSink) -> "ProcessArgs":
        self.stderr = stderr
        return self

    def and_interpreter_args(self, args: list[str]) -> "ProcessArgs":
        self.interpreter_args = list(args)
        return self

    def and_environment(self, environment: dict[str, str]) -> "ProcessArgs":
        self.environment = dict(environment)
        return self
