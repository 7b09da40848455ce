"""Configuration management for steprunner."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProjectConfig(BaseModel):
    """Project identification."""

    name: str = Field(default="my-project", description="Project name used in reports")


class DispatchMethodConfig(BaseModel):
    """A life cycle method whose override disables the fast path."""

    name: str = Field(description="Method name")
    arity: int = Field(default=0, description="Number of parameters, excluding self/cls")

    @field_validator("arity")
    @classmethod
    def validate_arity(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Arity cannot be negative")
        return v


def _default_dispatch_methods() -> list[DispatchMethodConfig]:
    return [
        DispatchMethodConfig(name="runTest"),
        DispatchMethodConfig(name="runBare"),
        DispatchMethodConfig(name="run", arity=1),
        DispatchMethodConfig(name="debug"),
        DispatchMethodConfig(name="setUp"),
        DispatchMethodConfig(name="tearDown"),
        DispatchMethodConfig(name="setUpClass"),
        DispatchMethodConfig(name="tearDownClass"),
    ]


class DiscoveryConfig(BaseModel):
    """Test discovery configuration."""

    legacy_base_type: str = Field(
        default="unittest.TestCase", description="Dotted name of the legacy test base class"
    )
    dispatch_methods: list[DispatchMethodConfig] = Field(
        default_factory=_default_dispatch_methods,
        description="Life cycle methods the fast path cannot emulate when overridden",
    )
    targets: list[str] = Field(
        default_factory=list, description="Modules, module:Class names or .py files to test"
    )
    fast_path: bool = Field(default=True, description="Use fast-path discovery where possible")
    compliant_fallback: bool = Field(
        default=True, description="Run classes the fast path declines through unittest"
    )

    @field_validator("legacy_base_type")
    @classmethod
    def validate_base_type(cls, v: str) -> str:
        if not v.strip() or "." not in v:
            raise ValueError("Legacy base type must be a dotted name such as unittest.TestCase")
        return v.strip()


class ProcessConfig(BaseModel):
    """Child process launch configuration."""

    python_path: list[str] = Field(default_factory=list, description="Extra entries for PYTHONPATH")
    interpreter_args: list[str] = Field(default_factory=list, description="Python interpreter flags")
    working_directory: str = Field(default=".", description="Directory to run the child process in")
    timeout_seconds: int = Field(default=300, description="Child process timeout")
    environment: dict[str, str] = Field(default_factory=dict, description="Additional environment variables")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        return v


class ReportConfig(BaseModel):
    """Report generation configuration."""

    output_dir: str = Field(default="./reports", description="Directory for report output")
    filename: str = Field(default="steprunner_report.html", description="Report filename")
    title: str = Field(default="Test Results", description="Report title")


class SteprunnerConfig(BaseModel):
    """Main configuration for steprunner."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "SteprunnerConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "SteprunnerConfig":
        """Find and load configuration file, searching up the directory tree."""
        config_path = find_config_file(start_dir)
        if config_path is None:
            raise FileNotFoundError(
                "No configuration file found. Create steprunner.json or run 'steprunner init'"
            )
        return cls.from_file(config_path)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_absolute_paths(self, base_dir: Path | str | None = None) -> dict[str, Path]:
        """Get absolute paths for various config paths."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        return {
            "working_directory": (base_dir / self.process.working_directory).resolve(),
            "report_output_dir": (base_dir / self.report.output_dir).resolve(),
        }


CONFIG_NAMES = ["steprunner.json", ".steprunner.json"]


def find_config_file(start_dir: Path | str | None = None) -> Optional[Path]:
    """Search up the directory tree for a configuration file."""
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()
    for directory in [current, *current.parents]:
        for name in CONFIG_NAMES:
            config_path = directory / name
            if config_path.exists():
                return config_path
    return None


def get_default_config() -> SteprunnerConfig:
    """Return a default configuration."""
    return SteprunnerConfig(
        project=ProjectConfig(name="my-project"),
        discovery=DiscoveryConfig(targets=["tests"]),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.to_file(output_path)
    return output_path
