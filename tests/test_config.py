"""Tests for the configuration module."""

import json
import tempfile
from pathlib import Path

import pytest

from steprunner.config import (
    DiscoveryConfig,
    DispatchMethodConfig,
    ProcessConfig,
    ProjectConfig,
    SteprunnerConfig,
    create_example_config,
    find_config_file,
    get_default_config,
)


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = ProjectConfig()
        assert config.name == "my-project"


class TestDiscoveryConfig:
    """Tests for DiscoveryConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = DiscoveryConfig()
        assert config.legacy_base_type == "unittest.TestCase"
        assert config.targets == []
        assert config.fast_path is True
        assert config.compliant_fallback is True

    def test_default_dispatch_methods(self):
        """Test the life cycle methods checked by default."""
        methods = {(m.name, m.arity) for m in DiscoveryConfig().dispatch_methods}
        assert ("runTest", 0) in methods
        assert ("run", 1) in methods
        assert ("setUp", 0) in methods
        assert len(methods) == 8

    def test_base_type_must_be_dotted(self):
        """Test that a bare class name is rejected."""
        with pytest.raises(ValueError):
            DiscoveryConfig(legacy_base_type="TestCase")

    def test_base_type_must_not_be_blank(self):
        with pytest.raises(ValueError):
            DiscoveryConfig(legacy_base_type="   ")

    def test_base_type_is_stripped(self):
        config = DiscoveryConfig(legacy_base_type=" mylib.BaseCase ")
        assert config.legacy_base_type == "mylib.BaseCase"

    def test_negative_arity_rejected(self):
        with pytest.raises(ValueError):
            DispatchMethodConfig(name="run", arity=-1)


class TestProcessConfig:
    """Tests for ProcessConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = ProcessConfig()
        assert config.python_path == []
        assert config.interpreter_args == []
        assert config.working_directory == "."
        assert config.timeout_seconds == 300
        assert config.environment == {}

    def test_timeout_validation(self):
        """Test that timeout must be positive."""
        with pytest.raises(ValueError):
            ProcessConfig(timeout_seconds=0)


class TestSteprunnerConfig:
    """Tests for SteprunnerConfig."""

    def test_default_config(self):
        """Test creating a default configuration."""
        config = get_default_config()
        assert config.discovery.targets == ["tests"]
        assert config.report.filename == "steprunner_report.html"

    def test_from_file(self):
        """Test loading configuration from a file."""
        config_data = {
            "project": {"name": "test-project"},
            "discovery": {
                "targets": ["tests/test_parser.py"],
                "dispatch_methods": [{"name": "runTest"}],
            },
            "process": {"python_path": ["src"]},
        }

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(config_data, f)
            f.flush()

            config = SteprunnerConfig.from_file(f.name)
            assert config.project.name == "test-project"
            assert config.discovery.targets == ["tests/test_parser.py"]
            assert [m.name for m in config.discovery.dispatch_methods] == ["runTest"]
            assert config.process.python_path == ["src"]

    def test_from_file_not_found(self):
        """Test loading from non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            SteprunnerConfig.from_file("/nonexistent/path.json")

    def test_from_file_invalid(self):
        """Test invalid settings are rejected on load."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "steprunner.json"
            path.write_text(json.dumps({"process": {"timeout_seconds": -5}}))

            with pytest.raises(ValueError):
                SteprunnerConfig.from_file(path)

    def test_to_file(self):
        """Test saving configuration to a file."""
        config = get_default_config()
        config.project.name = "saved-project"

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "config.json"
            config.to_file(path)

            assert path.exists()

            loaded = SteprunnerConfig.from_file(path)
            assert loaded.project.name == "saved-project"
            assert loaded.discovery.dispatch_methods == config.discovery.dispatch_methods

    def test_create_example_config(self):
        """Test creating an example configuration file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "example.json"
            result = create_example_config(path)

            assert result == path
            assert path.exists()

            with open(path) as f:
                data = json.load(f)
                assert "project" in data
                assert "discovery" in data
                assert "process" in data
                assert "report" in data

    def test_get_absolute_paths(self):
        """Test getting absolute paths from config."""
        config = get_default_config()
        config.report.output_dir = "./reports"

        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            paths = config.get_absolute_paths(base_dir)

            assert paths["report_output_dir"].is_absolute()
            assert str(paths["report_output_dir"]).endswith("reports")
            assert paths["working_directory"] == base_dir.resolve()


class TestFindConfigFile:
    """Tests for locating configuration files."""

    def test_finds_file_in_parent_directory(self):
        """Test the search walks up the directory tree."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / "steprunner.json").write_text("{}")
            nested = root / "a" / "b"
            nested.mkdir(parents=True)

            assert find_config_file(nested) == root / "steprunner.json"

    def test_hidden_name_is_found(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / ".steprunner.json").write_text("{}")

            assert find_config_file(root) == root / ".steprunner.json"

    def test_find_and_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "steprunner.json").write_text(json.dumps({"project": {"name": "found"}}))

            assert SteprunnerConfig.find_and_load(root).project.name == "found"
