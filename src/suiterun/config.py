"""Configuration management for suiterun."""

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class DiscoveryConfig(BaseModel):
    """Where and how suite files are found."""

    root: str = Field(default="tests", description="Directory scanned recursively for suite files")
    suffix: str = Field(default="_suite", description="File name suffix that marks a suite file")
    extension: str = Field(default=".py", description="File extension of suite files")
    on_load_error: Literal["warn", "ignore", "raise"] = Field(
        default="warn",
        description="What to do with a suite file that fails to import or construct",
    )

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError("Extension must start with a dot")
        return v

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Suite suffix cannot be empty")
        return v


class FactoryConfig(BaseModel):
    """Where data factories are auto-discovered from."""

    directory: str = Field(default="tests/factories", description="Directory scanned for factory files")
    suffix: str = Field(default="_factory", description="File name suffix stripped to form factory names")


class StorageConfig(BaseModel):
    """Datasources used as the per-test rollback boundary."""

    datasources: dict[str, str] = Field(
        default_factory=dict, description="Datasource name to SQLite database path"
    )
    default_datasource: Optional[str] = Field(
        default=None, description="Datasource used when none is given on the command line"
    )


class IntegrationConfig(BaseModel):
    """Framework bootstrap for integration suites."""

    bootstrap: Optional[str] = Field(
        default=None,
        description="Import path of a zero-argument callable returning the application, e.g. 'app.main:create_app'",
    )

    @field_validator("bootstrap")
    @classmethod
    def validate_bootstrap(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "." not in v and ":" not in v:
            raise ValueError("Bootstrap must be an import path like 'package.module:function'")
        return v


class RunnerConfig(BaseModel):
    """Test execution settings."""

    timeout_seconds: Optional[float] = Field(
        default=None, description="Per-test deadline; unset means no deadline"
    )

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class ReportConfig(BaseModel):
    """Console and HTML report configuration."""

    color: Optional[bool] = Field(default=None, description="Force colour on or off; auto-detect when unset")
    html_output: Optional[str] = Field(default=None, description="Write an HTML summary page to this path")
    title: str = Field(default="Test Results", description="HTML report title")


class SuiteRunConfig(BaseModel):
    """Main configuration for suiterun."""

    project: str = Field(default="my-project", description="Project name shown in reports")
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    factories: FactoryConfig = Field(default_factory=FactoryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    integration: IntegrationConfig = Field(default_factory=IntegrationConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "SuiteRunConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @staticmethod
    def find_file(start_dir: Path | str | None = None) -> Optional[Path]:
        """Find the nearest configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        config_names = ["suiterun.json", ".suiterun.json"]

        current = start_dir.resolve()
        while True:
            for name in config_names:
                config_path = current / name
                if config_path.exists():
                    return config_path
            if current == current.parent:
                return None
            current = current.parent

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "SuiteRunConfig":
        """Find and load configuration file, searching up the directory tree."""
        config_path = cls.find_file(start_dir)
        if config_path is not None:
            return cls.from_file(config_path)

        raise FileNotFoundError(
            "No configuration file found. Create suiterun.json or run 'suiterun init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_absolute_paths(self, base_dir: Path | str | None = None) -> dict[str, Path]:
        """Get absolute paths for the directories and files the config names."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        paths = {
            "suite_root": (base_dir / self.discovery.root).resolve(),
            "factory_directory": (base_dir / self.factories.directory).resolve(),
        }
        if self.report.html_output:
            paths["html_output"] = (base_dir / self.report.html_output).resolve()
        return paths

    def get_datasource_paths(self, base_dir: Path | str | None = None) -> dict[str, Path | str]:
        """Resolve datasource paths relative to ``base_dir``."""
        base_dir = Path.cwd() if base_dir is None else Path(base_dir)
        return {
            name: path if path == ":memory:" else (base_dir / path).resolve()
            for name, path in self.storage.datasources.items()
        }


def get_default_config() -> SuiteRunConfig:
    """Return a default configuration."""
    return SuiteRunConfig(
        project="my-project",
        discovery=DiscoveryConfig(root="tests"),
        factories=FactoryConfig(directory="tests/factories"),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.storage.datasources = {"default": "var/test.sqlite3"}
    config.storage.default_datasource = "default"
    config.to_file(output_path)
    return output_path
