"""Build configuration.

Configuration for discovering build units and invoking the Go toolchain.
Values resolve in this order (highest first): explicit keyword arguments,
forge.yaml (via BuildConfig.from_yaml), FORGE_* environment variables,
field defaults. The defaults reproduce the zero-configuration build:
every directory under ``lambda/`` is compiled for linux/amd64 with
``-mod=vendor`` into ``bootstrap`` and zipped into ``bootstrap.zip``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from forge_core.errors import ConfigurationError

DEFAULT_CONFIG_FILENAME = "forge.yaml"


class BuildConfig(BaseSettings):
    """Configuration for a build run.

    Can be loaded from environment variables with FORGE_ prefix.

    Attributes:
        root: Parent directory holding one subdirectory per build unit
        pattern: Glob pattern selecting unit directories under root
        entry_point: Go source entry point inside each unit
        output_name: Name of the compiled binary
        archive_name: Name of the zip archive written next to the binary
        goos: Target operating system (GOOS)
        goarch: Target architecture (GOARCH)
        cgo_enabled: Allow cgo; disabled for fully static binaries
        mod_mode: Value for ``-mod=``; empty string omits the flag
        go_binary: Go executable name or path
        extra_build_flags: Additional flags passed to ``go build``
        timeout_seconds: Per-step timeout; None waits indefinitely
        fail_fast: Skip remaining units after the first failure

    Example:
        >>> # From environment (FORGE_GOARCH=arm64)
        >>> config = BuildConfig()
        >>>
        >>> # Explicit
        >>> config = BuildConfig(root=Path("functions"), goarch="arm64")
    """

    model_config = SettingsConfigDict(
        env_prefix="FORGE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    root: Path = Field(default=Path("lambda"), description="Units parent directory")
    pattern: str = Field(default="*", min_length=1, description="Unit glob pattern")
    entry_point: str = Field(default="main.go", min_length=1, description="Go entry point")
    output_name: str = Field(default="bootstrap", min_length=1, description="Binary name")
    archive_name: str = Field(default="bootstrap.zip", min_length=1, description="Archive name")
    goos: str = Field(default="linux", min_length=1, description="Target OS")
    goarch: str = Field(default="amd64", min_length=1, description="Target architecture")
    cgo_enabled: bool = Field(default=False, description="Enable cgo")
    mod_mode: str = Field(default="vendor", description="go build -mod value")
    go_binary: str = Field(default="go", min_length=1, description="Go executable")
    extra_build_flags: list[str] = Field(
        default_factory=list,
        description="Additional go build flags",
    )
    timeout_seconds: int | None = Field(
        default=None,
        ge=1,
        description="Per-step timeout in seconds",
    )
    fail_fast: bool = Field(default=False, description="Stop on first failure")

    @field_validator("output_name", "archive_name")
    @classmethod
    def _bare_file_name(cls, value: str) -> str:
        """Output files are always written inside the unit directory."""
        if Path(value).name != value:
            raise ValueError("must be a file name without directory components")
        return value

    @field_validator("archive_name")
    @classmethod
    def _zip_suffix(cls, value: str) -> str:
        if not value.endswith(".zip"):
            raise ValueError("must end with '.zip'")
        return value

    def build_env(self) -> dict[str, str]:
        """Return the environment for the compiler subprocess.

        The parent environment is inherited so that PATH, GOPATH and GOCACHE
        keep working; only the cross-compilation variables are overridden.

        Returns:
            Environment mapping for subprocess.run.
        """
        env = dict(os.environ)
        env.update(
            {
                "CGO_ENABLED": "1" if self.cgo_enabled else "0",
                "GOOS": self.goos,
                "GOARCH": self.goarch,
            }
        )
        return env

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> BuildConfig:
        """Load BuildConfig from a YAML file.

        Args:
            path: Path to forge.yaml.
            **overrides: Values taking precedence over the file.

        Returns:
            Validated BuildConfig instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigurationError: If YAML syntax is invalid, the document is not a
                mapping, or it names an unknown option.
            pydantic.ValidationError: If field validation fails.

        Example:
            >>> config = BuildConfig.from_yaml("forge.yaml", fail_fast=True)
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with path.open("r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            line_number = None
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                line_number = mark.line + 1
            raise ConfigurationError(
                "Invalid YAML",
                file_path=str(path),
                line_number=line_number,
                internal_details=str(e),
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a mapping of option names to values",
                file_path=str(path),
            )

        unknown = sorted(str(key) for key in data if key not in cls.model_fields)
        if unknown:
            raise ConfigurationError(
                "Unknown configuration option",
                file_path=str(path),
                field_path=unknown[0],
            )

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


def load_config(path: str | Path | None = None, **overrides: Any) -> BuildConfig:
    """Resolve the build configuration.

    Uses path when given, else ./forge.yaml when present, else environment
    and defaults only. Non-None overrides always win.

    Args:
        path: Explicit configuration file.
        **overrides: Values taking precedence over file and environment.

    Returns:
        Validated BuildConfig instance.
    """
    if path is None and Path(DEFAULT_CONFIG_FILENAME).is_file():
        path = DEFAULT_CONFIG_FILENAME

    if path is not None:
        return BuildConfig.from_yaml(path, **overrides)

    return BuildConfig(**{k: v for k, v in overrides.items() if v is not None})
