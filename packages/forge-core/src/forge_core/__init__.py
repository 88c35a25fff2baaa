"""forge-core: Discovery, compilation and packaging of Go Lambda functions.

This package provides:
- BuildConfig: Build settings (FORGE_* environment, forge.yaml, overrides)
- discover_units: Find one build unit per function directory
- UnitBuilder / build_unit: Compile a unit and zip its binary
- BuildRunner / run_build: Build every unit and aggregate a BuildReport
- Report formatters for table and JSON output
"""

from __future__ import annotations

__version__ = "0.1.0"

from forge_core.archive import ZipArchiver
from forge_core.builder import UnitBuilder, build_unit
from forge_core.config import BuildConfig, load_config
from forge_core.discovery import discover_units

# Error types
from forge_core.errors import (
    ConfigurationError,
    DirectoryNotFoundError,
    ForgeError,
    ToolInvocationError,
)
from forge_core.models import (
    ArtifactInfo,
    BuildReport,
    BuildStatus,
    BuildUnit,
    ToolResult,
    UnitResult,
)
from forge_core.output import format_report_json, format_report_table, print_report
from forge_core.runner import BuildRunner, run_build
from forge_core.toolchain import GoCompiler

__all__ = [
    "__version__",
    # Configuration
    "BuildConfig",
    "load_config",
    # Build
    "BuildRunner",
    "GoCompiler",
    "UnitBuilder",
    "ZipArchiver",
    "build_unit",
    "discover_units",
    "run_build",
    # Models
    "ArtifactInfo",
    "BuildReport",
    "BuildStatus",
    "BuildUnit",
    "ToolResult",
    "UnitResult",
    # Errors
    "ConfigurationError",
    "DirectoryNotFoundError",
    "ForgeError",
    "ToolInvocationError",
    # Output
    "format_report_json",
    "format_report_table",
    "print_report",
]
