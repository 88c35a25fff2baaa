"""Build result models.

Models for build units and the outcome of building them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class BuildStatus(str, Enum):
    """Status of a unit build.

    Attributes:
        SUCCEEDED: Binary compiled and archived
        FAILED: A tool exited with a non-zero status
        ERROR: A tool could not be started or timed out
        SKIPPED: Not attempted (fail-fast after an earlier failure)
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class BuildUnit(BaseModel):
    """A directory holding one independently built function.

    Attributes:
        path: Unit directory

    Example:
        >>> BuildUnit(path=Path("lambda/blog-get-posts")).name
        'blog-get-posts'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path = Field(..., description="Unit directory")

    @property
    def name(self) -> str:
        """Human-readable label: the directory's final path segment."""
        return self.path.name


class ToolResult(BaseModel):
    """Captured outcome of one external tool invocation.

    Attributes:
        tool: Tool label (e.g., "go", "zip")
        command: Argument vector that was run
        exit_code: Process exit status; None if the process never ran to completion
        stdout: Captured standard output
        stderr: Captured standard error
        duration_ms: Step duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool: str = Field(..., min_length=1, description="Tool label")
    command: list[str] = Field(default_factory=list, description="Argument vector")
    exit_code: int | None = Field(default=None, description="Exit status")
    stdout: str = Field(default="", description="Captured stdout")
    stderr: str = Field(default="", description="Captured stderr")
    duration_ms: int = Field(default=0, ge=0, description="Duration in milliseconds")

    @property
    def succeeded(self) -> bool:
        """Check if the tool exited cleanly."""
        return self.exit_code == 0


class ArtifactInfo(BaseModel):
    """Deployable output of one unit.

    Attributes:
        binary_path: Compiled binary
        archive_path: Zip archive containing the binary
        size_bytes: Archive size
        sha256: Archive digest (informational, not used for staleness)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    binary_path: Path
    archive_path: Path
    size_bytes: int = Field(default=0, ge=0)
    sha256: str = ""


class UnitResult(BaseModel):
    """Result of building a single unit.

    Attributes:
        unit: Unit name
        path: Unit directory
        status: Build status
        message: Human-readable result message
        steps: Tool invocations in the order they ran
        artifact: Produced artifact, if the build succeeded
        duration_ms: Unit build duration in milliseconds
        timestamp: When the build started

    Example:
        >>> result = UnitResult(
        ...     unit="blog-get-posts",
        ...     path=Path("lambda/blog-get-posts"),
        ...     status=BuildStatus.SUCCEEDED,
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    unit: str = Field(..., min_length=1, description="Unit name")
    path: Path = Field(..., description="Unit directory")
    status: BuildStatus = Field(..., description="Build status")
    message: str = Field(default="", description="Result message")
    steps: list[ToolResult] = Field(default_factory=list, description="Tool invocations")
    artifact: ArtifactInfo | None = Field(default=None, description="Produced artifact")
    duration_ms: int = Field(default=0, ge=0, description="Duration in milliseconds")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Build timestamp"
    )

    @property
    def passed(self) -> bool:
        """Check if the unit was built."""
        return self.status == BuildStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the unit build failed."""
        return self.status in (BuildStatus.FAILED, BuildStatus.ERROR)


class BuildReport(BaseModel):
    """Aggregated result of a build run.

    Attributes:
        units: Per-unit results in discovery order
        overall_status: Overall run status
        started_at: When the run started
        finished_at: When the run finished
        total_duration_ms: Total duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    units: list[UnitResult] = Field(default_factory=list, description="Unit results")
    overall_status: BuildStatus = Field(
        default=BuildStatus.SUCCEEDED, description="Overall status"
    )
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Start time"
    )
    finished_at: datetime | None = Field(default=None, description="End time")
    total_duration_ms: int = Field(default=0, ge=0, description="Total duration")

    @property
    def passed(self) -> bool:
        """Check if every unit was built."""
        return self.overall_status == BuildStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if any unit failed."""
        return self.overall_status in (BuildStatus.FAILED, BuildStatus.ERROR)

    @property
    def passed_count(self) -> int:
        """Count of built units."""
        return sum(1 for u in self.units if u.passed)

    @property
    def failed_count(self) -> int:
        """Count of failed units."""
        return sum(1 for u in self.units if u.failed)

    @property
    def skipped_count(self) -> int:
        """Count of units not attempted."""
        return sum(1 for u in self.units if u.status == BuildStatus.SKIPPED)
