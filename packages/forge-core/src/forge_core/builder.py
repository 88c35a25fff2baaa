"""Single unit build.

Compiles one unit and packages its binary, recording every tool step.
"""

from __future__ import annotations

import hashlib
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from forge_core.archive import ZipArchiver
from forge_core.errors import DirectoryNotFoundError, ToolInvocationError
from forge_core.models import ArtifactInfo, BuildStatus, ToolResult, UnitResult
from forge_core.observability import mark_span, span, tool_step
from forge_core.toolchain import GoCompiler

if TYPE_CHECKING:
    from pathlib import Path

    from forge_core.config import BuildConfig
    from forge_core.models import BuildUnit

logger = structlog.get_logger(__name__)

# Lines of compiler stderr kept in the result message
STDERR_TAIL_LINES = 5


def _sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _stderr_tail(result: ToolResult) -> str:
    lines = [line for line in result.stderr.splitlines() if line.strip()]
    return "\n".join(lines[-STDERR_TAIL_LINES:])


class UnitBuilder:
    """Builds one unit: compile, then archive.

    Tool failures are returned as data on the UnitResult. Only a missing
    unit directory raises, because it means the discovered layout changed
    underneath the run.

    Attributes:
        config: Build configuration
        compiler: Compiler used for the compile step
        archiver: Archiver used for the packaging step

    Example:
        >>> builder = UnitBuilder(BuildConfig())
        >>> result = builder.build(BuildUnit(path=Path("lambda/blog-get-posts")))
        >>> result.status
        <BuildStatus.SUCCEEDED: 'succeeded'>
    """

    def __init__(
        self,
        config: BuildConfig,
        compiler: GoCompiler | None = None,
        archiver: ZipArchiver | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Build configuration
            compiler: Compiler override (defaults to GoCompiler(config))
            archiver: Archiver override (defaults to ZipArchiver())
        """
        self.config = config
        self.compiler = compiler or GoCompiler(config)
        self.archiver = archiver or ZipArchiver()

    def build(self, unit: BuildUnit) -> UnitResult:
        """Build a unit.

        Args:
            unit: Unit to build.

        Returns:
            UnitResult with status, steps, and artifact.

        Raises:
            DirectoryNotFoundError: If the unit directory no longer exists.
        """
        if not unit.path.is_dir():
            raise DirectoryNotFoundError(unit.path)

        log = logger.bind(unit=unit.name)
        start_time = time.monotonic()
        timestamp = datetime.now(UTC)
        steps: list[ToolResult] = []

        log.info("unit_build_started", path=str(unit.path))

        with span("forge.build_unit", attributes={"forge.unit": unit.name}) as unit_span:
            try:
                status, message, artifact = self._run_steps(unit, steps)
            except ToolInvocationError as e:
                steps.append(
                    ToolResult(
                        tool=e.tool,
                        command=e.command,
                        exit_code=None,
                        stdout=e.stdout,
                        stderr=e.stderr,
                    )
                )
                status, message, artifact = BuildStatus.ERROR, e.user_message, None
                log.error("unit_build_error", tool=e.tool, error=e.user_message)

            mark_span(unit_span, status == BuildStatus.SUCCEEDED, message)

        duration_ms = int((time.monotonic() - start_time) * 1000)
        log.info("unit_build_completed", status=status.value, duration_ms=duration_ms)

        return UnitResult(
            unit=unit.name,
            path=unit.path,
            status=status,
            message=message,
            steps=steps,
            artifact=artifact,
            duration_ms=duration_ms,
            timestamp=timestamp,
        )

    def _run_steps(
        self, unit: BuildUnit, steps: list[ToolResult]
    ) -> tuple[BuildStatus, str, ArtifactInfo | None]:
        """Run compile and archive, appending each ToolResult to steps."""
        with tool_step("go", unit.name) as s:
            compiled = self.compiler.compile(unit)
            mark_span(s, compiled.succeeded, f"exit status {compiled.exit_code}")
        steps.append(compiled)

        if not compiled.succeeded:
            # A stale binary from an earlier build is never packaged
            logger.warning(
                "compile_failed",
                unit=unit.name,
                exit_code=compiled.exit_code,
            )
            message = f"go build exited with status {compiled.exit_code}"
            tail = _stderr_tail(compiled)
            if tail:
                message = f"{message}\n{tail}"
            return BuildStatus.FAILED, message, None

        binary_path = unit.path / self.config.output_name
        archive_path = unit.path / self.config.archive_name

        with tool_step("zip", unit.name):
            archived = self.archiver.archive(binary_path, archive_path)
            try:
                artifact = ArtifactInfo(
                    binary_path=binary_path,
                    archive_path=archive_path,
                    size_bytes=archive_path.stat().st_size,
                    sha256=_sha256(archive_path),
                )
            except OSError as e:
                raise ToolInvocationError(
                    archived.tool,
                    f"Cannot read archive {archive_path.name}",
                    command=archived.command,
                    stdout=archived.stdout,
                    internal_details=str(e),
                ) from e
        steps.append(archived)

        return BuildStatus.SUCCEEDED, f"Packaged {self.config.archive_name}", artifact


def build_unit(unit: BuildUnit, config: BuildConfig) -> UnitResult:
    """Build a single unit with the default compiler and archiver.

    Args:
        unit: Unit to build.
        config: Build configuration.

    Returns:
        UnitResult for the unit.

    Raises:
        DirectoryNotFoundError: If the unit directory no longer exists.
    """
    return UnitBuilder(config).build(unit)
