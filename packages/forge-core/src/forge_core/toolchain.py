"""Go toolchain invocation.

Runs ``go build`` for a single unit as a subprocess. The unit directory is
passed as the subprocess working directory; the orchestrator's own working
directory is never changed.
"""

from __future__ import annotations

import subprocess
import time
from typing import TYPE_CHECKING

import structlog

from forge_core.errors import ToolInvocationError
from forge_core.models import ToolResult

if TYPE_CHECKING:
    from forge_core.config import BuildConfig
    from forge_core.models import BuildUnit

logger = structlog.get_logger(__name__)

GO_TOOL = "go"


def _as_text(output: str | bytes | None) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class GoCompiler:
    """Cross-compiles a unit into a static binary.

    Attributes:
        config: Build configuration (target platform, names, flags)

    Example:
        >>> compiler = GoCompiler(BuildConfig())
        >>> compiler.command()
        ['go', 'build', '-mod=vendor', '-o', 'bootstrap', 'main.go']
    """

    def __init__(self, config: BuildConfig) -> None:
        self.config = config

    def command(self) -> list[str]:
        """Return the ``go build`` argument vector."""
        cmd = [self.config.go_binary, "build"]
        if self.config.mod_mode:
            cmd.append(f"-mod={self.config.mod_mode}")
        cmd.extend(self.config.extra_build_flags)
        cmd.extend(["-o", self.config.output_name, self.config.entry_point])
        return cmd

    def compile(self, unit: BuildUnit) -> ToolResult:
        """Compile a unit in its own directory.

        Args:
            unit: Unit to compile.

        Returns:
            ToolResult with exit status and captured output. A non-zero exit
            status is returned, not raised.

        Raises:
            ToolInvocationError: If the compiler is missing or timed out.
        """
        cmd = self.command()
        log = logger.bind(unit=unit.name, tool=GO_TOOL)
        log.debug(
            "compiler_started",
            command=cmd,
            goos=self.config.goos,
            goarch=self.config.goarch,
            cgo_enabled=self.config.cgo_enabled,
        )

        start_time = time.monotonic()
        try:
            completed = subprocess.run(
                cmd,
                cwd=unit.path,
                env=self.config.build_env(),
                capture_output=True,
                text=True,
                timeout=self.config.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolInvocationError(
                GO_TOOL,
                f"Go compiler '{self.config.go_binary}' not found",
                command=cmd,
                internal_details=str(e),
            ) from e
        except OSError as e:
            # Not executable, a directory, or otherwise unlaunchable
            raise ToolInvocationError(
                GO_TOOL,
                f"Cannot run Go compiler '{self.config.go_binary}'",
                command=cmd,
                internal_details=str(e),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationError(
                GO_TOOL,
                f"Compiler timed out after {self.config.timeout_seconds}s",
                command=cmd,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
            ) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        log.debug("compiler_finished", exit_code=completed.returncode, duration_ms=duration_ms)

        return ToolResult(
            tool=GO_TOOL,
            command=cmd,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_ms=duration_ms,
        )
