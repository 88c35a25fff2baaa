"""Zip packaging of compiled binaries.

Archives are written in-process with zipfile rather than by shelling out to
``zip``. Unix permission bits are carried into the archive (the Lambda
runtime executes ``bootstrap`` directly) and every entry gets the same fixed
timestamp, so an unchanged binary always yields a byte-identical archive.
"""

from __future__ import annotations

import os
import time
import zipfile
from pathlib import Path

import structlog

from forge_core.errors import ToolInvocationError
from forge_core.models import ToolResult

logger = structlog.get_logger(__name__)

ZIP_TOOL = "zip"

# Earliest timestamp representable in a zip entry
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def _iter_entries(source: Path) -> list[tuple[Path, str]]:
    """Return (path, arcname) pairs, recursing into directories."""
    if source.is_dir():
        return [
            (p, p.relative_to(source.parent).as_posix())
            for p in sorted(source.rglob("*"))
            if p.is_file()
        ]
    return [(source, source.name)]


class ZipArchiver:
    """Packages a build output into a deployable zip file.

    Example:
        >>> ZipArchiver().archive(Path("lambda/a/bootstrap"), Path("lambda/a/bootstrap.zip"))
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression

    def archive(self, source: Path, destination: Path) -> ToolResult:
        """Write source (file or directory tree) into destination.

        The archive is written to a temporary sibling and moved into place,
        so a failed write never leaves a truncated archive behind.

        Args:
            source: Compiled output to package.
            destination: Zip file to create or overwrite.

        Returns:
            ToolResult listing the added entries on stdout.

        Raises:
            ToolInvocationError: If source is missing or the archive cannot be written.
        """
        command = [ZIP_TOOL, "-r", destination.name, source.name]
        if not source.exists():
            raise ToolInvocationError(
                ZIP_TOOL,
                f"Nothing to archive: {source.name} was not produced",
                command=command,
            )

        start_time = time.monotonic()
        tmp_path = destination.with_name(destination.name + ".tmp")
        added: list[str] = []

        try:
            with zipfile.ZipFile(tmp_path, "w", compression=self.compression) as zf:
                for path, arcname in _iter_entries(source):
                    info = zipfile.ZipInfo.from_file(path, arcname, strict_timestamps=False)
                    info.date_time = FIXED_DATE_TIME
                    info.compress_type = self.compression
                    zf.writestr(info, path.read_bytes())
                    added.append(arcname)
            os.replace(tmp_path, destination)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ToolInvocationError(
                ZIP_TOOL,
                f"Cannot write archive {destination.name}",
                command=command,
                internal_details=str(e),
            ) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(
            "archive_written",
            archive=str(destination),
            entries=len(added),
            duration_ms=duration_ms,
        )

        return ToolResult(
            tool=ZIP_TOOL,
            command=command,
            exit_code=0,
            stdout="\n".join(f"adding: {name}" for name in added),
            duration_ms=duration_ms,
        )
