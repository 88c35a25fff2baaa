"""Build unit discovery."""

from __future__ import annotations

from pathlib import Path

import structlog

from forge_core.errors import DirectoryNotFoundError
from forge_core.models import BuildUnit

logger = structlog.get_logger(__name__)


def discover_units(root: str | Path, pattern: str = "*") -> list[BuildUnit]:
    """List the build units under root.

    Entries matching pattern that are not directories (stray files such as a
    README next to the function directories) are ignored, and so are hidden
    directories such as `.aws-sam` unless pattern itself starts with a dot.
    Units are returned sorted by path so that runs are reproducible across platforms.

    Args:
        root: Parent directory holding one subdirectory per unit.
        pattern: Glob pattern relative to root.

    Returns:
        Discovered units, possibly empty.

    Raises:
        DirectoryNotFoundError: If root does not exist or is not a directory.

    Example:
        >>> [u.name for u in discover_units("lambda")]
        ['alpha', 'beta']
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryNotFoundError(root)

    include_hidden = pattern.startswith(".")
    units = [
        BuildUnit(path=p)
        for p in sorted(root.glob(pattern))
        if p.is_dir() and (include_hidden or not p.name.startswith("."))
    ]
    logger.debug("units_discovered", root=str(root), pattern=pattern, count=len(units))
    return units
