"""Build runner.

Orchestrates discovery and sequential unit builds.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from forge_core.builder import UnitBuilder
from forge_core.discovery import discover_units
from forge_core.models import BuildReport, BuildStatus, BuildUnit, UnitResult

if TYPE_CHECKING:
    from forge_core.config import BuildConfig

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[BuildUnit], None]


class BuildRunner:
    """Orchestrates build execution.

    Discovers units and builds them one at a time, in discovery order.

    Attributes:
        config: Build configuration
        fail_fast: Skip remaining units after the first failure
        builder: Builder used for each unit

    Example:
        >>> runner = BuildRunner(BuildConfig())
        >>> report = runner.run(progress=lambda unit: print(f"Building {unit.name}"))
        >>> print(report.overall_status)
    """

    def __init__(self, config: BuildConfig, builder: UnitBuilder | None = None) -> None:
        """Initialize the runner.

        Args:
            config: Build configuration
            builder: Builder override (defaults to UnitBuilder(config))
        """
        self.config = config
        self.fail_fast = config.fail_fast
        self.builder = builder or UnitBuilder(config)
        self._log = logger.bind(component="build_runner")

    def discover(self) -> list[BuildUnit]:
        """Return the units this runner would build."""
        return discover_units(self.config.root, self.config.pattern)

    def run(
        self,
        progress: ProgressCallback | None = None,
        units: list[BuildUnit] | None = None,
    ) -> BuildReport:
        """Build every unit.

        Args:
            progress: Called with each unit before its build starts
            units: Units to build; discovered from config when omitted

        Returns:
            BuildReport with all unit outcomes

        Raises:
            DirectoryNotFoundError: If the root or a unit directory is missing.
                Units after the missing one are not processed.
        """
        start_time = time.monotonic()
        started_at = datetime.now(UTC)
        results: list[UnitResult] = []

        if units is None:
            units = self.discover()

        self._log.info(
            "build_started",
            root=str(self.config.root),
            units=len(units),
            fail_fast=self.fail_fast,
        )

        for index, unit in enumerate(units):
            if progress is not None:
                progress(unit)

            result = self.builder.build(unit)
            results.append(result)

            if self.fail_fast and result.failed:
                self._log.warning(
                    "fail_fast_triggered",
                    unit=unit.name,
                    status=result.status.value,
                )
                results.extend(self._skipped(units[index + 1 :]))
                break

        finished_at = datetime.now(UTC)
        total_duration_ms = int((time.monotonic() - start_time) * 1000)
        overall_status = self._determine_overall_status(results)

        self._log.info(
            "build_completed",
            overall_status=overall_status.value,
            total_duration_ms=total_duration_ms,
            succeeded=sum(1 for r in results if r.passed),
            failed=sum(1 for r in results if r.failed),
        )

        return BuildReport(
            units=results,
            overall_status=overall_status,
            started_at=started_at,
            finished_at=finished_at,
            total_duration_ms=total_duration_ms,
        )

    def _skipped(self, units: list[BuildUnit]) -> list[UnitResult]:
        return [
            UnitResult(
                unit=unit.name,
                path=unit.path,
                status=BuildStatus.SKIPPED,
                message="Skipped after earlier failure",
            )
            for unit in units
        ]

    def _determine_overall_status(self, results: list[UnitResult]) -> BuildStatus:
        """Determine overall run status from unit results.

        Args:
            results: Unit results

        Returns:
            ERROR over FAILED over SUCCEEDED. An empty run succeeds.
        """
        if any(r.status == BuildStatus.ERROR for r in results):
            return BuildStatus.ERROR

        if any(r.status == BuildStatus.FAILED for r in results):
            return BuildStatus.FAILED

        return BuildStatus.SUCCEEDED


def run_build(
    config: BuildConfig,
    progress: ProgressCallback | None = None,
) -> BuildReport:
    """Build all units with the given configuration.

    Convenience function that creates a runner and executes it.

    Args:
        config: Build configuration
        progress: Called with each unit before its build starts

    Returns:
        BuildReport with all unit outcomes

    Example:
        >>> report = run_build(BuildConfig())
        >>> if report.passed:
        ...     print("All units built!")
    """
    runner = BuildRunner(config)
    return runner.run(progress=progress)
