"""Build report output formatters.

Rich table and JSON output for build reports.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from forge_core.models import BuildReport, BuildStatus, UnitResult


def _status_icon(status: BuildStatus) -> str:
    """Get icon for build status."""
    icons = {
        BuildStatus.SUCCEEDED: "✅",
        BuildStatus.FAILED: "❌",
        BuildStatus.ERROR: "💥",
        BuildStatus.SKIPPED: "⏭️",
    }
    return icons.get(status, "❓")


def _status_color(status: BuildStatus) -> str:
    """Get color for build status."""
    colors = {
        BuildStatus.SUCCEEDED: "green",
        BuildStatus.FAILED: "red",
        BuildStatus.ERROR: "red bold",
        BuildStatus.SKIPPED: "dim",
    }
    return colors.get(status, "white")


def format_report_table(report: BuildReport, console: Console | None = None) -> None:
    """Format a build report as a Rich table.

    Args:
        report: BuildReport to display
        console: Optional Rich console (creates one if not provided)
    """
    if console is None:
        console = Console()

    overall_icon = _status_icon(report.overall_status)
    overall_color = _status_color(report.overall_status)
    header_text = Text()
    header_text.append("Status: ", style="bold")
    header_text.append(f"{overall_icon} ", style=overall_color)
    header_text.append(report.overall_status.value.upper(), style=f"bold {overall_color}")
    header_text.append(
        f"\nUnits: {report.passed_count} built, {report.failed_count} failed"
    )
    if report.skipped_count:
        header_text.append(f", {report.skipped_count} skipped")
    if report.total_duration_ms > 0:
        header_text.append(f"\nDuration: {report.total_duration_ms}ms")

    console.print(Panel(header_text, title="[bold]Build Results[/bold]"))

    if not report.units:
        console.print("No build units found.", style="dim")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Status", width=3, justify="center")
    table.add_column("Unit", min_width=20)
    table.add_column("Artifact", min_width=30)
    table.add_column("Duration", justify="right", width=10)

    for unit in report.units:
        color = _status_color(unit.status)
        artifact = str(unit.artifact.archive_path) if unit.artifact else "-"
        duration = f"{unit.duration_ms}ms" if unit.duration_ms > 0 else "-"
        table.add_row(
            _status_icon(unit.status),
            Text(unit.unit, style=color),
            Text(artifact, style="" if unit.artifact else "dim"),
            duration,
        )

    console.print(table)

    failed_units = [u for u in report.units if u.failed]
    if failed_units:
        console.print()
        console.print("[bold red]Failed Unit Details:[/bold red]")
        for unit in failed_units:
            first, _, rest = unit.message.partition("\n")
            line = Text("  ")
            line.append(f"• {unit.unit}", style="red")
            line.append(f": {first}")
            console.print(line)
            for detail in rest.splitlines():
                console.print(Text(f"    {detail}", style="dim"))


def format_report_json(report: BuildReport, pretty: bool = True) -> str:
    """Format a build report as JSON.

    Args:
        report: BuildReport to format
        pretty: Whether to use indentation

    Returns:
        JSON string representation
    """
    data = _report_to_dict(report)
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, default=str)


def _report_to_dict(report: BuildReport) -> dict[str, Any]:
    """Convert BuildReport to dictionary for JSON serialization."""
    return {
        "status": report.overall_status.value,
        "passed": report.passed,
        "summary": {
            "total": len(report.units),
            "succeeded": report.passed_count,
            "failed": report.failed_count,
            "skipped": report.skipped_count,
        },
        "duration_ms": report.total_duration_ms,
        "started_at": report.started_at.isoformat() if report.started_at else None,
        "finished_at": report.finished_at.isoformat() if report.finished_at else None,
        "units": [_unit_to_dict(unit) for unit in report.units],
    }


def _unit_to_dict(unit: UnitResult) -> dict[str, Any]:
    """Convert UnitResult to dictionary for JSON serialization."""
    return {
        "name": unit.unit,
        "path": str(unit.path),
        "status": unit.status.value,
        "passed": unit.passed,
        "message": unit.message,
        "artifact": unit.artifact.model_dump(mode="json") if unit.artifact else None,
        "steps": [step.model_dump(mode="json") for step in unit.steps],
        "duration_ms": unit.duration_ms,
        "timestamp": unit.timestamp.isoformat() if unit.timestamp else None,
    }


def print_report(
    report: BuildReport,
    output_format: str = "table",
    console: Console | None = None,
) -> None:
    """Print a build report in the specified format.

    Args:
        report: BuildReport to display
        output_format: Output format ("table" or "json")
        console: Optional Rich console
    """
    if console is None:
        console = Console()

    if output_format == "json":
        # Bypass Rich so the output stays parseable
        console.file.write(format_report_json(report, pretty=True) + "\n")
    else:
        format_report_table(report, console)
