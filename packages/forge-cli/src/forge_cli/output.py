"""Rich console output utilities for forge-cli.

This module provides formatted console output with Rich,
supporting colored success/error/warning messages and
respecting NO_COLOR environment variable.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console

# Rich automatically respects NO_COLOR, but we also support --no-color flag
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False, stderr: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.
        stderr: If True, write to standard error instead of standard output.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(
        force_terminal=force_terminal,
        no_color=no_color or _force_no_color,
        stderr=stderr,
        highlight=False,
    )


# Default console instances
console = create_console()
err_console = create_console(stderr=True)


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("All units built")
        ✓ All units built
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X.

    Example:
        >>> error("Directory not found: lambda")
        ✗ Directory not found: lambda
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def progress(message: str, to_stderr: bool = False) -> None:
    """Print a plain progress line, never wrapped or marked up.

    Args:
        message: Progress line, e.g. "Building blog-get-posts".
        to_stderr: Send to standard error (keeps machine-readable stdout clean).
    """
    target = err_console if to_stderr else console
    target.print(message, markup=False, soft_wrap=True)


def set_no_color(no_color: bool) -> None:
    """Update the global consoles to enable/disable colors.

    Note:
        This updates the module-level console instances.
    """
    global console, err_console
    console = create_console(no_color=no_color)
    err_console = create_console(no_color=no_color, stderr=True)
