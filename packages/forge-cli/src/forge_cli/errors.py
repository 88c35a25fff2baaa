"""CLI error handling for forge-cli.

This module provides CLI-specific error handling that wraps
forge-core exceptions and provides user-friendly messages
with appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError
from rich.markup import escape

from forge_cli import output

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from forge_core.errors import ForgeError


EXIT_SUCCESS = 0
EXIT_BUILD_FAILED = 1  # At least one unit failed to build
EXIT_SYSTEM_ERROR = 2  # Missing directories, invalid configuration


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 2).
    """

    def __init__(self, message: str, exit_code: int = EXIT_SYSTEM_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        output.error(escape(self.format_message()))


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Args:
        err: Pydantic ValidationError instance.

    Returns:
        Formatted error message with field paths and issues.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - timeout_seconds: Input should be greater than or equal to 1"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}")

    return "\n".join(lines)


def handle_validation_error(err: PydanticValidationError, source: str) -> NoReturn:
    """Handle Pydantic validation errors with user-friendly messages.

    Args:
        err: Pydantic ValidationError instance.
        source: Where the invalid values came from (file path or "options").

    Raises:
        CLIError: Always raises with formatted error message.
    """
    formatted = format_pydantic_error(err)
    raise CLIError(f"Invalid configuration in {source}:\n{formatted}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Handle a missing configuration file.

    Args:
        file_path: Path to the missing file.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"File not found: {file_path}\n\n"
        "Run 'forge init' to create a forge.yaml, or omit --config to use defaults.",
    )


def handle_forge_error(err: ForgeError) -> NoReturn:
    """Convert a forge-core error into a CLI error.

    Args:
        err: forge-core exception.

    Raises:
        CLIError: Always raises with the error's user-facing message.
    """
    raise CLIError(err.user_message)
