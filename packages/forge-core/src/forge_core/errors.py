"""Custom exception hierarchy for forge-core.

This module defines the exception classes used throughout forge:
- ForgeError: Base exception for all forge-related errors
- DirectoryNotFoundError: Raised when the units root or a unit directory is missing
- ConfigurationError: Raised when build configuration cannot be loaded
- ToolInvocationError: Raised when an external tool cannot be started or times out

User-facing messages are safe to display. Technical details are logged
internally via structlog and never shown to the user.

Tool failures (a compiler exiting non-zero) are NOT exceptions. They are
recorded as data on UnitResult so that a run can report every unit.
"""

from __future__ import annotations

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class ForgeError(Exception):
    """Base exception for forge.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but NEVER exposed to the user.

    Example:
        >>> raise ForgeError(
        ...     "Build configuration invalid",
        ...     internal_details="goarch 'x86' rejected by validator"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ForgeError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "forge_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class DirectoryNotFoundError(ForgeError):
    """Raised when a directory needed by the build does not exist.

    Use this exception when:
    - The units root (e.g. ``lambda/``) is missing at discovery time
    - A unit directory disappeared between discovery and its build

    The run is aborted: subsequent units are not processed.

    Attributes:
        path: The directory that was expected to exist.

    Example:
        >>> raise DirectoryNotFoundError(Path("lambda/blog-get-posts"))
        # User sees: "Directory not found: lambda/blog-get-posts"
    """

    def __init__(
        self,
        path: Path | str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize DirectoryNotFoundError.

        Args:
            path: The missing directory.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(f"Directory not found: {path}", internal_details=internal_details)
        self.path = Path(path)


class ConfigurationError(ForgeError):
    """Raised when a build configuration file cannot be parsed or validated.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "goarch").
        line_number: Line number in the file where error occurred (if available).

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid timeout",
        ...     file_path="forge.yaml",
        ...     field_path="timeout_seconds",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        line_number: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            line_number: Line number in the file (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if line_number:
            context_parts.append(f"line {line_number}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path
        self.line_number = line_number


class ToolInvocationError(ForgeError):
    """Raised when an external tool step could not run to completion.

    Use this exception when:
    - The tool executable is not installed or not on PATH
    - The tool exceeded the configured timeout
    - The archive could not be written

    A tool that runs and exits non-zero is NOT an invocation error.

    Attributes:
        tool: Tool label (e.g., "go", "zip").
        command: Argument vector that was attempted.
        stdout: Output captured before the failure, if any.
        stderr: Error output captured before the failure, if any.
    """

    def __init__(
        self,
        tool: str,
        user_message: str,
        *,
        command: list[str] | None = None,
        stdout: str = "",
        stderr: str = "",
        internal_details: str | None = None,
    ) -> None:
        """Initialize ToolInvocationError.

        Args:
            tool: Tool label.
            user_message: Safe message to display to the user.
            command: Argument vector that was attempted.
            stdout: Captured standard output.
            stderr: Captured standard error.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)
        self.tool = tool
        self.command = command or []
        self.stdout = stdout
        self.stderr = stderr
