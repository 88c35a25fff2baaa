"""Structured logging and OpenTelemetry spans for forge.

This module provides:
- Structured logging setup via structlog
- OpenTelemetry span helpers for unit builds and tool steps
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer

_tracer: Tracer | None = None

# Tracer name for OpenTelemetry
TRACER_NAME = "forge.build"


def get_tracer() -> Tracer:
    """Get the OpenTelemetry tracer for forge.

    Returns:
        OpenTelemetry Tracer instance.
    """
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    *,
    log_level: str = "WARNING",
    json_format: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for forge.

    Logs go to stderr. Standard output is reserved for build progress and
    the final report.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format. If False, output human-readable.
        add_timestamp: If True, add ISO timestamp to log entries.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=False)
    """
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )


@contextmanager
def span(
    name: str,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Create an OpenTelemetry span that records failures.

    Args:
        name: Span name (e.g., "forge.build_unit").
        kind: Span kind.
        attributes: Optional span attributes.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with span("forge.build_unit", attributes={"forge.unit": "blog-get-posts"}):
        ...     builder.build(unit)
    """
    tracer = get_tracer()
    attrs = attributes or {}

    with tracer.start_as_current_span(
        name, kind=kind, attributes=attrs, record_exception=False
    ) as s:
        try:
            yield s
        except Exception as exc:
            s.set_status(Status(StatusCode.ERROR, str(exc)))
            s.record_exception(exc)
            raise


@contextmanager
def tool_step(tool: str, unit: str) -> Iterator[Span]:
    """Create a span for an external tool step with standard attributes.

    Args:
        tool: Tool label (e.g., "go", "zip").
        unit: Unit name.

    Yields:
        OpenTelemetry Span instance.
    """
    attrs: dict[str, Any] = {"forge.tool": tool, "forge.unit": unit}
    with span(f"forge.{tool}", kind=SpanKind.CLIENT, attributes=attrs) as s:
        yield s


def mark_span(s: Span, ok: bool, description: str | None = None) -> None:
    """Set span status from a step outcome that did not raise."""
    if ok:
        s.set_status(Status(StatusCode.OK))
    else:
        s.set_status(Status(StatusCode.ERROR, description))
