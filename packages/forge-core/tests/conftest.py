"""Shared pytest fixtures for forge-core tests.

This module provides a throwaway function tree and a stand-in for the
Go compiler so that unit tests never need a Go toolchain.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog

MAIN_GO = """\
package main

import "fmt"

func main() {
\tfmt.Println("hello")
}
"""

FakeRun = Callable[..., subprocess.CompletedProcess[str]]


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def _make_unit(root: Path, name: str, source: str = MAIN_GO) -> Path:
    unit_dir = root / name
    unit_dir.mkdir(parents=True)
    (unit_dir / "main.go").write_text(source)
    return unit_dir


@pytest.fixture
def make_unit() -> Callable[..., Path]:
    """Factory creating a function directory with a main.go entry point.

    Returns:
        Function taking (root, name, source=MAIN_GO) and returning the unit path.
    """
    return _make_unit


@pytest.fixture
def units_root(tmp_path: Path) -> Path:
    """Return a lambda/ tree holding the alpha and beta functions.

    Returns:
        Path to the lambda directory.
    """
    root = tmp_path / "lambda"
    _make_unit(root, "alpha")
    _make_unit(root, "beta")
    return root


@pytest.fixture
def fake_go() -> Callable[..., FakeRun]:
    """Factory for a subprocess.run replacement that imitates ``go build``.

    A successful fake writes a small executable named by the ``-o`` flag into
    the subprocess working directory. Failing units (by directory name)
    return their configured exit status with a compiler-style error.

    Returns:
        Function taking {unit_name: exit_code} and returning the fake.
    """

    def _factory(exit_codes: dict[str, int] | None = None) -> FakeRun:
        codes = exit_codes or {}

        def _run(cmd: list[str], *, cwd: Path, **kwargs: Any) -> subprocess.CompletedProcess[str]:
            unit_dir = Path(cwd)
            code = codes.get(unit_dir.name, 0)
            if code != 0:
                return subprocess.CompletedProcess(
                    cmd, code, stdout="", stderr="./main.go:5:2: undefined: fmtx\n"
                )
            binary = unit_dir / cmd[cmd.index("-o") + 1]
            binary.write_bytes(b"\x7fELF" + unit_dir.name.encode())
            binary.chmod(0o755)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        return _run

    return _factory
