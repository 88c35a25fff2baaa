"""Shared test fixtures for forge-cli tests.

Provides CliRunner fixtures, a function tree helper and a stand-in
for the Go compiler.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest
import structlog

MAIN_GO = 'package main\n\nfunc main() {\n\tprintln("hello")\n}\n'

FakeRun = Callable[..., subprocess.CompletedProcess[str]]


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo logging configuration done by commands under test."""
    yield
    structlog.reset_defaults()
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    This fixture creates a temporary directory and changes to it
    for the duration of the test.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def make_units() -> Callable[..., Path]:
    """Factory creating function directories in the current directory.

    Returns:
        Function taking (*names, root="lambda") and returning the root path.
    """

    def _make(*names: str, root: str = "lambda") -> Path:
        root_path = Path(root)
        root_path.mkdir(parents=True, exist_ok=True)
        for name in names:
            unit = root_path / name
            unit.mkdir()
            (unit / "main.go").write_text(MAIN_GO)
        return root_path

    return _make


@pytest.fixture
def fake_go() -> Callable[..., FakeRun]:
    """Factory for a subprocess.run replacement that imitates ``go build``.

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
                    cmd, code, stdout="", stderr="./main.go:4:2: undefined: fmtx\n"
                )
            binary = unit_dir / cmd[cmd.index("-o") + 1]
            binary.write_bytes(b"\x7fELF" + unit_dir.name.encode())
            binary.chmod(0o755)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        return _run

    return _factory
