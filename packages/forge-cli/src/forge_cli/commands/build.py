"""forge build command - Compile and package every function."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

from forge_cli import output
from forge_cli.errors import (
    EXIT_BUILD_FAILED,
    CLIError,
    handle_file_not_found,
    handle_forge_error,
    handle_validation_error,
)

if TYPE_CHECKING:
    from forge_core import BuildConfig, BuildReport, BuildUnit


@dataclass
class BuildOptions:
    """Grouped build CLI options."""

    config_path: str | None
    root: str | None
    pattern: str | None
    units: tuple[str, ...]
    goos: str | None
    goarch: str | None
    mod_mode: str | None
    go_binary: str | None
    timeout: int | None
    fail_fast: bool | None
    output_format: str


def _load_config(opts: BuildOptions) -> BuildConfig:
    """Resolve BuildConfig from forge.yaml, FORGE_* variables and CLI options.

    Raises:
        CLIError: If the configuration file is missing or invalid.
    """
    from pydantic import ValidationError as PydanticValidationError

    from forge_core import ForgeError, load_config

    try:
        return load_config(
            opts.config_path,
            root=opts.root,
            pattern=opts.pattern,
            goos=opts.goos,
            goarch=opts.goarch,
            mod_mode=opts.mod_mode,
            go_binary=opts.go_binary,
            timeout_seconds=opts.timeout,
            fail_fast=opts.fail_fast,
        )
    except FileNotFoundError:
        handle_file_not_found(str(opts.config_path))
    except PydanticValidationError as e:
        handle_validation_error(e, opts.config_path or "options")
    except ForgeError as e:
        handle_forge_error(e)


def _select_units(units: list[BuildUnit], names: tuple[str, ...]) -> list[BuildUnit]:
    """Keep only the named units, preserving discovery order.

    Raises:
        CLIError: If a name does not match any discovered unit.
    """
    if not names:
        return units

    available = {unit.name for unit in units}
    missing = [name for name in names if name not in available]
    if missing:
        listing = ", ".join(sorted(available)) or "none"
        raise CLIError(f"Unknown unit: {', '.join(missing)}. Available: {listing}")

    wanted = set(names)
    return [unit for unit in units if unit.name in wanted]


def _run_build(opts: BuildOptions) -> BuildReport:
    """Discover and build units, printing one progress line per unit."""
    from forge_core import BuildRunner, ForgeError

    config = _load_config(opts)
    runner = BuildRunner(config)
    to_stderr = opts.output_format == "json"

    def announce(unit: BuildUnit) -> None:
        output.progress(f"Building {unit.name}", to_stderr=to_stderr)

    try:
        units = _select_units(runner.discover(), opts.units)
        return runner.run(progress=announce, units=units)
    except ForgeError as e:
        handle_forge_error(e)


@click.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to forge.yaml [default: ./forge.yaml if present]",
)
@click.option(
    "-r",
    "--root",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding one subdirectory per function [default: lambda]",
)
@click.option(
    "--pattern",
    default=None,
    help="Glob selecting function directories under the root [default: *]",
)
@click.option(
    "-u",
    "--unit",
    "units",
    multiple=True,
    help="Build only this function (repeatable)",
)
@click.option("--goos", default=None, help="Target OS [default: linux]")
@click.option("--goarch", default=None, help="Target architecture [default: amd64]")
@click.option(
    "--mod-mode",
    default=None,
    help="Value for go build -mod; empty string omits the flag [default: vendor]",
)
@click.option("--go", "go_binary", default=None, help="Go executable [default: go]")
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="Per-step timeout in seconds [default: none]",
)
@click.option(
    "--fail-fast/--no-fail-fast",
    default=None,
    help="Skip remaining functions after the first failure [default: no]",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Report format; json moves progress lines to stderr [default: table]",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log each build step to stderr",
)
def build(
    config_path: str | None,
    root: str | None,
    pattern: str | None,
    units: tuple[str, ...],
    goos: str | None,
    goarch: str | None,
    mod_mode: str | None,
    go_binary: str | None,
    timeout: int | None,
    fail_fast: bool | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Compile every function and package it as a zip archive.

    Each function directory is compiled with `CGO_ENABLED=0` into a static
    `bootstrap` binary, which is then zipped into `bootstrap.zip` in the
    same directory. Exits with status 1 if any function failed.

    One `Building <name>` line is printed per function before it is built.
    With `--format json` these lines go to stderr so that stdout carries
    only the JSON report.

    Examples:

        forge build

        forge build --unit blog-get-posts

        forge build --goarch arm64 --format json

        forge build --root functions --fail-fast
    """
    from forge_core.observability import configure_logging
    from forge_core.output import print_report

    configure_logging(log_level="INFO" if verbose else "WARNING")

    opts = BuildOptions(
        config_path=config_path,
        root=root,
        pattern=pattern,
        units=units,
        goos=goos,
        goarch=goarch,
        mod_mode=mod_mode,
        go_binary=go_binary,
        timeout=timeout,
        fail_fast=fail_fast,
        output_format=output_format,
    )

    report = _run_build(opts)
    print_report(report, output_format=output_format, console=output.console)

    if report.passed:
        if output_format == "table":
            output.success(f"Built {report.passed_count} function(s)")
        return

    if output_format == "table":
        output.error(f"{report.failed_count} function(s) failed to build")
    raise SystemExit(EXIT_BUILD_FAILED)
