"""forge init command - Write a forge.yaml with the default settings."""

from __future__ import annotations

from pathlib import Path

import click

from forge_cli.output import error, success, warning

HEADER = """\
# forge build configuration
#
# Every directory under `root` matching `pattern` is compiled with
# `go build -o <output_name> <entry_point>` and zipped into <archive_name>.
# FORGE_* environment variables apply when a key is absent here;
# command-line options override both.
"""


@click.command()
@click.option(
    "-r",
    "--root",
    default="lambda",
    help="Directory holding one subdirectory per function [default: lambda]",
)
@click.option(
    "--goarch",
    type=click.Choice(["amd64", "arm64"]),
    default="amd64",
    help="Lambda architecture [default: amd64]",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite an existing forge.yaml",
)
def init(root: str, goarch: str, force: bool) -> None:
    """Write forge.yaml with the default build settings.

    Examples:

        forge init

        forge init --goarch arm64

        forge init --force
    """
    import yaml

    from forge_core.config import DEFAULT_CONFIG_FILENAME, BuildConfig

    config_path = Path(DEFAULT_CONFIG_FILENAME)
    existed = config_path.exists()
    if existed and not force:
        error(f"{DEFAULT_CONFIG_FILENAME} already exists.")
        error("Use --force to overwrite.")
        raise SystemExit(1)

    # Defaults only: FORGE_* variables must not leak into the written file
    defaults = {
        name: field.get_default(call_default_factory=True)
        for name, field in BuildConfig.model_fields.items()
    }
    defaults.update(root=root, goarch=goarch)
    config = BuildConfig.model_validate(defaults)

    content = HEADER + yaml.safe_dump(
        config.model_dump(mode="json"),
        sort_keys=False,
        default_flow_style=False,
    )

    try:
        config_path.write_text(content)
    except PermissionError:
        error("Cannot write to current directory.")
        raise SystemExit(2) from None

    if existed:
        warning(f"Overwrote existing {DEFAULT_CONFIG_FILENAME}")
    success(f"Created {DEFAULT_CONFIG_FILENAME}")
