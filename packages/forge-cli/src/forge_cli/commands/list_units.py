"""forge list command - Show the functions a build would cover."""

from __future__ import annotations

import json

import click

from forge_cli import output
from forge_cli.errors import handle_file_not_found, handle_forge_error, handle_validation_error


@click.command("list")
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
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format [default: text]",
)
def list_cmd(
    config_path: str | None,
    root: str | None,
    pattern: str | None,
    output_format: str,
) -> None:
    """List discovered functions in build order.

    Examples:

        forge list

        forge list --root functions --format json
    """
    from pydantic import ValidationError as PydanticValidationError

    from forge_core import ForgeError, discover_units, load_config
    from forge_core.observability import configure_logging

    configure_logging()

    try:
        config = load_config(config_path, root=root, pattern=pattern)
        units = discover_units(config.root, config.pattern)
    except FileNotFoundError:
        handle_file_not_found(str(config_path))
    except PydanticValidationError as e:
        handle_validation_error(e, config_path or "options")
    except ForgeError as e:
        handle_forge_error(e)

    if output_format == "json":
        data = [{"name": unit.name, "path": str(unit.path)} for unit in units]
        output.console.file.write(json.dumps(data, indent=2) + "\n")
        return

    if not units:
        output.warning(f"No functions found under {config.root}")
        return

    for unit in units:
        output.progress(unit.name)
