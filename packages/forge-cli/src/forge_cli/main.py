"""CLI entry point for forge.

This module defines the main CLI group using LazyGroup pattern
so that --help stays fast: forge-core (pydantic, OpenTelemetry)
is only imported when a command actually runs.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from forge_cli import __version__
from forge_cli.output import set_no_color

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Group whose subcommands are imported on first use.

    ``lazy_subcommands`` maps a command name to ``"module.attribute"``. The
    first lookup imports the module and registers the command on the group,
    so later lookups (help rendering, completion) reuse it.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return registered and not-yet-imported command names, sorted."""
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return the named command, importing it if it is still lazy."""
        target = self.lazy_subcommands.get(cmd_name)
        if target is not None:
            self.add_command(self._resolve(cmd_name, target), cmd_name)
            del self.lazy_subcommands[cmd_name]
        return super().get_command(ctx, cmd_name)  # type: ignore[arg-type]

    @staticmethod
    def _resolve(cmd_name: str, target: str) -> click.Command:
        module_name, _, attr_name = target.rpartition(".")
        command = getattr(importlib.import_module(module_name), attr_name)
        if not isinstance(command, click.Command):
            raise TypeError(f"{target} registered as '{cmd_name}' is not a click command")
        return command


LAZY_COMMANDS = {
    "build": "forge_cli.commands.build.build",
    "list": "forge_cli.commands.list_units.list_cmd",
    "init": "forge_cli.commands.init.init",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="forge")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """Forge - Build Go Lambda functions into deployable zip archives.

    Every directory under `lambda/` is one function. Each is compiled
    into a static `bootstrap` binary and packaged as `bootstrap.zip`.

    **Getting Started:**

    - `forge list` - Show the functions that would be built
    - `forge build` - Compile and package every function
    - `forge init` - Write a forge.yaml with the default settings
    """


if __name__ == "__main__":
    cli()
