"""Command-line interface for lukas."""

from __future__ import annotations

import os
from pathlib import Path

import click
from rich.markup import escape

from lukas import __version__
from lukas.config import Config, load_config
from lukas.exceptions import LukasError
from lukas.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    def get_config(self) -> Config:
        """Return the loaded config, or defaults when none was loaded."""
        if self.config is None:
            self.config = Config()
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


class CommandGroup(click.Group):
    """Group that registers the commands package on first lookup.

    Command modules import this module for ``Context``; registering lazily
    means importing a command module first still yields a complete group.
    """

    _registered = False

    def _register(self) -> None:
        if self._registered:
            return
        self._registered = True
        from lukas.commands import discover_commands

        for command in discover_commands():
            self.add_command(command)

    def list_commands(self, ctx: click.Context) -> list[str]:
        self._register()
        return super().list_commands(ctx)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        self._register()
        return super().get_command(ctx, cmd_name)


@click.group(cls=CommandGroup)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/lukas/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="lukas")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """lukas: Parse search queries into expression trees.

    Queries combine words, quoted phrases and registered field tokens with
    AND, OR, a leading - for negation and parentheses for grouping.

    Configuration is loaded from ~/.config/lukas/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Show the tree for a query
        lukas parse --format tree 'Lukas AND (me OR him) AND -term'

        # Show the tokens the scanner produces
        lukas tokens --field 'TRIP=^(trip:[0-9]+)(.*)' 'trip:123 OR trip:abc'
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
    except LukasError as e:
        error(escape(str(e)))
        ctx.exit(1)
        return

    app_ctx.config = loaded_config

    if not disable_color and not loaded_config.colored_output:
        set_color(False)

    # Show warnings unless quiet
    if not quiet:
        for warn in warnings:
            warning(escape(warn))
