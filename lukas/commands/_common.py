"""Helpers shared by the query commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click
from rich.markup import escape

from lukas.cli import Context
from lukas.exceptions import QuerySyntaxError
from lukas.query.parser import QueryParser
from lukas.query.scanner import QueryScanner
from lukas.utils.output import error_console

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1
EXIT_PATTERN_ERROR = 2


def _split_field(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]):
    """Turn ``LABEL=REGEX`` option values into ``(label, regex)`` pairs."""
    fields: list[tuple[str, str]] = []
    for value in values:
        label, sep, pattern = value.partition("=")
        if not sep or not label or not pattern:
            raise click.BadParameter(f"expected LABEL=REGEX, got '{value}'")
        fields.append((label, pattern))
    return fields


def field_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the repeatable ``--field LABEL=REGEX`` option to a command."""
    return click.option(
        "--field",
        "-F",
        "fields",
        multiple=True,
        callback=_split_field,
        metavar="LABEL=REGEX",
        help="Register a field token, e.g. 'TRIP=^(trip:[0-9]+)(.*)'. "
        "Repeatable; tried in order after fields from the config.",
    )(func)


def build_scanner(ctx: Context, fields: list[tuple[str, str]]) -> QueryScanner:
    """Create a scanner with config fields, then command-line fields.

    Raises:
        PatternError: If a pattern is malformed.
    """
    scanner = ctx.get_config().build_scanner()
    for label, pattern in fields:
        scanner.register_pattern(label, pattern)
    return scanner


def build_parser(
    ctx: Context, fields: list[tuple[str, str]], *, strict: bool = False
) -> QueryParser:
    """Create a parser honoring config and command-line options."""
    implicit_and = ctx.get_config().implicit_and and not strict
    return QueryParser(build_scanner(ctx, fields), implicit_and=implicit_and)


def print_syntax_error(e: QuerySyntaxError) -> None:
    """Print a syntax error with a caret under the offending position."""
    error_console.print(f"[error]Syntax error:[/error] {escape(str(e))}")
    error_console.print(f"  {escape(e.query)}", highlight=False)
    error_console.print(f"  {' ' * e.position}[error]^[/error]")
