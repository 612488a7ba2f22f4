"""Parse a search query and print its expression tree."""

from __future__ import annotations

import json

import click
from rich.markup import escape

from lukas.cli import Context, pass_context
from lukas.commands._common import (
    EXIT_PARSE_ERROR,
    EXIT_PATTERN_ERROR,
    build_parser,
    field_option,
    print_syntax_error,
)
from lukas.exceptions import PatternError, QuerySyntaxError
from lukas.query.visitor import QueryTreeBuilder, render, to_dict
from lukas.utils.output import console, error, verbose


@click.command("parse")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "tree", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Require an explicit AND between terms",
)
@field_option
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str,
    strict: bool,
    fields: list[tuple[str, str]],
) -> None:
    """Parse QUERY and print the resulting expression tree.

    QUERY is joined with spaces when given as several arguments.

    \b
    Syntax examples:
      lukas parse 'Lukas AND me'
      lukas parse 'Lukas AND (me OR him) AND -term'
      lukas parse '"exact phrase" OR word'
      lukas parse -F 'TRIP=^(trip:[0-9]+)(.*)' 'trip:123 AND -trip:456'

    \b
    Output formats:
      --format text   Query rendered back from the tree (default)
      --format tree   Indented tree of the nodes
      --format json   Nested JSON objects, one per node
    """
    query_string = " ".join(query)

    try:
        parser = build_parser(ctx, fields, strict=strict)
    except PatternError as e:
        error(escape(str(e)), hint="Patterns need two groups: '^(token)(.*)'")
        raise SystemExit(EXIT_PATTERN_ERROR)

    verbose(f"Parsing: {escape(query_string)}")
    parser.read_string(query_string)
    try:
        node = parser.parse()
    except QuerySyntaxError as e:
        print_syntax_error(e)
        raise SystemExit(EXIT_PARSE_ERROR)

    if output_format == "json":
        click.echo(json.dumps(to_dict(node), indent=2))
    elif output_format == "tree":
        console.print(node.accept(QueryTreeBuilder()))
    else:
        click.echo(render(node))
