"""Show the token stream the scanner produces for a query."""

from __future__ import annotations

import click
from rich.markup import escape

from lukas.cli import Context, pass_context
from lukas.commands._common import EXIT_PATTERN_ERROR, build_scanner, field_option
from lukas.exceptions import PatternError
from lukas.query.tokens import TokenKind
from lukas.utils.output import console, create_table, error


@click.command("tokens")
@click.argument("query", nargs=-1, required=True)
@field_option
@pass_context
def cli(ctx: Context, query: tuple[str, ...], fields: list[tuple[str, str]]) -> None:
    """Print the tokens scanned from QUERY, one row per token.

    Whitespace is not listed; it only separates tokens. Useful for
    checking which rule wins when field patterns overlap built-in tokens.
    """
    query_string = " ".join(query)

    try:
        scanner = build_scanner(ctx, fields)
    except PatternError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_PATTERN_ERROR)

    table = create_table(title="Tokens")
    table.add_column("Pos", justify="right")
    table.add_column("Kind", style="token.kind")
    table.add_column("Text", style="token.text")

    for token in scanner.tokens(query_string):
        text = "" if token.text is None else escape(token.text)
        kind = token.name
        if token.kind is TokenKind.ILLEGAL:
            kind = f"[error]{kind}[/error]"
        elif token.kind is TokenKind.CUSTOM:
            kind = f"[field]{escape(kind)}[/field]"
        table.add_row(str(token.position), kind, text)

    console.print(table)
