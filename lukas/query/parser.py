"""Recursive-descent parser building an AST from the scanner's tokens.

Grammar, loosest binding first::

    expression  := disjunction
    disjunction := conjunction (OR conjunction)*
    conjunction := operand (["AND"] operand)*
    operand     := "-" atom | atom
    atom        := WORD | TEXT | <registered field> | "(" expression ")"

``AND`` is not a token kind of its own: it is a WORD whose text is exactly
``AND``. Both binary operators fold to the left.
Parentheses may nest at most ``MAX_NESTING`` levels deep.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from lukas.exceptions import ParserStateError, QuerySyntaxError
from lukas.query.ast_nodes import (
    And,
    FieldFilter,
    Group,
    Node,
    Not,
    Or,
    Phrase,
    Term,
)
from lukas.query.scanner import QueryScanner
from lukas.query.tokens import Token, TokenKind

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

AND_KEYWORD = "AND"

# Each group costs several stack frames in the parser and in every visitor
MAX_NESTING = 100

# Token kinds that can begin an operand
_OPERAND_START: frozenset[TokenKind] = frozenset(
    {
        TokenKind.WORD,
        TokenKind.TEXT,
        TokenKind.CUSTOM,
        TokenKind.LPAREN,
        TokenKind.MINUS,
    }
)

_EXPECTED_ATOM = "a word, phrase, field or '('"


class QueryParser:
    """Parser for search queries, bound to one scanner for its lifetime.

    Usage::

        scanner = QueryScanner()
        scanner.register_pattern("TRIP", r"^(trip:[0-9]+)(.*)")
        parser = QueryParser(scanner)
        parser.read_string("Lukas AND (me OR him) AND -term AND trip:123")
        query = parser.parse()

    Args:
        scanner: Scanner to read tokens from. A plain scanner is created
            when omitted.
        implicit_and: Join adjacent operands with AND, so ``a b`` reads as
            ``a AND b``. When off, adjacent operands are a syntax error.
    """

    def __init__(self, scanner: QueryScanner | None = None, *, implicit_and: bool = True) -> None:
        self.scanner = scanner if scanner is not None else QueryScanner()
        self.implicit_and = implicit_and
        self._query = ""
        self._loaded = False
        self._depth = 0
        self._token = Token(TokenKind.END, None, 0)

    def read_string(self, text: str) -> None:
        """Load a new query string, discarding any previous parse state."""
        self.scanner.read_string(text)
        self._query = text
        self._loaded = True
        self._depth = 0
        self._token = Token(TokenKind.END, None, 0)

    def parse(self) -> Node:
        """Parse the loaded query string.

        Returns:
            Root node of the query.

        Raises:
            QuerySyntaxError: If the query does not match the grammar.
            ParserStateError: If no query string was loaded since the last
                call.
        """
        if not self._loaded:
            raise ParserStateError("parse() requires read_string() first")
        # Input is consumed whether parsing succeeds or not
        self._loaded = False

        logger.debug("Parsing query %r", self._query)
        self._advance()
        node = self._expression()
        if self._token.kind is not TokenKind.END:
            raise self._error("an operator or end of input")

        logger.debug("Parsed query %r into %s", self._query, type(node).__name__)
        return node

    def _advance(self) -> None:
        self._token = self.scanner.next()

    def _error(self, expected: str) -> QuerySyntaxError:
        token = self._token
        return QuerySyntaxError(self._query, token.name, token.text, token.position, expected)

    def _is_and(self) -> bool:
        token = self._token
        return token.kind is TokenKind.WORD and token.text == AND_KEYWORD

    def _expression(self) -> Node:
        return self._disjunction()

    def _disjunction(self) -> Node:
        node = self._conjunction()
        while self._token.kind is TokenKind.OR:
            self._advance()
            node = Or(node, self._conjunction())
        return node

    def _conjunction(self) -> Node:
        node = self._operand()
        while True:
            if self._is_and():
                self._advance()
            elif not (self.implicit_and and self._token.kind in _OPERAND_START):
                return node
            node = And(node, self._operand())

    def _operand(self) -> Node:
        if self._token.kind is TokenKind.MINUS:
            self._advance()
            return Not(self._atom())
        return self._atom()

    def _atom(self) -> Node:
        token = self._token
        kind = token.kind
        text = token.text

        if kind is TokenKind.WORD and text != AND_KEYWORD:
            self._advance()
            return Term(text)
        if kind is TokenKind.TEXT:
            self._advance()
            return Phrase(text[1:-1])
        if kind is TokenKind.CUSTOM:
            self._advance()
            return FieldFilter(token.label, text)
        if kind is TokenKind.LPAREN:
            if self._depth >= MAX_NESTING:
                raise self._error(f"at most {MAX_NESTING} nested groups")
            self._depth += 1
            self._advance()
            inner = self._expression()
            if self._token.kind is not TokenKind.RPAREN:
                raise self._error("')'")
            self._advance()
            self._depth -= 1
            return Group(inner)

        raise self._error(_EXPECTED_ATOM)


def parse_query(
    query_string: str,
    patterns: Mapping[str, str | re.Pattern[str]] | None = None,
    *,
    implicit_and: bool = True,
) -> Node:
    """Parse a search query string into an AST.

    Args:
        query_string: The search query to parse.
        patterns: Field patterns to register, ``label -> regex``, tried in
            mapping order.
        implicit_and: Treat adjacent operands as AND-ed.

    Returns:
        Root node of the query.

    Raises:
        QuerySyntaxError: If the query cannot be parsed.
        PatternError: If a field pattern is malformed.
    """
    scanner = QueryScanner.from_patterns(patterns or {})
    parser = QueryParser(scanner, implicit_and=implicit_and)
    parser.read_string(query_string)
    return parser.parse()
