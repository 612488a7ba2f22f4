"""Search query scanning, parsing and AST traversal."""

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
from lukas.query.parser import QueryParser, parse_query
from lukas.query.scanner import QueryScanner
from lukas.query.tokens import Token, TokenKind
from lukas.query.visitor import (
    QueryDictBuilder,
    QueryPrinter,
    QueryTreeBuilder,
    QueryVisitor,
    render,
    to_dict,
)

__all__ = [
    "And",
    "FieldFilter",
    "Group",
    "Node",
    "Not",
    "Or",
    "Phrase",
    "QueryDictBuilder",
    "QueryParser",
    "QueryPrinter",
    "QueryScanner",
    "QueryTreeBuilder",
    "QueryVisitor",
    "Term",
    "Token",
    "TokenKind",
    "parse_query",
    "render",
    "to_dict",
]
