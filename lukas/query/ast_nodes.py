"""AST data classes for parsed search queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lukas.query.visitor import QueryVisitor


@dataclass(frozen=True)
class Node:
    """Base AST node for search queries.

    Nodes never traverse themselves: ``accept`` hands the node to the
    matching visitor method and returns what it returns.
    """

    def accept(self, visitor: QueryVisitor) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class Term(Node):
    """A bare search word."""

    word: str

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_term(self)


@dataclass(frozen=True)
class Phrase(Node):
    """Quoted text, without the quotes."""

    text: str

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_phrase(self)


@dataclass(frozen=True)
class FieldFilter(Node):
    """A caller-defined structured term like ``trip:123``.

    ``label`` is the label the pattern was registered under, ``raw`` the
    matched text, left for the caller to interpret.
    """

    label: str
    raw: str

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_field_filter(self)


@dataclass(frozen=True)
class Not(Node):
    """Logical NOT of a query."""

    operand: Node

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_not(self)


@dataclass(frozen=True)
class And(Node):
    """Logical AND of two queries."""

    left: Node
    right: Node

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_and(self)


@dataclass(frozen=True)
class Or(Node):
    """Logical OR of two queries."""

    left: Node
    right: Node

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_or(self)


@dataclass(frozen=True)
class Group(Node):
    """A parenthesized sub-query."""

    inner: Node

    def accept(self, visitor: QueryVisitor) -> Any:
        return visitor.visit_group(self)
