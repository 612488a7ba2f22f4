"""Visitor protocol for query ASTs and the visitors shipped with lukas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from rich.markup import escape
from rich.tree import Tree

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


class QueryVisitor(ABC):
    """Base class for AST consumers.

    Each node's ``accept`` calls exactly one of these methods. Composite
    nodes do not visit their children; a visitor that wants to descend
    calls ``accept`` on them itself.
    """

    @abstractmethod
    def visit_term(self, node: Term) -> Any: ...

    @abstractmethod
    def visit_phrase(self, node: Phrase) -> Any: ...

    @abstractmethod
    def visit_field_filter(self, node: FieldFilter) -> Any: ...

    @abstractmethod
    def visit_not(self, node: Not) -> Any: ...

    @abstractmethod
    def visit_and(self, node: And) -> Any: ...

    @abstractmethod
    def visit_or(self, node: Or) -> Any: ...

    @abstractmethod
    def visit_group(self, node: Group) -> Any: ...


# Binding strength, loosest first
_PRECEDENCE: dict[type[Node], int] = {
    Or: 1,
    And: 2,
    Not: 3,
}
_ATOM_PRECEDENCE = 4


def _flatten(node: And | Or) -> list[Node]:
    """Return the operands of a left-folded chain of *node*'s operator.

    ``And(And(a, b), c)`` gives ``[a, b, c]``. Only the left spine is
    walked, so ``And(a, And(b, c))`` gives ``[a, And(b, c)]``. Parsed runs
    of ``AND`` or ``OR`` can be thousands of nodes deep, so the spine is
    walked with a loop.
    """
    operator = type(node)
    operands: list[Node] = []
    current: Node = node
    while type(current) is operator:
        operands.append(current.right)
        current = current.left
    operands.append(current)
    operands.reverse()
    return operands


class QueryPrinter(QueryVisitor):
    """Render a query AST back to query syntax.

    Output of a parsed tree parses again to the same tree. Trees built by
    hand that nest a looser operator directly under a tighter one get
    parentheses so the text keeps their meaning.
    """

    def _child(self, node: Node, min_precedence: int) -> str:
        text = node.accept(self)
        if _PRECEDENCE.get(type(node), _ATOM_PRECEDENCE) < min_precedence:
            return f"({text})"
        return text

    def _chain(self, node: And | Or, keyword: str) -> str:
        precedence = _PRECEDENCE[type(node)]
        first, *rest = _flatten(node)
        # Right operands bind one level tighter than the chain itself
        parts = [self._child(first, precedence)]
        parts.extend(self._child(operand, precedence + 1) for operand in rest)
        return f" {keyword} ".join(parts)

    def visit_term(self, node: Term) -> str:
        return node.word

    def visit_phrase(self, node: Phrase) -> str:
        return f'"{node.text}"'

    def visit_field_filter(self, node: FieldFilter) -> str:
        return node.raw

    def visit_not(self, node: Not) -> str:
        return "-" + self._child(node.operand, _ATOM_PRECEDENCE)

    def visit_and(self, node: And) -> str:
        return self._chain(node, "AND")

    def visit_or(self, node: Or) -> str:
        return self._chain(node, "OR")

    def visit_group(self, node: Group) -> str:
        return f"({node.inner.accept(self)})"


class QueryDictBuilder(QueryVisitor):
    """Convert a query AST into plain dicts, e.g. for JSON output.

    A left-folded run of one operator becomes a single dict with an
    ``operands`` list, so ``a AND b AND c`` is one ``and`` entry with three
    operands rather than two nested ones.
    """

    def _chain(self, node: And | Or, type_name: str) -> dict[str, Any]:
        return {
            "type": type_name,
            "operands": [operand.accept(self) for operand in _flatten(node)],
        }

    def visit_term(self, node: Term) -> dict[str, Any]:
        return {"type": "term", "word": node.word}

    def visit_phrase(self, node: Phrase) -> dict[str, Any]:
        return {"type": "phrase", "text": node.text}

    def visit_field_filter(self, node: FieldFilter) -> dict[str, Any]:
        return {"type": "field", "label": node.label, "raw": node.raw}

    def visit_not(self, node: Not) -> dict[str, Any]:
        return {"type": "not", "operand": node.operand.accept(self)}

    def visit_and(self, node: And) -> dict[str, Any]:
        return self._chain(node, "and")

    def visit_or(self, node: Or) -> dict[str, Any]:
        return self._chain(node, "or")

    def visit_group(self, node: Group) -> dict[str, Any]:
        return {"type": "group", "inner": node.inner.accept(self)}


class QueryTreeBuilder(QueryVisitor):
    """Build a Rich tree showing the AST structure.

    Like :class:`QueryDictBuilder`, a run of one operator is shown as a
    single branch.
    """

    def _branch(self, label: str, *children: Node) -> Tree:
        tree = Tree(label)
        for child in children:
            tree.children.append(child.accept(self))
        return tree

    def visit_term(self, node: Term) -> Tree:
        return Tree(f"[info]Term[/info] {escape(node.word)}")

    def visit_phrase(self, node: Phrase) -> Tree:
        return Tree(f'[info]Phrase[/info] "{escape(node.text)}"')

    def visit_field_filter(self, node: FieldFilter) -> Tree:
        return Tree(f"[field]{escape(node.label)}[/field] {escape(node.raw)}")

    def visit_not(self, node: Not) -> Tree:
        return self._branch("[operator]NOT[/operator]", node.operand)

    def visit_and(self, node: And) -> Tree:
        return self._branch("[operator]AND[/operator]", *_flatten(node))

    def visit_or(self, node: Or) -> Tree:
        return self._branch("[operator]OR[/operator]", *_flatten(node))

    def visit_group(self, node: Group) -> Tree:
        return self._branch("[operator]( )[/operator]", node.inner)


def render(node: Node) -> str:
    """Render *node* back to query syntax."""
    return node.accept(QueryPrinter())


def to_dict(node: Node) -> dict[str, Any]:
    """Convert *node* into nested plain dicts."""
    return node.accept(QueryDictBuilder())
