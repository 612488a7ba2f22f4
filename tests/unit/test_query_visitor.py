"""Unit tests for the visitor protocol and the bundled visitors."""

from __future__ import annotations

import io
import json

import pytest
from rich.console import Console
from rich.tree import Tree

from lukas.query.ast_nodes import And, FieldFilter, Group, Node, Not, Or, Phrase, Term
from lukas.query.parser import parse_query
from lukas.query.visitor import QueryTreeBuilder, QueryVisitor, render, to_dict
from lukas.utils.output import THEME

FIELDS = {"TRIP": r"^(trip:[0-9]+)(.*)"}

a, b, c = Term("a"), Term("b"), Term("c")


class _RecordingVisitor(QueryVisitor):
    """Records which hooks were called and never descends."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def visit_term(self, node: Term) -> str:
        self.calls.append("term")
        return "term"

    def visit_phrase(self, node: Phrase) -> str:
        self.calls.append("phrase")
        return "phrase"

    def visit_field_filter(self, node: FieldFilter) -> str:
        self.calls.append("field")
        return "field"

    def visit_not(self, node: Not) -> str:
        self.calls.append("not")
        return "not"

    def visit_and(self, node: And) -> str:
        self.calls.append("and")
        return "and"

    def visit_or(self, node: Or) -> str:
        self.calls.append("or")
        return "or"

    def visit_group(self, node: Group) -> str:
        self.calls.append("group")
        return "group"


class _TermCounter(_RecordingVisitor):
    """Descends everywhere and counts terms."""

    def visit_not(self, node: Not) -> int:
        return node.operand.accept(self)

    def visit_and(self, node: And) -> int:
        return node.left.accept(self) + node.right.accept(self)

    def visit_or(self, node: Or) -> int:
        return node.left.accept(self) + node.right.accept(self)

    def visit_group(self, node: Group) -> int:
        return node.inner.accept(self)

    def visit_term(self, node: Term) -> int:
        return 1

    def visit_phrase(self, node: Phrase) -> int:
        return 0

    def visit_field_filter(self, node: FieldFilter) -> int:
        return 0


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    @pytest.mark.parametrize(
        ("node", "hook"),
        [
            (a, "term"),
            (Phrase("x y"), "phrase"),
            (FieldFilter("TRIP", "trip:1"), "field"),
            (Not(a), "not"),
            (And(a, b), "and"),
            (Or(a, b), "or"),
            (Group(a), "group"),
        ],
    )
    def test_accept_calls_matching_hook(self, node: Node, hook: str) -> None:
        visitor = _RecordingVisitor()
        assert node.accept(visitor) == hook
        assert visitor.calls == [hook]

    def test_tree_does_not_descend_by_itself(self) -> None:
        visitor = _RecordingVisitor()
        parse_query("a AND (b OR -c)").accept(visitor)
        assert visitor.calls == ["and"]

    def test_visitor_controls_recursion(self) -> None:
        node = parse_query('a AND (b OR -c) AND "d" AND trip:1', FIELDS)
        assert node.accept(_TermCounter()) == 3

    def test_incomplete_visitor_cannot_be_created(self) -> None:
        class Partial(QueryVisitor):
            def visit_term(self, node: Term) -> str:
                return node.word

        with pytest.raises(TypeError):
            Partial()  # type: ignore[abstract]


# ---------------------------------------------------------------------------
# Printer
# ---------------------------------------------------------------------------


class TestQueryPrinter:
    def test_example_query(self) -> None:
        query = "Lukas AND (me OR him) AND -term AND trip:123"
        assert render(parse_query(query, FIELDS)) == query

    def test_phrase_gets_quotes(self) -> None:
        assert render(Phrase("dark psy")) == '"dark psy"'

    def test_implicit_and_becomes_explicit(self) -> None:
        assert render(parse_query("a b")) == "a AND b"

    def test_whitespace_normalized(self) -> None:
        assert render(parse_query("  a   OR\tb ")) == "a OR b"

    @pytest.mark.parametrize(
        "query",
        [
            "Lukas AND me",
            "a AND b OR c",
            "a OR b AND c",
            "-a AND b",
            "-(a OR b) AND c",
            '"dark psy" OR -"ambient drone"',
            "((a))",
            "a b OR (c -d)",
            "trip:1 OR -trip:22 AND x",
            "a OR (b OR c)",
        ],
    )
    def test_round_trip(self, query: str) -> None:
        tree = parse_query(query, FIELDS)
        assert parse_query(render(tree), FIELDS) == tree

    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            (And(Or(a, b), c), "(a OR b) AND c"),
            (And(a, And(b, c)), "a AND (b AND c)"),
            (Or(a, Or(b, c)), "a OR (b OR c)"),
            (Or(And(a, b), c), "a AND b OR c"),
            (Not(And(a, b)), "-(a AND b)"),
            (Not(Not(a)), "-(-a)"),
            (Not(Group(Or(a, b))), "-(a OR b)"),
        ],
    )
    def test_hand_built_trees_keep_meaning(self, node: Node, expected: str) -> None:
        assert render(node) == expected

    def test_long_and_chain(self) -> None:
        query = " AND ".join(f"t{i}" for i in range(1500))
        assert render(parse_query(query)) == query

    def test_long_or_chain_round_trip(self) -> None:
        query = " OR ".join(["a AND -b", '"c d"'] * 800)
        tree = parse_query(query)
        assert render(tree) == query
        assert to_dict(parse_query(render(tree))) == to_dict(tree)

    def test_deeply_nested_groups(self) -> None:
        query = "(" * 100 + "a OR b" + ")" * 100
        tree = parse_query(query)
        assert render(tree) == query
        assert parse_query(render(tree)) == tree


# ---------------------------------------------------------------------------
# Dict and Rich tree builders
# ---------------------------------------------------------------------------


class TestQueryDictBuilder:
    def test_nested(self) -> None:
        node = parse_query('-"x y" OR (a AND trip:5)', FIELDS)
        assert to_dict(node) == {
            "type": "or",
            "operands": [
                {"type": "not", "operand": {"type": "phrase", "text": "x y"}},
                {
                    "type": "group",
                    "inner": {
                        "type": "and",
                        "operands": [
                            {"type": "term", "word": "a"},
                            {"type": "field", "label": "TRIP", "raw": "trip:5"},
                        ],
                    },
                },
            ],
        }

    def test_run_of_one_operator_is_flat(self) -> None:
        assert to_dict(parse_query("a b c")) == {
            "type": "and",
            "operands": [
                {"type": "term", "word": "a"},
                {"type": "term", "word": "b"},
                {"type": "term", "word": "c"},
            ],
        }

    def test_right_nesting_is_kept(self) -> None:
        result = to_dict(And(a, And(b, c)))
        assert [operand["type"] for operand in result["operands"]] == ["term", "and"]

    def test_long_chain(self) -> None:
        result = to_dict(parse_query(" OR ".join(["a AND b"] * 1500)))
        assert result["type"] == "or"
        assert len(result["operands"]) == 1500
        assert all(len(operand["operands"]) == 2 for operand in result["operands"])
        json.dumps(result)


class TestQueryTreeBuilder:
    def test_structure(self) -> None:
        tree = parse_query("a AND -b").accept(QueryTreeBuilder())
        assert isinstance(tree, Tree)
        assert "AND" in str(tree.label)
        assert len(tree.children) == 2
        assert len(tree.children[1].children) == 1

    def test_renders(self) -> None:
        out = io.StringIO()
        console = Console(file=out, theme=THEME, width=80, no_color=True)
        console.print(parse_query('x OR "y"').accept(QueryTreeBuilder()))
        text = out.getvalue()
        assert "OR" in text
        assert "Phrase" in text

    def test_markup_in_words_is_escaped(self) -> None:
        out = io.StringIO()
        console = Console(file=out, theme=THEME, width=80, no_color=True)
        console.print(Term("[bold]x").accept(QueryTreeBuilder()))
        assert "[bold]x" in out.getvalue()

    def test_run_of_one_operator_is_one_branch(self) -> None:
        tree = parse_query("a OR b OR c OR d").accept(QueryTreeBuilder())
        assert "OR" in str(tree.label)
        assert len(tree.children) == 4
