"""Token kinds, tokens and the built-in lexical rules."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class TokenKind(enum.Enum):
    """Kinds of token produced by the scanner.

    ``CUSTOM`` covers every caller-registered rule; the rule's label travels
    on the token itself.
    """

    END = "END"
    WORD = "WORD"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    MINUS = "MINUS"
    COLON = "COLON"
    OR = "OR"
    WHITESPACE = "WHITESPACE"
    TEXT = "TEXT"
    ILLEGAL = "ILLEGAL"
    QUOTE = "QUOTE"
    CUSTOM = "CUSTOM"


# Labels a caller may not use for its own rules
RESERVED_LABELS: frozenset[str] = frozenset(kind.value for kind in TokenKind)


@dataclass(frozen=True)
class Token:
    """A classified fragment of the input.

    Attributes:
        kind: Token kind.
        text: Matched text, ``None`` for the end-of-input token.
        position: Offset of the first character in the original input.
        label: Caller label for ``CUSTOM`` tokens, otherwise ``None``.
    """

    kind: TokenKind
    text: str | None
    position: int
    label: str | None = None

    @property
    def name(self) -> str:
        """Textual kind: the caller label for custom tokens."""
        if self.label is not None:
            return self.label
        return self.kind.value


@dataclass(frozen=True)
class Rule:
    """A lexical rule.

    The pattern must have exactly two capture groups: the token text and
    the rest of the input that remains unconsumed.
    """

    kind: TokenKind
    pattern: re.Pattern[str]
    label: str | None = None

    @property
    def name(self) -> str:
        if self.label is not None:
            return self.label
        return self.kind.value


def _rule(kind: TokenKind, pattern: str, flags: int = 0) -> Rule:
    return Rule(kind, re.compile(pattern, flags | re.DOTALL))


# Rules tried before any caller-registered rule. Keywords and quoted text
# must precede the bare word or they are shadowed by it.
LEADING_RULES: tuple[Rule, ...] = (
    # Spaces, tabs and line breaks, any amount
    _rule(TokenKind.WHITESPACE, r"([ \t\r\n]+)(.*)"),
    # Everything between two double quotes, quotes included
    _rule(TokenKind.TEXT, r'("[^"]*")(.*)'),
    # OR keyword, only when not followed by another word character
    _rule(TokenKind.OR, r"(OR)(\b.*)", re.IGNORECASE),
)

# Rules tried after caller-registered rules
TRAILING_RULES: tuple[Rule, ...] = (
    # Letters, digits, underscore, then also linking characters and points
    # (e.g. dibe_relict.101)
    _rule(TokenKind.WORD, r"(\w[\w\-.%/]*)(.*)"),
    _rule(TokenKind.LPAREN, r"(\()(.*)"),
    _rule(TokenKind.RPAREN, r"(\))(.*)"),
    _rule(TokenKind.MINUS, r"(-)(.*)"),
    _rule(TokenKind.COLON, r"(:)(.*)"),
    # A double quote without a closing partner
    _rule(TokenKind.QUOTE, r'(")([^"]*)\Z'),
    # Any character that is left
    _rule(TokenKind.ILLEGAL, r"(.)(.*)"),
)

BUILTIN_RULES: tuple[Rule, ...] = LEADING_RULES + TRAILING_RULES
