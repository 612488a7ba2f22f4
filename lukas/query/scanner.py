"""Scanner turning a query string into tokens, one token per call."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from lukas.exceptions import PatternError
from lukas.query.tokens import (
    LEADING_RULES,
    RESERVED_LABELS,
    TRAILING_RULES,
    Rule,
    Token,
    TokenKind,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)


class QueryScanner:
    """Scanner for search queries.

    The scanner also acts as tokenizer: each call to :meth:`next` matches
    the rules in priority order against the remaining input and returns a
    whole token. Whitespace only separates tokens and is never returned.

    For diagnostics the scanner keeps the processed part of the input, the
    remaining part and its position in the original string.

    Rule priority:
        1. whitespace, quoted text, the ``OR`` keyword
        2. caller rules, in registration order
        3. bare word, ``(``, ``)``, ``-``, ``:``, lone quote, any character
    """

    def __init__(self) -> None:
        self._custom_rules: list[Rule] = []
        self._processed = ""
        self._remaining = ""
        self._position = 0
        self._token = Token(TokenKind.END, None, 0)

    @classmethod
    def from_patterns(cls, patterns: Mapping[str, str | re.Pattern[str]]) -> QueryScanner:
        """Create a scanner with ``label -> pattern`` rules registered in order."""
        scanner = cls()
        for label, pattern in patterns.items():
            scanner.register_pattern(label, pattern)
        return scanner

    def register_pattern(self, label: str, pattern: str | re.Pattern[str]) -> None:
        """Register a caller rule producing ``CUSTOM`` tokens labelled *label*.

        Args:
            label: Token label, e.g. ``TRIP``.
            pattern: Regular expression with two capture groups, the token
                text and the remaining input, e.g. ``^(trip:[0-9]+)(.*)``.
                Strings are compiled, and compiled patterns recompiled, with
                ``re.DOTALL``.

        Raises:
            PatternError: If the label is empty or reserved, or the pattern
                does not compile or has the wrong number of groups.
        """
        if not label:
            raise PatternError(label, "label must not be empty")
        if label in RESERVED_LABELS:
            raise PatternError(label, "label is reserved for a built-in token")

        if isinstance(pattern, str):
            try:
                compiled = re.compile(pattern, re.DOTALL)
            except re.error as e:
                raise PatternError(label, str(e)) from e
        else:
            # The rest group must run past line breaks
            compiled = re.compile(pattern.pattern, pattern.flags | re.DOTALL)

        if compiled.groups != 2:
            raise PatternError(
                label,
                f"expected 2 capture groups (token, rest), found {compiled.groups}",
            )

        self._custom_rules.append(Rule(TokenKind.CUSTOM, compiled, label))
        logger.debug("Registered token %s: %s", label, compiled.pattern)

    @property
    def rules(self) -> tuple[Rule, ...]:
        """All rules in the order they are tried."""
        return LEADING_RULES + tuple(self._custom_rules) + TRAILING_RULES

    @property
    def processed(self) -> str:
        """Part of the input already turned into tokens."""
        return self._processed

    @property
    def remaining(self) -> str:
        """Part of the input still to be scanned."""
        return self._remaining

    @property
    def position(self) -> int:
        """Number of characters consumed from the original input."""
        return self._position

    @property
    def token(self) -> Token:
        return self._token

    @property
    def token_kind(self) -> TokenKind:
        return self._token.kind

    @property
    def token_text(self) -> str | None:
        return self._token.text

    @property
    def token_name(self) -> str:
        return self._token.name

    def read_string(self, text: str) -> None:
        """Start scanning *text* from the beginning."""
        self._remaining = text
        self._processed = ""
        self._position = 0
        self._token = Token(TokenKind.END, None, 0)

    def next(self) -> Token:
        """Scan the next token and return it.

        Never raises: unknown input becomes an ``ILLEGAL`` token and the end
        of the input an ``END`` token, repeated on every further call.
        """
        while True:
            token = self._match()
            if token.kind is not TokenKind.WHITESPACE:
                self._token = token
                return token

    def tokens(self, text: str) -> Iterator[Token]:
        """Read *text* and yield all its tokens, ``END`` included."""
        self.read_string(text)
        while True:
            token = self.next()
            yield token
            if token.kind is TokenKind.END:
                return

    def _match(self) -> Token:
        start = self._position
        for rule in self.rules:
            match = rule.pattern.match(self._remaining)
            # Empty matches would never advance the scanner
            if match is None or not match.group(1):
                continue
            text = match.group(1)
            self._processed += text
            self._remaining = match.group(2) or ""
            self._position += len(text)
            return Token(rule.kind, text, start, rule.label)

        if self._remaining:
            # Unreachable while the catch-all rule is in place
            text = self._remaining
            self._processed += text
            self._remaining = ""
            self._position += len(text)
            return Token(TokenKind.ILLEGAL, text, start)

        return Token(TokenKind.END, None, start)
