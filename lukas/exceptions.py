"""Exception hierarchy for lukas."""

from pathlib import Path


class LukasError(Exception):
    """Base exception for all lukas errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all lukas errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(LukasError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Query Errors
class QueryError(LukasError):
    """Query scanning/parsing errors."""

    pass


class QuerySyntaxError(QueryError):
    """The query does not match the grammar.

    Carries the offending token and where it starts in the original input,
    so callers can point at the exact spot.
    """

    def __init__(
        self,
        query: str,
        kind: str,
        text: str | None,
        position: int,
        expected: str,
    ) -> None:
        self.query = query
        self.kind = kind
        self.text = text
        self.position = position
        self.expected = expected
        if text is None:
            found = "end of input"
        else:
            found = f"{kind} '{text}'"
        super().__init__(f"Unexpected {found} at position {position}, expected {expected}")


class ParserStateError(QueryError):
    """Parser used out of order (e.g. parse() before read_string())."""

    pass


class PatternError(QueryError):
    """A lexical pattern registered with the scanner is malformed."""

    def __init__(self, label: str, reason: str) -> None:
        self.label = label
        self.reason = reason
        super().__init__(f"Invalid pattern for token '{label}': {reason}")
