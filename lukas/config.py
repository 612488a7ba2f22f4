"""Configuration management for lukas."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from lukas.exceptions import (
    ConfigParseError,
    ConfigValidationError,
    PatternError,
)
from lukas.query.parser import QueryParser
from lukas.query.scanner import QueryScanner


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "lukas" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        colored_output: Whether to use colored terminal output.
        implicit_and: Whether adjacent query terms are AND-ed without an
            explicit ``AND``.
        field_patterns: Field token patterns, ``label -> regex``, in the
            order they are registered with the scanner.
        config_path: Path where config was loaded from (None if defaults).
    """

    colored_output: bool = True
    implicit_and: bool = True
    field_patterns: dict[str, str] = field(default_factory=dict)
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a field pattern cannot be used.
        """
        warnings: list[str] = []

        for label, pattern in self.field_patterns.items():
            try:
                QueryScanner().register_pattern(label, pattern)
            except PatternError as e:
                raise ConfigValidationError(f"fields.{label}", pattern, e.reason) from e
            if not pattern.startswith("^"):
                warnings.append(
                    f"fields.{label} has no leading '^'; patterns always match "
                    f"at the current scan position"
                )

        return warnings

    def build_scanner(self) -> QueryScanner:
        """Create a scanner with the configured field patterns registered."""
        return QueryScanner.from_patterns(self.field_patterns)

    def build_parser(self) -> QueryParser:
        """Create a parser over a freshly configured scanner."""
        return QueryParser(self.build_scanner(), implicit_and=self.implicit_and)


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: lukas init-config"
        )
        return config, warnings + config.validate()

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [parser] section
    parser = data.get("parser", {})
    if "implicit_and" in parser:
        value = parser["implicit_and"]
        if not isinstance(value, bool):
            raise ConfigValidationError("parser.implicit_and", value, "must be a boolean")
        config.implicit_and = value

    # Parse [fields] section; TOML tables keep their key order
    fields = data.get("fields", {})
    if not isinstance(fields, dict):
        raise ConfigValidationError("fields", fields, "must be a table")
    for label, pattern in fields.items():
        if not isinstance(pattern, str):
            raise ConfigValidationError(f"fields.{label}", pattern, "must be a string")
        config.field_patterns[label] = pattern

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "display": {
            "colored_output": config.colored_output,
        },
    }

    # Build [parser] section (only if non-default values)
    if not config.implicit_and:
        data["parser"] = {"implicit_and": False}

    if config.field_patterns:
        data["fields"] = dict(config.field_patterns)

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
