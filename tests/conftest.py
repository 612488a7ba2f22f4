"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from lukas.query.parser import QueryParser
from lukas.query.scanner import QueryScanner

if TYPE_CHECKING:
    from collections.abc import Generator

# Field tokens used by the bundled examples
TRIP_PATTERN = r"^(trip:[0-9]+)(.*)"
EXPERIENCE_PATTERN = r"^(experience:[0-9]+)(.*)"
EXTENSION_PATTERN = r"^(extension:[a-zA-Z0-9\.]+)(.*)"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file registering the example field tokens."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[display]
colored_output = false

[parser]
implicit_and = true

[fields]
TRIP = '^(trip:[0-9]+)(.*)'
EXPERIENCE = '^(experience:[0-9]+)(.*)'
EXTENSION = '^(extension:[a-zA-Z0-9\\.]+)(.*)'
""")
    return config_path


@pytest.fixture
def field_scanner() -> QueryScanner:
    """Scanner with TRIP, EXPERIENCE and EXTENSION registered."""
    scanner = QueryScanner()
    scanner.register_pattern("TRIP", TRIP_PATTERN)
    scanner.register_pattern("EXPERIENCE", EXPERIENCE_PATTERN)
    scanner.register_pattern("EXTENSION", EXTENSION_PATTERN)
    return scanner


@pytest.fixture
def field_parser(field_scanner: QueryScanner) -> QueryParser:
    """Parser over the field scanner."""
    return QueryParser(field_scanner)
