"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Language, Parser, Query
from tree_sitter_language_pack import get_language, get_parser

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def queries_dir() -> Path:
    """Return the path to the queries directory."""
    return _REPO_ROOT / "src" / "mavir" / "queries"


@pytest.fixture
def java_fixtures_dir() -> Path:
    """Return the directory holding the sample Java sources."""
    return Path(__file__).parent / "fixtures" / "java" / "com" / "github" / "example"


@pytest.fixture
def java_parser() -> Parser:
    """Return a tree-sitter parser for Java."""
    return get_parser("java")


@pytest.fixture
def java_language() -> Language:
    """Return the tree-sitter Java language."""
    return get_language("java")


@pytest.fixture
def java_value_classes_query(queries_dir: Path, java_language: Language) -> Query:
    """Load the value-class query."""
    return Query(java_language, (queries_dir / "java_value_classes.scm").read_text())


@pytest.fixture
def java_accessors_query(queries_dir: Path, java_language: Language) -> Query:
    """Load the accessor query."""
    return Query(java_language, (queries_dir / "java_accessors.scm").read_text())


@pytest.fixture
def write_java(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing a Java source into the temporary directory."""

    def _write(name: str, source: str) -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
