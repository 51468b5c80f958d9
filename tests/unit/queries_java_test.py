"""Unit tests for the Java tree-sitter queries."""

from pathlib import Path

import pytest
from tree_sitter import Parser, Query, QueryCursor

from mavir.core.queries import load_query, node_text, parse_java, run_query


def get_captures_with_text(query: Query, parser: Parser, source: str) -> dict[str, list[str]]:
    """Parse source and return capture names mapped to their matched text."""
    source_bytes = source.encode("utf-8")
    tree = parser.parse(source_bytes)
    cursor = QueryCursor(query)
    result: dict[str, list[str]] = {}
    for _, matched_captures in cursor.matches(tree.root_node):
        for cap_name, nodes in matched_captures.items():
            if cap_name not in result:
                result[cap_name] = []
            for node in nodes:
                text = source_bytes[node.start_byte : node.end_byte].decode("utf-8")
                result[cap_name].append(text)
    return result


class TestValueClassQuery:
    """Tests for the value-class query."""

    def test_captures_marked_class(self, java_value_classes_query: Query, java_parser: Parser) -> None:
        source = """
package a;

@AutoValue
public abstract class Point {
    abstract int x();
}
"""
        captures = get_captures_with_text(java_value_classes_query, java_parser, source)
        assert captures["class.name"] == ["Point"]
        assert captures["class.marker"] == ["AutoValue"]

    def test_captures_scoped_marker(self, java_value_classes_query: Query, java_parser: Parser) -> None:
        source = """
@com.google.auto.value.AutoValue
abstract class Point {
    abstract int x();
}
"""
        captures = get_captures_with_text(java_value_classes_query, java_parser, source)
        assert captures["class.marker"] == ["com.google.auto.value.AutoValue"]

    def test_ignores_classes_without_marker_annotations(
        self, java_value_classes_query: Query, java_parser: Parser
    ) -> None:
        source = """
public abstract class Plain {
    abstract int x();
}
"""
        captures = get_captures_with_text(java_value_classes_query, java_parser, source)
        assert "class.name" not in captures


class TestAccessorQuery:
    """Tests for the accessor query."""

    def test_captures_only_abstract_methods(self, java_accessors_query: Query, java_parser: Parser) -> None:
        source = """
abstract class Point {
    public abstract int x();
    abstract String label(String prefix);
    public int y() { return 1; }
    static int z() { return 2; }
}
"""
        captures = get_captures_with_text(java_accessors_query, java_parser, source)
        assert captures["accessor.name"] == ["x", "label"]
        assert captures["accessor.type"] == ["int", "String"]

    def test_captures_annotated_modifiers(self, java_accessors_query: Query, java_parser: Parser) -> None:
        source = """
abstract class Person {
    @Nullable
    public abstract String nickname();
}
"""
        captures = get_captures_with_text(java_accessors_query, java_parser, source)
        assert captures["accessor.modifiers"] == ["@Nullable\n    public abstract"]


class TestRunQuery:
    """Tests for the query capability wrapper."""

    def test_load_query_is_cached(self) -> None:
        assert load_query("package") is load_query("package")

    def test_load_query_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_query("does_not_exist")

    def test_where_filters_on_capture_text(self) -> None:
        source = b"""
@AutoValue abstract class A { abstract int x(); }
@Deprecated abstract class B { abstract int x(); }
@AutoValue abstract class C { abstract int x(); }
"""
        root = parse_java(source).root_node
        query = load_query("value_classes")

        everything = run_query(query, root, source)
        marked = run_query(query, root, source, where={"class.marker": {"AutoValue"}})

        assert [node_text(m["class.name"], source) for m in everything] == ["A", "B", "C"]
        assert [node_text(m["class.name"], source) for m in marked] == ["A", "C"]

    def test_imports_in_source_order(self) -> None:
        source = b"package p;\nimport b.B;\nimport a.A;\nimport static c.C.f;\n"
        root = parse_java(source).root_node
        texts = [node_text(m["import"], source) for m in run_query(load_query("imports"), root, source)]
        assert texts == ["import b.B;", "import a.A;", "import static c.C.f;"]


def test_query_files_exist(queries_dir: Path) -> None:
    names = sorted(p.name for p in queries_dir.glob("*.scm"))
    assert names == ["java_accessors.scm", "java_imports.scm", "java_package.scm", "java_value_classes.scm"]
