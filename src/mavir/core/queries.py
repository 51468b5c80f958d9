from collections.abc import Collection, Mapping
from functools import cache
from pathlib import Path

from tree_sitter import Node, Query, QueryCursor, Tree
from tree_sitter_language_pack import get_language, get_parser

_LANGUAGE = "java"


@cache
def load_query(query_type: str) -> Query:
    """Compile ``queries/java_<query_type>.scm``; compiled queries live for the whole process."""
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{_LANGUAGE}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(_LANGUAGE), query_text)


def parse_java(source_bytes: bytes) -> Tree:
    # Parsers are not shared between threads, so each call gets its own.
    parser = get_parser(_LANGUAGE)
    return parser.parse(source_bytes)


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def run_query(
    query: Query,
    node: Node,
    source: bytes,
    where: Mapping[str, Collection[str]] | None = None,
) -> list[dict[str, Node]]:
    """Run *query* below *node* and return one capture dict per match.

    Each capture maps to the first node bound to it. When *where* is given, a match
    is kept only if the text of every named capture is one of the accepted values.
    Matches are ordered by the start byte of their first capture.
    """
    cursor = QueryCursor(query)
    results: list[dict[str, Node]] = []
    for _, matched_captures in cursor.matches(node):
        captures = {name: nodes[0] for name, nodes in matched_captures.items() if nodes}
        if where and not _satisfies(captures, source, where):
            continue
        results.append(captures)
    results.sort(key=lambda captures: min(n.start_byte for n in captures.values()))
    return results


def _satisfies(captures: Mapping[str, Node], source: bytes, where: Mapping[str, Collection[str]]) -> bool:
    for capture_name, accepted in where.items():
        captured = captures.get(capture_name)
        if captured is None or node_text(captured, source) not in accepted:
            return False
    return True
