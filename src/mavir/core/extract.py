"""Structural extraction of value-class declarations from Java sources."""

import logging
import re
from pathlib import Path

from tree_sitter import Node

from mavir.core.queries import load_query, node_text, parse_java, run_query
from mavir.core.types import is_void
from mavir.errors import CannotReadFileError, FileNotParsableAsJavaError, FileProcessingError
from mavir.models import AccessorMethodBuilder, ClassEntry, ClassEntryBuilder, CompilationUnit

logger = logging.getLogger(__name__)

MARKER_ANNOTATIONS = frozenset({"AutoValue", "com.google.auto.value.AutoValue"})

_TYPE_DECLARATION_KINDS = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "annotation_type_declaration",
    }
)
_PARAMETER_KINDS = frozenset({"formal_parameter", "spread_parameter", "receiver_parameter"})
_COMMENT_KINDS = frozenset({"line_comment", "block_comment"})

_PACKAGE_PATTERN = re.compile(r"^package\s+(?P<name>[\w$]+(?:\s*\.\s*[\w$]+)*)\s*;$")


def extract_file(path: str) -> CompilationUnit:
    file_path = Path(path)
    try:
        source_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CannotReadFileError(f"Cannot read file: {exc}", path) from exc
    return extract(source_text, source_path=path)


def extract(source_text: str, source_path: str | None = None) -> CompilationUnit:
    """Build the compilation unit for one Java source, or raise; never partial."""
    source = source_text.encode("utf-8")
    tree = parse_java(source)
    root = tree.root_node
    if root.has_error:
        raise FileNotParsableAsJavaError(f"Source contains syntax errors near {_first_error_location(root)}", source_path)

    package_name = collect_package(root, source, source_path)
    imports = collect_imports(root, source)
    classes = collect_classes(root, source, source_path)
    logger.debug(
        "Extracted %d value class(es) from %s (package %s)", len(classes), source_path or "<source>", package_name
    )

    try:
        return CompilationUnit(
            package_name=package_name,
            imports=tuple(imports),
            classes=tuple(classes),
            source_path=source_path,
        )
    except ValueError as exc:
        raise FileProcessingError(f"Invalid compilation unit: {exc}", source_path) from exc


def collect_package(root: Node, source: bytes, source_path: str | None = None) -> str:
    matches = run_query(load_query("package"), root, source)
    if not matches:
        raise FileProcessingError("Could not find package declaration", source_path)
    package_text = node_text(matches[0]["package"], source)
    found = _PACKAGE_PATTERN.match(package_text.strip())
    if found is None:
        raise FileProcessingError(f"Malformed package declaration: {package_text!r}", source_path)
    return re.sub(r"\s+", "", found.group("name"))


def collect_imports(root: Node, source: bytes) -> list[str]:
    return [node_text(m["import"], source) for m in run_query(load_query("imports"), root, source)]


def collect_classes(root: Node, source: bytes, source_path: str | None = None) -> list[ClassEntry]:
    seen: set[int] = set()
    entries: list[ClassEntry] = []
    for captures in run_query(load_query("value_classes"), root, source, where={"class.marker": MARKER_ANNOTATIONS}):
        class_node = captures["class"]
        # A class carrying the marker twice yields one match per annotation.
        if class_node.id in seen:
            continue
        seen.add(class_node.id)

        builder = ClassEntryBuilder(
            simple_name=node_text(captures["class.name"], source),
            modifiers=_modifier_texts(_modifiers_of(class_node), source),
            enclosing_chain=enclosing_chain(class_node, source),
        )
        builder.accessors = [
            accessor.build(source_path) for accessor in _collect_accessors(captures["class.body"], source, builder)
        ]
        entries.append(builder.build(source_path))
    return entries


def enclosing_chain(node: Node, source: bytes) -> list[str]:
    """Names of the type declarations enclosing *node*, outermost first."""
    chain: list[str] = []
    parent = node.parent
    while parent is not None:
        if parent.type in _TYPE_DECLARATION_KINDS:
            name = parent.child_by_field_name("name")
            if name is not None:
                chain.append(node_text(name, source))
        parent = parent.parent
    chain.reverse()
    return chain


def _collect_accessors(body: Node, source: bytes, owner: ClassEntryBuilder) -> list[AccessorMethodBuilder]:
    accessors: list[AccessorMethodBuilder] = []
    for captures in run_query(load_query("accessors"), body, source):
        method = captures["accessor"]
        # Methods of nested types are matched too; only direct members count.
        if method.parent is None or method.parent != body:
            continue
        if _parameter_count(captures["accessor.parameters"]) > 0:
            continue

        return_type = node_text(captures["accessor.type"], source)
        name = node_text(captures["accessor.name"], source)
        if is_void(return_type):
            logger.warning("Skipping abstract void method %s.%s()", owner.simple_name, name)
            continue

        accessors.append(
            AccessorMethodBuilder(
                name=name,
                return_type=return_type,
                modifiers=_modifier_texts(captures["accessor.modifiers"], source),
            )
        )
    return accessors


def _modifiers_of(declaration: Node) -> Node | None:
    for child in declaration.children:
        if child.type == "modifiers":
            return child
    return None


def _modifier_texts(modifiers: Node | None, source: bytes) -> list[str]:
    if modifiers is None:
        return []
    return [node_text(child, source) for child in modifiers.children if child.type not in _COMMENT_KINDS]


def _parameter_count(parameters: Node) -> int:
    return sum(1 for child in parameters.named_children if child.type in _PARAMETER_KINDS)


def _first_error_location(root: Node) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            row, column = node.start_point
            return f"line {row + 1}, column {column + 1}"
        stack.extend(reversed(node.children))
    row, column = root.start_point
    return f"line {row + 1}, column {column + 1}"
