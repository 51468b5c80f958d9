"""Render value-class models into AutoValue-compatible Java sources.

The ``equals``/``hashCode`` rules reproduce the conventions used by the
AutoValue annotation processor, so the generated bytes must stay stable:
floating point fields compare by bit pattern, booleans hash to 1231/1237 and
every field is folded in with the multiplier 1000003.
"""

from mavir.core.types import is_primitive
from mavir.models import AccessorMethod, ClassEntry, CompilationUnit

HASH_MULTIPLIER = 1000003
BOOLEAN_TRUE_HASH = 1231
BOOLEAN_FALSE_HASH = 1237

_INDENT = "  "
_CONTINUATION = _INDENT * 3


def synthesize(unit: CompilationUnit, entry: ClassEntry) -> str:
    lines: list[str] = [f"package {unit.package_name};", ""]
    if unit.imports:
        lines.extend(unit.imports)
        lines.append("")

    header = " ".join(("final", *entry.modifiers, "class", entry.synthesized_name))
    lines.append(f"{header} extends {entry.qualified_name} {{")
    lines.append("")
    lines.extend(_fields(entry))
    lines.append("")
    lines.extend(_constructor(entry))
    for accessor in entry.accessors:
        lines.append("")
        lines.extend(_accessor_override(accessor))
    lines.append("")
    lines.extend(_to_string(entry))
    lines.append("")
    lines.extend(_equals(entry))
    lines.append("")
    lines.extend(_hash_code(entry))
    lines.append("}")
    return "\n".join(lines) + "\n"


def synthesize_unit(unit: CompilationUnit) -> list[tuple[ClassEntry, str]]:
    return [(entry, synthesize(unit, entry)) for entry in unit.classes]


def _needs_null_check(accessor: AccessorMethod) -> bool:
    return not accessor.is_nullable and not is_primitive(accessor.return_type)


def _annotated_type(accessor: AccessorMethod) -> str:
    if accessor.is_nullable:
        return f"{accessor.nullable_annotation} {accessor.return_type}"
    return accessor.return_type


def _fields(entry: ClassEntry) -> list[str]:
    lines = []
    for accessor in entry.accessors:
        if accessor.is_nullable:
            lines.append(f"{_INDENT}{accessor.nullable_annotation}")
        lines.append(f"{_INDENT}private final {accessor.return_type} {accessor.name};")
    return lines


def _constructor(entry: ClassEntry) -> list[str]:
    lines = [f"{_INDENT}{entry.synthesized_name}("]
    params = [f"{_CONTINUATION}{_annotated_type(a)} {a.name}" for a in entry.accessors]
    lines.append(",\n".join(params) + ") {")
    for accessor in entry.accessors:
        if _needs_null_check(accessor):
            lines.extend(
                [
                    f"{_INDENT * 2}if ({accessor.name} == null) {{",
                    f'{_INDENT * 3}throw new NullPointerException("Null {accessor.name}");',
                    f"{_INDENT * 2}}}",
                ]
            )
        lines.append(f"{_INDENT * 2}this.{accessor.name} = {accessor.name};")
    lines.append(f"{_INDENT}}}")
    return lines


def _accessor_override(accessor: AccessorMethod) -> list[str]:
    annotations = [m for m in accessor.modifiers if m.startswith("@")]
    keywords = [m for m in accessor.modifiers if not m.startswith("@") and m != "abstract"]
    lines = [f"{_INDENT}@Override"]
    lines.extend(f"{_INDENT}{annotation}" for annotation in annotations)
    signature = " ".join((*keywords, accessor.return_type, f"{accessor.name}()"))
    lines.append(f"{_INDENT}{signature} {{")
    lines.append(f"{_INDENT * 2}return {accessor.name};")
    lines.append(f"{_INDENT}}}")
    return lines


def _to_string(entry: ClassEntry) -> list[str]:
    lines = [
        f"{_INDENT}@Override",
        f"{_INDENT}public String toString() {{",
        f'{_INDENT * 2}return "{entry.simple_name}{{"',
    ]
    last = len(entry.accessors) - 1
    for i, accessor in enumerate(entry.accessors):
        separator = ' + ", "' if i < last else ""
        lines.append(f'{_CONTINUATION}+ "{accessor.name}=" + {accessor.name}{separator}')
    lines.append(f'{_CONTINUATION}+ "}}";')
    lines.append(f"{_INDENT}}}")
    return lines


def equals_comparison(accessor: AccessorMethod) -> str:
    """Java expression comparing ``this`` and ``that`` for one accessor."""
    mine = f"this.{accessor.name}"
    theirs = f"that.{accessor.name}()"
    if accessor.return_type == "double":
        return f"Double.doubleToLongBits({mine}) == Double.doubleToLongBits({theirs})"
    if accessor.return_type == "float":
        return f"Float.floatToIntBits({mine}) == Float.floatToIntBits({theirs})"
    if is_primitive(accessor.return_type):
        return f"{mine} == {theirs}"
    if accessor.is_nullable:
        return f"({mine} == null ? {theirs} == null : {mine}.equals({theirs}))"
    return f"{mine}.equals({theirs})"


def _equals(entry: ClassEntry) -> list[str]:
    qualified = entry.qualified_name
    comparisons = [equals_comparison(a) for a in entry.accessors]
    body = f"\n{_INDENT * 5}&& ".join(comparisons)
    return [
        f"{_INDENT}@Override",
        f"{_INDENT}public boolean equals(Object o) {{",
        f"{_INDENT * 2}if (o == this) {{",
        f"{_INDENT * 3}return true;",
        f"{_INDENT * 2}}}",
        f"{_INDENT * 2}if (o instanceof {qualified}) {{",
        f"{_INDENT * 3}{qualified} that = ({qualified}) o;",
        f"{_INDENT * 3}return {body};",
        f"{_INDENT * 2}}}",
        f"{_INDENT * 2}return false;",
        f"{_INDENT}}}",
    ]


def hash_contribution(accessor: AccessorMethod) -> str:
    """Java expression folded into the running hash for one accessor."""
    name = accessor.name
    if accessor.return_type == "long":
        return f"(int) (({name} >>> 32) ^ {name})"
    if accessor.return_type == "boolean":
        return f"{name} ? {BOOLEAN_TRUE_HASH} : {BOOLEAN_FALSE_HASH}"
    if accessor.return_type == "double":
        return f"(int) ((Double.doubleToLongBits({name}) >>> 32) ^ Double.doubleToLongBits({name}))"
    if accessor.return_type == "float":
        return f"Float.floatToIntBits({name})"
    if is_primitive(accessor.return_type):
        return name
    if accessor.is_nullable:
        return f"({name} == null) ? 0 : {name}.hashCode()"
    return f"{name}.hashCode()"


def _hash_code(entry: ClassEntry) -> list[str]:
    lines = [
        f"{_INDENT}@Override",
        f"{_INDENT}public int hashCode() {{",
        f"{_INDENT * 2}int h$ = 1;",
    ]
    for accessor in entry.accessors:
        lines.append(f"{_INDENT * 2}h$ *= {HASH_MULTIPLIER};")
        lines.append(f"{_INDENT * 2}h$ ^= {hash_contribution(accessor)};")
    lines.append(f"{_INDENT * 2}return h$;")
    lines.append(f"{_INDENT}}}")
    return lines
