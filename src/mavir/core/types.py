_PRIMITIVE_TYPES: frozenset[str] = frozenset(
    {
        "boolean",
        "byte",
        "short",
        "int",
        "long",
        "float",
        "double",
        "char",
    }
)

NULLABLE_ANNOTATION = "Nullable"


def is_primitive(type_token: str) -> bool:
    return type_token in _PRIMITIVE_TYPES


def is_void(type_token: str) -> bool:
    return type_token == "void"


def is_nullable_annotation(modifier: str) -> bool:
    """Match ``@Nullable``, ``@javax.annotation.Nullable`` and ``@Nullable(...)``."""
    if not modifier.startswith("@"):
        return False
    name = modifier[1:].split("(", 1)[0].strip()
    return name.rsplit(".", 1)[-1] == NULLABLE_ANNOTATION
