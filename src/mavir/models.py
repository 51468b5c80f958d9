from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mavir.core.types import is_nullable_annotation
from mavir.errors import FileProcessingError

SYNTHESIZED_CLASS_PREFIX = "AutoValue_"

_RETAINED_CLASS_MODIFIERS = frozenset({"public"})


class AccessorMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    return_type: str = Field(min_length=1)
    modifiers: tuple[str, ...] = ()
    is_nullable: bool = False

    @model_validator(mode="after")
    def _nullability_matches_modifiers(self) -> "AccessorMethod":
        if self.is_nullable != any(is_nullable_annotation(m) for m in self.modifiers):
            raise ValueError(f"is_nullable={self.is_nullable} disagrees with modifiers {list(self.modifiers)}")
        return self

    @property
    def nullable_annotation(self) -> str | None:
        """The annotation text that marked this accessor nullable, as written."""
        for modifier in self.modifiers:
            if is_nullable_annotation(modifier):
                return modifier
        return None


class ClassEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    simple_name: str = Field(min_length=1)
    modifiers: tuple[str, ...] = ()
    enclosing_chain: tuple[str, ...] = ()
    accessors: tuple[AccessorMethod, ...] = Field(min_length=1)

    @field_validator("modifiers")
    @classmethod
    def _only_retained_modifiers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        unexpected = [m for m in value if m not in _RETAINED_CLASS_MODIFIERS]
        if unexpected:
            raise ValueError(f"Unsupported class modifiers: {unexpected}")
        return value

    @property
    def synthesized_name(self) -> str:
        return SYNTHESIZED_CLASS_PREFIX + "_".join((*self.enclosing_chain, self.simple_name))

    @property
    def qualified_name(self) -> str:
        """Name of the annotated type as referenced from the same package."""
        return ".".join((*self.enclosing_chain, self.simple_name))


class CompilationUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    package_name: str = Field(min_length=1)
    imports: tuple[str, ...] = ()
    classes: tuple[ClassEntry, ...] = ()
    source_path: str | None = None


# ---------------------------------------------------------------------------
# Builders: mutable accumulators filled while walking the syntax tree
# ---------------------------------------------------------------------------


@dataclass
class AccessorMethodBuilder:
    name: str | None = None
    return_type: str | None = None
    modifiers: list[str] = field(default_factory=list)

    def build(self, source_path: str | None = None) -> AccessorMethod:
        try:
            return AccessorMethod(
                name=self.name,  # type: ignore[arg-type]
                return_type=self.return_type,  # type: ignore[arg-type]
                modifiers=tuple(self.modifiers),
                is_nullable=any(is_nullable_annotation(m) for m in self.modifiers),
            )
        except ValidationError as exc:
            raise FileProcessingError(f"Invalid accessor method '{self.name}': {exc}", source_path) from exc


@dataclass
class ClassEntryBuilder:
    simple_name: str | None = None
    modifiers: list[str] = field(default_factory=list)
    enclosing_chain: list[str] = field(default_factory=list)
    accessors: list[AccessorMethod] = field(default_factory=list)

    def build(self, source_path: str | None = None) -> ClassEntry:
        if self.simple_name and not self.accessors:
            raise FileProcessingError(
                f"Class '{self.simple_name}' is annotated for generation but declares no abstract "
                "zero-argument accessor methods",
                source_path,
            )
        try:
            return ClassEntry(
                simple_name=self.simple_name,  # type: ignore[arg-type]
                modifiers=tuple(m for m in self.modifiers if m in _RETAINED_CLASS_MODIFIERS),
                enclosing_chain=tuple(self.enclosing_chain),
                accessors=tuple(self.accessors),
            )
        except ValidationError as exc:
            raise FileProcessingError(f"Invalid class '{self.simple_name}': {exc}", source_path) from exc
