"""
Type model node definitions.

These nodes describe the structure of a data type as supplied by a
type model provider. The schema engine only ever sees these structures,
never language-native type metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

DEFAULT_GROUP = "Default"


@dataclass(frozen=True)
class TypeRef:
    """Identity of a concrete parameterization of a type."""

    name: str  # Qualified raw name, e.g. "shop.model.Order" or "string"
    args: tuple[TypeRef, ...] = ()

    @property
    def short_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def package(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[0]

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(str(a) for a in self.args)}>"


class TypeKind(str, Enum):
    """Shape of a described type."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ANY = "any"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    OPTIONAL = "optional"
    OBJECT = "object"


PRIMITIVE_KINDS = {
    TypeKind.STRING,
    TypeKind.INTEGER,
    TypeKind.NUMBER,
    TypeKind.BOOLEAN,
    TypeKind.NULL,
    TypeKind.ANY,
    TypeKind.ENUM,
}


class DiscriminatorStrategy(str, Enum):
    """How a polymorphic variant is told apart from its siblings."""

    PROPERTY = "property"  # Inject a literal type tag property
    EXISTING_PROPERTY = "existing_property"  # The tag is an already declared property
    CLASS = "class"  # Fully-qualified type identifier under the tag property
    MINIMAL_CLASS = "minimal_class"  # Identifier relative to the base type's package
    NONE = "none"  # Variants differ by shape only


# Constraint kinds


@dataclass(kw_only=True)
class Constraint:
    """Base class for validation constraints."""

    groups: tuple[str, ...] = ()

    def effective_groups(self) -> set[str]:
        return set(self.groups) if self.groups else {DEFAULT_GROUP}


@dataclass
class NotNull(Constraint):
    pass


@dataclass
class NotBlank(Constraint):
    pass


@dataclass
class NotEmpty(Constraint):
    pass


@dataclass
class Size(Constraint):
    min: int | None = None
    max: int | None = None


@dataclass
class Pattern(Constraint):
    regexp: str = ""


@dataclass
class Min(Constraint):
    value: int = 0


@dataclass
class Max(Constraint):
    value: int = 0


@dataclass
class DecimalMin(Constraint):
    value: str = "0"  # Kept as text so fractional digits survive until emission


@dataclass
class DecimalMax(Constraint):
    value: str = "0"


@dataclass
class Email(Constraint):
    pass


@dataclass
class InjectionSpec:
    """A user-declared raw JSON fragment to apply onto a generated node."""

    # Raw fragment: JSON text or an already parsed mapping
    json: str | dict[str, Any] = "{}"

    # Optional fragment producer merged into the raw fragment
    supplier: Callable[[], dict[str, Any] | None] | None = None

    # Name of a supplier registered in the generator config
    supplier_lookup: str = ""

    # Path-addressed primitive overrides: "a/b/c" -> value
    strings: dict[str, str] = field(default_factory=dict)
    ints: dict[str, int] = field(default_factory=dict)
    bools: dict[str, bool] = field(default_factory=dict)

    # Replace the target's content instead of merging into it
    override: bool = False

    # Validation groups this injection belongs to
    groups: tuple[str, ...] = ()

    def effective_groups(self) -> set[str]:
        return set(self.groups) if self.groups else {DEFAULT_GROUP}


@dataclass
class PropertyMetadata:
    """Metadata bag attached to a property or a type."""

    constraints: list[Constraint] = field(default_factory=list)
    format: str | None = None
    description: str | None = None
    title: str | None = None
    default: Any = None
    has_default: bool = False
    examples: list[Any] = field(default_factory=list)
    injections: list[InjectionSpec] = field(default_factory=list)


@dataclass
class PropertyDescriptor:
    """A property of an object type."""

    name: str = ""
    type: TypeRef | None = None

    # True when the declared type cannot represent null (e.g. a primitive int)
    required: bool = False

    metadata: PropertyMetadata = field(default_factory=PropertyMetadata)


@dataclass
class PolymorphismInfo:
    """Polymorphism settings declared on a base type."""

    discriminator: DiscriminatorStrategy = DiscriminatorStrategy.PROPERTY
    property_name: str = "type"

    # Explicitly declared variants, in order; None means use subclass discovery
    subtypes: list[TypeRef] | None = None


@dataclass
class TypeDescriptor:
    """Normalized description of a type."""

    ref: TypeRef = field(default_factory=lambda: TypeRef("any"))
    kind: TypeKind = TypeKind.OBJECT

    # Explicit schema name (overrides the short name for definitions and type tags)
    schema_name: str | None = None

    properties: list[PropertyDescriptor] = field(default_factory=list)
    enum_values: list[Any] = field(default_factory=list)

    # Set-like arrays
    unique_items: bool = False

    # Format hint carried by the type itself (e.g. "date-time")
    format: str | None = None

    # Nearest supertype declaring polymorphism (makes this type a variant)
    supertype: TypeRef | None = None

    # Present on polymorphic base types
    polymorphism: PolymorphismInfo | None = None

    # Type-level title/description/injections
    metadata: PropertyMetadata = field(default_factory=PropertyMetadata)

    @property
    def type_name(self) -> str:
        return self.schema_name or self.ref.short_name

    @property
    def element(self) -> TypeRef:
        """Element type of arrays and optionals, value type of maps."""
        if not self.ref.args:
            return TypeRef("any")
        return self.ref.args[-1]
