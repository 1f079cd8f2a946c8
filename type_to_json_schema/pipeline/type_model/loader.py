"""
Type model loaded from a JSON document.

Provides a TypeModelProvider and a SubclassDiscovery backed by a
declarative description of types, so schemas can be generated without
any reflection over language-native classes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import TypeModelError, UnknownTypeError
from .nodes import (
    Constraint,
    DecimalMax,
    DecimalMin,
    DiscriminatorStrategy,
    Email,
    InjectionSpec,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    PolymorphismInfo,
    PropertyDescriptor,
    PropertyMetadata,
    Size,
    TypeDescriptor,
    TypeKind,
    TypeRef,
)
from .parser import parse_type_expression
from .provider import SubclassDiscovery, TypeModelProvider

logger = logging.getLogger(__name__)

# Builtin type name -> (kind, format, unique items)
BUILTIN_TYPES: dict[str, tuple[TypeKind, str | None, bool]] = {
    "string": (TypeKind.STRING, None, False),
    "str": (TypeKind.STRING, None, False),
    "integer": (TypeKind.INTEGER, None, False),
    "int": (TypeKind.INTEGER, None, False),
    "number": (TypeKind.NUMBER, None, False),
    "float": (TypeKind.NUMBER, None, False),
    "boolean": (TypeKind.BOOLEAN, None, False),
    "bool": (TypeKind.BOOLEAN, None, False),
    "null": (TypeKind.NULL, None, False),
    "any": (TypeKind.ANY, None, False),
    "object": (TypeKind.MAP, None, False),
    "date": (TypeKind.STRING, "date", False),
    "date-time": (TypeKind.STRING, "date-time", False),
    "time": (TypeKind.STRING, "time", False),
    "uuid": (TypeKind.STRING, "uuid", False),
    "uri": (TypeKind.STRING, "uri", False),
    "list": (TypeKind.ARRAY, None, False),
    "array": (TypeKind.ARRAY, None, False),
    "set": (TypeKind.ARRAY, None, True),
    "map": (TypeKind.MAP, None, False),
    "dict": (TypeKind.MAP, None, False),
    "optional": (TypeKind.OPTIONAL, None, False),
}

CONSTRAINT_KINDS: dict[str, type[Constraint]] = {
    "not_null": NotNull,
    "not_blank": NotBlank,
    "not_empty": NotEmpty,
    "size": Size,
    "pattern": Pattern,
    "min": Min,
    "max": Max,
    "decimal_min": DecimalMin,
    "decimal_max": DecimalMax,
    "email": Email,
}


@dataclass
class PropertyDeclaration:
    """A property as declared, before type parameters are bound."""

    name: str = ""
    type: TypeRef | None = None
    required: bool = False
    metadata: PropertyMetadata = field(default_factory=PropertyMetadata)


@dataclass
class TypeDeclaration:
    """A type as declared in the document."""

    name: str = ""
    kind: TypeKind = TypeKind.OBJECT
    schema_name: str | None = None
    type_params: list[str] = field(default_factory=list)
    extends: str | None = None
    abstract: bool = False
    format: str | None = None
    enum_values: list[Any] = field(default_factory=list)
    polymorphism: PolymorphismInfo | None = None
    properties: list[PropertyDeclaration] = field(default_factory=list)
    metadata: PropertyMetadata = field(default_factory=PropertyMetadata)


class TypeModelDocument(TypeModelProvider):
    """TypeModelProvider over a JSON type model document.

    The document is parsed once at construction; describe() only reads,
    so one instance can serve concurrent generation runs.
    """

    def __init__(self, data: dict[str, Any]):
        if not isinstance(data, dict) or not isinstance(data.get("types", {}), dict):
            raise TypeModelError("Type model document must be an object with a 'types' object")
        self.declarations: dict[str, TypeDeclaration] = {}
        for name, raw in data.get("types", {}).items():
            self.declarations[name] = self._parse_declaration(name, raw)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> TypeModelDocument:
        """Create a type model from a parsed document."""
        return TypeModelDocument(data)

    @staticmethod
    def from_file(path: str | Path) -> TypeModelDocument:
        """Load a type model from a JSON file."""
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise TypeModelError(f"Could not parse type model {path}: {e}") from e
        return TypeModelDocument(data)

    def describe(self, type_ref: TypeRef) -> TypeDescriptor:
        if type_ref.name in BUILTIN_TYPES:
            kind, format_, unique_items = BUILTIN_TYPES[type_ref.name]
            return TypeDescriptor(ref=type_ref, kind=kind, format=format_, unique_items=unique_items)

        declaration = self.declarations.get(type_ref.name)
        if declaration is None:
            raise UnknownTypeError(type_ref.name)

        bindings = self._bind_type_params(declaration, type_ref)
        properties = [
            PropertyDescriptor(
                name=prop.name,
                type=self._substitute(prop.type, bindings),
                required=prop.required,
                metadata=prop.metadata,
            )
            for prop in self._collect_properties(declaration)
        ]

        return TypeDescriptor(
            ref=type_ref,
            kind=declaration.kind,
            schema_name=declaration.schema_name,
            properties=properties,
            enum_values=list(declaration.enum_values),
            format=declaration.format,
            supertype=self._polymorphic_supertype(declaration),
            polymorphism=declaration.polymorphism,
            metadata=declaration.metadata,
        )

    def extends_chain(self, name: str) -> list[str]:
        """Return the names of all declared supertypes of a type, nearest first."""
        chain = []
        current = self.declarations.get(name)
        while current is not None and current.extends:
            if current.extends in chain or current.extends == name:
                raise TypeModelError(f"Cyclic 'extends' chain for type {name}")
            chain.append(current.extends)
            current = self.declarations.get(current.extends)
        return chain

    # Resolution helpers

    def _bind_type_params(self, declaration: TypeDeclaration, type_ref: TypeRef) -> dict[str, TypeRef]:
        if not declaration.type_params:
            return {}
        if type_ref.args and len(type_ref.args) != len(declaration.type_params):
            raise TypeModelError(
                f"Type {declaration.name} expects {len(declaration.type_params)} type arguments, got {len(type_ref.args)}"
            )
        if not type_ref.args:
            # Raw use of a generic type
            return {param: TypeRef("any") for param in declaration.type_params}
        return dict(zip(declaration.type_params, type_ref.args))

    def _substitute(self, type_ref: TypeRef | None, bindings: dict[str, TypeRef]) -> TypeRef | None:
        if type_ref is None:
            return None
        if not type_ref.args and type_ref.name in bindings:
            return bindings[type_ref.name]
        if not type_ref.args:
            return type_ref
        return TypeRef(type_ref.name, tuple(self._substitute(arg, bindings) for arg in type_ref.args))

    def _collect_properties(self, declaration: TypeDeclaration) -> list[PropertyDeclaration]:
        """Inherited properties first, then the type's own; redeclared names keep their first position."""
        chain = [self.declarations[n] for n in reversed(self.extends_chain(declaration.name)) if n in self.declarations]
        chain.append(declaration)

        by_name: dict[str, PropertyDeclaration] = {}
        for decl in chain:
            for prop in decl.properties:
                by_name[prop.name] = prop
        return list(by_name.values())

    def _polymorphic_supertype(self, declaration: TypeDeclaration) -> TypeRef | None:
        for name in self.extends_chain(declaration.name):
            parent = self.declarations.get(name)
            if parent is not None and parent.polymorphism is not None:
                return TypeRef(name)
        return None

    # Document parsing

    def _parse_declaration(self, name: str, raw: dict[str, Any]) -> TypeDeclaration:
        if not isinstance(raw, dict):
            raise TypeModelError(f"Declaration of type {name} must be an object")

        kind_name = raw.get("kind", "enum" if "enum" in raw else "object")
        try:
            kind = TypeKind(kind_name)
        except ValueError as e:
            raise TypeModelError(f"Type {name} has unknown kind '{kind_name}'") from e

        return TypeDeclaration(
            name=name,
            kind=kind,
            schema_name=raw.get("schema_name"),
            type_params=list(raw.get("type_params", [])),
            extends=raw.get("extends"),
            abstract=bool(raw.get("abstract", False)),
            format=raw.get("format"),
            enum_values=list(raw.get("enum", [])),
            polymorphism=self._parse_polymorphism(name, raw.get("polymorphism")),
            properties=[self._parse_property(name, p) for p in raw.get("properties", [])],
            metadata=self._parse_metadata(name, raw),
        )

    def _parse_property(self, type_name: str, raw: dict[str, Any]) -> PropertyDeclaration:
        if not isinstance(raw, dict) or "name" not in raw:
            raise TypeModelError(f"Properties of type {type_name} must be objects with a 'name'")
        return PropertyDeclaration(
            name=raw["name"],
            type=parse_type_expression(raw.get("type", "any")),
            required=bool(raw.get("required", False)),
            metadata=self._parse_metadata(f"{type_name}.{raw['name']}", raw),
        )

    def _parse_metadata(self, owner: str, raw: dict[str, Any]) -> PropertyMetadata:
        return PropertyMetadata(
            constraints=[self._parse_constraint(owner, c) for c in raw.get("constraints", [])],
            format=raw.get("format"),
            description=raw.get("description"),
            title=raw.get("title"),
            default=raw.get("default"),
            has_default="default" in raw,
            examples=list(raw.get("examples", [])),
            injections=[self._parse_injection(owner, i) for i in raw.get("inject", [])],
        )

    def _parse_constraint(self, owner: str, raw: dict[str, Any]) -> Constraint:
        kind = raw.get("kind")
        constraint_class = CONSTRAINT_KINDS.get(kind)
        if constraint_class is None:
            raise TypeModelError(f"Unknown constraint kind '{kind}' on {owner}")

        params = {k: v for k, v in raw.items() if k not in ("kind", "groups")}
        if constraint_class in (DecimalMin, DecimalMax) and "value" in params:
            params["value"] = str(params["value"])
        try:
            return constraint_class(groups=tuple(raw.get("groups", [])), **params)
        except TypeError as e:
            raise TypeModelError(f"Invalid '{kind}' constraint on {owner}: {e}") from e

    def _parse_injection(self, owner: str, raw: dict[str, Any]) -> InjectionSpec:
        if not isinstance(raw, dict):
            raise TypeModelError(f"Injection on {owner} must be an object")
        fragment = raw.get("json", "{}")
        if not isinstance(fragment, (str, dict)):
            raise TypeModelError(f"Injection json on {owner} must be a string or an object")
        return InjectionSpec(
            json=fragment,
            supplier_lookup=raw.get("supplier_lookup", ""),
            strings=dict(raw.get("strings", {})),
            ints=dict(raw.get("ints", {})),
            bools=dict(raw.get("bools", {})),
            override=bool(raw.get("override", False)),
            groups=tuple(raw.get("groups", [])),
        )

    def _parse_polymorphism(self, owner: str, raw: dict[str, Any] | None) -> PolymorphismInfo | None:
        if raw is None:
            return None
        try:
            discriminator = DiscriminatorStrategy(raw.get("discriminator", "property"))
        except ValueError as e:
            raise TypeModelError(f"Unknown discriminator '{raw.get('discriminator')}' on {owner}") from e

        subtypes = raw.get("subtypes")
        return PolymorphismInfo(
            discriminator=discriminator,
            property_name=raw.get("property", "type"),
            subtypes=[parse_type_expression(s) for s in subtypes] if subtypes is not None else None,
        )


class ModelSubclassDiscovery(SubclassDiscovery):
    """Finds subtypes among the types declared in a TypeModelDocument.

    The scan can be restricted to packages (name prefixes) and/or explicit
    type names. Results follow document order, which callers must not rely on.
    """

    def __init__(
        self,
        document: TypeModelDocument,
        packages: list[str] | None = None,
        classes: list[str] | None = None,
    ):
        self.document = document
        self.packages = packages
        self.classes = classes
        if packages is None and classes is None:
            logger.debug("Entire type model will be scanned because subclass discovery is not scoped")

    def get_subclasses(self, base: TypeRef) -> list[TypeRef]:
        found = []
        for name, declaration in self.document.declarations.items():
            if declaration.abstract or not self._in_scope(name):
                continue
            if base.name in self.document.extends_chain(name):
                found.append(TypeRef(name))
        logger.debug("Discovered %d subtypes of %s", len(found), base)
        return found

    def _in_scope(self, name: str) -> bool:
        if self.packages is None and self.classes is None:
            return True
        if self.classes and name in self.classes:
            return True
        package = TypeRef(name).package
        return any(package == p or package.startswith(p + ".") for p in self.packages or [])
