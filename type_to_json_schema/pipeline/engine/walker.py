"""
Schema walker.

Drives the recursive conversion of a root type into a JSON Schema
document, consulting the definitions registry for every object type and
delegating to the polymorphism resolver, constraint translator, nullable
wrapper and injection merger along the way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ...utils import camel_case_to_sentence_case, get_or_create_object_child, get_required_list
from ..config import SchemaGeneratorConfig
from ..type_model.nodes import PRIMITIVE_KINDS, PropertyDescriptor, TypeDescriptor, TypeKind, TypeRef
from ..type_model.provider import NoSubclassDiscovery, SubclassDiscovery, TypeModelProvider
from .constraints import ConstraintTranslator
from .definitions import DefinitionInfo, DefinitionsRegistry, GenerationContext
from .injection import InjectionMerger
from .nullable import NullableWrapper
from .polymorphism import PolymorphismResolver

logger = logging.getLogger(__name__)


@dataclass
class ObjectHandle:
    """A definition node waiting to be populated with the body of a type."""

    desc: TypeDescriptor
    node: dict[str, Any]


class SchemaWalker:
    """Converts one root type into a schema document.

    A walker holds the call-scoped state of a single run (its registry),
    so a new walker must be created for every generation.
    """

    def __init__(
        self,
        provider: TypeModelProvider,
        config: SchemaGeneratorConfig,
        discovery: SubclassDiscovery | None = None,
    ):
        self.provider = provider
        self.config = config
        self.registry = DefinitionsRegistry(self.describe, config.definition_naming)
        self.constraints = ConstraintTranslator(config.active_validation_groups)
        self.nullable = NullableWrapper(config.nullable_handling, config.use_one_of_for_optional)
        self.injection = InjectionMerger(config.named_fragment_suppliers, self.constraints.is_active)
        self.polymorphism = PolymorphismResolver(
            self.describe,
            self.registry,
            discovery or NoSubclassDiscovery(),
            config.form_field_extensions,
            describe_declared=provider.describe,
        )

    def generate(self, root: TypeRef, title: str | None = None, description: str | None = None) -> dict[str, Any]:
        """
        Generate the schema document of a root type.

        Args:
            root: The root type
            title: Document title; derived from the type name when None,
                left out when empty
            description: Optional document description

        Returns:
            The schema document
        """
        ctx = GenerationContext()
        desc = self.describe(root)

        schema: dict[str, Any] = {"$schema": self.config.draft.url}
        if title is None:
            title = camel_case_to_sentence_case(desc.ref.short_name)
        if title:
            schema["title"] = title
        if description:
            schema["description"] = description

        if self.polymorphism.is_polymorphic(desc):
            schema["oneOf"] = self.polymorphism.resolve(desc, ctx, self.visit_definition)
        elif desc.kind == TypeKind.OBJECT:
            # The root type is populated inline; references back to it get a definition
            self.populate_object(ObjectHandle(desc, schema), ctx)
        else:
            schema.update(self.type_schema(desc, ctx))

        definitions = self.registry.definitions_node()
        if definitions is not None:
            schema["definitions"] = definitions
        return schema

    def describe(self, type_ref: TypeRef) -> TypeDescriptor:
        """Describe a type after applying type remapping."""
        return self.provider.describe(self.remap(type_ref))

    def remap(self, type_ref: TypeRef) -> TypeRef:
        mapped = self.config.type_remapping.get(type_ref.name)
        if mapped is None:
            return type_ref
        logger.debug("Remapping type %s to %s", type_ref, mapped)
        return self.provider.parse_type(mapped)

    def type_schema(self, desc: TypeDescriptor, ctx: GenerationContext) -> dict[str, Any]:
        """Return the schema of a value of the given type."""
        kind = desc.kind
        if kind == TypeKind.OPTIONAL:
            return self.type_schema(self.describe(desc.element), ctx)

        if kind in PRIMITIVE_KINDS:
            node = self.primitive_schema(desc)
        elif kind == TypeKind.ARRAY:
            node = {"type": "array", "items": self.type_schema(self.describe(desc.element), ctx)}
            if desc.unique_items:
                node["uniqueItems"] = True
                if self.config.form_field_extensions:
                    node["format"] = "checkbox"
        elif kind == TypeKind.MAP:
            node = {"type": "object", "additionalProperties": self.type_schema(self.describe(desc.element), ctx)}
        elif self.polymorphism.is_polymorphic(desc):
            node = {"oneOf": self.polymorphism.resolve(desc, ctx, self.visit_definition)}
        else:
            info = self.visit_definition(desc, ctx)
            node = {"$ref": info.ref}
        return node

    def primitive_schema(self, desc: TypeDescriptor) -> dict[str, Any]:
        if desc.kind == TypeKind.ANY:
            node: dict[str, Any] = {}
        elif desc.kind == TypeKind.ENUM:
            node = {"type": "string", "enum": list(desc.enum_values)}
        else:
            node = {"type": desc.kind.value}

        format_ = self.format_for(desc)
        if format_:
            node["format"] = format_
        return node

    def format_for(self, desc: TypeDescriptor) -> str | None:
        return self.config.custom_type_to_format_mapping.get(desc.ref.name, desc.format)

    def visit_definition(self, desc: TypeDescriptor, ctx: GenerationContext) -> DefinitionInfo[ObjectHandle]:
        """
        Reference the definition of a type, creating and populating it if needed.

        When the type is the one in progress, the live node is populated
        instead of creating a second definition.
        """
        info = self.registry.get_or_create(ctx, desc.ref, lambda node: ObjectHandle(desc, node))
        if info.handle is not None:
            with ctx.nested():
                self.populate_definition(info.handle, ctx)
        return info

    def populate_definition(self, handle: ObjectHandle, ctx: GenerationContext) -> None:
        if self.polymorphism.is_polymorphic(handle.desc):
            # Intermediate base inside a hierarchy
            handle.node["oneOf"] = self.polymorphism.resolve(handle.desc, ctx, self.visit_definition)
        else:
            self.populate_object(handle, ctx)

    def populate_object(self, handle: ObjectHandle, ctx: GenerationContext) -> None:
        """Fill a node with the object schema of a type."""
        desc, node = handle.desc, handle.node
        metadata = desc.metadata

        node["type"] = "object"
        node["additionalProperties"] = not self.config.fail_on_unknown_properties

        format_ = self.format_for(desc)
        if format_:
            node["format"] = format_

        self.polymorphism.apply_discriminator(desc, node)

        if metadata.title:
            node["title"] = metadata.title
        if metadata.description:
            node["description"] = metadata.description

        get_or_create_object_child(node, "properties")
        for index, prop in enumerate(desc.properties, start=1):
            self.visit_property(node, prop, index, ctx)

        self.injection.apply_all(node, metadata.injections)

    def visit_property(
        self,
        parent: dict[str, Any],
        prop: PropertyDescriptor,
        index: int,
        ctx: GenerationContext,
    ) -> None:
        """Add one property to an object node."""
        metadata = prop.metadata
        desc = self.describe(prop.type or TypeRef("any"))

        optional = False
        while desc.kind == TypeKind.OPTIONAL:
            optional = True
            desc = self.describe(desc.element)

        node = self.type_schema(desc, ctx)
        not_null = self.constraints.translate(metadata, desc.kind, node)

        if metadata.format:
            node["format"] = metadata.format
        if metadata.description:
            node["description"] = metadata.description
        if metadata.has_default:
            node["default"] = metadata.default
        if metadata.examples:
            node["examples"] = list(metadata.examples)

        nullable = optional or not prop.required
        node, required = self.nullable.wrap(node, nullable, not_null, optional)

        if metadata.title:
            node["title"] = metadata.title
        elif self.config.form_field_extensions:
            node["title"] = camel_case_to_sentence_case(prop.name)
        if self.config.form_field_extensions:
            node["propertyOrder"] = index

        self.injection.apply_all(node, metadata.injections)

        parent["properties"][prop.name] = node
        if required:
            required_list = get_required_list(parent)
            if prop.name not in required_list:
                required_list.append(prop.name)
