"""
Polymorphism resolver.

Builds "oneOf" arrays for polymorphic base types and marks each variant
definition with its discriminator.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ...utils import get_or_create_object_child, get_required_list
from ..type_model.nodes import DiscriminatorStrategy, TypeDescriptor, TypeRef
from ..type_model.provider import SubclassDiscovery
from .definitions import DefinitionInfo, DefinitionsRegistry, GenerationContext

logger = logging.getLogger(__name__)


class PolymorphismResolver:
    """Resolves the variants of polymorphic base types."""

    def __init__(
        self,
        describe: Callable[[TypeRef], TypeDescriptor],
        registry: DefinitionsRegistry,
        discovery: SubclassDiscovery,
        form_field_extensions: bool = False,
        describe_declared: Callable[[TypeRef], TypeDescriptor] | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            describe: Looks up descriptors, with type remapping applied
            registry: Definitions registry of the current run
            discovery: Finds subtypes when none are declared
            form_field_extensions: Hide discriminator properties in form renderers
            describe_declared: Looks up descriptors without remapping, used for
                supertypes so a remapped base keeps its discriminator
        """
        self.describe = describe
        self.registry = registry
        self.discovery = discovery
        self.form_field_extensions = form_field_extensions
        self.describe_declared = describe_declared or describe

    def is_polymorphic(self, desc: TypeDescriptor) -> bool:
        return desc.polymorphism is not None

    def variants(self, desc: TypeDescriptor) -> list[TypeRef]:
        """
        Return the variants of a polymorphic base type.

        Declared subtypes keep their declaration order. Discovered subtypes
        come in whatever order the discovery returns, which is not stable.
        """
        if desc.polymorphism is not None and desc.polymorphism.subtypes is not None:
            return list(desc.polymorphism.subtypes)

        subtypes = self.discovery.get_subclasses(desc.ref)
        logger.debug("Using discovered subtypes of %s (order is not guaranteed): %s", desc.ref, subtypes)
        return subtypes

    def resolve(
        self,
        desc: TypeDescriptor,
        ctx: GenerationContext,
        visit_definition: Callable[[TypeDescriptor, GenerationContext], DefinitionInfo],
    ) -> list[dict[str, Any]]:
        """
        Build the "oneOf" entries of a polymorphic base type.

        Each variant is registered as a definition and populated through
        visit_definition, which re-enters the registry for the same type.

        Args:
            desc: The polymorphic base type
            ctx: Generation context
            visit_definition: The walker's definition visitor

        Returns:
            One {"$ref": ...} entry per variant
        """
        one_of = []
        for variant_ref in self.variants(desc):
            variant = self.describe(variant_ref)

            def populate(node: dict[str, Any], variant: TypeDescriptor = variant) -> Any:
                return visit_definition(variant, ctx).handle

            with ctx.nested():
                info = self.registry.get_or_create(ctx, variant.ref, populate)
            one_of.append({"$ref": info.ref})
        return one_of

    def apply_discriminator(self, desc: TypeDescriptor, node: dict[str, Any]) -> None:
        """Merge the discriminator of a variant onto its root node."""
        if desc.supertype is None:
            return
        base = self.describe_declared(desc.supertype)
        info = base.polymorphism
        if info is None or info.discriminator == DiscriminatorStrategy.NONE:
            return

        if info.discriminator == DiscriminatorStrategy.EXISTING_PROPERTY:
            node["title"] = desc.type_name
            return

        tag = self.type_tag(desc, base)
        node["title"] = tag

        tag_property: dict[str, Any] = {"type": "string", "enum": [tag], "default": tag}
        if self.form_field_extensions:
            tag_property["options"] = {"hidden": True}
        get_or_create_object_child(node, "properties")[info.property_name] = tag_property

        required = get_required_list(node)
        if info.property_name not in required:
            required.insert(0, info.property_name)

    def type_tag(self, desc: TypeDescriptor, base: TypeDescriptor) -> str:
        """Return the value identifying a variant under its base's discriminator."""
        strategy = base.polymorphism.discriminator if base.polymorphism else DiscriminatorStrategy.PROPERTY
        if strategy == DiscriminatorStrategy.CLASS:
            return desc.ref.name
        if strategy == DiscriminatorStrategy.MINIMAL_CLASS:
            package = base.ref.package
            if package and desc.ref.name.startswith(package + "."):
                return desc.ref.name[len(package) :]
            return desc.ref.name
        return desc.type_name
