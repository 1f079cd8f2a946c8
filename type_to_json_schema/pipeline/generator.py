"""
Schema generator facade.

Ties a type model provider and a configuration to the schema walker.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import SchemaGeneratorConfig
from .engine.walker import SchemaWalker
from .type_model.loader import ModelSubclassDiscovery, TypeModelDocument
from .type_model.nodes import TypeRef
from .type_model.provider import NoSubclassDiscovery, SubclassDiscovery, TypeModelProvider

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Generates JSON Schema documents from a type model.

    The generator itself holds no per-run state: each call to generate()
    uses its own walker, registry and context, so one generator can be used
    from several threads.
    """

    def __init__(
        self,
        provider: TypeModelProvider,
        config: SchemaGeneratorConfig | None = None,
        discovery: SubclassDiscovery | None = None,
    ):
        """
        Initialize the generator.

        Args:
            provider: Supplies type descriptors
            config: Generation options (defaults when None)
            discovery: Finds undeclared subtypes; for a TypeModelDocument it
                defaults to scanning the document within the configured scope
        """
        self.provider = provider
        self.config = config or SchemaGeneratorConfig.default()
        if discovery is None:
            if isinstance(provider, TypeModelDocument):
                discovery = ModelSubclassDiscovery(
                    provider,
                    packages=self.config.subclass_scan_packages,
                    classes=self.config.subclass_scan_classes,
                )
            else:
                discovery = NoSubclassDiscovery()
        self.discovery = discovery

    def generate(
        self,
        root: TypeRef | str,
        title: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """
        Generate the schema of a root type.

        Args:
            root: The root type, or a type expression such as "Box<string>"
            title: Document title; derived from the type name when None,
                left out when empty
            description: Optional document description

        Returns:
            The schema document

        Raises:
            SchemaGenerationError: On injection failures or registry misuse
            CollaboratorError: When the provider or discovery fails
        """
        if isinstance(root, str):
            root = self.provider.parse_type(root)
        logger.debug("Generating schema for %s", root)
        walker = SchemaWalker(self.provider, self.config, self.discovery)
        return walker.generate(root, title=title, description=description)
