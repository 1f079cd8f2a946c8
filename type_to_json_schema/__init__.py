"""Type to JSON Schema Generator

A Python package for generating JSON Schema documents from type models.
Handles recursive and generic types, polymorphic hierarchies, validation
constraints, nullable handling and raw fragment injection.
"""

__version__ = "1.0.0"

from .pipeline import (
    CollaboratorError,
    SchemaGenerationError,
    SchemaGenerator,
    SchemaGeneratorConfig,
)
from .pipeline.type_model import TypeModelDocument, TypeModelProvider, TypeRef

__all__ = [
    "SchemaGenerator",
    "SchemaGeneratorConfig",
    "SchemaGenerationError",
    "CollaboratorError",
    "TypeModelDocument",
    "TypeModelProvider",
    "TypeRef",
]
