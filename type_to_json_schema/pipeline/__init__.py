"""
Schema generation pipeline.

Generation goes through these phases:
1. Type model: a provider describes each type met (type_model/)
2. Walking: the walker recurses from the root type, creating definitions
   for object types and resolving polymorphic variants (engine/)
3. Property processing: constraints, nullable handling and injections are
   applied to every property node (engine/)
"""

from .config import DefinitionNaming, JsonSchemaDraft, NullableHandling, SchemaGeneratorConfig
from .errors import CollaboratorError, SchemaGenerationError, TypeModelError, UnknownTypeError
from .generator import SchemaGenerator

__all__ = [
    "CollaboratorError",
    "DefinitionNaming",
    "JsonSchemaDraft",
    "NullableHandling",
    "SchemaGenerationError",
    "SchemaGenerator",
    "SchemaGeneratorConfig",
    "TypeModelError",
    "UnknownTypeError",
]
