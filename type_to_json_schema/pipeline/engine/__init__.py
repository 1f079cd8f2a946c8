"""
Schema engine.

Contains the walker and the components it drives: definitions registry,
polymorphism resolver, constraint translator, nullable wrapper and
injection merger.
"""

from .constraints import ConstraintTranslator
from .definitions import DefinitionInfo, DefinitionsRegistry, GenerationContext, WorkInProgress
from .injection import InjectionMerger
from .nullable import NullableWrapper
from .polymorphism import PolymorphismResolver
from .walker import ObjectHandle, SchemaWalker

__all__ = [
    "ConstraintTranslator",
    "DefinitionInfo",
    "DefinitionsRegistry",
    "GenerationContext",
    "InjectionMerger",
    "NullableWrapper",
    "ObjectHandle",
    "PolymorphismResolver",
    "SchemaWalker",
    "WorkInProgress",
]
