"""
Collaborator interfaces used by the schema engine.

The engine asks a TypeModelProvider for the description of every type it
meets, and a SubclassDiscovery for the variants of polymorphic base types
that do not declare them explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .nodes import TypeDescriptor, TypeRef
from .parser import parse_type_expression


class TypeModelProvider(ABC):
    """Supplies normalized type descriptors.

    Implementations that cache internally must allow concurrent reads, since
    independent generation runs may share one provider.
    """

    @abstractmethod
    def describe(self, type_ref: TypeRef) -> TypeDescriptor:
        """
        Describe a concrete type.

        Args:
            type_ref: The type to describe, with its type arguments

        Returns:
            TypeDescriptor for the type

        Raises:
            CollaboratorError: If the type cannot be described
        """
        pass

    def parse_type(self, expression: str) -> TypeRef:
        """Parse a type expression such as "Box<string>" into a TypeRef."""
        return parse_type_expression(expression)


class SubclassDiscovery(ABC):
    """Finds concrete subtypes of a polymorphic base type.

    The order of the returned list is implementation-defined; callers needing
    a stable variant order must declare the variants explicitly.
    """

    @abstractmethod
    def get_subclasses(self, base: TypeRef) -> list[TypeRef]:
        """Return the concrete types extending or implementing base."""
        pass


class NoSubclassDiscovery(SubclassDiscovery):
    """Discovery that never finds anything."""

    def get_subclasses(self, base: TypeRef) -> list[TypeRef]:
        return []
