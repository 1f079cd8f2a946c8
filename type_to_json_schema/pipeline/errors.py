"""
Exceptions raised while generating a schema.
"""

from __future__ import annotations


class SchemaGenerationError(Exception):
    """Raised when schema generation cannot proceed.

    This can happen when:
    - An injection references a supplier name that is not registered
    - A raw injection fragment is not valid JSON
    - The definitions registry is re-entered for a type other than the one
      currently being populated (broken push/pop discipline)
    """

    pass


class CollaboratorError(Exception):
    """Raised by a type model provider or subclass discovery collaborator.

    Generation treats these as fatal and lets them propagate unchanged.
    """

    pass


class TypeModelError(CollaboratorError):
    """Raised when a type model document is malformed."""

    pass


class UnknownTypeError(CollaboratorError):
    """Raised when a type model is asked about a type it does not know."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown type: {type_name}")
        self.type_name = type_name
