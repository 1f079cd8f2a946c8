"""
Nullable wrapper.

Decides whether a property is required and, in nullable mode, wraps the
schema of properties that may be absent.
"""

from __future__ import annotations

from typing import Any

from ..config import NullableHandling

NULL_VARIANT_TITLE = "Not included"


class NullableWrapper:
    """Applies the configured nullable handling to property nodes."""

    def __init__(self, handling: NullableHandling = NullableHandling.STRICT, wrap_optional: bool = False):
        self.handling = handling
        # Wrap optional<T> properties in strict mode too
        self.wrap_optional = wrap_optional

    def wrap(
        self,
        node: dict[str, Any],
        nullable: bool,
        not_null: bool,
        optional: bool = False,
    ) -> tuple[dict[str, Any], bool]:
        """
        Produce the node to place in the parent.

        Args:
            node: Fully generated schema of the property
            nullable: True if the declared type can represent null
            not_null: True if an active not-null constraint applies
            optional: True if the declared type is optional<T>

        Returns:
            Tuple of (node to insert, whether the property is required)
        """
        required = not nullable or not_null
        if required:
            return node, True
        if self.handling == NullableHandling.STRICT and not (optional and self.wrap_optional):
            return node, False

        wrapped = {
            "oneOf": [
                {"type": "null", "title": NULL_VARIANT_TITLE},
                node,
            ]
        }
        return wrapped, False
