"""
Constraint translator.

Turns the validation constraints of a property into JSON Schema keywords,
keeping only those whose validation groups are active.
"""

from __future__ import annotations

from typing import Any

from ..type_model.nodes import (
    DEFAULT_GROUP,
    Constraint,
    DecimalMax,
    DecimalMin,
    Email,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    PropertyMetadata,
    Size,
    TypeKind,
)

NOT_BLANK_PATTERN = r"^.*\S+.*$"

# Keywords used by size-like constraints, per kind
SIZE_KEYWORDS = {
    TypeKind.STRING: ("minLength", "maxLength"),
    TypeKind.ARRAY: ("minItems", "maxItems"),
    TypeKind.MAP: ("minProperties", "maxProperties"),
}


def combine_patterns(patterns: list[str]) -> str:
    """Combine patterns so that a value must match all of them."""
    if len(patterns) == 1:
        return patterns[0]
    return "^" + "".join(f"(?={p})" for p in patterns) + ".*$"


class ConstraintTranslator:
    """Maps constraints to schema keywords for the active validation groups."""

    def __init__(self, active_groups: list[str] | None = None):
        self.active_groups = set(active_groups) if active_groups else {DEFAULT_GROUP}

    def is_active(self, groups: set[str]) -> bool:
        return bool(groups & self.active_groups)

    def active_constraints(self, metadata: PropertyMetadata) -> list[Constraint]:
        return [c for c in metadata.constraints if self.is_active(c.effective_groups())]

    def translate(self, metadata: PropertyMetadata, kind: TypeKind, node: dict[str, Any]) -> bool:
        """
        Add the keywords of the active constraints to node.

        Args:
            metadata: Metadata of the property
            kind: Kind of the property's value type (optional already unwrapped)
            node: Schema node of the property's value

        Returns:
            True if a not-null style constraint applies
        """
        not_null = False
        patterns: list[str] = []
        min_keyword, max_keyword = SIZE_KEYWORDS.get(kind, (None, None))

        constraints = self.active_constraints(metadata)
        for constraint in constraints:
            if isinstance(constraint, (NotNull, NotBlank, NotEmpty)):
                not_null = True
            elif isinstance(constraint, Size):
                if min_keyword is None:
                    continue
                if constraint.min is not None:
                    node[min_keyword] = constraint.min
                if constraint.max is not None:
                    node[max_keyword] = constraint.max
            elif isinstance(constraint, Pattern):
                patterns.append(constraint.regexp)
            elif isinstance(constraint, Min):
                node["minimum"] = int(constraint.value)
            elif isinstance(constraint, Max):
                node["maximum"] = int(constraint.value)
            elif isinstance(constraint, DecimalMin):
                node["minimum"] = float(constraint.value)
            elif isinstance(constraint, DecimalMax):
                node["maximum"] = float(constraint.value)
            elif isinstance(constraint, Email):
                node["format"] = "email"

        # Minimums implied by emptiness checks come after explicit sizes
        for constraint in constraints:
            if isinstance(constraint, NotEmpty) and min_keyword is not None:
                node.setdefault(min_keyword, 1)
            elif isinstance(constraint, NotBlank) and kind == TypeKind.STRING:
                node.setdefault("minLength", 1)
                patterns.append(NOT_BLANK_PATTERN)

        if patterns:
            node["pattern"] = combine_patterns(patterns)

        return not_null
