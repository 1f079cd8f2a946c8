"""
Utility functions for the type to JSON Schema generator.
"""

import re
from typing import Any, Callable

# Zero-width positions where a camelCase identifier splits into words
_WORD_BOUNDARY_PATTERN = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])|(?<=[^A-Z])(?=[A-Z])|(?<=[A-Za-z])(?=[^A-Za-z])")


def camel_case_to_sentence_case(text: str) -> str:
    """Convert a camelCase identifier to a human readable title.

    Examples:
        "optionalList" -> "Optional List"
        "child1" -> "Child 1"
        "dateTimeWithAnnotation" -> "Date Time With Annotation"
        "HTMLParser" -> "HTML Parser"
        "_string" -> "_string"

    Args:
        text: The identifier to convert

    Returns:
        Words separated by spaces, first letter uppercased
    """
    if not text:
        return ""
    spaced = _WORD_BOUNDARY_PATTERN.sub(" ", text)
    return spaced[0].upper() + spaced[1:]


def merge(target: dict[str, Any], update: dict[str, Any]) -> None:
    """Deep merge update into target.

    Nested objects present on both sides are merged recursively; anything
    else (arrays, scalars, objects replacing non-objects) is replaced.
    """
    for key, value in update.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merge(existing, value)
        else:
            target[key] = value


def visit_path(node: dict[str, Any], path: str, f: Callable[[dict[str, Any], str], None]) -> None:
    """Walk a slash-separated path, creating intermediate objects, and call f(parent, last_part)."""
    parts = path.split("/")
    parent = node
    for name in parts[:-1]:
        child = parent.get(name)
        if not isinstance(child, dict):
            child = {}
            parent[name] = child
        parent = child
    f(parent, parts[-1])


def get_or_create_object_child(parent: dict[str, Any], name: str) -> dict[str, Any]:
    """Return parent[name], creating an empty object there if missing."""
    child = parent.get(name)
    if child is None:
        child = {}
        parent[name] = child
    return child


def get_required_list(node: dict[str, Any]) -> list[str]:
    """Return node["required"], creating an empty list there if missing."""
    required = node.get("required")
    if required is None:
        required = []
        node["required"] = required
    return required
