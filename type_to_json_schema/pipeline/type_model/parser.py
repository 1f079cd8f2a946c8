"""
Parser for type expressions.

Type expressions name a type and its arguments, e.g. "string",
"list<shop.Order>" or "map<string, Box<integer>>".
"""

from __future__ import annotations

import re

from ..errors import TypeModelError
from .nodes import TypeRef

_TOKEN_PATTERN = re.compile(r"\s*([<>,]|[A-Za-z0-9_.$\-]+)")


def _tokenize(expression: str) -> list[str]:
    tokens = []
    pos = 0
    while pos < len(expression):
        if expression[pos:].strip() == "":
            break
        match = _TOKEN_PATTERN.match(expression, pos)
        if not match:
            raise TypeModelError(f"Invalid type expression '{expression}' at position {pos}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


def parse_type_expression(expression: str) -> TypeRef:
    """
    Parse a type expression into a TypeRef.

    Args:
        expression: Type expression, e.g. "map<string, list<integer>>"

    Returns:
        The parsed TypeRef

    Raises:
        TypeModelError: If the expression is malformed
    """
    tokens = _tokenize(expression)
    if not tokens:
        raise TypeModelError("Empty type expression")

    type_ref, pos = _parse(tokens, 0, expression)
    if pos != len(tokens):
        raise TypeModelError(f"Unexpected '{tokens[pos]}' in type expression '{expression}'")
    return type_ref


def _parse(tokens: list[str], pos: int, expression: str) -> tuple[TypeRef, int]:
    if pos >= len(tokens) or tokens[pos] in "<>,":
        raise TypeModelError(f"Expected a type name in '{expression}'")
    name = tokens[pos]
    pos += 1

    if pos >= len(tokens) or tokens[pos] != "<":
        return TypeRef(name), pos

    args = []
    pos += 1
    while True:
        arg, pos = _parse(tokens, pos, expression)
        args.append(arg)
        if pos >= len(tokens):
            raise TypeModelError(f"Unterminated type arguments in '{expression}'")
        if tokens[pos] == ",":
            pos += 1
            continue
        if tokens[pos] == ">":
            pos += 1
            break
        raise TypeModelError(f"Unexpected '{tokens[pos]}' in type expression '{expression}'")

    return TypeRef(name, tuple(args)), pos
