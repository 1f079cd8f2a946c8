"""
Injection merger.

Applies user-declared raw JSON fragments onto generated nodes, either by
deep merge or by full replacement.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable

from ...utils import merge, visit_path
from ..errors import SchemaGenerationError
from ..type_model.nodes import InjectionSpec

logger = logging.getLogger(__name__)


class InjectionMerger:
    """Merges injected fragments into schema nodes."""

    def __init__(
        self,
        suppliers: dict[str, Callable[[], dict[str, Any] | None]] | None = None,
        is_active: Callable[[set[str]], bool] | None = None,
    ):
        """
        Initialize the merger.

        Args:
            suppliers: Named fragment producers available to supplier lookups
            is_active: Validation group filter; all injections apply when None
        """
        self.suppliers = suppliers or {}
        self.is_active = is_active

    def apply_all(self, target: dict[str, Any], specs: list[InjectionSpec]) -> None:
        """Apply every injection whose groups are active, in declaration order."""
        for spec in specs:
            if self.is_active is not None and not self.is_active(spec.effective_groups()):
                continue
            self.apply(target, spec)

    def apply(self, target: dict[str, Any], spec: InjectionSpec) -> bool:
        """
        Apply one injection to target.

        Returns:
            The override flag of the injection

        Raises:
            SchemaGenerationError: If the fragment is not valid JSON or a
                supplier name is not registered
        """
        fragment = self.build_fragment(spec)

        if spec.override:
            logger.debug("Injection replaces node content with %s", fragment)
            target.clear()
        merge(target, fragment)
        return spec.override

    def build_fragment(self, spec: InjectionSpec) -> dict[str, Any]:
        """Assemble the fragment of an injection: raw JSON, suppliers, then path overrides."""
        fragment = self._parse_json(spec.json)

        if spec.supplier is not None:
            supplied = spec.supplier()
            if supplied:
                merge(fragment, copy.deepcopy(supplied))

        if spec.supplier_lookup:
            supplier = self.suppliers.get(spec.supplier_lookup)
            if supplier is None:
                raise SchemaGenerationError(f"No fragment supplier registered under '{spec.supplier_lookup}'")
            supplied = supplier()
            if supplied:
                merge(fragment, copy.deepcopy(supplied))

        for overrides in (spec.strings, spec.ints, spec.bools):
            for path, value in overrides.items():
                visit_path(fragment, path, _leaf_setter(value))

        return fragment

    def _parse_json(self, raw: str | dict[str, Any]) -> dict[str, Any]:
        if isinstance(raw, dict):
            return copy.deepcopy(raw)
        if not isinstance(raw, str):
            raise SchemaGenerationError(f"Injected JSON fragment must be a string or object, not {type(raw).__name__}")
        try:
            parsed = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise SchemaGenerationError(f"Could not parse injected JSON fragment: {e}") from e
        if not isinstance(parsed, dict):
            raise SchemaGenerationError(f"Injected JSON fragment must be an object, got {type(parsed).__name__}")
        return parsed


def _leaf_setter(value: Any) -> Callable[[dict[str, Any], str], None]:
    def set_leaf(parent: dict[str, Any], name: str) -> None:
        parent[name] = value

    return set_leaf
