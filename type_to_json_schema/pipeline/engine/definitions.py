"""
Definitions registry.

Creates named entries under "definitions" for the types met during a
generation run, hands out "$ref" strings for finished ones, and tracks the
definition currently being populated so recursive and polymorphic
discovery can re-enter it instead of creating a duplicate.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, TypeVar

from ..config import DefinitionNaming
from ..errors import SchemaGenerationError
from ..type_model.nodes import TypeDescriptor, TypeRef

logger = logging.getLogger(__name__)

H = TypeVar("H")

DEFINITIONS_PREFIX = "#/definitions/"


@dataclass
class WorkInProgress:
    """A definition whose node is still being populated."""

    type_ref: TypeRef
    node: dict[str, Any]


@dataclass
class GenerationContext:
    """Per-run state threaded through every recursive call.

    Holds the current work-in-progress frame and the stack of frames saved
    while a nested type is processed.
    """

    work_in_progress: WorkInProgress | None = None
    stack: list[WorkInProgress | None] = field(default_factory=list)

    def push_work_in_progress(self) -> None:
        self.stack.append(self.work_in_progress)
        self.work_in_progress = None

    def pop_work_in_progress(self) -> None:
        if not self.stack:
            raise SchemaGenerationError("Work-in-progress stack is empty: unbalanced push/pop")
        self.work_in_progress = self.stack.pop()

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Save the current frame while a nested type is processed to completion."""
        self.push_work_in_progress()
        try:
            yield
        finally:
            self.pop_work_in_progress()


@dataclass
class DefinitionInfo(Generic[H]):
    """Result of DefinitionsRegistry.get_or_create.

    A finished definition yields only ref. A re-entered definition yields
    only handle. A freshly created one yields both: the caller populates it
    through the handle and references it through ref.
    """

    ref: str | None = None
    handle: H | None = None


class DefinitionsRegistry:
    """Maps types to named definitions for one generation run."""

    def __init__(
        self,
        describe: Callable[[TypeRef], TypeDescriptor],
        naming: DefinitionNaming = DefinitionNaming.SHORT_NAME,
    ):
        """
        Initialize the registry.

        Args:
            describe: Looks up descriptors, used for explicit schema names
            naming: How definition names are built
        """
        self.describe = describe
        self.naming = naming
        self._type_to_ref: dict[TypeRef, str] = {}
        self._definitions: dict[str, dict[str, Any]] = {}

    def get_or_create(
        self,
        ctx: GenerationContext,
        type_ref: TypeRef,
        populate: Callable[[dict[str, Any]], H],
    ) -> DefinitionInfo[H]:
        """
        Either create a new definition or return a $ref to an existing one.

        Args:
            ctx: Generation context holding the work-in-progress frame
            type_ref: The type needing a definition
            populate: Called with the definition node, returns a handle

        Returns:
            DefinitionInfo with ref and/or handle

        Raises:
            SchemaGenerationError: If the type is already registered and a
                different type is in progress
        """
        ref = self._type_to_ref.get(type_ref)
        if ref is not None:
            if ctx.work_in_progress is None:
                return DefinitionInfo(ref=ref)

            # Recursive polymorphism call: continue populating the same node
            if ctx.work_in_progress.type_ref != type_ref:
                raise SchemaGenerationError(
                    f"Wrong type - working on {ctx.work_in_progress.type_ref} - got {type_ref}"
                )
            return DefinitionInfo(handle=populate(ctx.work_in_progress.node))

        short_ref = self.definition_name(type_ref)
        base_name = short_ref
        retry_count = 0
        while self._is_taken(short_ref):
            retry_count += 1
            short_ref = f"{base_name}_{retry_count}"
        long_ref = DEFINITIONS_PREFIX + short_ref
        self._type_to_ref[type_ref] = long_ref

        node: dict[str, Any] = {}
        self._definitions[short_ref] = node
        logger.debug("Created definition %s for %s", long_ref, type_ref)

        ctx.work_in_progress = WorkInProgress(type_ref, node)
        try:
            handle = populate(node)
        finally:
            ctx.work_in_progress = None

        return DefinitionInfo(ref=long_ref, handle=handle)

    def definition_name(self, type_ref: TypeRef) -> str:
        """
        Compute the definition name of a type.

        Parameterized types get their argument names appended, e.g.
        "Pair(string,Box(Item))".
        """
        desc = self.describe(type_ref)
        if self.naming == DefinitionNaming.FULLY_QUALIFIED_ID:
            base_name = desc.ref.name
        else:
            base_name = desc.type_name

        if not desc.ref.args:
            return base_name
        arg_names = ",".join(self.definition_name(arg) for arg in desc.ref.args)
        return f"{base_name}({arg_names})"

    def definitions_node(self) -> dict[str, Any] | None:
        """Return the definitions object, or None if nothing was registered."""
        if not self._type_to_ref:
            return None
        return self._definitions

    def _is_taken(self, short_ref: str) -> bool:
        return DEFINITIONS_PREFIX + short_ref in self._type_to_ref.values()
