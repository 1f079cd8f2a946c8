"""
Configuration for the schema generator.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class NullableHandling(str, Enum):
    """How properties that may hold null are represented."""

    STRICT = "strict"  # Leave them out of "required"
    NULLABLE = "nullable"  # Wrap them in oneOf [null, schema]


class DefinitionNaming(str, Enum):
    """How names under "definitions" are built."""

    SHORT_NAME = "short_name"
    FULLY_QUALIFIED_ID = "fully_qualified_id"


class JsonSchemaDraft(str, Enum):
    """Supported JSON Schema drafts. Only the $schema URI differs."""

    DRAFT_04 = "draft-04"
    DRAFT_06 = "draft-06"
    DRAFT_07 = "draft-07"
    DRAFT_2019_09 = "2019-09"

    @property
    def url(self) -> str:
        return DRAFT_URLS[self]


DRAFT_URLS = {
    JsonSchemaDraft.DRAFT_04: "http://json-schema.org/draft-04/schema#",
    JsonSchemaDraft.DRAFT_06: "http://json-schema.org/draft-06/schema#",
    JsonSchemaDraft.DRAFT_07: "http://json-schema.org/draft-07/schema#",
    JsonSchemaDraft.DRAFT_2019_09: "https://json-schema.org/draft/2019-09/schema",
}

# Formats understood by GUI form renderers for date/time types
FORM_FIELD_DATE_FORMATS = {
    "date-time": "datetime",
    "local-date-time": "datetime-local",
    "date": "date",
    "time": "time",
}


@dataclass
class SchemaGeneratorConfig:
    """Configuration options for schema generation."""

    # Representation of nullable properties
    nullable_handling: NullableHandling = NullableHandling.STRICT

    # Use short names or fully-qualified type ids for definitions
    definition_naming: DefinitionNaming = DefinitionNaming.SHORT_NAME

    # Draft announced in $schema
    draft: JsonSchemaDraft = JsonSchemaDraft.DRAFT_04

    # Emit additionalProperties: false on object types
    fail_on_unknown_properties: bool = True

    # Add format/title/propertyOrder/uniqueItems hints for GUI form renderers
    form_field_extensions: bool = False

    # Wrap optional<T> properties in oneOf [null, schema] even in strict mode
    use_one_of_for_optional: bool = False

    # Validation groups whose constraints apply (empty = implicit default group)
    active_validation_groups: list[str] = field(default_factory=list)

    # Raw type name -> format
    custom_type_to_format_mapping: dict[str, str] = field(default_factory=dict)

    # Name -> fragment producer, used by injections with a supplier lookup
    named_fragment_suppliers: dict[str, Callable[[], dict[str, Any] | None]] = field(default_factory=dict)

    # Type name -> type name substitutions applied everywhere
    type_remapping: dict[str, str] = field(default_factory=dict)

    # Scope of subclass discovery (None = whole type model)
    subclass_scan_packages: list[str] | None = None
    subclass_scan_classes: list[str] | None = None

    @staticmethod
    def default() -> SchemaGeneratorConfig:
        return SchemaGeneratorConfig()

    @staticmethod
    def nullable() -> SchemaGeneratorConfig:
        return SchemaGeneratorConfig(nullable_handling=NullableHandling.NULLABLE)

    @staticmethod
    def json_editor() -> SchemaGeneratorConfig:
        """Config for GUI form renderers such as json-editor."""
        return SchemaGeneratorConfig(
            form_field_extensions=True,
            use_one_of_for_optional=True,
            custom_type_to_format_mapping=dict(FORM_FIELD_DATE_FORMATS),
        )

    @staticmethod
    def from_dict(d: dict) -> SchemaGeneratorConfig:
        """Create a config from a dictionary."""
        config = SchemaGeneratorConfig()
        for k, v in d.items():
            if k == "nullable_handling":
                config.nullable_handling = NullableHandling(v)
            elif k == "definition_naming":
                config.definition_naming = DefinitionNaming(v)
            elif k == "draft":
                config.draft = JsonSchemaDraft(v)
            elif k == "named_fragments" and isinstance(v, dict):
                # Literal fragments become constant suppliers
                for name, fragment in v.items():
                    config.named_fragment_suppliers[name] = _constant_supplier(fragment)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary. Named suppliers are not serializable and are left out."""
        return {
            "nullable_handling": self.nullable_handling.value,
            "definition_naming": self.definition_naming.value,
            "draft": self.draft.value,
            "fail_on_unknown_properties": self.fail_on_unknown_properties,
            "form_field_extensions": self.form_field_extensions,
            "use_one_of_for_optional": self.use_one_of_for_optional,
            "active_validation_groups": self.active_validation_groups,
            "custom_type_to_format_mapping": self.custom_type_to_format_mapping,
            "type_remapping": self.type_remapping,
            "subclass_scan_packages": self.subclass_scan_packages,
            "subclass_scan_classes": self.subclass_scan_classes,
        }


def _constant_supplier(fragment: Any) -> Callable[[], Any]:
    def supplier():
        return copy.deepcopy(fragment)

    return supplier
