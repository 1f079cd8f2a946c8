"""
Type model: descriptors of the types a schema is generated from.
"""

from .loader import ModelSubclassDiscovery, TypeModelDocument
from .nodes import (
    DEFAULT_GROUP,
    Constraint,
    DecimalMax,
    DecimalMin,
    DiscriminatorStrategy,
    Email,
    InjectionSpec,
    Max,
    Min,
    NotBlank,
    NotEmpty,
    NotNull,
    Pattern,
    PolymorphismInfo,
    PropertyDescriptor,
    PropertyMetadata,
    Size,
    TypeDescriptor,
    TypeKind,
    TypeRef,
)
from .parser import parse_type_expression
from .provider import NoSubclassDiscovery, SubclassDiscovery, TypeModelProvider

__all__ = [
    "DEFAULT_GROUP",
    "Constraint",
    "DecimalMax",
    "DecimalMin",
    "DiscriminatorStrategy",
    "Email",
    "InjectionSpec",
    "Max",
    "Min",
    "ModelSubclassDiscovery",
    "NoSubclassDiscovery",
    "NotBlank",
    "NotEmpty",
    "NotNull",
    "Pattern",
    "PolymorphismInfo",
    "PropertyDescriptor",
    "PropertyMetadata",
    "Size",
    "SubclassDiscovery",
    "TypeDescriptor",
    "TypeKind",
    "TypeModelDocument",
    "TypeModelProvider",
    "TypeRef",
    "parse_type_expression",
]
