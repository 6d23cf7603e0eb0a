from .descriptors import TYPE_REGISTRY, Specialization, TypeDescriptor
from .resolver import (
    ADDITIONAL_PROPERTIES,
    COMPONENT,
    ITEMS,
    PROPERTIES,
    SCHEMA,
    SchemaTypeResolver,
)

__all__ = [
    "ADDITIONAL_PROPERTIES",
    "COMPONENT",
    "ITEMS",
    "PROPERTIES",
    "SCHEMA",
    "TYPE_REGISTRY",
    "SchemaTypeResolver",
    "Specialization",
    "TypeDescriptor",
]
