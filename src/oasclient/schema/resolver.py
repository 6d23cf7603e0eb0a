"""Classification of schema nodes into type descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import cast

from ..config import CompilerOptions
from ..errors import SchemaResolutionError
from ..naming import to_class_name
from ..openapi import SCHEMA_NAME_KEY, SchemaObject
from . import descriptors as d
from .descriptors import TYPE_REGISTRY, Specialization, TypeDescriptor

# Context keys: where a schema node sits relative to its parent.
ADDITIONAL_PROPERTIES = "additionalProperties"
PROPERTIES = "properties"
ITEMS = "items"
SCHEMA = "schema"
COMPONENT = "component"

_COMPOSITION_KEYS = ("oneOf", "anyOf", "allOf")


@dataclass
class SchemaTypeResolver:
    """Resolves schema nodes into type descriptors.

    Resolution derives a specialization from a fixed-priority list of
    structural predicates, then matches (declared type, specialization,
    declared format) against ``TYPE_REGISTRY``. Results are cached by schema
    identity, so resolving the same node twice returns the same descriptor.

    Example:
        >>> resolver = SchemaTypeResolver(CompilerOptions())
        >>> resolver.resolve({"type": "string", "format": "uuid"}, SCHEMA)
        Uuid()
        >>> resolver.resolve({"type": "array", "items": {"type": "integer"}}, SCHEMA)
        Array(element=IntegerArbitrary())
    """

    options: CompilerOptions
    _cache: dict[tuple[int, bool], tuple[object, TypeDescriptor]] = field(default_factory=dict, init=False)
    _in_progress: set[tuple[int, bool]] = field(default_factory=set, init=False)

    def resolve(self, schema: SchemaObject | None, context_key: str) -> TypeDescriptor:
        """Classify a schema node.

        Args:
            schema: The resolved schema node; ``None`` is treated as an empty schema
            context_key: Where the node sits relative to its parent (``ITEMS``,
                ``ADDITIONAL_PROPERTIES``, ...); only ``ADDITIONAL_PROPERTIES``
                changes the classification

        Raises:
            SchemaResolutionError: If no registry entry matches the node
        """
        if schema is None:
            schema = cast(SchemaObject, {})
        if not isinstance(schema, Mapping):
            raise SchemaResolutionError(None, None, context_key, reason="schema must be an object")
        key = (id(schema), context_key == ADDITIONAL_PROPERTIES)
        cached = self._cache.get(key)
        if cached is not None:
            return cached[1]
        if key in self._in_progress:
            raise SchemaResolutionError(
                _safe_str(schema.get("type")),
                _safe_str(schema.get("format")),
                context_key,
                reason="recursive array or map schema",
            )
        self._in_progress.add(key)
        try:
            descriptor = self._classify(schema, context_key)
        finally:
            self._in_progress.discard(key)
        # The schema is kept alive alongside its descriptor so that its id is never reused.
        self._cache[key] = (schema, descriptor)
        return descriptor

    def _classify(self, schema: SchemaObject, context_key: str) -> TypeDescriptor:
        declared_type = declared_type_of(schema, context_key)
        declared_format = _safe_str(schema.get("format"))
        specialization = specialization_of(schema, context_key)
        variant = match_registry(declared_type, specialization, declared_format, context_key)
        return self._build(variant, schema)

    def _build(self, variant: type[TypeDescriptor], schema: SchemaObject) -> TypeDescriptor:
        name = schema_name(schema)
        if variant is d.Enum:
            values = tuple(str(value) for value in schema.get("enum", []) if value is not None)
            return d.Enum(values=values, name=name)
        if variant is d.Object:
            composite = any(schema.get(key) for key in _COMPOSITION_KEYS)
            return d.Object(name=name, composite=composite)
        if variant is d.Array:
            return d.Array(element=self.resolve(_sub_schema(schema.get("items")), ITEMS))
        if variant is d.Map:
            return d.Map(value=self._additional_properties(schema), name=name)
        if variant is d.TypedMapAdditionalProperties:
            return d.TypedMapAdditionalProperties(value=self._additional_properties(schema))
        if variant is d.TypedObjectAdditionalProperties:
            return d.TypedObjectAdditionalProperties(
                declared_properties=tuple(schema.get("properties", {})),
                value=self._additional_properties(schema),
                name=name,
            )
        if variant is d.UntypedObjectAdditionalProperties:
            return d.UntypedObjectAdditionalProperties(name=name)
        if variant is d.UnknownAdditionalProperties:
            return d.UnknownAdditionalProperties(name=name)
        return variant()  # type: ignore[call-arg]

    def _additional_properties(self, schema: SchemaObject) -> TypeDescriptor:
        return self.resolve(_sub_schema(schema.get("additionalProperties")), ADDITIONAL_PROPERTIES)


def declared_type_of(schema: SchemaObject, context_key: str = SCHEMA) -> str | None:
    """Return the effective OpenAPI type of a schema node.

    OpenAPI 3.1 type lists are reduced to their single non-null member.
    Untyped nodes are objects when they have an object shape (properties,
    additionalProperties or a composition), strings when they enumerate
    values, and otherwise stay untyped.
    """
    raw_type = schema.get("type")
    if isinstance(raw_type, list):
        members = [member for member in raw_type if member != "null"]
        if len(members) != 1:
            raise SchemaResolutionError(
                ", ".join(str(member) for member in raw_type),
                _safe_str(schema.get("format")),
                context_key,
                reason="a type list must contain exactly one non-null type",
            )
        raw_type = members[0]
    if isinstance(raw_type, str):
        return raw_type
    if raw_type is not None:
        raise SchemaResolutionError(str(raw_type), _safe_str(schema.get("format")), context_key)
    if _has_properties(schema) or "additionalProperties" in schema or _is_composition(schema):
        return "object"
    if schema.get("enum"):
        return "string"
    return None


def specialization_of(schema: SchemaObject, context_key: str) -> Specialization:
    """Derive the specialization tag of a schema node.

    The predicates are mutually exclusive by construction of the priority
    order: the first one that holds wins.
    """
    declared_type = declared_type_of(schema, context_key)
    is_object = declared_type == "object"
    has_properties = _has_properties(schema)
    additional = schema.get("additionalProperties")
    typed_additional = isinstance(additional, Mapping) and bool(additional)

    if declared_type == "string" and schema.get("format") == "uuid":
        return Specialization.UUID
    if declared_type == "string" and schema.get("enum"):
        return Specialization.ENUM
    if context_key == ADDITIONAL_PROPERTIES and is_object and not has_properties and typed_additional:
        return Specialization.TYPED_MAP_ADDITIONAL_PROPERTIES
    if is_object and not has_properties and typed_additional:
        return Specialization.MAP
    if is_object and has_properties and typed_additional:
        return Specialization.TYPED_OBJECT_ADDITIONAL_PROPERTIES
    if is_object and not has_properties and additional is True:
        return Specialization.UNTYPED_OBJECT_ADDITIONAL_PROPERTIES
    if is_object and (additional is True or (isinstance(additional, Mapping) and not additional)):
        return Specialization.UNKNOWN_ADDITIONAL_PROPERTIES
    if declared_type is None:
        return Specialization.UNTYPED_OBJECT
    return Specialization.NONE


def match_registry(
    declared_type: str | None,
    specialization: Specialization,
    declared_format: str | None,
    context_key: str,
) -> type[TypeDescriptor]:
    """Pick the registry variant for a classified node.

    Entries sharing (type, specialization) are disambiguated by format: an
    exact format match wins over the generic, format-less entry.

    Raises:
        SchemaResolutionError: If neither an exact nor a generic entry exists
    """
    # Schema-less nodes are untyped objects.
    effective_type = "object" if declared_type is None else declared_type
    candidates = [
        variant
        for variant in TYPE_REGISTRY
        if variant.oas_type == effective_type
        and variant.specialization is specialization
        and (variant.oas_format == declared_format or variant.oas_format is None)
    ]
    exact = [variant for variant in candidates if variant.oas_format is not None]
    generic = [variant for variant in candidates if variant.oas_format is None]
    if len(exact) == 1:
        return exact[0]
    if len(generic) == 1:
        return generic[0]
    raise SchemaResolutionError(declared_type, declared_format, context_key)


def schema_name(schema: SchemaObject) -> str | None:
    """Class name of a component schema, or None for inline schemas."""
    name = schema.get(SCHEMA_NAME_KEY)
    if isinstance(name, str) and name:
        return to_class_name(name) or None
    return None


def is_nullable(schema: SchemaObject | None) -> bool:
    if not schema:
        return False
    raw_type = schema.get("type")
    if isinstance(raw_type, list) and "null" in raw_type:
        return True
    return bool(schema.get("nullable"))


def _has_properties(schema: SchemaObject) -> bool:
    properties = schema.get("properties")
    return isinstance(properties, Mapping) and bool(properties)


def _is_composition(schema: SchemaObject) -> bool:
    return any(schema.get(key) for key in _COMPOSITION_KEYS)


def _sub_schema(value: object) -> SchemaObject:
    if isinstance(value, Mapping):
        return cast(SchemaObject, value)
    return cast(SchemaObject, {})


def _safe_str(value: object) -> str | None:
    return value if isinstance(value, str) else None
