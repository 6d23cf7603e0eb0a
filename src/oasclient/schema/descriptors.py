"""Type descriptors: the closed set of semantic types a schema can resolve to.

Each variant is a frozen dataclass that declares the registry key it is
matched by: the declared OpenAPI type, the declared format (``None`` for the
generic entry of a type) and a structural specialization. ``TYPE_REGISTRY``
lists every variant exactly once; it is checked when this module is imported.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Union


class Specialization(enum.Enum):
    """Secondary classification of schemas sharing the same declared type."""

    NONE = "none"
    UUID = "uuid"
    ENUM = "enum"
    TYPED_MAP_ADDITIONAL_PROPERTIES = "typed-map-additional-properties"
    MAP = "map"
    TYPED_OBJECT_ADDITIONAL_PROPERTIES = "typed-object-additional-properties"
    UNTYPED_OBJECT_ADDITIONAL_PROPERTIES = "untyped-object-additional-properties"
    UNKNOWN_ADDITIONAL_PROPERTIES = "unknown-additional-properties"
    UNTYPED_OBJECT = "untyped-object"


@dataclass(frozen=True)
class Boolean:
    oas_type: ClassVar[str] = "boolean"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Text:
    oas_type: ClassVar[str] = "string"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Date:
    oas_type: ClassVar[str] = "string"
    oas_format: ClassVar[str | None] = "date"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class DateTime:
    oas_type: ClassVar[str] = "string"
    oas_format: ClassVar[str | None] = "date-time"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Uuid:
    oas_type: ClassVar[str] = "string"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.UUID


@dataclass(frozen=True)
class Enum:
    """A string enumeration.

    Attributes:
        values: The wire values, in document order
        name: Component name, when the enum is a named schema
    """

    values: tuple[str, ...]
    name: str | None = None

    oas_type: ClassVar[str] = "string"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.ENUM


@dataclass(frozen=True)
class Integer32:
    oas_type: ClassVar[str] = "integer"
    oas_format: ClassVar[str | None] = "int32"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Integer64:
    oas_type: ClassVar[str] = "integer"
    oas_format: ClassVar[str | None] = "int64"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class IntegerArbitrary:
    oas_type: ClassVar[str] = "integer"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Float:
    oas_type: ClassVar[str] = "number"
    oas_format: ClassVar[str | None] = "float"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Double:
    oas_type: ClassVar[str] = "number"
    oas_format: ClassVar[str | None] = "double"
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class NumberArbitrary:
    oas_type: ClassVar[str] = "number"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Object:
    """An object schema, including oneOf/anyOf/allOf compositions.

    Properties are not resolved here; the model emitter resolves them on
    demand, which keeps recursive models finite.

    Attributes:
        name: Component name, when the object is a named schema
        composite: Whether the schema is a oneOf/anyOf/allOf composition
    """

    name: str | None = None
    composite: bool = False

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class Array:
    element: TypeDescriptor

    oas_type: ClassVar[str] = "array"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.NONE


@dataclass(frozen=True)
class UntypedObject:
    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.UNTYPED_OBJECT


@dataclass(frozen=True)
class Map:
    value: TypeDescriptor
    name: str | None = None

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.MAP


@dataclass(frozen=True)
class TypedObjectAdditionalProperties:
    declared_properties: tuple[str, ...]
    value: TypeDescriptor
    name: str | None = None

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.TYPED_OBJECT_ADDITIONAL_PROPERTIES


@dataclass(frozen=True)
class TypedMapAdditionalProperties:
    value: TypeDescriptor

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.TYPED_MAP_ADDITIONAL_PROPERTIES


@dataclass(frozen=True)
class UntypedObjectAdditionalProperties:
    name: str | None = None

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.UNTYPED_OBJECT_ADDITIONAL_PROPERTIES


@dataclass(frozen=True)
class UnknownAdditionalProperties:
    name: str | None = None

    oas_type: ClassVar[str] = "object"
    oas_format: ClassVar[str | None] = None
    specialization: ClassVar[Specialization] = Specialization.UNKNOWN_ADDITIONAL_PROPERTIES


TypeDescriptor = Union[
    Boolean,
    Text,
    Date,
    DateTime,
    Uuid,
    Enum,
    Integer32,
    Integer64,
    IntegerArbitrary,
    Float,
    Double,
    NumberArbitrary,
    Object,
    Array,
    UntypedObject,
    Map,
    TypedObjectAdditionalProperties,
    TypedMapAdditionalProperties,
    UntypedObjectAdditionalProperties,
    UnknownAdditionalProperties,
]

TYPE_REGISTRY: tuple[type[TypeDescriptor], ...] = (
    Boolean,
    Text,
    Date,
    DateTime,
    Uuid,
    Enum,
    Integer32,
    Integer64,
    IntegerArbitrary,
    Float,
    Double,
    NumberArbitrary,
    Object,
    Array,
    UntypedObject,
    Map,
    TypedObjectAdditionalProperties,
    TypedMapAdditionalProperties,
    UntypedObjectAdditionalProperties,
    UnknownAdditionalProperties,
)

RegistryKey = tuple[str, Specialization, "str | None"]


def registry_key(variant: type[TypeDescriptor]) -> RegistryKey:
    return (variant.oas_type, variant.specialization, variant.oas_format)


def _check_registry() -> None:
    variants = set(TypeDescriptor.__args__)  # type: ignore[attr-defined]
    registered = set(TYPE_REGISTRY)
    if variants != registered or len(registered) != len(TYPE_REGISTRY):
        raise RuntimeError("TYPE_REGISTRY must list every type descriptor variant exactly once")
    keys = [registry_key(variant) for variant in TYPE_REGISTRY]
    if len(set(keys)) != len(keys):
        raise RuntimeError("TYPE_REGISTRY entries must have unique (type, specialization, format) keys")


_check_registry()
