from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import cast

from ..ir import SchemaIR
from ..naming import to_class_name
from ..openapi import SchemaObject
from ..schema import descriptors as d
from ..schema.descriptors import TypeDescriptor
from ..schema.resolver import COMPONENT, PROPERTIES, SCHEMA, SchemaTypeResolver, is_nullable
from .profile import GenerationProfile
from .type_emitter import JSON_VALUE, TypeEmitter

logger = logging.getLogger(__name__)

_MEMBER_DELIMITERS = re.compile(r"[^0-9A-Za-z]+")


@dataclass
class ModelOutput:
    code: str
    names: list[str] = field(default_factory=list)


@dataclass
class _Alias:
    name: str
    annotation: str
    refs: frozenset[str]


def generate_models(
    schemas: list[SchemaIR],
    resolver: SchemaTypeResolver,
    profile: GenerationProfile,
) -> ModelOutput:
    """Render ``models.py`` for the component schemas of a document.

    Enums are emitted first, then TypedDicts (whose references are quoted),
    then aliases ordered so that every alias follows the aliases it uses.
    """
    emitter = TypeEmitter(profile)
    enum_blocks: list[list[str]] = []
    typed_dict_blocks: list[list[str]] = []
    aliases: dict[str, _Alias] = {}
    names: list[str] = []

    for schema_ir in schemas:
        name = to_class_name(schema_ir.name)
        schema = schema_ir.schema
        if not name or name in names:
            logger.warning("Skipping component schema %r: duplicate or empty class name", schema_ir.name)
            continue
        names.append(name)
        descriptor = resolver.resolve(schema, COMPONENT)
        if isinstance(descriptor, d.Enum) and descriptor.values:
            enum_blocks.append(_emit_enum(name, descriptor))
            continue
        object_schema = _object_shape(schema, descriptor)
        if object_schema is not None:
            typed_dict_blocks.append(_emit_typed_dict(name, object_schema, resolver, emitter))
            continue
        aliases[name] = _build_alias(name, schema, descriptor, resolver, emitter)

    body: list[str] = []
    for block in enum_blocks + typed_dict_blocks:
        body.extend(block)
    for alias in _order_aliases(aliases, emitter):
        body.extend([f"{alias.name} = {alias.annotation}", ""])

    lines: list[str] = []
    if profile.use_future_annotations:
        lines.append("from __future__ import annotations")
    imports = _render_imports(emitter, enums=bool(enum_blocks), typed_dicts=bool(typed_dict_blocks))
    if imports:
        if lines:
            lines.append("")
        lines.extend(imports)
    if body:
        lines.extend(["", ""])
        lines.extend(body)
    return ModelOutput(code="\n".join(lines).rstrip() + "\n", names=names)


def _object_shape(schema: SchemaObject, descriptor: TypeDescriptor) -> SchemaObject | None:
    """The schema to render as a TypedDict, or None for aliases."""
    if isinstance(descriptor, d.Object) and descriptor.composite:
        all_of = schema.get("allOf")
        if all_of and isinstance(all_of, list):
            return _merge_all_of(all_of)
        return None
    if isinstance(
        descriptor,
        (d.Object, d.TypedObjectAdditionalProperties, d.UnknownAdditionalProperties),
    ):
        properties = schema.get("properties")
        if isinstance(properties, Mapping) and properties:
            return schema
    return None


def _emit_enum(name: str, descriptor: d.Enum) -> list[str]:
    lines = [f"class {name}(str, Enum):"]
    used: set[str] = set()
    for value in descriptor.values:
        member = _enum_member_name(value, used)
        lines.append(f"    {member} = {value!r}")
    lines.extend(["", ""])
    return lines


def _enum_member_name(value: str, used: set[str]) -> str:
    member = _MEMBER_DELIMITERS.sub("_", re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", value)).strip("_").upper()
    if not member or member[0].isdigit():
        member = f"VALUE_{member}".rstrip("_")
    candidate = member
    index = 2
    while candidate in used:
        candidate = f"{member}_{index}"
        index += 1
    used.add(candidate)
    return candidate


def _emit_typed_dict(
    name: str,
    schema: SchemaObject,
    resolver: SchemaTypeResolver,
    emitter: TypeEmitter,
) -> list[str]:
    properties = cast(dict[str, SchemaObject], schema.get("properties", {}))
    required_set = set(schema.get("required", []))
    for prop_name, prop_schema in properties.items():
        if isinstance(prop_schema, dict) and "default" in prop_schema:
            required_set.discard(prop_name)

    closed = schema.get("additionalProperties") is False

    lines = [f"{name} = TypedDict(", f"    {name!r},", "    {"]
    lines.extend(_typed_dict_items(properties, required_set, resolver, emitter))
    if closed and len(required_set) == len(properties):
        lines.extend(["    },", "    total=True,", ")", "", ""])
    else:
        lines.extend(["    },", "    total=False,", ")", "", ""])
    return lines


def _typed_dict_items(
    properties: dict[str, SchemaObject],
    required_set: set[str],
    resolver: SchemaTypeResolver,
    emitter: TypeEmitter,
) -> list[str]:
    items: list[str] = []
    for prop_name, prop_schema in properties.items():
        prop_type, refs = emitter.emit_with_refs(resolver.resolve(prop_schema, PROPERTIES))
        if is_nullable(prop_schema):
            prop_type = emitter.optional(prop_type)
        # Model names are resolved lazily, from this module's namespace.
        if refs:
            prop_type = repr(prop_type)
        if prop_name in required_set:
            prop_type = f"Required[{prop_type}]"
        items.append(f"        {prop_name!r}: {prop_type},")
    return items


def _build_alias(
    name: str,
    schema: SchemaObject,
    descriptor: TypeDescriptor,
    resolver: SchemaTypeResolver,
    emitter: TypeEmitter,
) -> _Alias:
    if isinstance(descriptor, d.Object) and descriptor.composite:
        members = schema.get("oneOf") or schema.get("anyOf") or []
        parts: list[str] = []
        refs: set[str] = set()
        for member in members:
            annotation, member_refs = emitter.emit_with_refs(resolver.resolve(member, SCHEMA))
            parts.append(annotation)
            refs.update(member_refs)
        annotation = emitter.union(parts)
    else:
        annotation, found = emitter.emit_with_refs(_anonymous(descriptor))
        refs = set(found)
    if is_nullable(schema):
        annotation = emitter.optional(annotation)
    return _Alias(name=name, annotation=annotation, refs=frozenset(refs - {name}))


def _anonymous(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Drop the component name, so an alias renders its structure instead of itself."""
    if getattr(descriptor, "name", None) is not None:
        return dataclasses.replace(descriptor, name=None)  # type: ignore[call-arg]
    return descriptor


def _order_aliases(aliases: dict[str, _Alias], emitter: TypeEmitter) -> list[_Alias]:
    """Order aliases so that each one follows the aliases it references.

    An alias that closes a reference cycle cannot be evaluated at import
    time and falls back to ``JsonValue``.
    """
    ordered: list[_Alias] = []
    visiting: set[str] = set()
    done: set[str] = set()

    def visit(name: str) -> None:
        visiting.add(name)
        alias = aliases[name]
        for ref in sorted(alias.refs):
            if ref not in aliases or ref in done:
                continue
            if ref in visiting:
                logger.warning("Alias %s is part of a reference cycle, typing it as %s", name, JSON_VALUE)
                emitter.uses_json_value = True
                alias = _Alias(name=name, annotation=JSON_VALUE, refs=frozenset())
                aliases[name] = alias
                break
            visit(ref)
        visiting.discard(name)
        done.add(name)
        ordered.append(alias)

    for name in list(aliases):
        if name not in done:
            visit(name)
    return ordered


def _render_imports(emitter: TypeEmitter, enums: bool, typed_dicts: bool) -> list[str]:
    lines = [f"import {module}" for module in sorted(emitter.modules)]
    if enums:
        lines.append("from enum import Enum")
    if emitter.imports:
        lines.append(f"from typing import {', '.join(sorted(emitter.imports))}")
    if typed_dicts:
        source = "typing_extensions" if emitter.profile.use_typing_extensions else "typing"
        lines.append(f"from {source} import Required, TypedDict")
    if emitter.uses_json_value:
        if lines:
            lines.append("")
        lines.append("from pydantic import JsonValue")
    return lines


def _merge_all_of(schemas: list[SchemaObject]) -> SchemaObject | None:
    """Merge allOf schemas into a single object schema.

    Properties and required names of all members are combined. Any member
    that is not an object schema makes the merge impossible.

    Returns:
        Merged schema, or None if merging is not possible
    """
    merged_properties: dict[str, SchemaObject] = {}
    merged_required: list[str] = []
    additional_properties: object | None = None

    for schema in schemas:
        if not isinstance(schema, dict):
            return None
        if schema.get("type") not in ("object", None):
            return None

        properties = schema.get("properties")
        if isinstance(properties, dict):
            merged_properties.update(properties)

        required = schema.get("required")
        if isinstance(required, list):
            merged_required.extend(name for name in required if name not in merged_required)

        # The most restrictive additionalProperties wins.
        schema_additional = schema.get("additionalProperties")
        if schema_additional is False:
            additional_properties = False
        elif additional_properties is None and schema_additional is not None:
            additional_properties = schema_additional

    if not merged_properties:
        return None

    result: SchemaObject = {
        "type": "object",
        "properties": merged_properties,
    }
    if merged_required:
        result["required"] = merged_required
    if additional_properties is not None:
        result["additionalProperties"] = additional_properties
    return result
