"""Static shapes of the OpenAPI 3.x objects the generator reads.

Only the keys consulted during generation are listed. Every shape is
``total=False``: documents are validated by use, not up front.
"""

from __future__ import annotations

from typing import TypedDict

Scalar = str | int | float | bool | None
Json = Scalar | list["Json"] | dict[str, "Json"]

# Set by the loader on every component schema so that resolved references keep their name.
SCHEMA_NAME_KEY = "x-oasclient-schema-name"

SchemaObject = TypedDict(
    "SchemaObject",
    {
        # "string", "object", ... or a 3.1 list such as ["integer", "null"]
        "type": object,
        "format": str,
        "enum": list[Scalar],
        "default": Json,
        "nullable": bool,
        "description": str,
        "properties": dict[str, "SchemaObject"],
        "required": list[str],
        # True, False, {} or a schema
        "additionalProperties": object,
        "items": "SchemaObject",
        "allOf": list["SchemaObject"],
        "anyOf": list["SchemaObject"],
        "oneOf": list["SchemaObject"],
        "x-oasclient-schema-name": str,
    },
    total=False,
)

MediaTypeObject = TypedDict("MediaTypeObject", {"schema": SchemaObject}, total=False)

ParameterObject = TypedDict(
    "ParameterObject",
    {
        "name": str,
        "in": str,
        "required": bool,
        "description": str,
        "schema": SchemaObject,
        "content": dict[str, MediaTypeObject],
        "style": str,
        "explode": bool,
        "default": Json,
    },
    total=False,
)

RequestBodyObject = TypedDict(
    "RequestBodyObject",
    {"required": bool, "description": str, "content": dict[str, MediaTypeObject]},
    total=False,
)

ResponseObject = TypedDict(
    "ResponseObject",
    {"description": str, "content": dict[str, MediaTypeObject]},
    total=False,
)

OperationObject = TypedDict(
    "OperationObject",
    {
        "operationId": str,
        "summary": str,
        "description": str,
        "parameters": list[ParameterObject],
        "requestBody": RequestBodyObject,
        "responses": dict[str, ResponseObject],
    },
    total=False,
)

# Besides "parameters", a path item maps lower-case verbs to operations.
PathItemObject = dict[str, object]

ComponentsObject = TypedDict("ComponentsObject", {"schemas": dict[str, SchemaObject]}, total=False)

OpenAPIDocument = TypedDict(
    "OpenAPIDocument",
    {
        "openapi": str,
        "info": dict[str, Json],
        "paths": dict[str, PathItemObject],
        "components": ComponentsObject,
    },
    total=False,
)
