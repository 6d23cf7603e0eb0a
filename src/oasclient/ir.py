"""Flattened view of a resolved OpenAPI document.

The IR keeps exactly what the operation compiler and the model emitter
consume: component schemas, and one ``OperationIR`` per (path, verb) pair
with path-level parameters already merged in. Every list keeps the key order
of the source document, because "first declared" decides the primary
response, the request body media type and the Accept default.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import cast

from .openapi import (
    MediaTypeObject,
    OpenAPIDocument,
    OperationObject,
    ParameterObject,
    PathItemObject,
    RequestBodyObject,
    ResponseObject,
    SchemaObject,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass(frozen=True)
class SchemaIR:
    """A component schema under its ``components/schemas`` key."""

    name: str
    schema: SchemaObject


@dataclass(frozen=True)
class MediaTypeIR:
    content_type: str
    schema: SchemaObject | None


@dataclass(frozen=True)
class ResponseIR:
    """One entry of an operation's ``responses`` map.

    Attributes:
        status: The status key as written ("200", "2XX", "default")
        description: Documentation of the response
        content: Declared media types; empty for body-less responses
    """

    status: str
    description: str | None
    content: list[MediaTypeIR]


@dataclass(frozen=True)
class RequestBodyIR:
    required: bool
    description: str | None
    content: list[MediaTypeIR]


@dataclass(frozen=True)
class ParameterIR:
    """A declared parameter, after path-level and operation-level merging.

    Attributes:
        name: The wire name
        location: "path", "query", "header" or "cookie"
        required: The declared ``required`` flag
        schema: The ``schema`` of the parameter, if any
        content: The ``content`` map, used when no schema is declared
        style: The declared serialization style
        explode: The declared ``explode`` flag; None when absent
        default: A parameter-level default; schema defaults live in ``schema``
        description: Documentation of the parameter
    """

    name: str
    location: str
    required: bool
    schema: SchemaObject | None
    content: list[MediaTypeIR]
    style: str | None
    explode: bool | None
    default: object | None
    description: str | None = None


@dataclass(frozen=True)
class OperationIR:
    """One operation: a lower-case verb on a path template."""

    method: str
    path: str
    operation_id: str | None
    parameters: list[ParameterIR]
    request_body: RequestBodyIR | None
    responses: list[ResponseIR]
    summary: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class IRDocument:
    schemas: list[SchemaIR]
    operations: list[OperationIR]


def build_ir(document: OpenAPIDocument) -> IRDocument:
    """Flatten a resolved document (no ``$ref`` left) into its IR.

    Operations are listed path by path, and within a path in the order the
    path item declares its verbs. Keys that are not verbs, such as
    ``summary`` or ``x-`` extensions, are skipped.
    """
    components = document.get("components", {})
    schemas = [SchemaIR(name=name, schema=schema) for name, schema in components.get("schemas", {}).items()]
    operations: list[OperationIR] = []
    for path, item in document.get("paths", {}).items():
        operations.extend(_path_operations(path, item))
    return IRDocument(schemas=schemas, operations=operations)


def _path_operations(path: str, item: PathItemObject) -> Iterator[OperationIR]:
    shared = cast(list[ParameterObject], item.get("parameters", []))
    for method, value in item.items():
        if method not in HTTP_METHODS or not isinstance(value, Mapping):
            continue
        operation = cast(OperationObject, value)
        yield OperationIR(
            method=method,
            path=path,
            operation_id=operation.get("operationId"),
            parameters=_merge_parameters(shared, operation.get("parameters", [])),
            request_body=_request_body(operation.get("requestBody")),
            responses=[_response(str(status), response) for status, response in operation.get("responses", {}).items()],
            summary=operation.get("summary"),
            description=operation.get("description"),
        )


def _merge_parameters(shared: list[ParameterObject], own: list[ParameterObject]) -> list[ParameterIR]:
    """Merge path-level parameters with the operation's own.

    Parameters are identified by (name, location). An operation parameter
    replaces the path-level one it shadows, in the shadowed one's position.
    """
    merged: dict[tuple[str, str], ParameterObject] = {}
    for param in [*shared, *own]:
        key = (param.get("name"), param.get("in"))
        if key[0] and key[1]:
            merged[cast(tuple[str, str], key)] = param
    return [_parameter(param) for param in merged.values()]


def _parameter(param: ParameterObject) -> ParameterIR:
    return ParameterIR(
        name=param.get("name", ""),
        location=param.get("in", ""),
        required=bool(param.get("required", False)),
        schema=param.get("schema"),
        content=_media_types(param.get("content", {})),
        style=param.get("style"),
        explode=param.get("explode"),
        default=param.get("default"),
        description=param.get("description"),
    )


def _request_body(body: RequestBodyObject | None) -> RequestBodyIR | None:
    if not body:
        return None
    return RequestBodyIR(
        required=bool(body.get("required", False)),
        description=body.get("description"),
        content=_media_types(body.get("content", {})),
    )


def _response(status: str, response: ResponseObject) -> ResponseIR:
    return ResponseIR(
        status=status,
        description=response.get("description"),
        content=_media_types(response.get("content", {})),
    )


def _media_types(content: dict[str, MediaTypeObject]) -> list[MediaTypeIR]:
    return [MediaTypeIR(content_type=name, schema=media.get("schema")) for name, media in content.items()]
