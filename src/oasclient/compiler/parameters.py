from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import CompilerOptions
from ..ir import OperationIR, ParameterIR
from ..naming import RESERVED_ARGUMENT_NAMES, to_code_name, to_identifier
from ..openapi import SchemaObject
from ..schema.resolver import SCHEMA, SchemaTypeResolver, schema_name
from .plan import HEADER, PATH, QUERY, OperationParameter, RequestBodySpec

logger = logging.getLogger(__name__)

_SUPPORTED_LOCATIONS = (PATH, QUERY, HEADER)


@dataclass(frozen=True)
class OperationParameters:
    """Parameters of one operation, split by location.

    Attributes:
        declared: Every supported parameter, in declaration order
    """

    path: tuple[OperationParameter, ...]
    query: tuple[OperationParameter, ...]
    header: tuple[OperationParameter, ...]
    declared: tuple[OperationParameter, ...]

    def code_names(self) -> set[str]:
        return {param.code_name for param in self.declared}


def extract_parameters(
    operation: OperationIR,
    resolver: SchemaTypeResolver,
    options: CompilerOptions,
) -> OperationParameters:
    """Resolve the path, query and header parameters of an operation.

    Document declaration order is kept within each location. Path parameters
    are always required; cookie parameters are not supported and skipped.
    """
    declared: list[OperationParameter] = []
    used_names: set[str] = set(RESERVED_ARGUMENT_NAMES)
    for param in operation.parameters:
        if param.location not in _SUPPORTED_LOCATIONS:
            logger.debug(
                "Skipping %s parameter %r of %s %s",
                param.location,
                param.name,
                operation.method.upper(),
                operation.path,
            )
            continue
        declared.append(_build_parameter(param, resolver, used_names))
    return OperationParameters(
        path=tuple(param for param in declared if param.location == PATH),
        query=tuple(param for param in declared if param.location == QUERY),
        header=tuple(param for param in declared if param.location == HEADER),
        declared=tuple(declared),
    )


def extract_request_body(
    operation: OperationIR,
    resolver: SchemaTypeResolver,
    options: CompilerOptions,
    reserved_names: set[str] | None = None,
) -> RequestBodySpec | None:
    """Resolve the request body of an operation.

    Only the first declared media type is used; further media types are
    ignored. A body without any media type is treated as absent.
    """
    request_body = operation.request_body
    if request_body is None or not request_body.content:
        return None
    primary = request_body.content[0]
    if len(request_body.content) > 1:
        logger.debug(
            "Using %s request body of %s %s, ignoring %d other media types",
            primary.content_type,
            operation.method.upper(),
            operation.path,
            len(request_body.content) - 1,
        )
    descriptor = resolver.resolve(primary.schema, SCHEMA)
    return RequestBodySpec(
        media_type=primary.content_type,
        descriptor=descriptor,
        required=request_body.required,
        code_name=_body_name(primary.schema, reserved_names or set()),
        description=request_body.description,
        schema=primary.schema,
    )


def _build_parameter(
    param: ParameterIR,
    resolver: SchemaTypeResolver,
    used_names: set[str],
) -> OperationParameter:
    schema = param.schema
    if schema is None and param.content:
        schema = param.content[0].schema
    descriptor = resolver.resolve(schema, SCHEMA)
    default = param.default
    if default is None and schema is not None:
        default = schema.get("default")
    code_name = _unique_name(to_identifier(param.name, fallback=param.location), param.location, used_names)
    return OperationParameter(
        name=param.name,
        code_name=code_name,
        location=param.location,
        required=True if param.location == PATH else param.required,
        descriptor=descriptor,
        # form style defaults to explode=true
        explode=True if param.explode is None else param.explode,
        has_default=default is not None,
        default=default,
        description=param.description,
    )


def _unique_name(name: str, location: str, used_names: set[str]) -> str:
    candidate = name
    if candidate in used_names:
        candidate = f"{name}{location.title()}"
    index = 2
    while candidate in used_names:
        candidate = f"{name}{location.title()}{index}"
        index += 1
    used_names.add(candidate)
    return candidate


def _body_name(schema: SchemaObject | None, reserved_names: set[str]) -> str:
    name = schema_name(schema) if schema else None
    candidate = to_identifier(to_code_name(name), fallback="body") if name else "body"
    taken = reserved_names | RESERVED_ARGUMENT_NAMES
    if candidate not in taken:
        return candidate
    candidate = "requestBody"
    index = 2
    while candidate in taken:
        candidate = f"requestBody{index}"
        index += 1
    return candidate
