"""Compiled, emission-agnostic request plans.

A ``ClientMethodPlan`` is everything a renderer needs to write one client
method: the caller-facing arguments in signature order and the ordered steps
that build and dispatch the HTTP request. Plans are frozen and compare by
value, so compiling the same operation twice yields equal plans.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from ..openapi import SchemaObject
from ..schema.descriptors import Array, TypeDescriptor

PATH = "path"
QUERY = "query"
HEADER = "header"

ACCEPT_HEADER = "Accept"


@dataclass(frozen=True)
class OperationParameter:
    """A typed, located request parameter.

    Attributes:
        name: The wire name (as declared in the document)
        code_name: The argument name in generated code
        location: One of "path", "query", "header"
        required: Whether the caller must supply a value
        descriptor: The resolved type of the parameter's schema
        explode: Whether array values render as repeated pairs (query only)
        has_default: Whether the schema or parameter declares a default
        default: The declared default value, if any
        description: Documentation for the parameter
    """

    name: str
    code_name: str
    location: str
    required: bool
    descriptor: TypeDescriptor
    explode: bool = True
    has_default: bool = False
    default: object = None
    description: str | None = None

    @property
    def nullable(self) -> bool:
        return not self.required and not self.has_default

    @property
    def is_array(self) -> bool:
        return isinstance(self.descriptor, Array)


@dataclass(frozen=True)
class RequestBodySpec:
    media_type: str
    descriptor: TypeDescriptor
    required: bool
    code_name: str
    description: str | None = None
    schema: SchemaObject | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ResponseSpec:
    """The primary response of an operation.

    Attributes:
        status: The status code key of the selected response
        primary_media_type: First declared media type; its schema types the result
        media_types: Every declared media type, in document order
        descriptor: The decoded return type
    """

    status: str
    primary_media_type: str
    media_types: tuple[str, ...]
    descriptor: TypeDescriptor
    schema: SchemaObject | None = field(default=None, compare=False, repr=False)

    @property
    def has_multiple_media_types(self) -> bool:
        return len(self.media_types) > 1


class AcceptPolicy(enum.Enum):
    # No primary response: no Accept header is sent.
    NONE = "none"
    # The operation declares its own Accept header parameter.
    DECLARED = "declared"
    # Single response media type: a literal Accept header.
    FIXED = "fixed"
    # Several response media types: the caller picks, defaulting to the first.
    SYNTHESIZED = "synthesized"


class ArgumentKind(enum.Enum):
    BODY = "body"
    PARAMETER = "parameter"
    ACCEPT = "accept"
    ADDITIONAL_HEADERS = "additional-headers"


@dataclass(frozen=True)
class MethodArgument:
    """One argument of a generated client method."""

    name: str
    kind: ArgumentKind
    descriptor: TypeDescriptor
    required: bool
    has_default: bool = False
    default: object = None
    description: str | None = None

    @property
    def nullable(self) -> bool:
        return not self.required and not self.has_default


@dataclass(frozen=True)
class UrlTemplate:
    path: str


@dataclass(frozen=True)
class PathSubstitution:
    placeholder: str
    parameter: OperationParameter


@dataclass(frozen=True)
class QueryAssembly:
    parameter: OperationParameter
    # None for scalar parameters, which always render one pair.
    explode: bool | None


@dataclass(frozen=True)
class HeaderAssembly:
    parameter: OperationParameter


@dataclass(frozen=True)
class SynthesizedAccept:
    argument: str
    default: str


@dataclass(frozen=True)
class FixedAccept:
    media_type: str


@dataclass(frozen=True)
class AdditionalHeaders:
    argument: str


@dataclass(frozen=True)
class BodyEncoding:
    verb: str
    media_type: str
    # None when a PUT/POST/PATCH operation declares no body: an empty payload is sent.
    body: RequestBodySpec | None


@dataclass(frozen=True)
class Dispatch:
    verb: str


PlanStep = Union[
    UrlTemplate,
    PathSubstitution,
    QueryAssembly,
    HeaderAssembly,
    SynthesizedAccept,
    FixedAccept,
    AdditionalHeaders,
    BodyEncoding,
    Dispatch,
]


@dataclass(frozen=True)
class ClientMethodPlan:
    name: str
    verb: str
    path_template: str
    resource: str
    path_params: tuple[OperationParameter, ...]
    query_params: tuple[OperationParameter, ...]
    header_params: tuple[OperationParameter, ...]
    body: RequestBodySpec | None
    response: ResponseSpec | None
    accept_policy: AcceptPolicy
    arguments: tuple[MethodArgument, ...]
    steps: tuple[PlanStep, ...]
    summary: str | None = None
    description: str | None = None

    def step_count(self, step_type: type) -> int:
        return sum(1 for step in self.steps if isinstance(step, step_type))
