"""Compilation of operations into request plans.

The steps of a plan always come in the same order: URL template, path
substitutions, query pairs, headers (declared, Accept, caller extras), body
encoding, dispatch.
"""

from __future__ import annotations

import logging

from ..config import CompilerOptions
from ..errors import UnsupportedOperationVerb
from ..ir import OperationIR
from ..naming import function_name, resource_name
from ..schema.descriptors import Map, Text
from ..schema.resolver import SchemaTypeResolver
from .parameters import OperationParameters, extract_parameters, extract_request_body
from .plan import (
    ACCEPT_HEADER,
    AcceptPolicy,
    AdditionalHeaders,
    ArgumentKind,
    BodyEncoding,
    ClientMethodPlan,
    Dispatch,
    FixedAccept,
    HeaderAssembly,
    MethodArgument,
    PathSubstitution,
    PlanStep,
    QueryAssembly,
    RequestBodySpec,
    ResponseSpec,
    SynthesizedAccept,
    UrlTemplate,
)
from .responses import resolve_response

logger = logging.getLogger(__name__)

SUPPORTED_VERBS = ("GET", "HEAD", "PUT", "POST", "PATCH", "DELETE")
BODY_VERBS = frozenset({"PUT", "POST", "PATCH"})

ACCEPT_ARGUMENT = "accept"
ADDITIONAL_HEADERS_ARGUMENT = "additionalHeaders"


def compile_operation(
    operation: OperationIR,
    resolver: SchemaTypeResolver,
    options: CompilerOptions,
) -> ClientMethodPlan:
    """Compile one operation into an immutable request plan.

    Raises:
        UnsupportedOperationVerb: If the verb is not one of SUPPORTED_VERBS
        SchemaResolutionError: If a parameter, body or response schema cannot be classified
    """
    verb = operation.method.upper()
    if verb not in SUPPORTED_VERBS:
        raise UnsupportedOperationVerb(operation.method, operation.path)
    logger.debug("Compiling %s %s", verb, operation.path)

    parameters = extract_parameters(operation, resolver, options)
    body = extract_request_body(operation, resolver, options, reserved_names=parameters.code_names())
    if body is not None and verb not in BODY_VERBS:
        logger.warning("Ignoring request body of %s %s: %s requests carry no body", verb, operation.path, verb)
        body = None
    response = resolve_response(operation, resolver, options)
    accept_policy = _accept_policy(parameters, response)
    accept_argument = _accept_argument_name(parameters)

    steps: list[PlanStep] = [UrlTemplate(operation.path)]
    for param in parameters.path:
        steps.append(PathSubstitution("{" + param.name + "}", param))
    for param in parameters.query:
        steps.append(QueryAssembly(param, param.explode if param.is_array else None))
    for param in parameters.header:
        steps.append(HeaderAssembly(param))
    if accept_policy is AcceptPolicy.SYNTHESIZED and response is not None:
        steps.append(SynthesizedAccept(accept_argument, response.primary_media_type))
    elif accept_policy is AcceptPolicy.FIXED and response is not None:
        steps.append(FixedAccept(response.primary_media_type))
    steps.append(AdditionalHeaders(ADDITIONAL_HEADERS_ARGUMENT))
    if verb in BODY_VERBS:
        media_type = body.media_type if body is not None else options.default_media_type
        steps.append(BodyEncoding(verb, media_type, body))
    steps.append(Dispatch(verb))

    return ClientMethodPlan(
        name=function_name(verb, operation.path),
        verb=verb,
        path_template=operation.path,
        resource=resource_name(operation.path, options.resource_grouping),
        path_params=parameters.path,
        query_params=parameters.query,
        header_params=parameters.header,
        body=body,
        response=response,
        accept_policy=accept_policy,
        arguments=_arguments(parameters, body, response, accept_policy, accept_argument),
        steps=tuple(steps),
        summary=operation.summary,
        description=operation.description,
    )


def compile_operations(
    operations: list[OperationIR],
    resolver: SchemaTypeResolver,
    options: CompilerOptions,
) -> list[ClientMethodPlan]:
    return [compile_operation(operation, resolver, options) for operation in operations]


def _accept_policy(parameters: OperationParameters, response: ResponseSpec | None) -> AcceptPolicy:
    if any(param.name == ACCEPT_HEADER for param in parameters.header):
        return AcceptPolicy.DECLARED
    if response is None:
        return AcceptPolicy.NONE
    if response.has_multiple_media_types:
        return AcceptPolicy.SYNTHESIZED
    return AcceptPolicy.FIXED


def _accept_argument_name(parameters: OperationParameters) -> str:
    if ACCEPT_ARGUMENT in parameters.code_names():
        return f"{ACCEPT_ARGUMENT}Header"
    return ACCEPT_ARGUMENT


def _arguments(
    parameters: OperationParameters,
    body: RequestBodySpec | None,
    response: ResponseSpec | None,
    accept_policy: AcceptPolicy,
    accept_argument: str,
) -> tuple[MethodArgument, ...]:
    """Caller-facing arguments: required ones first, extra headers last.

    Within each group the order is body, declared parameters, Accept.
    """
    arguments: list[MethodArgument] = []
    if body is not None:
        arguments.append(
            MethodArgument(
                name=body.code_name,
                kind=ArgumentKind.BODY,
                descriptor=body.descriptor,
                required=body.required,
                description=body.description,
            )
        )
    for param in parameters.declared:
        arguments.append(
            MethodArgument(
                name=param.code_name,
                kind=ArgumentKind.PARAMETER,
                descriptor=param.descriptor,
                required=param.required,
                has_default=param.has_default,
                default=param.default,
                description=param.description,
            )
        )
    if accept_policy is AcceptPolicy.SYNTHESIZED and response is not None:
        arguments.append(
            MethodArgument(
                name=accept_argument,
                kind=ArgumentKind.ACCEPT,
                descriptor=Text(),
                required=False,
                has_default=True,
                default=response.primary_media_type,
                description=f"One of: {', '.join(response.media_types)}",
            )
        )
    ordered = [argument for argument in arguments if argument.required]
    ordered.extend(argument for argument in arguments if not argument.required)
    ordered.append(
        MethodArgument(
            name=ADDITIONAL_HEADERS_ARGUMENT,
            kind=ArgumentKind.ADDITIONAL_HEADERS,
            descriptor=Map(value=Text()),
            required=False,
            has_default=True,
            description="Extra headers sent with the request, overriding generated ones",
        )
    )
    return tuple(ordered)
