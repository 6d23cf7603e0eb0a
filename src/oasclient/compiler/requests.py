"""Execution of request plans without generating code.

``render_request`` walks the steps of a plan with the same runtime helpers
generated clients call, so a plan can be checked (or used directly) without
rendering and importing a client module.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from ..templates.http_util import (
    QueryPairs,
    build_request,
    encode_body,
    header_param,
    merge_headers,
    path_param,
    query_param,
)
from .plan import (
    ACCEPT_HEADER,
    AdditionalHeaders,
    BodyEncoding,
    ClientMethodPlan,
    Dispatch,
    FixedAccept,
    HeaderAssembly,
    PathSubstitution,
    QueryAssembly,
    SynthesizedAccept,
    UrlTemplate,
)


def bind_arguments(plan: ClientMethodPlan, values: Mapping[str, object]) -> dict[str, object]:
    """Bind caller values to the arguments of a plan, applying defaults.

    Raises:
        TypeError: If a required argument is missing or an unknown one is given
    """
    names = {argument.name for argument in plan.arguments}
    unknown = sorted(set(values) - names)
    if unknown:
        raise TypeError(f"{plan.name}() got unexpected arguments: {', '.join(unknown)}")
    missing = [argument.name for argument in plan.arguments if argument.required and argument.name not in values]
    if missing:
        raise TypeError(f"{plan.name}() missing required arguments: {', '.join(missing)}")
    bound: dict[str, object] = {}
    for argument in plan.arguments:
        if argument.name in values:
            bound[argument.name] = values[argument.name]
        elif argument.has_default:
            bound[argument.name] = argument.default
        else:
            bound[argument.name] = None
    return bound


def render_request(
    plan: ClientMethodPlan,
    base_url: str,
    values: Mapping[str, object],
    client: httpx.Client | None = None,
) -> httpx.Request:
    """Build the HTTP request a generated method would send.

    Args:
        plan: The compiled plan
        base_url: Prefix of every request URL
        values: Caller arguments keyed by their argument name
        client: If given, the request is built by this client (base headers, auth, ...)

    Example:
        >>> request = render_request(plan, "https://api.example.com", {"id": "42"})
        >>> str(request.url)
        'https://api.example.com/a/42/b'
    """
    bound = bind_arguments(plan, values)
    url = base_url
    query: QueryPairs = []
    headers: dict[str, str] = {}
    content: bytes | None = None
    media_type: str | None = None
    request: httpx.Request | None = None
    for step in plan.steps:
        if isinstance(step, UrlTemplate):
            url = base_url + step.path
        elif isinstance(step, PathSubstitution):
            url = path_param(url, step.placeholder, bound[step.parameter.code_name])
        elif isinstance(step, QueryAssembly):
            explode = True if step.explode is None else step.explode
            query_param(query, step.parameter.name, bound[step.parameter.code_name], explode)
        elif isinstance(step, HeaderAssembly):
            header_param(headers, step.parameter.name, bound[step.parameter.code_name])
        elif isinstance(step, SynthesizedAccept):
            header_param(headers, ACCEPT_HEADER, bound[step.argument])
        elif isinstance(step, FixedAccept):
            headers[ACCEPT_HEADER] = step.media_type
        elif isinstance(step, AdditionalHeaders):
            extra = bound[step.argument]
            if extra:
                merge_headers(headers, extra)  # type: ignore[arg-type]
        elif isinstance(step, BodyEncoding):
            value = bound[step.body.code_name] if step.body is not None else None
            content = encode_body(value, step.media_type)
            media_type = step.media_type
        elif isinstance(step, Dispatch):
            request = build_request(client, step.verb, url, query, headers, content, media_type)
    if request is None:
        raise ValueError(f"Plan {plan.name} has no dispatch step")
    return request
