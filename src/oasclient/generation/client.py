"""Rendering of request plans into client modules.

Rendering makes no decisions of its own: every argument, header and step of
a generated method comes from its ``ClientMethodPlan``, so identical plans
always render byte-identical source.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..compiler.plan import (
    ACCEPT_HEADER,
    AdditionalHeaders,
    ArgumentKind,
    BodyEncoding,
    ClientMethodPlan,
    Dispatch,
    FixedAccept,
    HeaderAssembly,
    MethodArgument,
    PathSubstitution,
    QueryAssembly,
    SynthesizedAccept,
    UrlTemplate,
)
from ..naming import client_class_name, to_module_name
from .profile import GenerationProfile
from .type_emitter import TypeEmitter

INDENT = "    "
BODY_INDENT = INDENT * 2


@dataclass(frozen=True)
class ClientModule:
    module_name: str
    class_name: str
    code: str


@dataclass
class _ModuleContext:
    emitter: TypeEmitter
    helpers: set[str]


def group_plans(plans: list[ClientMethodPlan]) -> dict[str, list[ClientMethodPlan]]:
    """Group plans by resource, in order of first appearance."""
    groups: dict[str, list[ClientMethodPlan]] = {}
    for plan in plans:
        groups.setdefault(plan.resource, []).append(plan)
    return groups


def generate_clients(
    plans: list[ClientMethodPlan],
    profile: GenerationProfile,
) -> list[ClientModule]:
    modules: list[ClientModule] = []
    for resource, resource_plans in group_plans(plans).items():
        class_name = client_class_name(resource)
        code = generate_client(class_name, resource_plans, profile)
        modules.append(ClientModule(module_name=to_module_name(class_name), class_name=class_name, code=code))
    return modules


def generate_client(
    class_name: str,
    plans: list[ClientMethodPlan],
    profile: GenerationProfile,
) -> str:
    """Render one module holding a client class with one method per plan."""
    ctx = _ModuleContext(
        emitter=TypeEmitter(profile),
        helpers={"EMPTY_HEADERS", "QueryPairs", "build_request", "execute"},
    )
    class_lines = [
        f"class {class_name}:",
        f"{INDENT}def __init__(self, base_url: str, client: httpx.Client) -> None:",
        f"{BODY_INDENT}self.base_url = base_url.rstrip('/')",
        f"{BODY_INDENT}self.client = client",
    ]
    for plan in plans:
        class_lines.append("")
        class_lines.extend(_emit_method(plan, ctx))

    lines: list[str] = []
    if profile.use_future_annotations:
        lines.extend(["from __future__ import annotations", ""])
    lines.extend(_render_imports(ctx))
    lines.extend(["", ""])
    lines.extend(class_lines)
    return "\n".join(lines).rstrip() + "\n"


def _emit_method(plan: ClientMethodPlan, ctx: _ModuleContext) -> list[str]:
    emitter = ctx.emitter
    if plan.response is not None:
        response_type = emitter.emit(plan.response.descriptor)
    else:
        response_type = "None"
    lines = [f"{INDENT}def {plan.name}(", f"{BODY_INDENT}self,"]
    for argument in plan.arguments:
        lines.append(f"{BODY_INDENT}{_render_argument(argument, ctx)},")
    lines.append(f"{INDENT}) -> ApiResponse[{response_type}]:")
    lines.extend(_render_docstring(plan))
    for argument in plan.arguments:
        if _has_mutable_default(argument):
            lines.append(f"{BODY_INDENT}if {argument.name} is None:")
            lines.append(f"{BODY_INDENT}{INDENT}{argument.name} = {argument.default!r}")
    lines.append(f"{BODY_INDENT}_query: QueryPairs = []")
    lines.append(f"{BODY_INDENT}_headers: dict[str, str] = {{}}")
    lines.extend(_render_steps(plan, response_type, ctx))
    return lines


def _render_argument(argument: MethodArgument, ctx: _ModuleContext) -> str:
    if argument.kind is ArgumentKind.ADDITIONAL_HEADERS:
        ctx.emitter.imports.add("Mapping")
        return f"{argument.name}: Mapping[str, str] = EMPTY_HEADERS"
    annotation = ctx.emitter.emit(argument.descriptor)
    if argument.required:
        return f"{argument.name}: {annotation}"
    if argument.has_default and not _has_mutable_default(argument):
        return f"{argument.name}: {annotation} = {argument.default!r}"
    return f"{argument.name}: {ctx.emitter.optional(annotation)} = None"


def _has_mutable_default(argument: MethodArgument) -> bool:
    # Rendered as None in the signature and filled in by the method body.
    return not argument.required and argument.has_default and isinstance(argument.default, (list, dict))


def _render_docstring(plan: ClientMethodPlan) -> list[str]:
    summary = " ".join((plan.summary or "").split()) or f"{plan.verb} {plan.path_template}"
    lines = [f'{BODY_INDENT}"""{_doc_text(summary)}']
    if plan.description:
        lines.append("")
        for line in plan.description.strip().splitlines():
            lines.append(f"{BODY_INDENT}{_doc_text(line)}".rstrip())
    lines.append("")
    for argument in plan.arguments:
        description = " ".join((argument.description or "").split())
        lines.append(f"{BODY_INDENT}:param {argument.name}: {_doc_text(description)}".rstrip())
    lines.append(f"{BODY_INDENT}:raises ApiException: If the response status is not 2xx")
    lines.append(f'{BODY_INDENT}"""')
    return lines


def _doc_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def _render_steps(plan: ClientMethodPlan, response_type: str, ctx: _ModuleContext) -> list[str]:
    lines: list[str] = []
    media_type: str | None = None
    for step in plan.steps:
        if isinstance(step, UrlTemplate):
            lines.append(f"_url = self.base_url + {step.path!r}")
        elif isinstance(step, PathSubstitution):
            ctx.helpers.add("path_param")
            lines.append(f"_url = path_param(_url, {step.placeholder!r}, {step.parameter.code_name})")
        elif isinstance(step, QueryAssembly):
            ctx.helpers.add("query_param")
            call = f"query_param(_query, {step.parameter.name!r}, {step.parameter.code_name}"
            if step.explode is not None:
                call += f", explode={step.explode!r}"
            lines.append(call + ")")
        elif isinstance(step, HeaderAssembly):
            ctx.helpers.add("header_param")
            lines.append(f"header_param(_headers, {step.parameter.name!r}, {step.parameter.code_name})")
        elif isinstance(step, SynthesizedAccept):
            ctx.helpers.add("header_param")
            lines.append(f"header_param(_headers, {ACCEPT_HEADER!r}, {step.argument})")
        elif isinstance(step, FixedAccept):
            lines.append(f"_headers[{ACCEPT_HEADER!r}] = {step.media_type!r}")
        elif isinstance(step, AdditionalHeaders):
            ctx.helpers.add("merge_headers")
            lines.append(f"merge_headers(_headers, {step.argument})")
        elif isinstance(step, BodyEncoding):
            ctx.helpers.add("encode_body")
            value = step.body.code_name if step.body is not None else "None"
            lines.append(f"_content = encode_body({value}, {step.media_type!r})")
            media_type = step.media_type
        elif isinstance(step, Dispatch):
            call = f"build_request(self.client, {step.verb!r}, _url, _query, _headers"
            if media_type is not None:
                call += f", _content, {media_type!r}"
            lines.append(f"_request = {call})")
            lines.append(f"return execute(self.client, _request, {response_type})")
        else:
            raise TypeError(f"Unsupported plan step: {step!r}")
    return [f"{BODY_INDENT}{line}" for line in lines]


def _render_imports(ctx: _ModuleContext) -> list[str]:
    emitter = ctx.emitter
    typing_names = sorted(name for name in emitter.imports if name != "Mapping")
    lines = [f"import {module}" for module in sorted(emitter.modules)]
    if "Mapping" in emitter.imports:
        lines.append("from collections.abc import Mapping")
    if typing_names:
        lines.append(f"from typing import {', '.join(typing_names)}")
    if lines:
        lines.append("")
    lines.append("import httpx")
    lines.append("")
    api_models = ["ApiResponse"]
    if emitter.uses_json_value:
        api_models.append("JsonValue")
    lines.append(f"from .api_models import {', '.join(api_models)}")
    lines.append(f"from .http_util import {', '.join(sorted(ctx.helpers, key=_import_sort_key))}")
    if emitter.model_refs:
        lines.append(f"from .models import {', '.join(sorted(emitter.model_refs))}")
    return lines


def _import_sort_key(name: str) -> tuple[int, str]:
    # Constants, then classes, then functions.
    if name.isupper():
        return (0, name)
    if name[:1].isupper():
        return (1, name)
    return (2, name)
