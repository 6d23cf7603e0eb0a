from .builder import SUPPORTED_VERBS, compile_operation, compile_operations
from .parameters import OperationParameters, extract_parameters, extract_request_body
from .plan import (
    AcceptPolicy,
    ArgumentKind,
    ClientMethodPlan,
    MethodArgument,
    OperationParameter,
    PlanStep,
    RequestBodySpec,
    ResponseSpec,
)
from .requests import bind_arguments, render_request
from .responses import primary_response, resolve_response

__all__ = [
    "SUPPORTED_VERBS",
    "AcceptPolicy",
    "ArgumentKind",
    "ClientMethodPlan",
    "MethodArgument",
    "OperationParameter",
    "OperationParameters",
    "PlanStep",
    "RequestBodySpec",
    "ResponseSpec",
    "bind_arguments",
    "compile_operation",
    "compile_operations",
    "extract_parameters",
    "extract_request_body",
    "primary_response",
    "render_request",
    "resolve_response",
]
