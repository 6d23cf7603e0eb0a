from .compiler import ClientMethodPlan, compile_operation, compile_operations, render_request
from .config import CompilerOptions, ResourceGrouping
from .errors import OasClientError, SchemaResolutionError, SpecError, UnsupportedOperationVerb
from .generation import (
    GenerationProfile,
    TypeEmitter,
    generate_clients,
    generate_models,
)
from .generator import PackageSpec, generate_package, render_package
from .ir import IRDocument, build_ir
from .loader import load_openapi
from .schema import SchemaTypeResolver

__all__ = [
    "ClientMethodPlan",
    "CompilerOptions",
    "GenerationProfile",
    "IRDocument",
    "OasClientError",
    "PackageSpec",
    "ResourceGrouping",
    "SchemaResolutionError",
    "SchemaTypeResolver",
    "SpecError",
    "TypeEmitter",
    "UnsupportedOperationVerb",
    "build_ir",
    "compile_operation",
    "compile_operations",
    "generate_clients",
    "generate_models",
    "generate_package",
    "load_openapi",
    "render_package",
    "render_request",
]
