from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .compiler import compile_operations
from .config import CompilerOptions
from .generation import ClientModule, GenerationProfile, generate_clients, generate_models, load_assets
from .ir import IRDocument
from .schema import SchemaTypeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    package_name: str
    output_dir: Path


def render_package(
    ir: IRDocument,
    profile: GenerationProfile,
    options: CompilerOptions | None = None,
) -> dict[str, str]:
    """Render every file of a generated package, keyed by file name.

    All operations are compiled before anything is rendered, so an
    unsupported operation or schema fails the whole package.

    Raises:
        SchemaResolutionError: If a schema cannot be classified
        UnsupportedOperationVerb: If an operation uses an unsupported verb
    """
    options = options or CompilerOptions()
    resolver = SchemaTypeResolver(options)
    plans = compile_operations(ir.operations, resolver, options)
    models = generate_models(ir.schemas, resolver, profile)
    clients = generate_clients(plans, profile)

    files: dict[str, str] = {"models.py": models.code}
    for client in clients:
        files[f"{client.module_name}.py"] = client.code
    files.update(load_assets())
    files["__init__.py"] = _init_content(clients)
    return files


def generate_package(
    spec: PackageSpec,
    ir: IRDocument,
    profile: GenerationProfile,
    options: CompilerOptions | None = None,
) -> Path:
    files = render_package(ir, profile, options)
    package_dir = spec.output_dir / spec.package_name
    package_dir.mkdir(parents=True, exist_ok=True)
    for name, code in files.items():
        (package_dir / name).write_text(code, encoding="utf-8")
    logger.info("Wrote %d files to %s", len(files), package_dir)
    return package_dir


def _init_content(clients: list[ClientModule]) -> str:
    lines = [
        "from .api_models import ApiException, ApiResponse, JsonValue",
        "from .logging_interceptor import logging_hooks",
        "from .models import *  # noqa: F403",
        "from .oauth import BearerAuth, OAuth2ClientCredentials",
    ]
    for client in sorted(clients, key=lambda client: client.module_name):
        lines.append(f"from .{client.module_name} import {client.class_name}")
    exported = [
        "ApiException",
        "ApiResponse",
        "BearerAuth",
        "JsonValue",
        "OAuth2ClientCredentials",
        "logging_hooks",
        *(client.class_name for client in clients),
    ]
    lines.append("")
    lines.append("__all__ = [")
    for name in sorted(exported):
        lines.append(f"    {name!r},")
    lines.append("]")
    lines.append("")
    return "\n".join(lines)
