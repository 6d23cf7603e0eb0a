"""Identifier normalization for generated code.

Every name that ends up in generated source (method names, argument names,
class names, module names) goes through this module.
"""

from __future__ import annotations

import keyword
import re

from .config import ResourceGrouping

# Every maximal run of characters that are neither letters nor digits.
_DELIMITERS = re.compile(r"[\W_]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Names a generated method body refers to: runtime helpers, modules and
# builtins used in annotations, and the trailing extra-headers argument.
RESERVED_ARGUMENT_NAMES = frozenset(
    {
        "additionalHeaders",
        "build_request",
        "datetime",
        "encode_body",
        "execute",
        "header_param",
        "httpx",
        "merge_headers",
        "path_param",
        "query_param",
        "uuid",
        "bool",
        "bytes",
        "dict",
        "float",
        "int",
        "list",
        "object",
        "str",
    }
)


def to_code_name(raw: str) -> str:
    """Convert any string into a camelCase identifier.

    Non letter-or-digit characters act as delimiters, and the fragments
    in between are joined in camel case.

    Example:
        >>> to_code_name("get /my-resource/path/{param}")
        'getMyResourcePathParam'
        >>> to_code_name("If-None-Match")
        'ifNoneMatch'
    """
    fragments = [fragment for fragment in _DELIMITERS.split(raw) if fragment]
    if not fragments:
        return ""
    joined = "".join(_capitalize(fragment) for fragment in fragments)
    return joined[0].lower() + joined[1:]


def to_class_name(raw: str) -> str:
    """Convert any string into a PascalCase identifier."""
    return _capitalize(to_code_name(raw))


def to_identifier(raw: str, fallback: str = "value") -> str:
    """Like to_code_name, but always a usable Python identifier."""
    name = to_code_name(raw)
    if not name:
        return fallback
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name) or name == "self":
        name = f"{name}_"
    return name


def function_name(verb: str, path: str) -> str:
    """Name the client method of an operation.

    Example:
        >>> function_name("GET", "/my-resource/path/{param}")
        'getMyResourcePathParam'
    """
    return to_identifier(f"{verb.lower()} {path}")


def resource_name(path: str, grouping: ResourceGrouping = ResourceGrouping.PATH) -> str:
    """Name the resource a path belongs to.

    Example:
        >>> resource_name("/example-path-3/{path_param}/subresource")
        'ExamplePath3Subresource'
    """
    segments = [segment for segment in path.split("/") if segment and not segment.startswith("{")]
    if grouping is ResourceGrouping.LEADING_SEGMENT:
        segments = segments[:1]
    name = to_class_name(" ".join(segments))
    if not name:
        return "Root"
    if name[0].isdigit():
        return f"R{name}"
    return name


def client_class_name(resource: str) -> str:
    return f"{resource}Client"


def to_module_name(raw: str) -> str:
    """Convert a class-like name into a snake_case module name.

    Example:
        >>> to_module_name("ExamplePath3SubresourceClient")
        'example_path3_subresource_client'
        >>> to_module_name("HTTPStatusClient")
        'http_status_client'
    """
    snake = _CAMEL_BOUNDARY.sub("_", to_class_name(raw)).lower()
    if not snake:
        return "module"
    if snake[0].isdigit() or keyword.iskeyword(snake):
        return f"_{snake}"
    return snake


def _capitalize(fragment: str) -> str:
    return fragment[:1].upper() + fragment[1:]
