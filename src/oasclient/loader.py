"""Reading OpenAPI documents and inlining their ``$ref`` targets."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path, PurePosixPath
from typing import cast
from urllib.parse import urldefrag, urlparse

import httpx
import yaml

from .errors import SpecError
from .openapi import SCHEMA_NAME_KEY, OpenAPIDocument

logger = logging.getLogger(__name__)

OpenAPISource = str | PathLike[str] | Mapping[str, object]

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
_COMPONENT_SCHEMAS_POINTER = "/components/schemas/"


def load_openapi(
    source: OpenAPISource,
    base_path: str | PathLike[str] | None = None,
) -> OpenAPIDocument:
    """Read an OpenAPI 3.x document and inline every ``$ref``.

    This is the only I/O of a generation run. All references to one target
    resolve to the same Python object, so the type resolver can key its
    cache on schema identity. Component schemas are tagged with their name
    under ``SCHEMA_NAME_KEY``.

    Args:
        source: A file path, an http(s) URL, or an already parsed mapping
            (which is not modified)
        base_path: Directory that relative file references resolve against;
            defaults to the directory of a file source, else the working
            directory

    Raises:
        SpecError: If the document cannot be read, is not an OpenAPI 3
            document, or holds a reference that cannot be resolved
    """
    default_base = Path(base_path) if base_path is not None else None
    document, base = _read_source(source, default_base)
    version = document.get("openapi")
    if not isinstance(version, str):
        raise SpecError("Missing or invalid 'openapi' field in document")
    if not version.startswith("3."):
        raise SpecError(f"Unsupported OpenAPI version: {version}")
    return RefResolver(document, base).resolve()


@dataclass
class RefResolver:
    """Replaces ``$ref`` nodes by the nodes they point to.

    Supported references are JSON pointers into the document itself
    (``#/components/schemas/Pet``) and relative files with an optional
    pointer (``common.yaml#/Error``). Sibling keys next to a ``$ref`` are
    merged over the target.

    Resolved nodes are memoized by the identity of their source node: a
    node is registered before its children are visited, which keeps
    recursive schemas finite and makes every reference to one target share
    a single object. Only a reference whose target is, transitively, the
    reference itself is an error.

    Example:
        >>> resolved = RefResolver(document, Path("./specs")).resolve()
    """

    document: OpenAPIDocument
    base_path: Path | None
    _memo: dict[int, object] = field(default_factory=dict, init=False)
    _pending_refs: set[int] = field(default_factory=set, init=False)
    _external: dict[Path, OpenAPIDocument] = field(default_factory=dict, init=False)

    def resolve(self) -> OpenAPIDocument:
        """Return a resolved copy of the document."""
        self.document = deepcopy(self.document)
        _tag_component_schemas(self.document)
        return cast(OpenAPIDocument, self._visit(self.document, self.base_path or Path.cwd()))

    def _visit(self, node: object, base: Path) -> object:
        if isinstance(node, list):
            return [self._visit(item, base) for item in node]
        if not isinstance(node, dict):
            return node
        if id(node) in self._memo:
            return self._memo[id(node)]
        if "$ref" in node:
            return self._visit_ref(cast(dict[str, object], node), base)
        resolved: dict[str, object] = {}
        self._memo[id(node)] = resolved
        for key, value in node.items():
            resolved[key] = self._visit(value, base)
        return resolved

    def _visit_ref(self, node: dict[str, object], base: Path) -> object:
        ref = node["$ref"]
        if not isinstance(ref, str):
            raise SpecError("$ref must be a string")
        if id(node) in self._pending_refs:
            raise SpecError(f"Circular $ref: {ref}")
        self._pending_refs.add(id(node))
        try:
            target, target_base = self._lookup(ref, base)
            resolved = self._visit(target, target_base)
        finally:
            self._pending_refs.discard(id(node))

        siblings = {key: value for key, value in node.items() if key != "$ref"}
        if not siblings:
            self._memo[id(node)] = resolved
            return resolved
        if not isinstance(resolved, dict):
            raise SpecError(f"$ref target must be an object when merged: {ref}")
        merged = dict(resolved)
        self._memo[id(node)] = merged
        for key, value in siblings.items():
            merged[key] = self._visit(value, base)
        return merged

    def _lookup(self, ref: str, base: Path) -> tuple[object, Path]:
        """Find the unresolved target of a reference and the base its own references use."""
        location, fragment = urldefrag(ref)
        if fragment and not fragment.startswith("/"):
            raise SpecError(f"Unsupported $ref fragment: {fragment}")
        if location:
            path = (base / location).resolve()
            if path not in self._external:
                logger.debug("Reading referenced document %s", path)
                self._external[path] = _read_file(path)
            document, base = self._external[path], path.parent
        else:
            document = self.document
        target = _resolve_pointer(document, fragment)
        if fragment.startswith(_COMPONENT_SCHEMAS_POINTER) and isinstance(target, dict):
            target.setdefault(SCHEMA_NAME_KEY, fragment.rsplit("/", 1)[-1])
        return target, base


def _tag_component_schemas(document: OpenAPIDocument) -> None:
    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if not isinstance(schemas, dict):
        return
    for name, schema in schemas.items():
        if isinstance(schema, dict):
            schema.setdefault(SCHEMA_NAME_KEY, name)


def _resolve_pointer(document: object, fragment: str) -> object:
    """Follow a JSON pointer (RFC 6901); the empty pointer is the whole document."""
    node = document
    if not fragment:
        return node
    for token in fragment.lstrip("/").split("/"):
        key = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or key not in node:
            raise SpecError(f"Unresolvable $ref pointer: #{fragment}")
        node = node[key]
    return node


def _read_source(source: OpenAPISource, base_path: Path | None) -> tuple[OpenAPIDocument, Path | None]:
    """Parse the root document and pick the base directory of its references."""
    if isinstance(source, Mapping):
        return cast(OpenAPIDocument, dict(source)), base_path
    location = os.fspath(source)
    if _is_url(location):
        logger.debug("Fetching OpenAPI document from %s", location)
        suffix = PurePosixPath(urlparse(location).path).suffix.lower()
        document = _parse(_fetch_url(location), suffix, location)
        return document, base_path
    path = Path(location)
    logger.debug("Reading OpenAPI document from %s", path)
    return _read_file(path), base_path or path.parent


def _read_file(path: Path) -> OpenAPIDocument:
    return _parse(path.read_text(encoding="utf-8"), path.suffix.lower(), str(path))


def _parse(text: str, suffix: str, origin: str) -> OpenAPIDocument:
    """Parse JSON or YAML text; anything but a YAML suffix tries JSON first."""
    if suffix in YAML_SUFFIXES:
        data = _load_yaml(text)
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = _load_yaml(text)
    if not isinstance(data, dict):
        raise SpecError(f"OpenAPI document must be an object: {origin}")
    return cast(OpenAPIDocument, data)


def _load_yaml(text: str) -> object:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid YAML document: {exc}") from exc


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _fetch_url(url: str) -> str:
    """Download a document.

    Raises:
        SpecError: If the request fails or answers with an error status
    """
    try:
        response = httpx.get(url, headers={"User-Agent": "oasclient"}, timeout=30, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise SpecError(f"Failed to fetch URL: {url}") from exc
    return response.text
