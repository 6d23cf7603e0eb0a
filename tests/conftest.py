from __future__ import annotations

from typing import Callable

import pytest

from oasclient.config import CompilerOptions
from oasclient.ir import IRDocument, OperationIR, build_ir
from oasclient.loader import load_openapi
from oasclient.schema import SchemaTypeResolver

LoadDocument = Callable[..., IRDocument]
LoadOperation = Callable[..., OperationIR]


@pytest.fixture()
def minimal_openapi_document() -> dict[str, object]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Example", "version": "1.0.0"},
        "paths": {},
    }


@pytest.fixture()
def options() -> CompilerOptions:
    return CompilerOptions()


@pytest.fixture()
def resolver(options: CompilerOptions) -> SchemaTypeResolver:
    return SchemaTypeResolver(options)


@pytest.fixture()
def load_document(minimal_openapi_document: dict[str, object]) -> LoadDocument:
    """Load a document built from the minimal one, with top-level keys overridden."""

    def load(**document: object) -> IRDocument:
        raw = dict(minimal_openapi_document)
        raw.update(document)
        return build_ir(load_openapi(raw))

    return load


@pytest.fixture()
def load_operation(load_document: LoadDocument) -> LoadOperation:
    """Load a one-operation document and return the IR of that operation."""

    def load(path: str, method: str, operation: dict[str, object], **document: object) -> OperationIR:
        return load_document(paths={path: {method: operation}}, **document).operations[0]

    return load
