"""Pytest fixtures for integration tests.

This module provides fixtures for:
- Generating a client package from the Pet Store spec
- Importing the generated package
- Serving the FastAPI app through an in-process test client
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import ModuleType
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from petstore_server import app, store

from oasclient import GenerationProfile, PackageSpec, build_ir, generate_package, load_openapi

SPEC_PATH = Path(__file__).parent / "openapi.yaml"
PACKAGE_NAME = "petstore_client"
BASE_URL = "http://testserver"


@pytest.fixture(scope="session")
def generated_client_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Generate client code from the OpenAPI spec and return the package directory."""
    output_dir = tmp_path_factory.mktemp("generated")
    ir = build_ir(load_openapi(SPEC_PATH))
    package_spec = PackageSpec(package_name=PACKAGE_NAME, output_dir=output_dir)
    return generate_package(package_spec, ir, GenerationProfile.from_version("3.10"))


@pytest.fixture(scope="session")
def generated_client_module(generated_client_dir: Path) -> Generator[ModuleType, None, None]:
    """Import the generated package from the temporary output directory."""
    parent_dir = str(generated_client_dir.parent)
    sys.path.insert(0, parent_dir)
    try:
        yield importlib.import_module(PACKAGE_NAME)
    finally:
        sys.path.remove(parent_dir)
        for name in [name for name in sys.modules if name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}.")]:
            del sys.modules[name]


@pytest.fixture(autouse=True)
def reset_store() -> None:
    """Reset the pet store before each test."""
    store.reset()


@pytest.fixture
def http_client() -> Generator[TestClient, None, None]:
    with TestClient(app, base_url=BASE_URL) as client:
        yield client
