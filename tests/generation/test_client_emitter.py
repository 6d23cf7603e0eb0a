from __future__ import annotations

import ast
from typing import Callable

import pytest

from oasclient.compiler import ClientMethodPlan, compile_operations
from oasclient.config import CompilerOptions
from oasclient.generation import ClientModule, GenerationProfile, generate_clients, group_plans
from oasclient.ir import IRDocument
from oasclient.schema import SchemaTypeResolver

LoadDocument = Callable[..., IRDocument]
CompilePlans = Callable[[dict[str, object]], list[ClientMethodPlan]]

PET_SCHEMAS = {
    "schemas": {
        "Pet": {"type": "object", "properties": {"id": {"type": "integer"}, "name": {"type": "string"}}},
        "NewPet": {"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]},
    }
}

PET_PATHS = {
    "/pets": {
        "get": {
            "summary": "List   pets",
            "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer", "default": 20}}],
            "responses": {
                "200": {
                    "description": "ok",
                    "content": {
                        "application/json": {"schema": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}}
                    },
                }
            },
        },
        "post": {
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/NewPet"}}},
            },
            "responses": {
                "201": {
                    "description": "created",
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                }
            },
        },
    },
    "/pets/{petId}": {
        "parameters": [
            {
                "name": "petId",
                "in": "path",
                "required": True,
                "description": "The pet id",
                "schema": {"type": "integer"},
            }
        ],
        "get": {
            "summary": "Get a pet",
            "description": 'Returns a single pet.\nUses """quotes""".',
            "parameters": [
                {
                    "name": "fields",
                    "in": "query",
                    "explode": False,
                    "schema": {"type": "array", "items": {"type": "string"}},
                },
                {"name": "X-Request-Id", "in": "header", "schema": {"type": "string", "format": "uuid"}},
            ],
            "responses": {
                "200": {
                    "description": "ok",
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                }
            },
        },
        "delete": {"responses": {"204": {"description": "gone"}}},
    },
    "/pets/{petId}/photo": {
        "get": {
            "parameters": [{"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}}],
            "responses": {
                "200": {
                    "description": "ok",
                    "content": {"image/png": {}, "image/jpeg": {}},
                }
            }
        }
    },
}


@pytest.fixture()
def compile_plans(load_document: LoadDocument, options: CompilerOptions) -> CompilePlans:
    def compile(paths: dict[str, object]) -> list[ClientMethodPlan]:
        ir = load_document(paths=paths, components=PET_SCHEMAS)
        return compile_operations(ir.operations, SchemaTypeResolver(options), options)

    return compile


@pytest.fixture()
def pets_module(compile_plans: CompilePlans) -> ClientModule:
    modules = generate_clients(compile_plans(PET_PATHS), GenerationProfile.from_version("3.12"))
    return modules[0]


def method_source(code: str, name: str) -> str:
    start = code.index(f"    def {name}(")
    end = code.find("\n    def ", start + 1)
    return code[start:] if end == -1 else code[start:end]


class TestGenerateClients:
    def test_one_module_per_resource_in_first_seen_order(self, compile_plans: CompilePlans) -> None:
        modules = generate_clients(compile_plans(PET_PATHS), GenerationProfile.from_version("3.12"))
        assert [(module.module_name, module.class_name) for module in modules] == [
            ("pets_client", "PetsClient"),
            ("pets_photo_client", "PetsPhotoClient"),
        ]
        for module in modules:
            ast.parse(module.code)

    def test_group_plans(self, compile_plans: CompilePlans) -> None:
        groups = group_plans(compile_plans(PET_PATHS))
        assert list(groups) == ["Pets", "PetsPhoto"]
        assert [plan.name for plan in groups["Pets"]] == ["getPets", "postPets", "getPetsPetId", "deletePetsPetId"]

    def test_rendering_is_deterministic(self, compile_plans: CompilePlans) -> None:
        profile = GenerationProfile.from_version("3.10")
        first = generate_clients(compile_plans(PET_PATHS), profile)
        second = generate_clients(compile_plans(PET_PATHS), profile)
        assert first == second

    def test_imports(self, pets_module: ClientModule) -> None:
        code = pets_module.code
        assert code.startswith("from __future__ import annotations\n\nimport uuid\n")
        assert "from collections.abc import Mapping\n" in code
        assert "import httpx\n" in code
        assert "from .api_models import ApiResponse\n" in code
        assert (
            "from .http_util import EMPTY_HEADERS, QueryPairs, build_request, encode_body, execute, "
            "header_param, merge_headers, path_param, query_param\n"
        ) in code
        assert "from .models import NewPet, Pet\n" in code

    def test_constructor(self, pets_module: ClientModule) -> None:
        assert "class PetsClient:\n" in pets_module.code
        assert "    def __init__(self, base_url: str, client: httpx.Client) -> None:\n" in pets_module.code
        assert "        self.base_url = base_url.rstrip('/')\n" in pets_module.code


class TestClientMethods:
    def test_signature(self, pets_module: ClientModule) -> None:
        source = method_source(pets_module.code, "getPetsPetId")
        assert source.startswith(
            "    def getPetsPetId(\n"
            "        self,\n"
            "        petId: int,\n"
            "        fields: list[str] | None = None,\n"
            "        xRequestId: uuid.UUID | None = None,\n"
            "        additionalHeaders: Mapping[str, str] = EMPTY_HEADERS,\n"
            "    ) -> ApiResponse[Pet]:\n"
        )

    def test_body_follows_plan_steps(self, pets_module: ClientModule) -> None:
        source = method_source(pets_module.code, "getPetsPetId")
        body = source[source.index("_query: QueryPairs") :]
        assert body.split("\n")[:10] == [
            "_query: QueryPairs = []",
            "        _headers: dict[str, str] = {}",
            "        _url = self.base_url + '/pets/{petId}'",
            "        _url = path_param(_url, '{petId}', petId)",
            "        query_param(_query, 'fields', fields, explode=False)",
            "        header_param(_headers, 'X-Request-Id', xRequestId)",
            "        _headers['Accept'] = 'application/json'",
            "        merge_headers(_headers, additionalHeaders)",
            "        _request = build_request(self.client, 'GET', _url, _query, _headers)",
            "        return execute(self.client, _request, Pet)",
        ]

    def test_defaults_are_rendered(self, pets_module: ClientModule) -> None:
        source = method_source(pets_module.code, "getPets")
        assert "        limit: int = 20,\n" in source
        assert ") -> ApiResponse[list[Pet]]:" in source
        assert "query_param(_query, 'limit', limit)\n" in source
        assert "return execute(self.client, _request, list[Pet])" in source

    def test_body_encoding(self, pets_module: ClientModule) -> None:
        source = method_source(pets_module.code, "postPets")
        assert "        newPet: NewPet,\n" in source
        assert "_content = encode_body(newPet, 'application/json')" in source
        assert (
            "_request = build_request(self.client, 'POST', _url, _query, _headers, _content, 'application/json')"
        ) in source

    def test_no_content_response(self, pets_module: ClientModule) -> None:
        source = method_source(pets_module.code, "deletePetsPetId")
        assert ") -> ApiResponse[None]:" in source
        assert "return execute(self.client, _request, None)" in source
        assert "_headers['Accept']" not in source

    def test_synthesized_accept_argument(self, compile_plans: CompilePlans) -> None:
        modules = generate_clients(compile_plans(PET_PATHS), GenerationProfile.from_version("3.12"))
        source = method_source(modules[1].code, "getPetsPetIdPhoto")
        assert "        accept: str = 'image/png',\n" in source
        assert "header_param(_headers, 'Accept', accept)" in source
        assert ") -> ApiResponse[JsonValue]:" in source
        assert "from .api_models import ApiResponse, JsonValue\n" in modules[1].code

    def test_docstring(self, pets_module: ClientModule) -> None:
        get_pets = method_source(pets_module.code, "getPets")
        assert '        """List pets\n' in get_pets
        get_pet = method_source(pets_module.code, "getPetsPetId")
        assert '        """Get a pet\n\n        Returns a single pet.\n' in get_pet
        assert '\\"\\"\\"quotes\\"\\"\\"' in get_pet
        assert "        :param petId: The pet id\n" in get_pet
        assert "        :raises ApiException: If the response status is not 2xx\n" in get_pet
        post_pets = method_source(pets_module.code, "postPets")
        assert '        """POST /pets\n' in post_pets

    def test_python39_uses_optional(self, compile_plans: CompilePlans) -> None:
        modules = generate_clients(compile_plans(PET_PATHS), GenerationProfile.from_version("3.9"))
        source = method_source(modules[0].code, "getPetsPetId")
        assert "        fields: Optional[list[str]] = None,\n" in source
        assert "from typing import Optional\n" in modules[0].code

    def test_container_defaults_are_filled_in_the_body(self, compile_plans: CompilePlans) -> None:
        paths = {
            "/items": {
                "get": {
                    "parameters": [
                        {
                            "name": "tags",
                            "in": "query",
                            "schema": {"type": "array", "items": {"type": "string"}, "default": ["a"]},
                        }
                    ],
                    "responses": {"204": {"description": "none"}},
                }
            }
        }
        code = generate_clients(compile_plans(paths), GenerationProfile.from_version("3.12"))[0].code
        source = method_source(code, "getItems")
        assert "        tags: list[str] | None = None,\n" in source
        assert "        if tags is None:\n            tags = ['a']\n" in source
        method = next(
            node for node in ast.walk(ast.parse(code)) if isinstance(node, ast.FunctionDef) and node.name == "getItems"
        )
        assert not any(isinstance(default, (ast.List, ast.Dict)) for default in method.args.defaults)

    def test_arguments_do_not_shadow_names_used_in_the_body(self, compile_plans: CompilePlans) -> None:
        paths = {
            "/items": {
                "get": {
                    "parameters": [
                        {"name": "list", "in": "query", "schema": {"type": "string"}},
                        {"name": "execute", "in": "header", "schema": {"type": "string"}},
                    ],
                    "responses": {
                        "200": {
                            "description": "ok",
                            "content": {
                                "application/json": {
                                    "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
                                }
                            },
                        }
                    },
                }
            }
        }
        code = generate_clients(compile_plans(paths), GenerationProfile.from_version("3.12"))[0].code
        source = method_source(code, "getItems")
        assert "        listQuery: str | None = None,\n" in source
        assert "        executeHeader: str | None = None,\n" in source
        assert "query_param(_query, 'list', listQuery)\n" in source
        assert "header_param(_headers, 'execute', executeHeader)\n" in source
        assert "return execute(self.client, _request, list[Pet])" in source
