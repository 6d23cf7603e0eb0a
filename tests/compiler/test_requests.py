from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from oasclient.compiler import ClientMethodPlan, compile_operation, render_request
from oasclient.config import CompilerOptions
from oasclient.ir import OperationIR
from oasclient.schema import SchemaTypeResolver

LoadOperation = Callable[..., OperationIR]
CompilePlan = Callable[..., ClientMethodPlan]

BASE_URL = "https://api.example.com"
TAGS_SCHEMA = {"type": "array", "items": {"type": "string"}}


@pytest.fixture()
def compile_plan(load_operation: LoadOperation, options: CompilerOptions) -> CompilePlan:
    def compile(path: str, method: str, operation: dict[str, object], **document: object) -> ClientMethodPlan:
        return compile_operation(
            load_operation(path, method, operation, **document),
            SchemaTypeResolver(options),
            options,
        )

    return compile


class TestRenderRequest:
    def test_substitutes_path_parameters(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/a/{id}/b",
            "get",
            {"parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]},
        )
        request = render_request(plan, BASE_URL, {"id": "42"})
        assert str(request.url) == "https://api.example.com/a/42/b"
        assert request.method == "GET"

    def test_path_values_are_percent_encoded(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/files/{name}",
            "get",
            {"parameters": [{"name": "name", "in": "path", "required": True, "schema": {"type": "string"}}]},
        )
        request = render_request(plan, BASE_URL, {"name": "a b/c"})
        assert request.url.raw_path == b"/files/a%20b%2Fc"

    @pytest.mark.parametrize(
        "explode, expected",
        [
            pytest.param(True, [("tags", "a"), ("tags", "b")], id="explode"),
            pytest.param(False, [("tags", "a,b")], id="no-explode"),
        ],
    )
    def test_array_query_parameters(
        self,
        compile_plan: CompilePlan,
        explode: bool,
        expected: list[tuple[str, str]],
    ) -> None:
        plan = compile_plan(
            "/pets",
            "get",
            {"parameters": [{"name": "tags", "in": "query", "explode": explode, "schema": TAGS_SCHEMA}]},
        )
        request = render_request(plan, BASE_URL, {"tags": ["a", "b"]})
        assert request.url.params.multi_items() == expected

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param(None, id="none"),
            pytest.param([], id="empty-array"),
        ],
    )
    def test_absent_query_values_are_omitted(self, compile_plan: CompilePlan, value: object) -> None:
        plan = compile_plan("/pets", "get", {"parameters": [{"name": "tags", "in": "query", "schema": TAGS_SCHEMA}]})
        request = render_request(plan, BASE_URL, {"tags": value})
        assert request.url.query == b""

    def test_defaults_apply_to_missing_arguments(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/pets",
            "get",
            {
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 10}},
                    {"name": "verbose", "in": "query", "schema": {"type": "boolean"}},
                ]
            },
        )
        request = render_request(plan, BASE_URL, {"verbose": True})
        assert request.url.params["limit"] == "10"
        assert request.url.params["verbose"] == "true"

    def test_header_enum_values_use_wire_value(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/pets",
            "get",
            {
                "parameters": [
                    {"name": "X-Mode", "in": "header", "schema": {"type": "string", "enum": ["fast", "safe"]}},
                    {"name": "X-Skip", "in": "header", "schema": {"type": "string"}},
                ]
            },
        )
        request = render_request(plan, BASE_URL, {"xMode": "safe"})
        assert request.headers["X-Mode"] == "safe"
        assert "X-Skip" not in request.headers

    def test_fixed_accept_header(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/report",
            "get",
            {"responses": {"200": {"description": "ok", "content": {"application/json": {}}}}},
        )
        request = render_request(plan, BASE_URL, {})
        assert request.headers["Accept"] == "application/json"

    def test_synthesized_accept_defaults_to_first_media_type(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/report",
            "get",
            {"responses": {"200": {"description": "ok", "content": {"application/json": {}, "text/csv": {}}}}},
        )
        assert render_request(plan, BASE_URL, {}).headers["Accept"] == "application/json"
        assert render_request(plan, BASE_URL, {"accept": "text/csv"}).headers["Accept"] == "text/csv"

    def test_additional_headers_override_generated_headers(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/report",
            "get",
            {"responses": {"200": {"description": "ok", "content": {"application/json": {}}}}},
        )
        request = render_request(
            plan,
            BASE_URL,
            {"additionalHeaders": {"Accept": "application/problem+json", "X-Extra": "1"}},
        )
        assert request.headers["Accept"] == "application/problem+json"
        assert request.headers["X-Extra"] == "1"

    def test_additional_headers_override_regardless_of_case(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/report",
            "get",
            {
                "parameters": [{"name": "X-Extra", "in": "header", "schema": {"type": "string"}}],
                "responses": {"200": {"description": "ok", "content": {"application/json": {}}}},
            },
        )
        request = render_request(
            plan,
            BASE_URL,
            {"xExtra": "generated", "additionalHeaders": {"accept": "text/csv", "x-extra": "caller"}},
        )
        assert request.headers.get_list("accept") == ["text/csv"]
        assert request.headers.get_list("x-extra") == ["caller"]

    def test_encodes_json_body(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/pets",
            "post",
            {
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                },
                "responses": {"201": {"description": "created"}},
            },
            components={"schemas": {"Pet": {"type": "object", "properties": {"name": {"type": "string"}}}}},
        )
        request = render_request(plan, BASE_URL, {"pet": {"name": "Rex"}})
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"name": "Rex"}

    def test_body_verb_without_body_sends_empty_payload(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/jobs/{id}/cancel",
            "post",
            {"parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}]},
        )
        request = render_request(plan, BASE_URL, {"id": 7})
        assert request.content == b""
        assert "Content-Type" not in request.headers

    def test_uses_client_to_build_request(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan("/pets", "get", {})
        with httpx.Client(headers={"User-Agent": "tests"}) as client:
            request = render_request(plan, BASE_URL, {}, client=client)
        assert request.headers["User-Agent"] == "tests"


class TestBindArguments:
    def test_missing_required_argument(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan(
            "/a/{id}",
            "get",
            {"parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]},
        )
        with pytest.raises(TypeError, match="missing required arguments: id"):
            render_request(plan, BASE_URL, {})

    def test_unknown_argument(self, compile_plan: CompilePlan) -> None:
        plan = compile_plan("/a", "get", {})
        with pytest.raises(TypeError, match="unexpected arguments: nope"):
            render_request(plan, BASE_URL, {"nope": 1})
