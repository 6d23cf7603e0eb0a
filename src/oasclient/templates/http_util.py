"""Request construction and execution helpers for generated clients."""

from __future__ import annotations

import datetime
import enum
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import TypeAdapter, ValidationError

from .api_models import ApiException, ApiResponse

logger = logging.getLogger(__name__)

EMPTY_HEADERS: Mapping[str, str] = MappingProxyType({})

QueryPairs = list[tuple[str, str]]

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def to_wire(value: object) -> str:
    """Plain string form of a parameter value; enums use their wire value."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def path_param(url: str, placeholder: str, value: object) -> str:
    return url.replace(placeholder, quote(to_wire(value), safe=""))


def query_param(query: QueryPairs, name: str, value: object, explode: bool = True) -> None:
    """Append the pairs of one query parameter.

    Arrays render as one pair per element when ``explode`` is true, and as a
    single comma-joined pair otherwise. ``None`` and empty arrays are omitted.
    """
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        items = [to_wire(item) for item in value if item is not None]
        if not items:
            return
        if explode:
            query.extend((name, item) for item in items)
        else:
            query.append((name, ",".join(items)))
        return
    query.append((name, to_wire(value)))


def header_param(headers: dict[str, str], name: str, value: object) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        headers[name] = ",".join(to_wire(item) for item in value)
        return
    headers[name] = to_wire(value)


def merge_headers(headers: dict[str, str], extra: Mapping[str, str]) -> None:
    """Set every header of ``extra``, replacing existing ones whatever their case."""
    for name, value in extra.items():
        for existing in [key for key in headers if key.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value


def is_json(media_type: str) -> bool:
    media_type = media_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def encode_body(value: object, media_type: str) -> bytes:
    """Encode a request body with the codec of its media type."""
    if value is None:
        return b""
    if isinstance(value, bytes):
        return value
    if is_json(media_type):
        return _ANY_ADAPTER.dump_json(value)
    if media_type.startswith("application/x-www-form-urlencoded") and isinstance(value, Mapping):
        return urlencode({key: to_wire(item) for key, item in value.items()}).encode("utf-8")
    if isinstance(value, str):
        return value.encode("utf-8")
    return _ANY_ADAPTER.dump_json(value)


def build_request(
    client: httpx.Client | None,
    method: str,
    url: str,
    query: QueryPairs,
    headers: Mapping[str, str],
    content: bytes | None = None,
    media_type: str | None = None,
) -> httpx.Request:
    request_headers = dict(headers)
    if content and media_type and not any(key.lower() == "content-type" for key in request_headers):
        request_headers["Content-Type"] = media_type
    if client is None:
        return httpx.Request(method, url, params=query, headers=request_headers, content=content or None)
    return client.build_request(method, url, params=query, headers=request_headers, content=content or None)


def decode_body(response: httpx.Response, response_type: Any) -> Any:
    """Decode a response body into ``response_type``.

    JSON bodies are validated with pydantic; other bodies are returned as
    text or bytes.
    """
    if response_type is None or not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    try:
        if is_json(content_type):
            return TypeAdapter(response_type).validate_json(response.content)
        if response_type is bytes:
            return response.content
        if response_type is str:
            return response.text
        return TypeAdapter(response_type).validate_python(response.text)
    except ValidationError as exc:
        raise ApiException(
            f"Cannot decode response body: {exc}",
            status_code=response.status_code,
            headers=response.headers,
            body=response.text,
        ) from exc


def execute(client: httpx.Client, request: httpx.Request, response_type: Any = None) -> ApiResponse[Any]:
    """Send a request and decode its response.

    Raises:
        ApiException: If the response status is not 2xx or the body cannot be decoded
    """
    logger.debug("Sending %s %s", request.method, request.url)
    response = client.send(request)
    if not response.is_success:
        raise ApiException(
            f"{request.method} {request.url} failed",
            status_code=response.status_code,
            headers=response.headers,
            body=response.text,
        )
    return ApiResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        data=decode_body(response, response_type),
    )
