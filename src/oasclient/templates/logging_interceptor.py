"""httpx event hooks that log traffic through the standard logging module.

Usage:
    client = httpx.Client(event_hooks=logging_hooks())
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

import httpx

REDACTED = "<redacted>"
SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie", "set-cookie"})

_default_logger = logging.getLogger(__name__)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {key: REDACTED if key.lower() in SENSITIVE_HEADERS else value for key, value in headers.items()}


def logging_hooks(
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> dict[str, list[Callable[..., None]]]:
    log = logger or _default_logger

    def log_request(request: httpx.Request) -> None:
        log.log(level, "--> %s %s headers=%s", request.method, request.url, redact_headers(request.headers))

    def log_response(response: httpx.Response) -> None:
        request = response.request
        log.log(
            level,
            "<-- %s %s %d headers=%s",
            request.method,
            request.url,
            response.status_code,
            redact_headers(response.headers),
        )

    return {"request": [log_request], "response": [log_response]}
