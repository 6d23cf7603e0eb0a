from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import JsonValue

__all__ = ["ApiException", "ApiResponse", "JsonValue"]

T = TypeVar("T")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """A successful response with its decoded body.

    ``data`` is ``None`` when the response has no body.
    """

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    data: T | None = None


class ApiException(Exception):
    """Raised for non-2xx responses and for bodies that cannot be decoded."""

    def __init__(
        self,
        message: str,
        status_code: int,
        headers: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body

    def __str__(self) -> str:
        return f"{self.message} (status {self.status_code})"
