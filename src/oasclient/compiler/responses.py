from __future__ import annotations

from ..config import CompilerOptions
from ..ir import OperationIR, ResponseIR
from ..schema.resolver import SCHEMA, SchemaTypeResolver
from .plan import ResponseSpec

DEFAULT_RESPONSE = "default"


def primary_response(operation: OperationIR) -> ResponseIR | None:
    """First response, other than ``default``, that declares a media type."""
    for response in operation.responses:
        if response.status == DEFAULT_RESPONSE:
            continue
        if response.content:
            return response
    return None


def resolve_response(
    operation: OperationIR,
    resolver: SchemaTypeResolver,
    options: CompilerOptions,
) -> ResponseSpec | None:
    """Resolve the decoded return type of an operation.

    The type always comes from the first media type of the primary response,
    whichever media type the server actually answers with. ``None`` means the
    operation returns no content.
    """
    response = primary_response(operation)
    if response is None:
        return None
    primary = response.content[0]
    return ResponseSpec(
        status=response.status,
        primary_media_type=primary.content_type,
        media_types=tuple(media.content_type for media in response.content),
        descriptor=resolver.resolve(primary.schema, SCHEMA),
        schema=primary.schema,
    )
