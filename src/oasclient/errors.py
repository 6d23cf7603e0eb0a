from __future__ import annotations


class OasClientError(Exception):
    """Base class for every error raised while generating a client."""


class SpecError(OasClientError):
    """The OpenAPI document cannot be loaded or a `$ref` cannot be resolved."""


class SchemaResolutionError(OasClientError):
    """A schema node does not classify into exactly one type descriptor."""

    def __init__(
        self,
        schema_type: str | None,
        schema_format: str | None,
        context_key: str,
        reason: str | None = None,
    ) -> None:
        self.schema_type = schema_type
        self.schema_format = schema_format
        self.context_key = context_key
        message = f"Unknown OAS type: {schema_type} and format: {schema_format} (in {context_key!r})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedOperationVerb(OasClientError):
    """An operation uses an HTTP verb that generated clients cannot dispatch."""

    def __init__(self, verb: str, path: str) -> None:
        self.verb = verb
        self.path = path
        super().__init__(f"API operation {verb.upper()} {path} is not supported")
