"""Typed data models for a parsed OpenAPI document.

The loader converts raw JSON/YAML mappings into these models; the scoring
engine only ever reads them. Unknown keys (``x-*`` extensions and fields the
scorer does not care about) are kept as extra attributes.
"""

from datetime import date
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class OpenApiModel(BaseModel):
    """Base for document models: tolerant of extra keys, populated by field or alias."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Info(OpenApiModel):
    title: str = ""
    version: str = ""
    description: str | None = None

    @field_validator("title", "version", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float and `version: 2024-01-15` as a date
        if value is None:
            return ""
        if isinstance(value, (int, float, date)):
            return str(value)
        return value


class Server(OpenApiModel):
    url: str = ""
    description: str | None = None


class Tag(OpenApiModel):
    name: str
    description: str | None = None


class Parameter(OpenApiModel):
    """A single operation parameter (query, path, header, or cookie)."""

    name: str = ""
    location: str | None = Field(default=None, alias="in")
    description: str | None = None
    required: bool = False
    schema_: dict | None = Field(default=None, alias="schema")


class MediaType(OpenApiModel):
    """One ``content`` entry, e.g. the ``application/json`` of a response."""

    schema_: dict | None = Field(default=None, alias="schema")
    example: Any = None
    examples: Any = None


class _Payload(OpenApiModel):
    description: str | None = None
    schema_: dict | None = Field(default=None, alias="schema")
    example: Any = None
    examples: Any = None
    content: dict[str, MediaType] = {}

    @field_validator("content", mode="before")
    @classmethod
    def _null_media_types(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v if v is not None else {} for k, v in value.items()}
        return value

    def has_schema(self) -> bool:
        """True when a schema is attached directly or under any media type."""
        if self.schema_ is not None:
            return True
        return any(media.schema_ is not None for media in self.content.values())

    def has_examples(self) -> bool:
        """True when an example is attached directly or under any media type."""
        if self.example is not None or self.examples is not None:
            return True
        return any(
            media.example is not None or media.examples is not None for media in self.content.values()
        )


class RequestBody(_Payload):
    required: bool = False


class Response(_Payload):
    pass


class Operation(OpenApiModel):
    """One HTTP method's contract at a path."""

    tags: list[str] = []
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = Field(default=None, alias="operationId")
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] | None = None
    deprecated: bool = False

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML reads `200:` as an int key
        if isinstance(value, dict):
            return {str(code): resp if resp is not None else {} for code, resp in value.items()}
        return value


class PathItem(OpenApiModel):
    """All operations defined at one path template."""

    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] = []
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield ``(method, operation)`` for each defined method, in HTTP_METHODS order."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class Components(OpenApiModel):
    schemas: dict[str, Any] | None = None
    security_schemes: dict[str, Any] | None = Field(default=None, alias="securitySchemes")


class Document(OpenApiModel):
    """Root of an OpenAPI 3.x description."""

    openapi: str = ""
    info: Info = Field(default_factory=Info)
    servers: list[Server] | None = None
    paths: dict[str, PathItem] = {}
    components: Components | None = None
    security: list[dict[str, list[str]]] | None = None
    tags: list[Tag] | None = None

    @field_validator("paths", mode="before")
    @classmethod
    def _null_paths(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {path: item if item is not None else {} for path, item in value.items()}
        return value

    @field_validator("openapi", mode="before")
    @classmethod
    def _coerce_openapi(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def iter_operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield ``(path, method, operation)`` across all paths in document order."""
        for path, item in self.paths.items():
            for method, operation in item.operations():
                yield path, method, operation
