"""Document model for dereferenced OpenAPI documents.

The loader converts OpenAPI 3.x and Swagger 2.0 input into these models.
Schema definitions form a closed set of variants (one class per kind), and
may reference each other cyclically, so they compare by identity: the same
source schema is always the same object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

PRIMITIVE_KINDS = ("string", "integer", "number", "boolean")


@dataclass(eq=False)
class ScalarSchema:
    """A primitive value: string, integer, number or boolean."""

    kind: str
    format: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    name: str | None = None
    description: str = ""
    nullable: bool = False


@dataclass(eq=False)
class ObjectSchema:
    """An object with named properties."""

    properties: dict[str, SchemaDefinition] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool = False
    name: str | None = None
    description: str = ""
    nullable: bool = False


@dataclass(eq=False)
class ArraySchema:
    items: SchemaDefinition | None = None
    name: str | None = None
    description: str = ""
    nullable: bool = False


@dataclass(eq=False)
class EnumSchema:
    values: list[Any] = field(default_factory=list)
    name: str | None = None
    description: str = ""
    nullable: bool = False


@dataclass(eq=False)
class UnionSchema:
    """`oneOf` / `anyOf` alternatives."""

    members: list[SchemaDefinition] = field(default_factory=list)
    name: str | None = None
    description: str = ""
    nullable: bool = False


@dataclass(eq=False)
class AnySchema:
    """A schema without a type: any JSON value."""

    name: str | None = None
    description: str = ""
    nullable: bool = False


SchemaDefinition = Union[ScalarSchema, ObjectSchema, ArraySchema, EnumSchema, UnionSchema, AnySchema]


@dataclass(frozen=True, eq=False)
class Parameter:
    """A single operation parameter (path, query, header, or cookie)."""

    name: str
    location: str  # path / query / header / cookie
    required: bool
    schema: SchemaDefinition
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True, eq=False)
class RequestBody:
    schema: SchemaDefinition
    required: bool = False
    content_type: str = "application/json"
    description: str = ""


@dataclass(frozen=True, eq=False)
class Response:
    status: str  # "200", "2XX", "default"
    description: str = ""
    schema: SchemaDefinition | None = None
    content_type: str | None = None


@dataclass(frozen=True, eq=False)
class Operation:
    """A single HTTP operation with everything needed to map it."""

    method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS / TRACE
    path: str  # /pets/{id}
    operation_id: str | None = None
    summary: str = ""
    description: str = ""
    deprecated: bool = False
    tags: tuple[str, ...] = ()
    parameters: tuple[Parameter, ...] = ()
    request_body: RequestBody | None = None
    responses: dict[str, Response] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class PathItem:
    path: str
    operations: dict[str, Operation] = field(default_factory=dict)  # keyed by upper-case method


@dataclass(frozen=True, eq=False)
class OpenApiDocument:
    title: str = ""
    version: str = ""
    spec_version: str = "openapi3"  # openapi3 / swagger2
    endpoint: str | None = None
    paths: dict[str, PathItem] = field(default_factory=dict)
    schemas: dict[str, SchemaDefinition] = field(default_factory=dict)

    def operations(self) -> list[Operation]:
        """All operations in declaration order."""
        return [op for item in self.paths.values() for op in item.operations.values()]
