"""Resolver binding descriptors.

A binding records which HTTP call a root field stands for, so an execution
layer can turn GraphQL arguments back into a request. They are plain data:
nothing here performs I/O.
"""

from pydantic import BaseModel


class ArgumentBinding(BaseModel):
    """Where a GraphQL argument goes in the HTTP request."""

    argument: str  # GraphQL argument name
    name: str  # parameter name in the OpenAPI document
    location: str  # path / query / header / cookie / body


class ResolverBinding(BaseModel):
    """One root field and the operation it calls."""

    source: str
    root: str  # Query / Mutation
    field: str
    method: str  # GET / POST / ...
    path: str  # /pets/{id}
    arguments: list[ArgumentBinding] = []
    request_content_type: str | None = None
    response_content_type: str | None = None
    response_status: str | None = None  # status whose body feeds the field type


class BindingManifest(BaseModel):
    """All bindings of a translated document."""

    source: str
    endpoint: str | None = None
    operations: list[ResolverBinding]
