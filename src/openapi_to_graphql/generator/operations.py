"""Operation mapper: turns OpenAPI operations into GraphQL root fields."""

import logging
import re
from dataclasses import dataclass

from graphql import GraphQLArgument, GraphQLBoolean, GraphQLField, GraphQLNonNull

from openapi_to_graphql.generator.bindings import ArgumentBinding, ResolverBinding
from openapi_to_graphql.generator.naming import (
    NameResolver,
    argument_namespace,
    camel_case,
    field_namespace,
    pascal_case,
    sanitize,
)
from openapi_to_graphql.generator.type_mapper import INPUT, OUTPUT, TypeMapper
from openapi_to_graphql.options import TranslationOptions
from openapi_to_graphql.parser.base import Operation, Response

logger = logging.getLogger(__name__)

QUERY = "Query"
MUTATION = "Mutation"

# Safe methods read, everything else writes
QUERY_METHODS = frozenset({"GET", "HEAD"})

_SUCCESS_STATUS = re.compile(r"^2\d\d$")


@dataclass(frozen=True)
class RootField:
    root: str  # Query / Mutation
    name: str
    field: GraphQLField
    binding: ResolverBinding


def classify(method: str) -> str:
    """Return the root type an HTTP method belongs to."""
    return QUERY if method.upper() in QUERY_METHODS else MUTATION


def derive_field_name(method: str, path: str) -> str:
    """Build a field name from path segments and method: GET /pets/{id} -> petsIdGet."""
    segments = [s.strip("{}") for s in path.split("/") if s]
    return camel_case(" ".join([*segments, method.lower()])) if segments else f"root{method.capitalize()}"


def select_response(responses: dict[str, Response]) -> Response | None:
    """Pick the response whose body becomes the field type.

    The lowest explicit 2xx status with a body wins; a 2XX range counts after
    explicit codes. Other statuses are never used.
    """
    candidates = []
    for order, response in enumerate(responses.values()):
        if response.schema is None:
            continue
        status = response.status.upper()
        if _SUCCESS_STATUS.match(status):
            candidates.append(((int(status), 0, order), response))
        elif status == "2XX":
            candidates.append(((299, 1, order), response))
    if not candidates:
        return None
    return min(candidates, key=lambda c: c[0])[1]


class OperationMapper:
    """Maps operations to root fields for one translation run."""

    def __init__(self, types: TypeMapper, names: NameResolver, options: TranslationOptions):
        self.types = types
        self.names = names
        self.options = options

    def map_operation(self, operation: Operation) -> RootField:
        root = classify(operation.method)

        name = self._field_name(operation, root)
        type_hint = pascal_case(name)
        arg_namespace = argument_namespace(root, name)

        args = {}
        arg_bindings = []
        for param in operation.parameters:
            arg_name = self.names.resolve(param.name, arg_namespace, fallback="arg")
            arg_type = self.types.field_type(param.schema, INPUT, type_hint + pascal_case(param.name), param.required)
            args[arg_name] = GraphQLArgument(
                arg_type,
                description=param.description or None,
                out_name=param.name,
            )
            arg_bindings.append(ArgumentBinding(argument=arg_name, name=param.name, location=param.location))

        body = operation.request_body
        if body is not None:
            arg_name = self.names.resolve(self.options.body_argument_name, arg_namespace, fallback="input")
            arg_type = self.types.field_type(body.schema, INPUT, type_hint, body.required)
            args[arg_name] = GraphQLArgument(arg_type, description=body.description or None)
            arg_bindings.append(ArgumentBinding(argument=arg_name, name=arg_name, location="body"))

        response = select_response(operation.responses)
        if response is None:
            # no body to return, the field only reports success
            return_type = GraphQLNonNull(GraphQLBoolean)
        else:
            return_type = self.types.field_type(response.schema, OUTPUT, f"{type_hint}Response", True)

        binding = ResolverBinding(
            source=self.options.source_name,
            root=root,
            field=name,
            method=operation.method,
            path=operation.path,
            arguments=arg_bindings,
            request_content_type=body.content_type if body is not None else None,
            response_content_type=response.content_type if response is not None else None,
            response_status=response.status if response is not None else None,
        )
        field = GraphQLField(
            return_type,
            args=args,
            description=operation.description or operation.summary or None,
            deprecation_reason="Deprecated in the source API." if operation.deprecated else None,
            extensions={"http_operation": binding},
        )
        return RootField(root=root, name=name, field=field, binding=binding)

    def _field_name(self, operation: Operation, root: str) -> str:
        namespace = field_namespace(root)
        if self.options.prefer_operation_id and operation.operation_id:
            if not self.names.is_taken(sanitize(operation.operation_id), namespace):
                return self.names.resolve(operation.operation_id, namespace)
            logger.info(
                "operationId %r of %s %s is already used, deriving the name from the path",
                operation.operation_id,
                operation.method,
                operation.path,
            )
        return self.names.resolve(derive_field_name(operation.method, operation.path), namespace)
