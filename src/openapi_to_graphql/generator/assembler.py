"""Schema assembler: drives one translation run and builds the GraphQL schema.

Each `assemble` call creates a fresh TranslationContext, so runs never share
naming state and can happen side by side (for example in tests).
"""

import logging
from dataclasses import dataclass, field

from graphql import GraphQLBoolean, GraphQLField, GraphQLObjectType, GraphQLSchema

from openapi_to_graphql.errors import EmptySchemaError, NameCollisionError, SchemaValidationError
from openapi_to_graphql.generator.bindings import BindingManifest, ResolverBinding
from openapi_to_graphql.generator.naming import BUILTIN_TYPE_NAMES, TYPE_NAMESPACE, NameResolver, field_namespace
from openapi_to_graphql.generator.operations import MUTATION, QUERY, OperationMapper
from openapi_to_graphql.generator.scalars import CUSTOM_SCALARS
from openapi_to_graphql.generator.type_mapper import OUTPUT, TypeMapper
from openapi_to_graphql.generator.validator import find_duplicate_names, validate_closure, validate_schema_model
from openapi_to_graphql.options import TranslationOptions
from openapi_to_graphql.parser.base import OpenApiDocument

logger = logging.getLogger(__name__)


@dataclass
class TranslationContext:
    """State owned by a single translation run."""

    options: TranslationOptions
    names: NameResolver
    types: TypeMapper
    operations: OperationMapper

    @classmethod
    def create(cls, options: TranslationOptions) -> "TranslationContext":
        names = NameResolver(options.collision_policy, options.max_name_suffix)
        names.reserve(TYPE_NAMESPACE, *BUILTIN_TYPE_NAMES, *CUSTOM_SCALARS)
        types = TypeMapper(names, options)
        return cls(options=options, names=names, types=types, operations=OperationMapper(types, names, options))


@dataclass
class TranslationResult:
    schema: GraphQLSchema
    source_name: str
    endpoint: str | None = None
    bindings: list[ResolverBinding] = field(default_factory=list)

    def manifest(self) -> BindingManifest:
        return BindingManifest(source=self.source_name, endpoint=self.endpoint, operations=self.bindings)


class SchemaAssembler:
    """Translates OpenAPI documents into GraphQL schemas."""

    def __init__(self, options: TranslationOptions | None = None):
        self.options = options or TranslationOptions()

    def assemble(self, document: OpenApiDocument) -> TranslationResult:
        context = TranslationContext.create(self.options)
        query_fields: dict[str, GraphQLField] = {}
        mutation_fields: dict[str, GraphQLField] = {}
        bindings: list[ResolverBinding] = []

        for operation in document.operations():
            root_field = context.operations.map_operation(operation)
            target = query_fields if root_field.root == QUERY else mutation_fields
            target[root_field.name] = root_field.field
            bindings.append(root_field.binding)

        if not query_fields and not mutation_fields:
            raise EmptySchemaError(f"{self.options.source_name}: the document defines no operations")

        if self.options.include_unreferenced_schemas:
            for name, schema in document.schemas.items():
                context.types.map(schema, OUTPUT, name)

        if not query_fields:
            # GraphQL requires a query root even when the API only writes
            placeholder = context.names.resolve("_empty", field_namespace(QUERY))
            query_fields[placeholder] = GraphQLField(
                GraphQLBoolean, description="The source API declares no read operations."
            )

        context.types.finalize()

        query = GraphQLObjectType(QUERY, query_fields)
        mutation = GraphQLObjectType(MUTATION, mutation_fields) if mutation_fields else None
        roots = [query] if mutation is None else [query, mutation]

        duplicates = find_duplicate_names(context.types.types, roots)
        if duplicates:
            raise NameCollisionError(f"Several distinct types share the names: {', '.join(duplicates)}")
        closure_errors = validate_closure(context.types.types, roots)
        if closure_errors:
            raise SchemaValidationError(list(closure_errors.values()))

        schema = GraphQLSchema(query=query, mutation=mutation, types=list(context.types.types.values()))
        errors = validate_schema_model(schema)
        if errors:
            raise SchemaValidationError(errors)

        logger.info(
            "Translated %s: %d queries, %d mutations, %d named types",
            self.options.source_name,
            len(query_fields),
            len(mutation_fields),
            len(context.types.types),
        )
        return TranslationResult(
            schema=schema,
            source_name=self.options.source_name,
            endpoint=document.endpoint,
            bindings=bindings,
        )
