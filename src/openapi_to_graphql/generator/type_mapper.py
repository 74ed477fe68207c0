"""Type mapper: converts schema definitions into GraphQL types.

Output and input positions need separate type graphs in GraphQL, so objects
are mapped once per category. Object fields are bound in a second pass
(`finalize`): an object type is registered as a placeholder before any of its
properties are mapped, which lets types refer to each other cyclically.
"""

import logging
from collections import deque

from graphql import (
    GraphQLBoolean,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLFloat,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    GraphQLType,
    GraphQLUnionType,
)

from openapi_to_graphql.errors import CycleError, UnsupportedSchemaConstructError
from openapi_to_graphql.generator.naming import (
    TYPE_NAMESPACE,
    NameResolver,
    enum_namespace,
    field_namespace,
    pascal_case,
)
from openapi_to_graphql.generator.scalars import GraphQLBigInt, GraphQLByte, GraphQLDateTime, GraphQLJSON
from openapi_to_graphql.options import TranslationOptions
from openapi_to_graphql.parser.base import (
    AnySchema,
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    ScalarSchema,
    SchemaDefinition,
    UnionSchema,
)

logger = logging.getLogger(__name__)

OUTPUT = "output"
INPUT = "input"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

RESERVED_ENUM_VALUES = ("true", "false", "null")


class TypeMapper:
    """Maps schema definitions to GraphQL types for one translation run."""

    def __init__(self, names: NameResolver, options: TranslationOptions):
        self.names = names
        self.options = options
        self.types: dict[str, GraphQLNamedType] = {}  # every named type created, by name
        self._cache: dict[tuple[int, str], GraphQLNamedType] = {}
        self._pending: deque[tuple[ObjectSchema, str, str, GraphQLNamedType, dict]] = deque()
        self._in_progress: set[int] = set()

    def map(self, schema: SchemaDefinition, category: str, hint: str) -> GraphQLType:
        """Return the (nullable) GraphQL type for `schema`.

        `hint` names the type when the schema has no name of its own.
        """
        if isinstance(schema, ScalarSchema):
            return self._map_scalar(schema)
        if isinstance(schema, EnumSchema):
            return self._map_enum(schema, hint)
        if isinstance(schema, ArraySchema):
            return self._map_array(schema, category, hint)
        if isinstance(schema, ObjectSchema):
            return self._map_object(schema, category, hint)
        if isinstance(schema, UnionSchema):
            return self._map_union(schema, category, hint)
        if isinstance(schema, AnySchema):
            return self._json()
        raise UnsupportedSchemaConstructError(f"No GraphQL mapping for {type(schema).__name__}")

    def field_type(self, schema: SchemaDefinition, category: str, hint: str, required: bool) -> GraphQLType:
        """Map `schema` and make it non-null when required."""
        gql_type = self.map(schema, category, hint)
        if required and not schema.nullable:
            return GraphQLNonNull(gql_type)
        return gql_type

    def finalize(self) -> None:
        """Bind the fields of every placeholder object type.

        Filling one object may reach new objects, which are queued and filled
        in turn until nothing is left.
        """
        while self._pending:
            self._fill_object(*self._pending.popleft())

    # -- kinds ----------------------------------------------------------------

    def _map_scalar(self, schema: ScalarSchema) -> GraphQLType:
        custom = self.options.custom_scalars
        if schema.kind == "string":
            if schema.format == "date-time" and custom:
                return self._register(GraphQLDateTime)
            if schema.format == "byte" and custom:
                return self._register(GraphQLByte)
            return GraphQLString
        if schema.kind == "integer":
            if _needs_64_bits(schema):
                return self._register(GraphQLBigInt) if custom else GraphQLString
            return GraphQLInt
        if schema.kind == "number":
            return GraphQLFloat
        if schema.kind == "boolean":
            return GraphQLBoolean
        raise UnsupportedSchemaConstructError(f"Unknown primitive kind {schema.kind!r}")

    def _map_enum(self, schema: EnumSchema, hint: str) -> GraphQLType:
        # enums are valid in both input and output positions, so one type serves both
        key = (id(schema), "enum")
        if key in self._cache:
            return self._cache[key]

        values = [v for v in schema.values if v is not None]
        if not values:
            raise UnsupportedSchemaConstructError(f"Enum {schema.name or hint} declares no values")

        name = self.names.resolve(schema.name or hint, TYPE_NAMESPACE, fallback="Enum")
        namespace = enum_namespace(name)
        enum_values = {}
        for value in values:
            raw = str(value)
            if raw in RESERVED_ENUM_VALUES:
                raw += "_"
            enum_values[self.names.resolve(raw, namespace, fallback="_EMPTY")] = GraphQLEnumValue(value)

        enum_type = GraphQLEnumType(name, enum_values, description=schema.description or None)
        self._cache[key] = enum_type
        return self._register(enum_type)

    def _map_array(self, schema: ArraySchema, category: str, hint: str) -> GraphQLType:
        key = id(schema)
        if key in self._in_progress:
            raise CycleError(f"Array {schema.name or hint} contains itself without an object in between")
        if schema.items is None:
            return GraphQLList(self._json())

        self._in_progress.add(key)
        try:
            item_type = self.map(schema.items, category, f"{hint}Item")
        finally:
            self._in_progress.discard(key)
        return GraphQLList(item_type)

    def _map_object(self, schema: ObjectSchema, category: str, hint: str) -> GraphQLType:
        if not schema.properties:
            logger.debug("Object %s has no properties, using JSON", schema.name or hint)
            return self._json()

        key = (id(schema), category)
        if key in self._cache:
            return self._cache[key]

        base = schema.name or hint
        fields: dict = {}
        description = schema.description or None
        if category == INPUT:
            name = self.names.resolve(f"{base}Input", TYPE_NAMESPACE, fallback="Input")
            gql_type = GraphQLInputObjectType(name, lambda: fields, description=description)
        else:
            name = self.names.resolve(base, TYPE_NAMESPACE, fallback="Object")
            gql_type = GraphQLObjectType(name, lambda: fields, description=description)

        self._cache[key] = gql_type
        self._pending.append((schema, category, pascal_case(base), gql_type, fields))
        return self._register(gql_type)

    def _fill_object(self, schema: ObjectSchema, category: str, base: str, gql_type: GraphQLNamedType, fields: dict) -> None:
        namespace = field_namespace(gql_type.name)
        for prop_name, prop_schema in schema.properties.items():
            field_name = self.names.resolve(prop_name, namespace, fallback="field")
            required = prop_name in schema.required
            field_type = self.field_type(prop_schema, category, base + pascal_case(prop_name), required)
            description = prop_schema.description or None
            if category == INPUT:
                fields[field_name] = GraphQLInputField(field_type, description=description, out_name=prop_name)
            else:
                fields[field_name] = GraphQLField(
                    field_type, description=description, extensions={"source_name": prop_name}
                )

        if schema.additional_properties:
            field_name = self.names.resolve("additionalProperties", namespace)
            description = "Properties not declared by the schema."
            if category == INPUT:
                fields[field_name] = GraphQLInputField(self._json(), description=description)
            else:
                fields[field_name] = GraphQLField(self._json(), description=description)

    def _map_union(self, schema: UnionSchema, category: str, hint: str) -> GraphQLType:
        key = (id(schema), category)
        if key in self._cache:
            return self._cache[key]
        if id(schema) in self._in_progress:
            raise CycleError(f"Union {schema.name or hint} contains itself without an object in between")

        base = schema.name or hint
        self._in_progress.add(id(schema))
        try:
            members = [
                self.map(member, category, f"{pascal_case(base)}Option{i}")
                for i, member in enumerate(schema.members, start=1)
            ]
        finally:
            self._in_progress.discard(id(schema))

        if not members:
            logger.debug("Union %s has no members besides null, using JSON", base)
            return self._json()
        if len(members) == 1:
            return members[0]
        if category == INPUT:
            logger.debug("Union %s in an input position, using JSON", base)
            return self._json()

        object_types: list[GraphQLObjectType] = []
        for member in members:
            if isinstance(member, GraphQLUnionType):
                candidates = list(member.types)
            elif isinstance(member, GraphQLObjectType):
                candidates = [member]
            else:
                logger.debug("Union %s has a non-object member %s, using JSON", base, member)
                return self._json()
            object_types.extend(t for t in candidates if t not in object_types)

        name = self.names.resolve(base, TYPE_NAMESPACE, fallback="Union")
        union_type = GraphQLUnionType(name, object_types, description=schema.description or None)
        self._cache[key] = union_type
        return self._register(union_type)

    # -- registry -------------------------------------------------------------

    def _json(self) -> GraphQLType:
        return self._register(GraphQLJSON)

    def _register(self, gql_type: GraphQLNamedType) -> GraphQLNamedType:
        self.types.setdefault(gql_type.name, gql_type)
        return gql_type


def _needs_64_bits(schema: ScalarSchema) -> bool:
    if schema.format == "int64":
        return True
    for bound in (schema.minimum, schema.maximum):
        if bound is not None and not INT32_MIN <= bound <= INT32_MAX:
            return True
    return False
