"""Validates the assembled type graph before and after schema construction."""

from graphql import (
    GraphQLInputObjectType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLUnionType,
    get_named_type,
    is_specified_scalar_type,
    validate_schema,
)


def collect_named_types(roots: list[GraphQLNamedType]) -> list[GraphQLNamedType]:
    """Walk every named type reachable from `roots`, in discovery order."""
    seen: list[GraphQLNamedType] = []
    seen_ids: set[int] = set()
    stack = list(reversed(roots))
    while stack:
        named = stack.pop()
        if id(named) in seen_ids:
            continue
        seen_ids.add(id(named))
        seen.append(named)

        referenced = []
        if isinstance(named, GraphQLObjectType):
            for field in named.fields.values():
                referenced.append(get_named_type(field.type))
                referenced.extend(get_named_type(arg.type) for arg in field.args.values())
        elif isinstance(named, GraphQLInputObjectType):
            referenced.extend(get_named_type(field.type) for field in named.fields.values())
        elif isinstance(named, GraphQLUnionType):
            referenced.extend(named.types)
        stack.extend(reversed(referenced))
    return seen


def find_duplicate_names(defined: dict[str, GraphQLNamedType], roots: list[GraphQLNamedType]) -> list[str]:
    """Return names carried by more than one distinct type."""
    by_name: dict[str, GraphQLNamedType] = {}
    duplicates = []
    for named in collect_named_types([*roots, *defined.values()]):
        first = by_name.setdefault(named.name, named)
        if first is not named and named.name not in duplicates:
            duplicates.append(named.name)
    return duplicates


def validate_closure(defined: dict[str, GraphQLNamedType], roots: list[GraphQLNamedType]) -> dict[str, str]:
    """Check that every type reachable from the roots or the registry is registered.

    Returns dict of {type_name: error_message} for referenced types nobody defined.
    """
    errors = {}
    for named in collect_named_types([*roots, *defined.values()]):
        if any(named is root for root in roots) or is_specified_scalar_type(named):
            continue
        if named.name not in defined:
            errors[named.name] = f"Type {named.name!r} is referenced but never defined"
    return errors


def validate_schema_model(schema: GraphQLSchema) -> list[str]:
    """Run graphql-core's type-system validation.

    Returns the list of error messages, empty when the schema is valid.
    """
    return [error.message for error in validate_schema(schema)]
