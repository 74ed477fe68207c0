"""Renders translation results as text."""

from graphql import GraphQLSchema, print_schema

from openapi_to_graphql.generator.assembler import TranslationResult


def print_sdl(schema: GraphQLSchema) -> str:
    """Print a schema in GraphQL SDL, ending with a newline."""
    return print_schema(schema) + "\n"


def dump_manifest(result: TranslationResult) -> str:
    """Serialize the resolver bindings of a result as indented JSON."""
    return result.manifest().model_dump_json(indent=2) + "\n"
