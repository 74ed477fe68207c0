"""High-level entry points: file in, GraphQL schema out."""

import logging
from pathlib import Path

from graphql import GraphQLSchema

from openapi_to_graphql.generator.assembler import SchemaAssembler, TranslationResult
from openapi_to_graphql.options import TranslationOptions
from openapi_to_graphql.parser.swagger import load_document

logger = logging.getLogger(__name__)


def translate_file(file_path: Path, options: TranslationOptions | None = None) -> TranslationResult:
    """Load an OpenAPI/Swagger file and translate it."""
    options = options or TranslationOptions()
    logger.info("Loading %s from %s", options.source_name, file_path)
    document = load_document(Path(file_path))
    return SchemaAssembler(options).assemble(document)


def load_graphql_schema_from_openapi(name: str, source: Path | str, **options) -> GraphQLSchema:
    """Build a GraphQL schema for the API described by `source`.

    Extra keyword arguments are TranslationOptions fields.
    """
    result = translate_file(Path(source), TranslationOptions(source_name=name, **options))
    return result.schema
