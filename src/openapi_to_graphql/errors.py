"""Errors raised while loading an OpenAPI document or translating it.

Every error aborts the whole translation run. Renaming and sanitising
identifiers are normal outcomes and are logged instead of raised.
"""


class TranslationError(Exception):
    """Base class for all translation failures."""


class DocumentLoadError(TranslationError):
    """The source document cannot be read or dereferenced."""


class CycleError(TranslationError):
    """A schema refers to itself without an object type in between."""


class NameCollisionError(TranslationError):
    """A unique name could not be assigned."""


class UnsupportedSchemaConstructError(TranslationError):
    """A schema construct has no GraphQL mapping."""


class EmptySchemaError(TranslationError):
    """The document yields no query or mutation fields."""


class SchemaValidationError(TranslationError):
    """The assembled schema breaks GraphQL type-system rules."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid GraphQL schema:\n" + "\n".join(f"  - {e}" for e in errors))
