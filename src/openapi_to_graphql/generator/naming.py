"""Naming resolver: turns OpenAPI strings into valid, unique GraphQL names.

Names live in independent namespaces: "types" for every named type, and one
namespace per type for its fields, per field for its arguments, and per enum
for its values. Within a namespace the first assignment keeps the bare name
and later ones get a numeric suffix (Name2, Name3, ...).
"""

import logging
import re

from openapi_to_graphql.errors import NameCollisionError

logger = logging.getLogger(__name__)

TYPE_NAMESPACE = "types"

BUILTIN_TYPE_NAMES = ("Query", "Mutation", "Subscription", "String", "Int", "Float", "Boolean", "ID")

_INVALID_CHARS = re.compile(r"[^_0-9A-Za-z]+")
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def sanitize(raw: str, fallback: str = "unnamed") -> str:
    """Replace characters GraphQL does not allow in names.

    "pet-name" -> "pet_name", "1" -> "_1", "-" -> "_", "" -> fallback.
    """
    name = _INVALID_CHARS.sub("_", str(raw))
    if not name:
        return fallback
    if name.startswith("__"):
        # leading double underscore is reserved for introspection
        name = "_" + name.lstrip("_")
    if name[0].isdigit():
        name = "_" + name
    return name


def pascal_case(raw: str) -> str:
    """Join words with each first letter upper-cased: "pet-store items" -> "PetStoreItems"."""
    words = [w for w in _WORD_SPLIT.split(str(raw)) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def camel_case(raw: str) -> str:
    name = pascal_case(raw)
    return name[:1].lower() + name[1:]


def field_namespace(type_name: str) -> str:
    return f"{type_name}.fields"


def argument_namespace(type_name: str, field_name: str) -> str:
    return f"{type_name}.{field_name}.args"


def enum_namespace(enum_name: str) -> str:
    return f"{enum_name}.values"


class NameResolver:
    """Assigns unique names for one translation run."""

    def __init__(self, collision_policy: str = "suffix", max_suffix: int = 1000):
        self.collision_policy = collision_policy
        self.max_suffix = max_suffix
        self._taken: dict[str, set[str]] = {}

    def reserve(self, namespace: str, *names: str) -> None:
        """Mark names as used without assigning them."""
        self._taken.setdefault(namespace, set()).update(names)

    def is_taken(self, name: str, namespace: str) -> bool:
        return name in self._taken.get(namespace, ())

    def resolve(self, raw: str, namespace: str, fallback: str = "unnamed") -> str:
        """Assign a valid name for `raw` that is unused in `namespace`."""
        base = sanitize(raw, fallback)
        if base != raw:
            logger.debug("Sanitized name %r to %r", raw, base)

        taken = self._taken.setdefault(namespace, set())
        if base not in taken:
            taken.add(base)
            return base

        if self.collision_policy == "error":
            raise NameCollisionError(f"Name {base!r} is already used in {namespace}")

        for n in range(2, self.max_suffix + 1):
            candidate = f"{base}{n}"
            if candidate not in taken:
                taken.add(candidate)
                logger.info("Name %r already used in %s, renamed to %r", base, namespace, candidate)
                return candidate

        raise NameCollisionError(f"No free suffix for {base!r} in {namespace} (tried up to {self.max_suffix})")
