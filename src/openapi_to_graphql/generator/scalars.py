"""Custom scalars for OpenAPI formats GraphQL has no built-in type for."""

import base64
import binascii
from datetime import datetime

from graphql import GraphQLError, GraphQLScalarType, StringValueNode, IntValueNode
from graphql.utilities import value_from_ast_untyped


def _serialize_datetime(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise GraphQLError(f"DateTime cannot represent value: {value!r}")


def _parse_datetime(value):
    if not isinstance(value, str):
        raise GraphQLError(f"DateTime must be a string, got: {value!r}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise GraphQLError(f"DateTime is not an ISO 8601 date-time: {value!r}") from e


def _parse_datetime_literal(node, _variables=None):
    if not isinstance(node, StringValueNode):
        raise GraphQLError("DateTime literal must be a string")
    return _parse_datetime(node.value)


def _coerce_bigint(value):
    if isinstance(value, bool):
        raise GraphQLError(f"BigInt cannot represent value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as e:
            raise GraphQLError(f"BigInt cannot represent value: {value!r}") from e
    raise GraphQLError(f"BigInt cannot represent value: {value!r}")


def _parse_bigint_literal(node, _variables=None):
    if not isinstance(node, (IntValueNode, StringValueNode)):
        raise GraphQLError("BigInt literal must be an integer or a string")
    return _coerce_bigint(node.value)


def _serialize_byte(value):
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, str):
        return value
    raise GraphQLError(f"Byte cannot represent value: {value!r}")


def _parse_byte(value):
    if not isinstance(value, str):
        raise GraphQLError(f"Byte must be a base64 string, got: {value!r}")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise GraphQLError(f"Byte is not valid base64: {value!r}") from e


def _parse_byte_literal(node, _variables=None):
    if not isinstance(node, StringValueNode):
        raise GraphQLError("Byte literal must be a string")
    return _parse_byte(node.value)


GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="Any JSON value: free-form objects and schemas without a GraphQL mapping.",
    serialize=lambda value: value,
    parse_value=lambda value: value,
    parse_literal=value_from_ast_untyped,
    specified_by_url="https://www.rfc-editor.org/rfc/rfc8259",
)

GraphQLDateTime = GraphQLScalarType(
    name="DateTime",
    description="Date and time in ISO 8601 form (OpenAPI format date-time).",
    serialize=_serialize_datetime,
    parse_value=_parse_datetime,
    parse_literal=_parse_datetime_literal,
    specified_by_url="https://www.rfc-editor.org/rfc/rfc3339",
)

GraphQLBigInt = GraphQLScalarType(
    name="BigInt",
    description="Integer that may not fit in 32 bits (OpenAPI format int64).",
    serialize=_coerce_bigint,
    parse_value=_coerce_bigint,
    parse_literal=_parse_bigint_literal,
)

GraphQLByte = GraphQLScalarType(
    name="Byte",
    description="Base64-encoded binary data (OpenAPI format byte).",
    serialize=_serialize_byte,
    parse_value=_parse_byte,
    parse_literal=_parse_byte_literal,
)

CUSTOM_SCALARS = {
    scalar.name: scalar for scalar in (GraphQLJSON, GraphQLDateTime, GraphQLBigInt, GraphQLByte)
}
