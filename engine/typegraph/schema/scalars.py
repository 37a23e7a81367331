"""
Built-in Date and JSON scalars.

Both names are reserved: callers can use them in type references but never
define types called Date or JSON themselves.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from graphql import GraphQLError, GraphQLScalarType, StringValueNode, value_from_ast_untyped


def serialize_date(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise GraphQLError(f"Date cannot represent value: {value!r}")


def parse_date_value(value: Any) -> str:
    if not isinstance(value, str):
        raise GraphQLError(f"Date cannot represent non-string value: {value!r}")
    return value


def parse_date_literal(value_node: Any, _variables: Any = None) -> str:
    if not isinstance(value_node, StringValueNode):
        raise GraphQLError("Date cannot represent a non-string literal", value_node)
    return value_node.value


GraphQLDate = GraphQLScalarType(
    name="Date",
    description=(
        "A date string, such as 2007-12-03, compliant with the ISO 8601 standard "
        "for representation of dates and times using the Gregorian calendar."
    ),
    serialize=serialize_date,
    parse_value=parse_date_value,
    parse_literal=parse_date_literal,
)

GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="Arbitrary JSON value.",
    serialize=lambda value: value,
    parse_value=lambda value: value,
    parse_literal=value_from_ast_untyped,
)
