"""
Third-party schema merge.

Every root query field of a foreign schema is copied onto the local Query
type. Every other named type of the foreign schema is imported and tagged
foreign, so createResolvers can later retarget its fields freely.

Skipped when importing: the foreign query type itself, the specified
scalars (String, Int, ...) and introspection types.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from graphql import GraphQLScalarType, GraphQLSchema, is_introspection_type, is_specified_scalar_type

from ..errors import NameConflictError
from ..reporting import DiagnosticKind, Reporter
from .native import fields_from_graphql, from_graphql_type
from .registry import TypeRegistry

logger = logging.getLogger(__name__)


def add_third_party_schema(
    registry: TypeRegistry, schema: GraphQLSchema, reporter: Reporter
) -> List[str]:
    """Merge one foreign schema.

    Returns:
        Names of the imported types
    """
    query_type = schema.query_type
    if query_type is not None:
        registry.query.add_fields(fields_from_graphql(query_type.fields))

    imported = []
    for name, named_type in schema.type_map.items():
        if named_type is query_type:
            continue
        if is_specified_scalar_type(named_type) or is_introspection_type(named_type):
            continue
        if name in registry:
            if isinstance(named_type, GraphQLScalarType):
                reporter.warn(
                    f"Third-party scalar `{name}` already exists in the schema and was skipped.",
                    DiagnosticKind.FOREIGN_TYPE_SKIPPED,
                    type_name=name,
                )
                continue
            error = NameConflictError(
                f"Third-party type `{name}` collides with an existing type of the same name.",
                type_name=name,
                rule="duplicate-name",
            )
            reporter.panic(error.message, error=error, kind=DiagnosticKind.NAME_CONFLICT)
        imported.append(registry.add_foreign(from_graphql_type(named_type)))

    logger.info(
        f"Merged third-party schema: {len(query_type.fields) if query_type else 0} "
        f"root field(s), {len(imported)} type(s)"
    )
    return imported


async def add_third_party_schemas(
    registry: TypeRegistry, schemas: Iterable[GraphQLSchema], reporter: Reporter
) -> List[str]:
    imported = []
    for schema in schemas:
        imported.extend(add_third_party_schema(registry, schema, reporter))
    return imported
