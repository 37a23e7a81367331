"""
Finalization of a TypeRegistry into a graphql-core GraphQLSchema.

Type references are SDL text until this point. Every named type is created
first with thunked fields, interfaces and members; references are then
resolved by name on first access, so cycles (Person.friends: [Person]) and
forward references need no ordering.

Invariants:
    - Every registered type is part of the schema, referenced or not
    - The returned schema has passed graphql-core validation
    - Descriptors are not modified
"""

from __future__ import annotations

import logging
from typing import Dict, List

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLFloat,
    GraphQLID,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
    GraphQLUnionType,
    ListTypeNode,
    NonNullTypeNode,
    parse_type,
    print_schema,
    validate_schema,
)

from ..errors import SchemaValidationError
from .registry import TypeRegistry
from .types import (
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    TypeDef,
    UnionTypeDef,
)

logger = logging.getLogger(__name__)


class _SchemaAssembler:
    def __init__(self, registry: TypeRegistry) -> None:
        self.registry = registry
        self.type_map: Dict[str, GraphQLNamedType] = {
            t.name: t for t in (GraphQLString, GraphQLInt, GraphQLFloat, GraphQLBoolean, GraphQLID)
        }

    def resolve(self, ref: str):
        return self._from_node(parse_type(ref))

    def _from_node(self, node):
        if isinstance(node, NonNullTypeNode):
            return GraphQLNonNull(self._from_node(node.type))
        if isinstance(node, ListTypeNode):
            return GraphQLList(self._from_node(node.type))
        return self.type_map[node.name.value]

    def _field(self, f: FieldDef) -> GraphQLField:
        return GraphQLField(
            self.resolve(f.type),
            args={
                name: GraphQLArgument(
                    self.resolve(arg.type),
                    default_value=arg.default,
                    description=arg.description or None,
                )
                for name, arg in f.args.items()
            },
            resolve=f.resolver.compose(),
            description=f.description or None,
            deprecation_reason=f.deprecation_reason,
        )

    def _input_field(self, f: FieldDef) -> GraphQLInputField:
        return GraphQLInputField(
            self.resolve(f.type),
            default_value=f.default,
            description=f.description or None,
        )

    def create(self, type_def: TypeDef) -> GraphQLNamedType:
        description = type_def.description or None

        if isinstance(type_def, ObjectTypeDef):
            return GraphQLObjectType(
                type_def.name,
                fields=lambda: {n: self._field(f) for n, f in type_def.fields.items()},
                interfaces=lambda: [self.type_map[i] for i in type_def.interfaces],
                is_type_of=type_def.is_type_of,
                description=description,
            )
        if isinstance(type_def, InterfaceTypeDef):
            return GraphQLInterfaceType(
                type_def.name,
                fields=lambda: {n: self._field(f) for n, f in type_def.fields.items()},
                interfaces=lambda: [self.type_map[i] for i in type_def.interfaces],
                resolve_type=type_def.resolve_type,
                description=description,
            )
        if isinstance(type_def, UnionTypeDef):
            return GraphQLUnionType(
                type_def.name,
                types=lambda: [self.type_map[t] for t in type_def.types],
                resolve_type=type_def.resolve_type,
                description=description,
            )
        if isinstance(type_def, InputObjectTypeDef):
            return GraphQLInputObjectType(
                type_def.name,
                fields=lambda: {n: self._input_field(f) for n, f in type_def.fields.items()},
                description=description,
            )
        if isinstance(type_def, EnumTypeDef):
            return GraphQLEnumType(
                type_def.name,
                values={name: GraphQLEnumValue(value) for name, value in type_def.values.items()},
                description=description,
            )
        if isinstance(type_def, ScalarTypeDef):
            if type_def.native is not None:
                return type_def.native
            return GraphQLScalarType(type_def.name, description=description)
        raise TypeError(f"Cannot finalize {type_def!r}")

    def assemble(self) -> GraphQLSchema:
        for type_def in self.registry.values():
            self.type_map[type_def.name] = self.create(type_def)
        query = self.type_map[self.registry.query_type_name]
        types: List[GraphQLNamedType] = [self.type_map[name] for name in self.registry.must_have]
        return GraphQLSchema(query=query, types=types)


def to_graphql_schema(registry: TypeRegistry, print_sdl: bool = False) -> GraphQLSchema:
    """Build and validate the executable schema.

    Raises:
        SchemaValidationError: On dangling references or invalid schema shape
    """
    errors = registry.validate_all()
    if errors:
        raise SchemaValidationError(errors)

    schema = _SchemaAssembler(registry).assemble()
    validation_errors = validate_schema(schema)
    if validation_errors:
        raise SchemaValidationError([e.message for e in validation_errors])

    if print_sdl:
        logger.debug(f"Finalized schema:\n{print_schema(schema)}")
    return schema
