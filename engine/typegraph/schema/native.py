"""
Conversion of ready-made graphql-core types into type descriptors.

Used for native types passed as explicit definitions and for every type
imported from a third-party schema. Field resolvers, resolve_type and
is_type_of functions are carried over unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLUnionType,
)

from .chain import ResolverChain
from .types import (
    ArgumentDef,
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    TypeDef,
    UnionTypeDef,
)


def _argument(arg: GraphQLArgument) -> ArgumentDef:
    return ArgumentDef(
        type=str(arg.type),
        default=arg.default_value,
        description=arg.description or "",
    )


def _field(name: str, f: GraphQLField) -> FieldDef:
    return FieldDef(
        name=name,
        type=str(f.type),
        args={arg_name: _argument(arg) for arg_name, arg in f.args.items()},
        resolver=ResolverChain(base=f.resolve),
        description=f.description or "",
        deprecation_reason=f.deprecation_reason,
    )


def _input_field(name: str, f: GraphQLInputField) -> FieldDef:
    return FieldDef(
        name=name,
        type=str(f.type),
        default=f.default_value,
        description=f.description or "",
    )


def fields_from_graphql(fields: Dict[str, GraphQLField]) -> Dict[str, FieldDef]:
    return {name: _field(name, f) for name, f in fields.items()}


def _resolve_type_by_name(resolve_type: Optional[Any]) -> Optional[Any]:
    """Adapt a resolve_type that may return type objects to return names."""
    if resolve_type is None:
        return None

    def resolve(value: Any, info: Any, abstract_type: Any) -> Any:
        result = resolve_type(value, info, abstract_type)
        if isinstance(result, GraphQLObjectType):
            return result.name
        return result

    return resolve


def from_graphql_type(named_type: GraphQLNamedType) -> TypeDef:
    """Convert a graphql-core named type into the matching descriptor.

    Raises:
        TypeError: For types that are not named schema types
    """
    description = named_type.description or ""

    if isinstance(named_type, GraphQLObjectType):
        return ObjectTypeDef(
            name=named_type.name,
            fields=fields_from_graphql(named_type.fields),
            interfaces=tuple(i.name for i in named_type.interfaces),
            description=description,
            is_type_of=named_type.is_type_of,
        )
    if isinstance(named_type, GraphQLInterfaceType):
        return InterfaceTypeDef(
            name=named_type.name,
            fields=fields_from_graphql(named_type.fields),
            interfaces=tuple(i.name for i in named_type.interfaces),
            description=description,
            resolve_type=_resolve_type_by_name(named_type.resolve_type),
        )
    if isinstance(named_type, GraphQLUnionType):
        return UnionTypeDef(
            name=named_type.name,
            types=tuple(t.name for t in named_type.types),
            description=description,
            resolve_type=_resolve_type_by_name(named_type.resolve_type),
        )
    if isinstance(named_type, GraphQLInputObjectType):
        return InputObjectTypeDef(
            name=named_type.name,
            fields={name: _input_field(name, f) for name, f in named_type.fields.items()},
            description=description,
        )
    if isinstance(named_type, GraphQLEnumType):
        return EnumTypeDef(
            name=named_type.name,
            values={name: value.value for name, value in named_type.values.items()},
            description=description,
        )
    if isinstance(named_type, GraphQLScalarType):
        return ScalarTypeDef(name=named_type.name, description=description, native=named_type)
    raise TypeError(f"Illegal type definition: {named_type!r}")
