"""
Default filter and sort input synthesizers.

For a node type `Person { name: String, age: Int, internal: Internal! }`:

    input PersonFilterInput {
      name: StringQueryOperatorInput
      age: IntQueryOperatorInput
      internal: InternalFilterInput
    }

    enum PersonFieldsEnum { name age internal___type ... }

    input PersonSortInput {
      fields: [PersonFieldsEnum]
      order: [SortOrderEnum] = [ASC]
    }

Operator inputs and SortOrderEnum are shared by all node types; every other
generated type is owned by the node type it was built for.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional

from .registry import SPECIFIED_SCALARS, TypeRegistry
from .types import (
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
)

MAX_SORT_DEPTH = 3
SORT_ORDER_ENUM = "SortOrderEnum"

_EQUALITY = ("eq", "ne", "in", "nin")
_ORDERED = _EQUALITY + ("gt", "gte", "lt", "lte")
OPERATORS_BY_SCALAR = {
    "String": _EQUALITY + ("regex", "glob"),
    "Int": _ORDERED,
    "Float": _ORDERED,
    "Date": _ORDERED,
    "ID": _EQUALITY,
    "Boolean": _EQUALITY,
    "JSON": _EQUALITY,
}

# Names GraphQL does not allow as enum values.
_INVALID_ENUM_VALUES = frozenset(("true", "false", "null"))


def filter_input_name(type_name: str) -> str:
    return f"{type_name}FilterInput"


def sort_input_name(type_name: str) -> str:
    return f"{type_name}SortInput"


def fields_enum_name(type_name: str) -> str:
    return f"{type_name}FieldsEnum"


def _is_leaf(registry: TypeRegistry, name: str) -> bool:
    return name in SPECIFIED_SCALARS or isinstance(registry.get(name), (ScalarTypeDef, EnumTypeDef))


def operator_input(registry: TypeRegistry, leaf_type: str) -> str:
    """Ensure the shared `<Leaf>QueryOperatorInput` type exists and return its name."""
    name = f"{leaf_type}QueryOperatorInput"
    operators = OPERATORS_BY_SCALAR.get(leaf_type, _EQUALITY)
    fields: Dict[str, FieldDef] = {}
    for op in operators:
        if op in ("in", "nin"):
            fields[op] = FieldDef(op, f"[{leaf_type}]")
        elif op in ("regex", "glob"):
            fields[op] = FieldDef(op, "String")
        else:
            fields[op] = FieldDef(op, leaf_type)
    registry.ensure_shared(InputObjectTypeDef(name, fields=fields))
    return name


def _filter_fields(
    registry: TypeRegistry,
    type_def: ObjectTypeDef,
    owner: str,
    seen: FrozenSet[str],
) -> Dict[str, FieldDef]:
    fields: Dict[str, FieldDef] = {}
    for f in type_def.fields.values():
        named = f.named_type
        if _is_leaf(registry, named):
            fields[f.name] = FieldDef(f.name, operator_input(registry, named))
            continue
        target = registry.get(named)
        if isinstance(target, ObjectTypeDef) and not target.is_node_type and named not in seen:
            nested = _nested_filter(registry, target, owner, seen | {named})
            if nested is not None:
                fields[f.name] = FieldDef(f.name, nested)
    return fields


def _nested_filter(
    registry: TypeRegistry,
    type_def: ObjectTypeDef,
    owner: str,
    seen: FrozenSet[str],
) -> Optional[str]:
    fields = _filter_fields(registry, type_def, owner, seen)
    if not fields:
        return None
    name = filter_input_name(type_def.name)
    registry.add_generated(InputObjectTypeDef(name, fields=fields), owner=owner)
    return name


def get_filter_input(registry: TypeRegistry, type_def: ObjectTypeDef) -> InputObjectTypeDef:
    """Synthesize `<T>FilterInput` from the type's current fields."""
    fields = _filter_fields(registry, type_def, type_def.name, frozenset({type_def.name}))
    filter_input = InputObjectTypeDef(filter_input_name(type_def.name), fields=fields)
    registry.add_generated(filter_input, owner=type_def.name)
    return filter_input


def sortable_paths(
    registry: TypeRegistry,
    type_def: ObjectTypeDef,
    prefix: str = "",
    depth: int = 1,
    seen: FrozenSet[str] = frozenset(),
) -> List[str]:
    """Leaf field paths joined with `___`, following nested non-node objects."""
    paths = []
    for f in type_def.fields.values():
        named = f.named_type
        path = prefix + f.name
        if _is_leaf(registry, named):
            if path not in _INVALID_ENUM_VALUES:
                paths.append(path)
            continue
        target = registry.get(named)
        if (
            isinstance(target, ObjectTypeDef)
            and not target.is_node_type
            and named not in seen
            and depth < MAX_SORT_DEPTH
        ):
            paths.extend(
                sortable_paths(registry, target, path + "___", depth + 1, seen | {named})
            )
    return paths


def get_sort_input(registry: TypeRegistry, type_def: ObjectTypeDef) -> InputObjectTypeDef:
    """Synthesize `<T>FieldsEnum` and `<T>SortInput`."""
    registry.ensure_shared(EnumTypeDef(SORT_ORDER_ENUM, values=["ASC", "DESC"]))

    enum_name = fields_enum_name(type_def.name)
    paths = sortable_paths(registry, type_def, seen=frozenset({type_def.name}))
    registry.add_generated(EnumTypeDef(enum_name, values=paths), owner=type_def.name)

    sort_input = InputObjectTypeDef(
        sort_input_name(type_def.name),
        fields={
            "fields": FieldDef("fields", f"[{enum_name}]"),
            "order": FieldDef("order", f"[{SORT_ORDER_ENUM}]", default=["ASC"]),
        },
    )
    registry.add_generated(sort_input, owner=type_def.name)
    return sort_input
