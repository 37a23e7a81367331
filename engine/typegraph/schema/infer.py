"""
Example-value type inference.

Infers object types from the records held in a node store. Each field's
GraphQL type is chosen from the values observed across all nodes of a type:

    {"name": "Ada", "age": 36, "born": "1815-12-10", "tags": ["math"],
     "address": {"city": "London"}}

    type Person implements Node {
      name: String
      age: Int
      born: Date
      tags: [String]
      address: PersonAddress
    }

Invariants:
    - Identity keys (id, parent, children, internal) and keys starting with
      "$" are never inferred; the enricher owns them
    - Int mixed with Float widens to Float; Date mixed with String widens
      to String
    - Any other mix of kinds is reported once and the field is left out
    - Output is deterministic for the same records

How to change safely:
    - New scalar kinds need a matching QueryOperatorInput in inputs.py
    - Keep nested type names `<Parent><Field>` so setFields paths agree
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from graphql import GraphQLError, assert_name

from ..reporting import DiagnosticKind, Reporter
from ..store.base import NodeStore
from .naming import upper_first
from .registry import NODE_INTERFACE
from .resolvers import maybe_await
from .types import FieldDef, ObjectTypeDef, TypeDef

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset(("id", "parent", "children", "internal"))

ISO_DATE = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)

_OBJECT = "object"
_CONFLICT = "!conflict"


def infer_value_kind(value: Any) -> Optional[str]:
    """Map an example value to a GraphQL scalar name, "object" or a list ref.

    Checks bool before int since bool is a subclass of int.

    Returns:
        "Boolean", "Int", "Float", "Date", "String", "object", "[<kind>]",
        or None when the value carries no type information
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Int"
    if isinstance(value, float):
        return "Float"
    if isinstance(value, str):
        return "Date" if ISO_DATE.match(value) else "String"
    if isinstance(value, dict):
        return _OBJECT
    if isinstance(value, (list, tuple)):
        kind = _merge_kinds([infer_value_kind(v) for v in value])
        if kind is None or kind == _CONFLICT:
            return kind
        return f"[{kind}]"
    return None


def _merge_kinds(kinds: Sequence[Optional[str]]) -> Optional[str]:
    seen = {k for k in kinds if k is not None}
    if not seen:
        return None
    if _CONFLICT in seen:
        return _CONFLICT
    if len(seen) == 1:
        return seen.pop()
    if seen == {"Int", "Float"}:
        return "Float"
    if seen == {"Date", "String"}:
        return "String"
    if all(k.startswith("[") for k in seen):
        inner = _merge_kinds([k[1:-1] for k in seen])
        return inner if inner == _CONFLICT else f"[{inner}]"
    return _CONFLICT


def _is_valid_field_name(name: str) -> bool:
    try:
        assert_name(name)
    except GraphQLError:
        return False
    return True


class ExampleValueInferrer:
    """Infer node types from example node records.

    Example:
        >>> store = InMemoryNodeStore([create_node("p1", "Person", name="Ada")])
        >>> [t.name for t in await ExampleValueInferrer().infer_types(store, LoggingReporter())]
        ['Person']
    """

    async def infer_types(self, node_store: NodeStore, reporter: Reporter) -> List[TypeDef]:
        """Infer every node type held in the store."""
        type_defs: List[TypeDef] = []
        for type_name in sorted(await maybe_await(node_store.get_types())):
            type_defs.extend(await self.infer_type(node_store, type_name, reporter))
        return type_defs

    async def infer_type(
        self, node_store: NodeStore, type_name: str, reporter: Reporter
    ) -> List[TypeDef]:
        """Infer one node type; the node type comes first, nested types after."""
        nodes = list(await maybe_await(node_store.get_nodes_by_type(type_name)) or ())
        type_defs: List[TypeDef] = []
        node_type = self._infer_object(type_name, nodes, reporter, type_defs, top_level=True)
        node_type.add_interface(NODE_INTERFACE)
        logger.debug(f"Inferred {type_name} from {len(nodes)} node(s): {node_type.get_field_names()}")
        return [node_type] + type_defs

    def _infer_object(
        self,
        type_name: str,
        records: Sequence[Dict[str, Any]],
        reporter: Reporter,
        nested_out: List[TypeDef],
        top_level: bool = False,
    ) -> ObjectTypeDef:
        examples: Dict[str, List[Any]] = {}
        for record in records:
            for key, value in record.items():
                if top_level and key in RESERVED_KEYS:
                    continue
                if key.startswith("$"):
                    continue
                examples.setdefault(key, []).append(value)

        fields: Dict[str, FieldDef] = {}
        for key in sorted(examples):
            if not _is_valid_field_name(key):
                logger.debug(f"Skipping field with invalid name on {type_name}: {key!r}")
                continue
            field_type = self._infer_field(type_name, key, examples[key], reporter, nested_out)
            if field_type is not None:
                fields[key] = FieldDef(key, field_type)
        return ObjectTypeDef(type_name, fields=fields)

    def _infer_field(
        self,
        type_name: str,
        key: str,
        values: List[Any],
        reporter: Reporter,
        nested_out: List[TypeDef],
    ) -> Optional[str]:
        kind = _merge_kinds([infer_value_kind(v) for v in values])
        if kind is None:
            return None
        if kind == _CONFLICT:
            reporter.warn(
                f"Field `{key}` on `{type_name}` has values of incompatible types and "
                "was not inferred. Define it explicitly to include it in the schema.",
                DiagnosticKind.INFERENCE_CONFLICT,
                type_name=type_name,
                field_name=key,
            )
            return None

        if kind.strip("[]") != _OBJECT:
            return kind

        nested_name = type_name + upper_first(key)
        nested_records = list(_flatten_objects(values))
        nested = self._infer_object(nested_name, nested_records, reporter, nested_out)
        if not nested.fields:
            return None
        nested_out.append(nested)
        return kind.replace(_OBJECT, nested_name)


def _flatten_objects(values: Sequence[Any]):
    for value in values:
        if isinstance(value, dict):
            yield value
        elif isinstance(value, (list, tuple)):
            yield from _flatten_objects(value)
