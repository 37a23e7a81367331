"""
Node-type enrichment.

Gives every node type the uniform query capabilities:

    1. identity fields (id, parent, children, internal)
    2. generated inputs and envelopes, plus the findOne and
       findManyPaginated named resolvers
    3. child<T> / children<T> relationship fields
    4. root query fields <t> and all<T>

Invariants:
    - Enriching a type twice yields the same registry contents; generated
      types from a previous pass are dropped before being recreated
    - Only the type being enriched, its owned generated types, the shared
      generated types and Query are written
    - Steps 1 and 2 never await, so concurrent enrichment of different
      types cannot observe another type's half-built inputs

How to change safely:
    - Keep step order; pagination reads the FieldsEnum made by the sort step
    - New relationship kinds belong in step 3 and must be derivable from
      stored nodes alone
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from ..reporting import DiagnosticKind, Reporter
from ..store.base import NodeStore, node_type_of
from .chain import ResolverChain
from .inputs import get_filter_input, get_sort_input
from .naming import camel_case
from .node_interface import add_node_interface_fields
from .pagination import get_pagination
from .registry import TypeRegistry
from .resolvers import find_many_paginated, find_one, link_many, link_one, maybe_await
from .types import FieldDef, NamedResolver, ObjectTypeDef, TypeDef

logger = logging.getLogger(__name__)

FIND_ONE = "findOne"
FIND_MANY_PAGINATED = "findManyPaginated"

Synthesizer = Callable[[TypeRegistry, ObjectTypeDef], TypeDef]


@dataclass(frozen=True)
class InputSynthesizers:
    """Generators for a node type's sort input, filter input and connection."""

    sort: Synthesizer = get_sort_input
    filter: Synthesizer = get_filter_input
    pagination: Synthesizer = get_pagination


def root_query_names(type_name: str) -> tuple[str, str]:
    """Single and plural root field names: Person -> (person, allPerson)."""
    return camel_case(type_name), camel_case(f"all {type_name}")


class NodeTypeEnricher:
    """Applies the enrichment steps to node types of one registry."""

    def __init__(
        self,
        registry: TypeRegistry,
        node_store: NodeStore,
        reporter: Reporter,
        synthesizers: InputSynthesizers = InputSynthesizers(),
    ) -> None:
        self.registry = registry
        self.node_store = node_store
        self.reporter = reporter
        self.synthesizers = synthesizers

    async def process(self, type_name: str) -> None:
        """Run every enrichment step for one node type."""
        type_def = self.registry.get_object(type_name)
        if not type_def.is_node_type:
            return
        add_node_interface_fields(type_def)
        self.add_resolvers(type_def)
        await self.add_children_fields(type_def)
        self.add_to_root_query(type_def)
        logger.debug(f"Enriched node type {type_name}")

    def add_resolvers(self, type_def: ObjectTypeDef) -> None:
        name = type_def.name
        removed = self.registry.remove_generated(name)
        if removed:
            logger.debug(f"Dropped generated types of {name}: {removed}")

        sort_input = self.synthesizers.sort(self.registry, type_def)
        filter_input = self.synthesizers.filter(self.registry, type_def)
        connection = self.synthesizers.pagination(self.registry, type_def)

        type_def.add_resolver(
            NamedResolver(
                name=FIND_ONE,
                type=name,
                args={f.name: f.type for f in filter_input.fields.values()},
                resolve=find_one(name),
            )
        )
        type_def.add_resolver(
            NamedResolver(
                name=FIND_MANY_PAGINATED,
                type=f"{connection.name}!",
                args={
                    "filter": filter_input.name,
                    "sort": sort_input.name,
                    "skip": "Int",
                    "limit": "Int",
                },
                resolve=find_many_paginated(name),
            )
        )

    async def add_children_fields(self, type_def: ObjectTypeDef) -> None:
        """Replace the child<T>/children<T> fields with ones derived from the live child nodes."""
        children_by_type = await self._group_child_nodes_by_type(type_def.name)
        for stale in self.registry.take_relationship_fields(type_def.name):
            type_def.remove_field(stale)
        fields: Dict[str, FieldDef] = {}
        for child_type, children in children_by_type.items():
            if child_type is None or child_type not in self.registry:
                self.reporter.warn(
                    f"Child nodes of `{type_def.name}` have type `{child_type}`, which is "
                    "not in the schema. No relationship field was added.",
                    DiagnosticKind.UNKNOWN_CHILD_TYPE,
                    type_name=type_def.name,
                )
                continue
            max_child_count = max(Counter(child.get("parent") for child in children).values())
            if max_child_count > 1:
                field_name = camel_case(f"children {child_type}")
                fields[field_name] = FieldDef(
                    field_name,
                    f"[{child_type}]",
                    resolver=ResolverChain(base=link_many(child_type)),
                )
            else:
                field_name = camel_case(f"child {child_type}")
                fields[field_name] = FieldDef(
                    field_name,
                    child_type,
                    resolver=ResolverChain(base=link_one(child_type)),
                )
        type_def.add_fields(fields)
        self.registry.record_relationship_fields(type_def.name, fields)

    async def _group_child_nodes_by_type(self, type_name: str) -> Dict[Any, List[dict]]:
        nodes = await maybe_await(self.node_store.get_nodes_by_type(type_name))
        grouped: Dict[Any, List[dict]] = {}
        for node in nodes or ():
            for child_id in node.get("children") or ():
                child = await maybe_await(self.node_store.get_node(child_id))
                if child is None:
                    continue
                grouped.setdefault(node_type_of(child), []).append(child)
        return grouped

    def add_to_root_query(self, type_def: ObjectTypeDef) -> None:
        single, plural = root_query_names(type_def.name)
        self.registry.query.add_fields(
            {
                single: type_def.get_resolver(FIND_ONE).to_field(single),
                plural: type_def.get_resolver(FIND_MANY_PAGINATED).to_field(plural),
            }
        )
