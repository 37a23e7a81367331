"""
Default pagination envelope synthesizer.

For a node type `Person`:

    type PersonConnection {
      totalCount: Int!
      edges: [PersonEdge!]!
      nodes: [Person!]!
      pageInfo: PageInfo!
      distinct(field: PersonFieldsEnum!): [String!]!
    }

`distinct` is only offered once the sort synthesizer has produced the
type's FieldsEnum. PageInfo is shared; the edge and connection types are
owned by the node type.
"""

from __future__ import annotations

from .chain import ResolverChain
from .inputs import fields_enum_name
from .registry import TypeRegistry
from .resolvers import distinct
from .types import FieldDef, ObjectTypeDef

PAGE_INFO = "PageInfo"


def connection_name(type_name: str) -> str:
    return f"{type_name}Connection"


def edge_name(type_name: str) -> str:
    return f"{type_name}Edge"


def page_info_type() -> ObjectTypeDef:
    return ObjectTypeDef(
        PAGE_INFO,
        fields={
            "currentPage": "Int!",
            "hasPreviousPage": "Boolean!",
            "hasNextPage": "Boolean!",
            "itemCount": "Int!",
            "pageCount": "Int!",
            "perPage": "Int",
        },
    )


def get_pagination(registry: TypeRegistry, type_def: ObjectTypeDef) -> ObjectTypeDef:
    """Synthesize `<T>Edge` and `<T>Connection` (plus the shared PageInfo)."""
    name = type_def.name
    registry.ensure_shared(page_info_type())

    edge = ObjectTypeDef(
        edge_name(name),
        fields={"next": name, "node": f"{name}!", "previous": name},
    )
    registry.add_generated(edge, owner=name)

    fields = {
        "totalCount": FieldDef("totalCount", "Int!"),
        "edges": FieldDef("edges", f"[{edge.name}!]!"),
        "nodes": FieldDef("nodes", f"[{name}!]!"),
        "pageInfo": FieldDef("pageInfo", f"{PAGE_INFO}!"),
    }
    enum_name = fields_enum_name(name)
    if registry.is_generated(enum_name):
        fields["distinct"] = FieldDef(
            "distinct",
            "[String!]!",
            args={"field": f"{enum_name}!"},
            resolver=ResolverChain(base=distinct),
        )

    connection = ObjectTypeDef(connection_name(name), fields=fields)
    registry.add_generated(connection, owner=name)
    return connection
