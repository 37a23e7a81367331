"""
The Node capability.

Owns the canonical identity field set every node type receives:

    interface Node {
      id: ID!
      parent: Node
      children: [Node!]!
      internal: Internal!
    }
"""

from __future__ import annotations

from typing import Dict

from .chain import ResolverChain
from .registry import NODE_INTERFACE, TypeRegistry
from .resolvers import link_many, resolve_parent
from .types import FieldDef, InterfaceTypeDef, ObjectTypeDef

INTERNAL_TYPE = "Internal"


def node_interface_fields() -> Dict[str, FieldDef]:
    return {
        "id": FieldDef("id", "ID!"),
        "parent": FieldDef("parent", NODE_INTERFACE, resolver=ResolverChain(base=resolve_parent)),
        "children": FieldDef(
            "children", f"[{NODE_INTERFACE}!]!", resolver=ResolverChain(base=link_many())
        ),
        "internal": FieldDef("internal", f"{INTERNAL_TYPE}!"),
    }


def internal_type() -> ObjectTypeDef:
    return ObjectTypeDef(
        name=INTERNAL_TYPE,
        fields={
            "content": "String",
            "contentDigest": "String!",
            "description": "String",
            "fieldOwners": "[String]",
            "ignoreType": "Boolean",
            "mediaType": "String",
            "owner": "String!",
            "type": "String!",
        },
    )


def install_node_interface(registry: TypeRegistry) -> None:
    """Add the Node interface and its Internal metadata type."""
    registry.add_internal(internal_type())
    registry.add_internal(
        InterfaceTypeDef(
            name=NODE_INTERFACE,
            fields=node_interface_fields(),
            description="Node Interface",
        )
    )


def add_node_interface_fields(type_def: ObjectTypeDef) -> None:
    """Give a node type the identity fields, replacing same-named fields."""
    type_def.add_interface(NODE_INTERFACE)
    type_def.add_fields(node_interface_fields())
