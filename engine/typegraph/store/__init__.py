"""
Node storage for typegraph.

- NodeStore / NodeModel protocols consumed by the schema builder and by
  generated resolvers
- InMemoryNodeStore, a dictionary-backed implementation of both
"""

from .base import Node, NodeModel, NodeStore, create_node, get_path_value, node_type_of
from .memory import InMemoryNodeStore

__all__ = [
    "Node",
    "NodeModel",
    "NodeStore",
    "InMemoryNodeStore",
    "create_node",
    "get_path_value",
    "node_type_of",
]
