"""
Node storage protocols.

Nodes are plain dictionaries:

    {
        "id": "person-1",
        "parent": None,
        "children": ["pet-1", "pet-2"],
        "internal": {"type": "Person", "contentDigest": "...", "owner": "source-fs"},
        "name": "Ada",
    }

Relationships are ids only; nothing holds a reference to another node.

Two views of storage are used:
- NodeStore: what the schema builder reads at build time
- NodeModel: what generated resolvers call at query time

Invariants:
    - Every node has a unique "id" and an "internal.type" tag
    - "children" is an ordered list of node ids
    - Methods may return awaitables; callers await them

How to change safely:
    - Protocol changes require updating all implementations
    - Keep lookups side-effect free
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

Node = Dict[str, Any]


@runtime_checkable
class NodeStore(Protocol):
    """Build-time access to stored nodes."""

    def get_types(self) -> Sequence[str]:
        """Names of every node type with at least one node."""
        ...

    def get_nodes_by_type(self, type_name: str) -> Sequence[Node]:
        ...

    def get_node(self, node_id: str) -> Optional[Node]:
        ...

    def get_nodes_by_ids(
        self,
        ids: Iterable[str],
        type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Sequence[Node]:
        ...


@runtime_checkable
class NodeModel(Protocol):
    """Query-time node lookup used by generated resolvers."""

    def get_node_by_id(
        self,
        node_id: str,
        type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Optional[Node]:
        ...

    def get_nodes_by_ids(
        self,
        ids: Iterable[str],
        type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Sequence[Node]:
        ...

    def run_query(
        self,
        args: Mapping[str, Any],
        type_name: str,
        first_only: bool = False,
        path: Optional[str] = None,
    ) -> Any:
        ...


def node_type_of(node: Mapping[str, Any]) -> Optional[str]:
    internal = node.get("internal")
    if isinstance(internal, Mapping):
        return internal.get("type")
    return None


def get_path_value(node: Any, path: Sequence[str]) -> Any:
    """Follow a field path through nested dicts; lists are mapped element-wise."""
    value = node
    for part in path:
        if value is None:
            return None
        if isinstance(value, list):
            value = [get_path_value(v, [part]) for v in value]
            continue
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def content_digest(payload: Mapping[str, Any]) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


def create_node(
    node_id: str,
    type_name: str,
    *,
    parent: Optional[str] = None,
    children: Sequence[str] = (),
    owner: str = "default-site-plugin",
    **fields: Any,
) -> Node:
    """Build a node dictionary with its internal metadata filled in.

    Example:
        >>> create_node("p1", "Person", children=["pet1"], name="Ada")["internal"]["type"]
        'Person'
    """
    node: Node = dict(fields)
    node["id"] = node_id
    node["parent"] = parent
    node["children"] = list(children)
    node["internal"] = {
        "type": type_name,
        "owner": owner,
        "contentDigest": content_digest(fields),
    }
    return node


def validate_node(node: Mapping[str, Any]) -> List[str]:
    """Check the minimal node contract.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    if not node.get("id"):
        errors.append("Node has no 'id'")
    if not node_type_of(node):
        errors.append(f"Node '{node.get('id')}' has no 'internal.type'")
    children = node.get("children", [])
    if children is not None and not isinstance(children, list):
        errors.append(f"Node '{node.get('id')}' 'children' must be a list of ids")
    return errors
