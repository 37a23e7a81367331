"""
In-memory node store.

This module provides a simple in-memory node backend for:
- Unit tests
- Integration tests that execute queries against a built schema
- The schema CLI, which loads nodes from a project file

It implements both NodeStore (build time) and NodeModel (query time).

Invariants:
    - All data is lost on process exit
    - Nodes are returned in insertion order unless a sort is requested
    - Node ids are unique; adding an existing id replaces the node

How to change safely:
    - Keep interface compatible with the NodeStore and NodeModel protocols
    - Keep filter semantics aligned with the generated QueryOperatorInput types
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .base import Node, get_path_value, node_type_of, validate_node

logger = logging.getLogger(__name__)

OPERATORS = frozenset(("eq", "ne", "in", "nin", "gt", "gte", "lt", "lte", "regex", "glob"))


class InMemoryNodeStore:
    """In-memory implementation of NodeStore and NodeModel.

    Example:
        >>> store = InMemoryNodeStore([create_node("p1", "Person", name="Ada")])
        >>> store.get_types()
        ['Person']
        >>> store.run_query({"filter": {"name": {"eq": "Ada"}}}, "Person", first_only=True)["id"]
        'p1'
    """

    def __init__(self, nodes: Iterable[Mapping[str, Any]] = ()) -> None:
        self._nodes: Dict[str, Node] = {}
        self._by_type: Dict[str, List[str]] = defaultdict(list)
        for node in nodes:
            self.add_node(node)

    def __len__(self) -> int:
        return len(self._nodes)

    def add_node(self, node: Mapping[str, Any]) -> None:
        """Store a node.

        Raises:
            ValueError: If the node violates the node contract
        """
        errors = validate_node(node)
        if errors:
            raise ValueError("; ".join(errors))
        node_id = node["id"]
        type_name = node_type_of(node)
        existing = self._nodes.get(node_id)
        if existing is not None:
            self._by_type[node_type_of(existing)].remove(node_id)
        self._nodes[node_id] = dict(node)
        self._by_type[type_name].append(node_id)

    def delete_node(self, node_id: str) -> None:
        node = self._nodes.pop(node_id, None)
        if node is not None:
            self._by_type[node_type_of(node)].remove(node_id)

    # NodeStore

    def get_types(self) -> List[str]:
        return [t for t, ids in self._by_type.items() if ids]

    def get_nodes_by_type(self, type_name: str) -> List[Node]:
        return [self._nodes[i] for i in self._by_type.get(type_name, [])]

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_nodes_by_ids(
        self,
        ids: Iterable[str],
        type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> List[Node]:
        result = []
        for node_id in ids:
            node = self._nodes.get(node_id)
            if node is None:
                continue
            if type is not None and node_type_of(node) != type:
                continue
            result.append(node)
        return result

    # NodeModel

    def get_node_by_id(
        self,
        node_id: str,
        type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Optional[Node]:
        node = self._nodes.get(node_id)
        if node is None or (type is not None and node_type_of(node) != type):
            return None
        return node

    def run_query(
        self,
        args: Mapping[str, Any],
        type_name: str,
        first_only: bool = False,
        path: Optional[str] = None,
    ) -> Any:
        """Filter and sort nodes of one type.

        Args:
            args: {"filter": {...}, "sort": {"fields": [...], "order": [...]}}
            type_name: Node type to query
            first_only: Return the first match (or None) instead of a list
            path: Query path (unused by this backend)
        """
        nodes = self.get_nodes_by_type(type_name)
        filter_ = args.get("filter") or {}
        if filter_:
            nodes = [n for n in nodes if matches(n, filter_)]
        sort = args.get("sort")
        if sort and sort.get("fields"):
            nodes = sort_nodes(nodes, sort["fields"], sort.get("order") or [])
        if first_only:
            return nodes[0] if nodes else None
        return nodes


def matches(node: Any, filter_: Mapping[str, Any]) -> bool:
    """Whether a node satisfies a nested operator filter."""
    for key, condition in filter_.items():
        if condition is None:
            continue
        if key in OPERATORS:
            if not _apply_operator(node, key, condition):
                return False
            continue
        value = get_path_value(node, [key])
        if isinstance(condition, Mapping) and not (set(condition) & OPERATORS):
            # Nested object filter.
            candidates = value if isinstance(value, list) else [value]
            if not any(c is not None and matches(c, condition) for c in candidates):
                return False
        elif not matches(value, condition):
            return False
    return True


def _apply_operator(value: Any, op: str, operand: Any) -> bool:
    values = value if isinstance(value, list) else [value]
    if op == "eq":
        return any(v == operand for v in values)
    if op == "ne":
        return all(v != operand for v in values)
    if op == "in":
        return any(v in operand for v in values)
    if op == "nin":
        return all(v not in operand for v in values)
    if op in ("gt", "gte", "lt", "lte"):
        return any(v is not None and _compare(v, op, operand) for v in values)
    if op == "regex":
        pattern = _compile_regex(operand)
        return any(isinstance(v, str) and pattern.search(v) for v in values)
    if op == "glob":
        return any(isinstance(v, str) and fnmatch.fnmatchcase(v, operand) for v in values)
    raise ValueError(f"Unknown filter operator '{op}'")


def _compare(value: Any, op: str, operand: Any) -> bool:
    try:
        if op == "gt":
            return value > operand
        if op == "gte":
            return value >= operand
        if op == "lt":
            return value < operand
        return value <= operand
    except TypeError:
        return False


def _compile_regex(operand: str) -> re.Pattern:
    """Accept both 'pattern' and '/pattern/flags' forms."""
    if operand.startswith("/") and operand.rfind("/") > 0:
        end = operand.rfind("/")
        flags = 0
        for flag in operand[end + 1 :]:
            if flag == "i":
                flags |= re.IGNORECASE
            elif flag == "m":
                flags |= re.MULTILINE
            elif flag == "s":
                flags |= re.DOTALL
        return re.compile(operand[1:end], flags)
    return re.compile(operand)


def sort_nodes(nodes: Sequence[Node], fields: Sequence[str], order: Sequence[str]) -> List[Node]:
    """Stable multi-field sort; missing values go last regardless of order."""
    result = list(nodes)
    for index in reversed(range(len(fields))):
        path = fields[index].split("___")
        descending = index < len(order) and str(order[index]).upper() == "DESC"
        present = [n for n in result if get_path_value(n, path) is not None]
        missing = [n for n in result if get_path_value(n, path) is None]
        present.sort(key=lambda n: _sort_key(get_path_value(n, path)), reverse=descending)
        result = present + missing
    return result


def _sort_key(value: Any) -> Any:
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))
