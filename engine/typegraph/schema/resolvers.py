"""
Query-time resolvers wired by the enricher.

The resolvers never touch storage themselves. They read a node model from
the execution context (`context.node_model`, or `context["node_model"]` for
dict contexts) together with the optional query `path`, and delegate to it.

Invariants:
    - Node models may be synchronous or asynchronous; results are awaited
      when they are awaitable
    - Relationship lookups are batched by id and scoped to the query path
"""

from __future__ import annotations

import inspect
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from graphql import GraphQLResolveInfo

from ..store.base import NodeModel, get_path_value


@dataclass
class ResolveContext:
    """Execution context expected by generated resolvers.

    Attributes:
        node_model: Query-time node lookup
        path: Current page/query path, threaded to the node model
    """

    node_model: NodeModel
    path: Optional[str] = None


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def context_parts(info: GraphQLResolveInfo) -> Tuple[NodeModel, Optional[str]]:
    context = info.context
    if isinstance(context, Mapping):
        return context["node_model"], context.get("path")
    return context.node_model, getattr(context, "path", None)


def find_one(type_name: str) -> Callable[..., Awaitable[Any]]:
    """Resolver returning the first node of `type_name` matching the filter args."""

    async def resolve(source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        node_model, path = context_parts(info)
        return await maybe_await(
            node_model.run_query({"filter": args}, type_name=type_name, first_only=True, path=path)
        )

    resolve.__name__ = f"find_one_{type_name}"
    return resolve


def find_many_paginated(type_name: str) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """Resolver returning a pagination envelope over matching nodes."""

    async def resolve(
        source: Any,
        info: GraphQLResolveInfo,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[Dict[str, Any]] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        node_model, path = context_parts(info)
        results = await maybe_await(
            node_model.run_query(
                {"filter": filter, "sort": sort},
                type_name=type_name,
                first_only=False,
                path=path,
            )
        )
        return paginate(list(results or []), skip=skip or 0, limit=limit)

    resolve.__name__ = f"find_many_paginated_{type_name}"
    return resolve


def paginate(results: Sequence[Any], skip: int = 0, limit: Optional[int] = None) -> Dict[str, Any]:
    """Slice results and describe the page.

    Example:
        >>> page = paginate(["a", "b", "c"], skip=1, limit=1)
        >>> page["nodes"], page["pageInfo"]["currentPage"], page["pageInfo"]["hasNextPage"]
        (['b'], 2, True)
    """
    count = len(results)
    items = list(results[skip : skip + limit] if limit else results[skip:])

    if limit:
        page_count = math.ceil(skip / limit) + math.ceil((count - skip) / limit)
        current_page = math.ceil(skip / limit) + 1
    else:
        page_count = 2 if skip else 1
        current_page = 2 if skip else 1

    edges = [
        {
            "node": item,
            "next": items[i + 1] if i + 1 < len(items) else None,
            "previous": items[i - 1] if i > 0 else None,
        }
        for i, item in enumerate(items)
    ]
    return {
        "totalCount": count,
        "edges": edges,
        "nodes": items,
        "pageInfo": {
            "currentPage": current_page,
            "hasPreviousPage": current_page > 1,
            "hasNextPage": limit is not None and skip + limit < count,
            "itemCount": len(items),
            "pageCount": page_count,
            "perPage": limit,
        },
    }


def distinct(source: Mapping[str, Any], info: GraphQLResolveInfo, field: str) -> List[str]:
    """Distinct values of a `___`-separated field path across a page's nodes."""
    path = field.split("___")
    values = set()
    for edge in source.get("edges", ()):
        value = get_path_value(edge["node"], path)
        if value is None:
            continue
        for v in value if isinstance(value, list) else [value]:
            if v is not None:
                values.add(str(v))
    return sorted(values)


def link_one(type_name: Optional[str] = None) -> Callable[..., Awaitable[Any]]:
    """Resolver for `child<T>`: first node among the source's children of type T."""

    async def resolve(source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        node_model, path = context_parts(info)
        result = await maybe_await(
            node_model.get_nodes_by_ids(_children_of(source), type=type_name, path=path)
        )
        if result:
            return result[0]
        return None

    return resolve


def link_many(type_name: Optional[str] = None) -> Callable[..., Awaitable[List[Any]]]:
    """Resolver for `children<T>` and the Node `children` field."""

    async def resolve(source: Any, info: GraphQLResolveInfo, **args: Any) -> List[Any]:
        node_model, path = context_parts(info)
        result = await maybe_await(
            node_model.get_nodes_by_ids(_children_of(source), type=type_name, path=path)
        )
        return list(result or [])

    return resolve


async def resolve_parent(source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
    """Resolver for the Node `parent` field."""
    parent_id = source.get("parent") if isinstance(source, Mapping) else getattr(source, "parent", None)
    if parent_id is None:
        return None
    node_model, path = context_parts(info)
    return await maybe_await(node_model.get_node_by_id(parent_id, path=path))


def _children_of(source: Any) -> List[str]:
    children = source.get("children") if isinstance(source, Mapping) else getattr(source, "children", None)
    return list(children or [])
