"""
Type source adapters for explicit and inferred definitions.

Explicit definitions may be given as:
- SDL strings: "type Author implements Node { name: String }"
- Type descriptors (ObjectTypeDef, UnionTypeDef, ...)
- graphql-core named types (GraphQLObjectType, ...)
- Kind-tagged dictionaries: {"kind": "object", "name": "Author", ...}

Invariants:
    - Every explicit name is checked before any of them is registered, so a
      rejected batch leaves the registry untouched
    - Inferred definitions only fill gaps (TypeRegistry.merge_inferred)
    - A nested inferred type is merged only if a merged field still refers to it
    - Parse and name failures are reported through reporter.panic
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from graphql import GraphQLNamedType

from ..errors import NameConflictError, ParseFailureError, TypeGraphError
from ..reporting import DiagnosticKind, Reporter
from ..store.base import NodeStore
from .native import from_graphql_type
from .registry import TypeRegistry, check_type_name
from .resolvers import maybe_await
from .sdl import parse_type_defs
from .types import TypeDef, is_type_def, type_def_from_dict

logger = logging.getLogger(__name__)


def _to_type_defs(
    definition: Any,
    reporter: Reporter,
    lines_above: int,
    lines_below: int,
) -> List[TypeDef]:
    if isinstance(definition, str):
        try:
            return parse_type_defs(definition, lines_above, lines_below)
        except ParseFailureError as e:
            reporter.panic(e.message, error=e, kind=DiagnosticKind.PARSE_FAILURE)
    if is_type_def(definition):
        return [definition]
    if isinstance(definition, GraphQLNamedType):
        return [from_graphql_type(definition)]
    if isinstance(definition, Mapping):
        try:
            return [type_def_from_dict(definition)]
        except ValueError as e:
            reporter.panic(str(e), error=TypeGraphError(str(e), code="ILLEGAL_TYPE"))
    message = f"Illegal type definition: {definition!r}"
    reporter.panic(message, error=TypeGraphError(message, code="ILLEGAL_TYPE"))


def check_names(registry: TypeRegistry, type_defs: Sequence[TypeDef]) -> None:
    """Validate a batch of names against reserved names, the registry and each other.

    Raises:
        NameConflictError: On the first offending name
    """
    seen = set()
    for type_def in type_defs:
        name = type_def.name
        check_type_name(name)
        if name in registry or name in seen:
            raise NameConflictError(
                f"Type `{name}` is already defined. Type names must be unique.",
                type_name=name,
                rule="duplicate-name",
            )
        seen.add(name)


async def add_types(
    registry: TypeRegistry,
    types: Iterable[Any],
    reporter: Reporter,
    lines_above: int = 5,
    lines_below: int = 5,
) -> List[str]:
    """Register explicit type definitions.

    Returns:
        Registered names in declaration order
    """
    type_defs: List[TypeDef] = []
    for definition in types:
        type_defs.extend(_to_type_defs(definition, reporter, lines_above, lines_below))

    try:
        check_names(registry, type_defs)
    except NameConflictError as e:
        reporter.panic(e.message, error=e, kind=DiagnosticKind.NAME_CONFLICT)

    names = [registry.register(type_def) for type_def in type_defs]
    if names:
        logger.info(f"Added {len(names)} explicit type(s)")
    return names


async def add_inferred_types(
    registry: TypeRegistry,
    node_store: NodeStore,
    inferrer: Any,
    reporter: Reporter,
    type_names: Optional[Sequence[str]] = None,
) -> List[str]:
    """Merge inferred types into the registry.

    Args:
        type_names: Infer only these node types; all types when None

    Returns:
        Names of the inferred types that were merged
    """
    if type_names is None:
        inferred = await maybe_await(inferrer.infer_types(node_store, reporter))
    else:
        inferred = []
        for type_name in type_names:
            inferred.extend(await maybe_await(inferrer.infer_type(node_store, type_name, reporter)))

    # Types only reachable through another inferred type's field are merged
    # when a merged type still points at them after gap-filling.
    referenced = {f.named_type for t in inferred for f in getattr(t, "fields", {}).values()}
    nested = {
        t.name: t
        for t in inferred
        if t.name in referenced and not getattr(t, "is_node_type", False)
    }
    pending = deque(t for t in inferred if t.name not in nested)

    merged = []
    while pending:
        type_def = pending.popleft()
        try:
            registry.merge_inferred(type_def)
        except NameConflictError as e:
            reporter.panic(e.message, error=e, kind=DiagnosticKind.NAME_CONFLICT)
        merged.append(type_def.name)
        for f in getattr(registry.get(type_def.name), "fields", {}).values():
            if f.named_type in nested:
                pending.append(nested.pop(f.named_type))

    if nested:
        logger.debug(f"Skipped inferred types shadowed by explicit fields: {sorted(nested)}")
    logger.debug(f"Merged {len(merged)} inferred type(s)")
    return merged
