"""
Plugin hook dispatch.

Plugins extend a build through two hooks:

- setFieldsOnGraphQLNodeType: called once per node type; each handler may
  return a mapping of dotted field paths to field specs, e.g.
  {"frontmatter.wordCount": "Int"}
- createResolvers: called once after every type exists; handlers call
  `args.create_resolvers({...})` to patch resolvers and return nothing

Invariants:
    - Handlers run in registration order and their results keep that order
    - Handlers may be plain functions or coroutines
    - Results outside a hook's contract raise HookContractError

How to change safely:
    - Add new hooks as new payload dataclasses; never widen existing ones
"""

from __future__ import annotations

import inspect
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence

from .errors import HookContractError

logger = logging.getLogger(__name__)

SET_FIELDS_ON_NODE_TYPE = "setFieldsOnGraphQLNodeType"
CREATE_RESOLVERS = "createResolvers"

Handler = Callable[[Any], Any]


@dataclass(frozen=True)
class NodeTypeInfo:
    """A node type as seen by plugins: its name and current nodes."""

    name: str
    nodes: Sequence[Mapping[str, Any]] = ()


@dataclass(frozen=True)
class SetFieldsOnNodeTypeArgs:
    type: NodeTypeInfo
    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class CreateResolversArgs:
    """Payload of the createResolvers hook.

    Attributes:
        schema: Intermediate GraphQLSchema with every type in place
        create_resolvers: Callback accepting {type: {field: patch}}
        trace_id: Identifier shared by all handlers of one hook run
    """

    schema: Any
    create_resolvers: Callable[[Mapping[str, Mapping[str, Any]]], None]
    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class HookRunner:
    """Registry of hook handlers.

    Example:
        >>> hooks = HookRunner()
        >>> hooks.register(SET_FIELDS_ON_NODE_TYPE, lambda args: {"slug": "String"})
        >>> results = await hooks.run(SET_FIELDS_ON_NODE_TYPE, payload)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def register(self, hook: str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError(f"Handler for {hook} must be callable, got {handler!r}")
        self._handlers.setdefault(hook, []).append(handler)
        logger.debug(f"Registered handler for {hook}: {getattr(handler, '__name__', handler)}")

    def handlers(self, hook: str) -> List[Handler]:
        return list(self._handlers.get(hook, ()))

    async def run(self, hook: str, payload: Any) -> List[Any]:
        """Call every handler of `hook` with `payload`, awaiting coroutines.

        Returns:
            One result per handler, in registration order
        """
        results = []
        for handler in self._handlers.get(hook, ()):
            result = handler(payload)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results


def validate_set_fields_results(
    results: Sequence[Any], type_name: str
) -> List[Mapping[str, Any]]:
    """Check setFieldsOnGraphQLNodeType results; None results are dropped.

    Raises:
        HookContractError: If a result is not a mapping of string paths
    """
    field_maps = []
    for result in results:
        if result is None:
            continue
        if not isinstance(result, Mapping) or not all(isinstance(k, str) for k in result):
            raise HookContractError(
                f"{SET_FIELDS_ON_NODE_TYPE} must return a mapping of field paths to field "
                f"definitions for `{type_name}`, got {type(result).__name__}",
                hook=SET_FIELDS_ON_NODE_TYPE,
            )
        field_maps.append(result)
    return field_maps


def validate_create_resolvers_results(results: Sequence[Any]) -> None:
    """createResolvers handlers patch through the callback and return nothing.

    Raises:
        HookContractError: If a handler returned a value
    """
    for result in results:
        if result is not None:
            raise HookContractError(
                f"{CREATE_RESOLVERS} handlers must call create_resolvers() instead of "
                f"returning a value, got {type(result).__name__}",
                hook=CREATE_RESOLVERS,
            )
