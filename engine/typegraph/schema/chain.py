"""
Resolver chains.

A field's resolution is an ordered list of steps rather than nested closures.
The terminal step is the field's base resolver (or graphql-core's default
field lookup). Each overlay step wraps everything before it and receives an
info object whose `original_resolver` attribute is that inner resolver, so it
can delegate to it, wrap it, or ignore it.

Example:
    >>> def shout(source, info, **args):
    ...     return info.original_resolver(source, info, **args).upper()
    >>> chain = ResolverChain().then(shout)
    >>> resolve = chain.compose()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple

from graphql import GraphQLResolveInfo, default_field_resolver

Resolver = Callable[..., Any]


class OverlayInfo:
    """GraphQLResolveInfo plus the resolver an overlay step replaced."""

    __slots__ = ("_info", "original_resolver")

    def __init__(self, info: GraphQLResolveInfo, original_resolver: Resolver) -> None:
        self._info = info
        self.original_resolver = original_resolver

    def __getattr__(self, name: str) -> Any:
        return getattr(self._info, name)

    def __repr__(self) -> str:
        return f"OverlayInfo(field_name={self._info.field_name!r})"


@dataclass(frozen=True)
class ResolverChain:
    """Ordered resolver steps for one field, applied outer-to-inner.

    Attributes:
        base: Terminal resolver; None means graphql-core's default lookup
        steps: Overlay steps, innermost first
    """

    base: Optional[Resolver] = None
    steps: Tuple[Resolver, ...] = ()

    @property
    def is_default(self) -> bool:
        """Whether resolution is plain default field lookup."""
        return self.base is None and not self.steps

    def then(self, step: Resolver) -> ResolverChain:
        """Return a chain with `step` wrapping the current resolution."""
        return replace(self, steps=self.steps + (step,))

    def with_base(self, base: Optional[Resolver]) -> ResolverChain:
        """Return a chain with a new terminal resolver and the same steps."""
        return replace(self, base=base)

    def compose(self) -> Optional[Resolver]:
        """Build the callable handed to graphql-core, or None for the default."""
        if self.is_default:
            return None
        resolver: Resolver = self.base or default_field_resolver
        for step in self.steps:
            resolver = _wrap(step, resolver)
        return resolver


def _wrap(step: Resolver, original: Resolver) -> Resolver:
    def resolve(source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        return step(source, OverlayInfo(info, original), **args)

    resolve.__name__ = getattr(step, "__name__", "overlay")
    return resolve
