"""
Unit tests for resolver chains.

Tests cover:
- Default resolution
- Base resolvers
- Overlay steps and original_resolver
"""

from types import SimpleNamespace

from graphql import default_field_resolver

from engine.typegraph.schema.chain import OverlayInfo, ResolverChain


def make_info(field_name="name"):
    return SimpleNamespace(field_name=field_name, context=None)


class TestResolverChain:
    """Tests for ResolverChain."""

    def test_empty_chain_is_default(self):
        """An empty chain composes to None (graphql-core default lookup)."""
        chain = ResolverChain()
        assert chain.is_default
        assert chain.compose() is None

    def test_base_only(self):
        """A chain with only a base composes to the base itself."""

        def base(source, info, **args):
            return "base"

        assert ResolverChain(base=base).compose() is base

    def test_step_wraps_default_lookup(self):
        """A step over no base sees graphql-core's default resolver."""
        seen = {}

        def shout(source, info, **args):
            seen["original"] = info.original_resolver
            return info.original_resolver(source, info, **args).upper()

        resolve = ResolverChain().then(shout).compose()

        assert resolve({"name": "ada"}, make_info()) == "ADA"
        assert seen["original"] is default_field_resolver

    def test_steps_apply_in_order(self):
        """Each step wraps everything before it."""

        def base(source, info, **args):
            return "x"

        def add_a(source, info, **args):
            return info.original_resolver(source, info, **args) + "a"

        def add_b(source, info, **args):
            return info.original_resolver(source, info, **args) + "b"

        resolve = ResolverChain(base=base).then(add_a).then(add_b).compose()
        assert resolve(None, make_info()) == "xab"

    def test_step_can_ignore_original(self):
        """Steps may replace resolution entirely."""
        resolve = ResolverChain(base=lambda s, i, **a: "old").then(lambda s, i, **a: "new").compose()
        assert resolve(None, make_info()) == "new"

    def test_arguments_forwarded(self):
        """Field arguments reach every step."""

        def base(source, info, first=0):
            return list(range(first))

        def count(source, info, **args):
            return len(info.original_resolver(source, info, **args))

        resolve = ResolverChain(base=base).then(count).compose()
        assert resolve(None, make_info(), first=3) == 3

    def test_chain_is_immutable(self):
        """then() and with_base() return new chains."""
        chain = ResolverChain()
        extended = chain.then(lambda s, i, **a: None)
        assert chain.steps == ()
        assert len(extended.steps) == 1
        rebased = extended.with_base(lambda s, i, **a: 1)
        assert extended.base is None
        assert rebased.steps == extended.steps


class TestOverlayInfo:
    """Tests for OverlayInfo."""

    def test_delegates_to_info(self):
        """Attributes not set on the overlay come from the wrapped info."""
        info = OverlayInfo(make_info("title"), default_field_resolver)
        assert info.field_name == "title"
        assert info.original_resolver is default_field_resolver
