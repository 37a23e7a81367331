"""
Unit tests for plugin hook dispatch.

Tests cover:
- Registration order and async handlers
- Hook result contracts
"""

import pytest

from engine.typegraph.errors import HookContractError
from engine.typegraph.plugins import (
    CREATE_RESOLVERS,
    SET_FIELDS_ON_NODE_TYPE,
    HookRunner,
    NodeTypeInfo,
    SetFieldsOnNodeTypeArgs,
    validate_create_resolvers_results,
    validate_set_fields_results,
)


class TestHookRunner:
    """Tests for HookRunner."""

    @pytest.mark.asyncio
    async def test_results_in_registration_order(self):
        """Sync and async handlers both contribute, in order."""
        hooks = HookRunner()

        async def later(args):
            return {"b": "Int"}

        hooks.register(SET_FIELDS_ON_NODE_TYPE, lambda args: {"a": "String"})
        hooks.register(SET_FIELDS_ON_NODE_TYPE, later)

        payload = SetFieldsOnNodeTypeArgs(type=NodeTypeInfo("Post"))
        assert await hooks.run(SET_FIELDS_ON_NODE_TYPE, payload) == [{"a": "String"}, {"b": "Int"}]

    @pytest.mark.asyncio
    async def test_handlers_receive_payload(self):
        seen = []
        hooks = HookRunner()
        hooks.register(SET_FIELDS_ON_NODE_TYPE, seen.append)
        payload = SetFieldsOnNodeTypeArgs(type=NodeTypeInfo("Post", nodes=[{"id": "p1"}]))
        await hooks.run(SET_FIELDS_ON_NODE_TYPE, payload)
        assert seen == [payload]
        assert seen[0].type.name == "Post"
        assert seen[0].trace_id

    @pytest.mark.asyncio
    async def test_unknown_hook_runs_nothing(self):
        assert await HookRunner().run(CREATE_RESOLVERS, None) == []

    def test_register_rejects_non_callable(self):
        with pytest.raises(TypeError):
            HookRunner().register(CREATE_RESOLVERS, "not a function")

    def test_handlers_is_a_copy(self):
        hooks = HookRunner()
        hooks.handlers(CREATE_RESOLVERS).append(print)
        assert hooks.handlers(CREATE_RESOLVERS) == []


class TestResultContracts:
    """Tests for hook result validation."""

    def test_set_fields_drops_none(self):
        results = validate_set_fields_results([None, {"slug": "String"}], "Post")
        assert results == [{"slug": "String"}]

    @pytest.mark.parametrize("bad", [["slug"], "slug", {1: "String"}])
    def test_set_fields_rejects_non_mappings(self, bad):
        with pytest.raises(HookContractError, match="`Post`") as exc:
            validate_set_fields_results([bad], "Post")
        assert exc.value.hook == SET_FIELDS_ON_NODE_TYPE
        assert exc.value.code == "HOOK_CONTRACT"

    def test_create_resolvers_must_return_none(self):
        validate_create_resolvers_results([None, None])
        with pytest.raises(HookContractError, match="create_resolvers"):
            validate_create_resolvers_results([None, {"Query": {}}])
