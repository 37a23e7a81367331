"""
Unit tests for explicit and inferred type sources.

Tests cover:
- Accepted definition forms
- Batch name validation
- Parse failures and illegal definitions
- Gap-filling inference
"""

import pytest
from graphql import GraphQLField, GraphQLObjectType, GraphQLString

from engine.typegraph.errors import NameConflictError, ParseFailureError, TypeGraphError
from engine.typegraph.reporting import DiagnosticKind
from engine.typegraph.schema.builtins import install_site_page
from engine.typegraph.schema.infer import ExampleValueInferrer
from engine.typegraph.schema.sources import add_inferred_types, add_types, check_names
from engine.typegraph.schema.types import ObjectTypeDef
from engine.typegraph.store import InMemoryNodeStore, create_node


class TestAddTypes:
    """Tests for add_types."""

    @pytest.mark.asyncio
    async def test_every_form(self, registry, reporter):
        """SDL, descriptors, graphql-core types and dicts are all accepted."""
        names = await add_types(
            registry,
            [
                "type Author { name: String }\ntype Book { title: String }",
                ObjectTypeDef("Shelf", fields={"books": "[Book]"}),
                GraphQLObjectType("Review", {"text": GraphQLField(GraphQLString)}),
                {"kind": "enum", "name": "Genre", "values": ["POETRY"]},
            ],
            reporter,
        )
        assert names == ["Author", "Book", "Shelf", "Review", "Genre"]
        assert registry.get("Review").get_field("text").type == "String"

    @pytest.mark.asyncio
    async def test_batch_rejected_as_a_whole(self, registry, reporter):
        """One bad name leaves the registry untouched."""
        before = registry.names()
        with pytest.raises(NameConflictError):
            await add_types(registry, ["type Author { a: Int }", "type AuthorSortInput { a: Int }"], reporter)
        assert registry.names() == before
        assert reporter.diagnostics[-1].kind is DiagnosticKind.NAME_CONFLICT

    @pytest.mark.asyncio
    async def test_duplicate_within_batch(self, registry, reporter):
        with pytest.raises(NameConflictError, match="already defined"):
            await add_types(registry, ["type A { a: Int }", "type A { b: Int }"], reporter)

    @pytest.mark.asyncio
    async def test_explicit_site_page_kept(self, registry, reporter):
        """An explicit SitePage takes precedence over the default one."""
        await add_types(registry, ["type SitePage implements Node { path: String!, title: String }"], reporter)
        assert install_site_page(registry) is False
        assert registry.get_object("SitePage").get_field_names() == ["path", "title"]

    def test_default_site_page_installed(self, registry):
        assert install_site_page(registry) is True
        assert registry.get_object("SitePage").is_node_type
        assert "SitePage" in registry.must_have

    @pytest.mark.asyncio
    async def test_parse_failure_reported(self, registry, reporter):
        with pytest.raises(ParseFailureError):
            await add_types(registry, ["type A {"], reporter)
        assert reporter.diagnostics[-1].kind is DiagnosticKind.PARSE_FAILURE

    @pytest.mark.asyncio
    async def test_illegal_definition(self, registry, reporter):
        with pytest.raises(TypeGraphError) as exc:
            await add_types(registry, [42], reporter)
        assert exc.value.code == "ILLEGAL_TYPE"

    @pytest.mark.asyncio
    async def test_dict_without_kind(self, registry, reporter):
        with pytest.raises(TypeGraphError) as exc:
            await add_types(registry, [{"name": "A"}], reporter)
        assert exc.value.code == "ILLEGAL_TYPE"


class TestCheckNames:
    """Tests for check_names."""

    def test_reserved(self, registry):
        with pytest.raises(NameConflictError) as exc:
            check_names(registry, [ObjectTypeDef("Node")])
        assert exc.value.rule == "reserved-node"


class TestAddInferredTypes:
    """Tests for add_inferred_types."""

    @pytest.mark.asyncio
    async def test_explicit_fields_win(self, registry, reporter):
        """Inferred fields fill gaps in explicit types."""
        await add_types(registry, ["type Post implements Node { views: Float }"], reporter)
        store = InMemoryNodeStore([create_node("p1", "Post", views=3, title="Hi")])

        merged = await add_inferred_types(registry, store, ExampleValueInferrer(), reporter)

        post = registry.get_object("Post")
        assert merged == ["Post"]
        assert post.get_field("views").type == "Float"
        assert post.get_field("title").type == "String"

    @pytest.mark.asyncio
    async def test_only_named_types(self, registry, reporter):
        store = InMemoryNodeStore(
            [create_node("p1", "Post", title="Hi"), create_node("u1", "User", name="Ada")]
        )
        merged = await add_inferred_types(
            registry, store, ExampleValueInferrer(), reporter, type_names=["User"]
        )
        assert merged == ["User"]
        assert "Post" not in registry

    @pytest.mark.asyncio
    async def test_kind_conflict_is_fatal(self, registry, reporter):
        await add_types(registry, ["enum Post { A }"], reporter)
        store = InMemoryNodeStore([create_node("p1", "Post", title="Hi")])
        with pytest.raises(NameConflictError):
            await add_inferred_types(registry, store, ExampleValueInferrer(), reporter)

    @pytest.mark.asyncio
    async def test_async_store(self, registry, reporter, async_person_pet_store):
        """Coroutine-returning stores are awaited."""
        merged = await add_inferred_types(
            registry, async_person_pet_store, ExampleValueInferrer(), reporter
        )
        assert merged == ["Person", "Pet"]
        assert registry.get_object("Person").get_field("age").type == "Int"

    @pytest.mark.asyncio
    async def test_nested_type_shadowed_by_explicit_field(self, registry, reporter):
        """No PersonAddress when an explicit field already owns `address`."""
        await add_types(
            registry,
            ["type Address { city: String }", "type Person implements Node { address: Address }"],
            reporter,
        )
        store = InMemoryNodeStore(
            [create_node("p1", "Person", name="Ada", address={"city": "London", "geo": {"lat": 1.5}})]
        )

        merged = await add_inferred_types(registry, store, ExampleValueInferrer(), reporter)

        assert merged == ["Person"]
        assert "PersonAddress" not in registry
        assert "PersonAddressGeo" not in registry
        assert "PersonAddress" not in registry.must_have
        assert registry.get_object("Person").get_field("address").type == "Address"

    @pytest.mark.asyncio
    async def test_nested_types_follow_added_fields(self, registry, reporter):
        store = InMemoryNodeStore(
            [create_node("p1", "Person", address={"city": "London", "geo": {"lat": 1.5}})]
        )
        merged = await add_inferred_types(registry, store, ExampleValueInferrer(), reporter)
        assert merged == ["Person", "PersonAddress", "PersonAddressGeo"]
        assert registry.get_object("PersonAddress").get_field("geo").type == "PersonAddressGeo"
