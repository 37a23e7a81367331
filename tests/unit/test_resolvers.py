"""
Unit tests for generated resolvers.

Tests cover:
- Pagination envelopes
- distinct over a page
- Context lookup for dict and object contexts
- Relationship and root query resolvers with sync and async node models
"""

from types import SimpleNamespace

import pytest

from engine.typegraph.schema.resolvers import (
    ResolveContext,
    distinct,
    find_many_paginated,
    find_one,
    link_many,
    link_one,
    paginate,
    resolve_parent,
)


def make_info(context):
    return SimpleNamespace(context=context, field_name="field")


class AsyncNodeModel:
    """Awaitable facade over a synchronous store."""

    def __init__(self, store):
        self.store = store
        self.paths = []

    async def get_node_by_id(self, node_id, type=None, path=None):
        self.paths.append(path)
        return self.store.get_node_by_id(node_id, type=type)

    async def get_nodes_by_ids(self, ids, type=None, path=None):
        self.paths.append(path)
        return self.store.get_nodes_by_ids(ids, type=type)

    async def run_query(self, args, type_name, first_only=False, path=None):
        self.paths.append(path)
        return self.store.run_query(args, type_name, first_only=first_only)


class TestPaginate:
    """Tests for paginate."""

    def test_middle_page(self):
        page = paginate(["a", "b", "c"], skip=1, limit=1)
        assert page["nodes"] == ["b"]
        assert page["totalCount"] == 3
        assert page["pageInfo"] == {
            "currentPage": 2,
            "hasPreviousPage": True,
            "hasNextPage": True,
            "itemCount": 1,
            "pageCount": 3,
            "perPage": 1,
        }

    def test_no_limit(self):
        """Without a limit everything after skip is one page."""
        page = paginate(["a", "b", "c"])
        assert page["nodes"] == ["a", "b", "c"]
        assert page["pageInfo"]["pageCount"] == 1
        assert not page["pageInfo"]["hasNextPage"]
        assert page["pageInfo"]["perPage"] is None

    def test_skip_without_limit(self):
        page = paginate(["a", "b", "c"], skip=2)
        assert page["nodes"] == ["c"]
        assert page["pageInfo"]["currentPage"] == 2
        assert page["pageInfo"]["hasPreviousPage"]

    def test_last_page(self):
        page = paginate(["a", "b", "c"], skip=2, limit=2)
        assert page["nodes"] == ["c"]
        assert not page["pageInfo"]["hasNextPage"]
        assert page["pageInfo"]["pageCount"] == 2

    def test_edges_link_neighbours(self):
        """Edges point at the previous and next node of the page."""
        edges = paginate(["a", "b", "c"])["edges"]
        assert edges[0] == {"node": "a", "next": "b", "previous": None}
        assert edges[1] == {"node": "b", "next": "c", "previous": "a"}
        assert edges[2]["next"] is None

    def test_empty(self):
        page = paginate([], limit=10)
        assert page["nodes"] == []
        assert page["pageInfo"]["pageCount"] == 0
        assert page["pageInfo"]["currentPage"] == 1


class TestDistinct:
    """Tests for distinct."""

    def test_sorted_unique_strings(self):
        page = paginate(
            [
                {"tags": ["b", "a"], "meta": {"lang": "en"}},
                {"tags": ["a"], "meta": {"lang": None}},
                {"tags": None, "meta": {"lang": "de"}},
            ]
        )
        assert distinct(page, None, field="tags") == ["a", "b"]
        assert distinct(page, None, field="meta___lang") == ["de", "en"]

    def test_non_strings_are_stringified(self):
        page = paginate([{"n": 2}, {"n": 10}])
        assert distinct(page, None, field="n") == ["10", "2"]


class TestRootResolvers:
    """Tests for find_one and find_many_paginated."""

    @pytest.mark.asyncio
    async def test_find_one_with_dict_context(self, person_pet_store):
        resolve = find_one("Person")
        result = await resolve(None, make_info({"node_model": person_pet_store}), name={"eq": "Bob"})
        assert result["id"] == "person-2"

    @pytest.mark.asyncio
    async def test_find_many_with_async_model(self, person_pet_store):
        """Async node models are awaited and receive the query path."""
        model = AsyncNodeModel(person_pet_store)
        resolve = find_many_paginated("Pet")
        page = await resolve(
            None,
            make_info(ResolveContext(node_model=model, path="/pets/")),
            sort={"fields": ["name"], "order": ["ASC"]},
            limit=2,
        )
        assert [n["name"] for n in page["nodes"]] == ["Fido", "Rex"]
        assert page["totalCount"] == 3
        assert model.paths == ["/pets/"]

    @pytest.mark.asyncio
    async def test_find_many_without_args(self, person_pet_store):
        page = await find_many_paginated("Person")(None, make_info({"node_model": person_pet_store}))
        assert page["totalCount"] == 2


class TestRelationshipResolvers:
    """Tests for link_one, link_many and resolve_parent."""

    @pytest.mark.asyncio
    async def test_link_many(self, person_pet_store):
        ada = person_pet_store.get_node("person-1")
        pets = await link_many("Pet")(ada, make_info({"node_model": person_pet_store}))
        assert [p["name"] for p in pets] == ["Rex", "Fido"]

    @pytest.mark.asyncio
    async def test_link_one_takes_first(self, person_pet_store):
        ada = person_pet_store.get_node("person-1")
        pet = await link_one("Pet")(ada, make_info({"node_model": person_pet_store}))
        assert pet["name"] == "Rex"

    @pytest.mark.asyncio
    async def test_link_one_without_children(self, person_pet_store):
        rex = person_pet_store.get_node("pet-1")
        assert await link_one("Pet")(rex, make_info({"node_model": person_pet_store})) is None

    @pytest.mark.asyncio
    async def test_resolve_parent(self, person_pet_store):
        model = AsyncNodeModel(person_pet_store)
        rex = person_pet_store.get_node("pet-1")
        parent = await resolve_parent(rex, make_info(ResolveContext(node_model=model)))
        assert parent["name"] == "Ada"
        ada = person_pet_store.get_node("person-1")
        assert await resolve_parent(ada, make_info(ResolveContext(node_model=model))) is None
