"""
Unit tests for remote schema introspection.

Uses httpx.MockTransport so no network is touched.
"""

import json

import httpx
import pytest
from graphql import build_schema as build_sdl_schema
from graphql import introspection_from_schema

from engine.typegraph.errors import RemoteSchemaError
from engine.typegraph.schema.remote import fetch_remote_schema

URL = "https://weather.example.com/graphql"


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def introspection():
    schema = build_sdl_schema("type Forecast { city: String } type Query { weather: Forecast }")
    return introspection_from_schema(schema)


class TestFetchRemoteSchema:
    """Tests for fetch_remote_schema."""

    @pytest.mark.asyncio
    async def test_builds_client_schema(self, introspection):
        """The introspection result becomes a GraphQLSchema."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"data": introspection})

        async with make_client(handler) as client:
            schema = await fetch_remote_schema(URL, headers={"Authorization": "Bearer t"}, client=client)

        assert "Forecast" in schema.type_map
        assert schema.query_type.fields["weather"].type.name == "Forecast"
        assert requests[0].headers["Authorization"] == "Bearer t"
        assert "__schema" in json.loads(requests[0].content)["query"]

    @pytest.mark.asyncio
    async def test_http_error(self):
        async with make_client(lambda request: httpx.Response(500, text="boom")) as client:
            with pytest.raises(RemoteSchemaError) as exc:
                await fetch_remote_schema(URL, client=client)
        assert exc.value.url == URL
        assert exc.value.code == "REMOTE_SCHEMA"

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        body = {"errors": [{"message": "Introspection disabled"}]}
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(RemoteSchemaError, match="Introspection disabled"):
                await fetch_remote_schema(URL, client=client)

    @pytest.mark.asyncio
    async def test_not_json(self):
        async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(RemoteSchemaError, match="not JSON"):
                await fetch_remote_schema(URL, client=client)

    @pytest.mark.asyncio
    async def test_missing_schema(self):
        async with make_client(lambda request: httpx.Response(200, json={"data": {}})) as client:
            with pytest.raises(RemoteSchemaError, match="no __schema"):
                await fetch_remote_schema(URL, client=client)
