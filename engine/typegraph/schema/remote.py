"""
Remote schema loading.

Introspects a GraphQL endpoint over HTTP and returns a client schema that can
be passed to build_schema(third_party_schemas=[...]). Client schemas carry no
resolvers; attach them through createResolvers.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx
from graphql import GraphQLSchema, build_client_schema, get_introspection_query

from ..errors import RemoteSchemaError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


async def fetch_remote_schema(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> GraphQLSchema:
    """Introspect `url` and build a client schema.

    Args:
        url: GraphQL endpoint
        headers: Extra request headers (e.g. Authorization)
        client: Client to reuse; a short-lived one is created when None
        timeout: Request timeout in seconds, for a created client

    Raises:
        RemoteSchemaError: On transport errors, non-2xx responses, GraphQL
            errors or an unusable introspection result
    """
    payload = {"query": get_introspection_query(descriptions=True)}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.post(url, json=payload, headers=headers)
        else:
            response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
        body = response.json()
    except httpx.HTTPError as e:
        raise RemoteSchemaError(f"Failed to introspect {url}: {e}", url=url) from e
    except ValueError as e:
        raise RemoteSchemaError(f"Introspection response from {url} is not JSON", url=url) from e

    if body.get("errors"):
        messages = [err.get("message", str(err)) for err in body["errors"]]
        raise RemoteSchemaError(f"Introspection of {url} failed: {messages}", url=url)
    data = body.get("data")
    if not data or "__schema" not in data:
        raise RemoteSchemaError(f"Introspection response from {url} has no __schema", url=url)

    try:
        schema = build_client_schema(data)
    except (TypeError, ValueError) as e:
        raise RemoteSchemaError(f"Cannot build schema from {url}: {e}", url=url) from e

    logger.info(f"Fetched remote schema from {url}: {len(schema.type_map)} types")
    return schema
