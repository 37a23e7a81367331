"""
typegraph - schema composition for node-backed GraphQL APIs.

This package merges independently produced type definitions into one
queryable type graph and hands the result to graphql-core for execution:

    ┌──────────────┐   ┌──────────────┐   ┌──────────────┐
    │ explicit SDL │   │   inferred   │   │  third-party │
    │ / descriptors│   │  node types  │   │    schemas   │
    └──────┬───────┘   └──────┬───────┘   └──────┬───────┘
           │                  │                  │
           ▼                  ▼                  │
    ┌─────────────────────────────────┐          │
    │          TypeRegistry           │◀─────────┘
    └────────────────┬────────────────┘
                     │  per node type
                     ▼
    ┌─────────────────────────────────┐
    │ identity fields, findOne/all*,  │
    │ child/children fields, Query    │
    └────────────────┬────────────────┘
                     ▼
    ┌─────────────────────────────────┐
    │ createResolvers overlay         │──▶ GraphQLSchema
    └─────────────────────────────────┘

Invariants:
    - Every build owns its registry; nothing is shared across builds
    - Reserved names (Node, built-in scalars, *FilterInput, *SortInput)
      can never be registered by callers
    - Inferred fields never replace explicitly defined ones
    - A build either returns a validated schema or raises

How to change safely:
    - Add new type sources as adapters that go through TypeRegistry.register
    - Keep generated type names owned by their node type so re-enrichment
      stays idempotent
"""

from ._version import __version__
from .errors import (
    BuildAbortedError,
    NameConflictError,
    ParseFailureError,
    TypeGraphError,
)
from .schema.builder import (
    BuiltSchema,
    SchemaBuilder,
    build_schema,
    rebuild_schema_with_site_page,
)

__all__ = [
    "__version__",
    "BuildAbortedError",
    "BuiltSchema",
    "NameConflictError",
    "ParseFailureError",
    "SchemaBuilder",
    "TypeGraphError",
    "build_schema",
    "rebuild_schema_with_site_page",
]
