"""
Schema builder.

Orchestrates one build from type sources to a validated GraphQLSchema:

    builtins -> explicit types -> default SitePage -> inferred types
      -> setFieldsOnGraphQLNodeType (per node type)
      -> enrichment of every node type (concurrently)
      -> third-party schemas
      -> createResolvers overlay
      -> finalize

Invariants:
    - Each build runs in its own BuildSession with a fresh TypeRegistry;
      a rebuild works on a copy of the previous registry
    - Source adapters run strictly in the order above
    - A build returns a validated schema or raises; fatal problems go through
      reporter.panic first so they are recorded and logged

How to change safely:
    - New build steps belong in BuildSession and must not read another
      session's registry
    - Keep the overlay last before finalize; patches assume every type exists
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from graphql import GraphQLSchema

from ..config import BuildSettings
from ..errors import HookContractError, NameConflictError, SchemaValidationError
from ..plugins import (
    CREATE_RESOLVERS,
    SET_FIELDS_ON_NODE_TYPE,
    CreateResolversArgs,
    HookRunner,
    NodeTypeInfo,
    SetFieldsOnNodeTypeArgs,
    validate_create_resolvers_results,
    validate_set_fields_results,
)
from ..reporting import Diagnostic, DiagnosticKind, LoggingReporter, Reporter
from ..store.base import NodeStore
from ..store.memory import InMemoryNodeStore
from .builtins import install_builtins, install_site_page
from .enricher import InputSynthesizers, NodeTypeEnricher
from .finalize import to_graphql_schema
from .infer import ExampleValueInferrer
from .overlay import apply_resolver_patches
from .registry import TypeRegistry
from .resolvers import maybe_await
from .sources import add_inferred_types, add_types
from .third_party import add_third_party_schemas

logger = logging.getLogger(__name__)


@dataclass
class BuiltSchema:
    """Result of a build.

    Attributes:
        schema: The validated, executable schema
        registry: The registry the schema was finalized from
        diagnostics: Everything reported during the build
        fingerprint: SHA-256 fingerprint of the registry contents
    """

    schema: GraphQLSchema
    registry: TypeRegistry
    diagnostics: List[Diagnostic] = field(default_factory=list)
    fingerprint: str = ""

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.fatal]


class BuildSession:
    """State and steps of a single build."""

    def __init__(
        self,
        registry: TypeRegistry,
        node_store: NodeStore,
        inferrer: Any,
        hooks: HookRunner,
        reporter: Reporter,
        settings: BuildSettings,
        synthesizers: InputSynthesizers,
    ) -> None:
        self.registry = registry
        self.node_store = node_store
        self.inferrer = inferrer
        self.hooks = hooks
        self.reporter = reporter
        self.settings = settings
        self.enricher = NodeTypeEnricher(registry, node_store, reporter, synthesizers)
        # A reporter may outlive one build; only this session's diagnostics are returned.
        self._first_diagnostic = len(getattr(reporter, "diagnostics", ()))

    async def add_explicit_types(self, types: Iterable[Any]) -> None:
        await add_types(
            self.registry,
            types,
            self.reporter,
            lines_above=self.settings.code_frame_lines_above,
            lines_below=self.settings.code_frame_lines_below,
        )

    async def add_inferred_types(self, type_names: Optional[List[str]] = None) -> None:
        await add_inferred_types(
            self.registry, self.node_store, self.inferrer, self.reporter, type_names
        )

    async def add_set_fields_on_node_types(self) -> None:
        """Run setFieldsOnGraphQLNodeType for every node type and apply the results."""
        node_types = [t.name for t in self.registry.node_types()]
        payloads = []
        for name in node_types:
            nodes = await maybe_await(self.node_store.get_nodes_by_type(name))
            payloads.append(SetFieldsOnNodeTypeArgs(type=NodeTypeInfo(name, list(nodes or ()))))

        results = await asyncio.gather(
            *(self.hooks.run(SET_FIELDS_ON_NODE_TYPE, payload) for payload in payloads)
        )
        for name, type_results in zip(node_types, results):
            try:
                for field_map in validate_set_fields_results(type_results, name):
                    self.registry.add_nested_fields(name, field_map)
            except HookContractError as e:
                self.reporter.panic(e.message, error=e, kind=DiagnosticKind.HOOK_CONTRACT)
            except (KeyError, TypeError, ValueError) as e:
                error = HookContractError(
                    f"{SET_FIELDS_ON_NODE_TYPE} returned unusable fields for `{name}`: {e}",
                    hook=SET_FIELDS_ON_NODE_TYPE,
                )
                self.reporter.panic(error.message, error=error, kind=DiagnosticKind.HOOK_CONTRACT)

    async def enrich(self, type_names: Optional[List[str]] = None) -> None:
        """Enrich node types; all of them when `type_names` is None."""
        if type_names is None:
            type_names = [t.name for t in self.registry.node_types()]
        if self.settings.enrich_concurrently:
            await asyncio.gather(*(self._enrich_one(name) for name in type_names))
        else:
            for name in type_names:
                await self._enrich_one(name)

    async def _enrich_one(self, type_name: str) -> None:
        try:
            await self.enricher.process(type_name)
        except NameConflictError as e:
            self.reporter.panic(e.message, error=e, kind=DiagnosticKind.NAME_CONFLICT)

    async def add_third_party_schemas(self, schemas: Iterable[GraphQLSchema]) -> None:
        await add_third_party_schemas(self.registry, schemas, self.reporter)

    async def add_custom_resolvers(self) -> None:
        """Run createResolvers against an intermediate schema."""
        if not self.hooks.handlers(CREATE_RESOLVERS):
            return
        intermediate = self.finalize()

        def create_resolvers(patches: Mapping[str, Mapping[str, Any]]) -> None:
            apply_resolver_patches(self.registry, patches, self.reporter)

        results = await self.hooks.run(
            CREATE_RESOLVERS,
            CreateResolversArgs(
                schema=intermediate,
                create_resolvers=create_resolvers,
                trace_id="initial-createResolvers",
            ),
        )
        try:
            validate_create_resolvers_results(results)
        except HookContractError as e:
            self.reporter.panic(e.message, error=e, kind=DiagnosticKind.HOOK_CONTRACT)

    def finalize(self) -> GraphQLSchema:
        try:
            return to_graphql_schema(self.registry, print_sdl=self.settings.print_schema)
        except SchemaValidationError as e:
            self.reporter.panic(e.message, error=e, kind=DiagnosticKind.INVALID_SCHEMA)

    def result(self, schema: GraphQLSchema) -> BuiltSchema:
        fingerprint = self.registry.fingerprint()
        diagnostics = list(getattr(self.reporter, "diagnostics", ()))[self._first_diagnostic :]
        logger.info(
            f"Built schema: {len(self.registry)} types, "
            f"{len(self.registry.node_types())} node types, "
            f"{len(diagnostics)} diagnostic(s), fingerprint={fingerprint[:19]}"
        )
        return BuiltSchema(
            schema=schema,
            registry=self.registry,
            diagnostics=diagnostics,
            fingerprint=fingerprint,
        )


class SchemaBuilder:
    """Builds schemas from one set of collaborators.

    Example:
        >>> store = InMemoryNodeStore([create_node("p1", "Person", name="Ada")])
        >>> built = await SchemaBuilder(store).build(types=["type Pet implements Node { name: String }"])
        >>> built.schema.query_type.fields["allPerson"].type
        <GraphQLNonNull <GraphQLObjectType 'PersonConnection'>>
    """

    def __init__(
        self,
        node_store: Optional[NodeStore] = None,
        inferrer: Any = None,
        hooks: Optional[HookRunner] = None,
        reporter: Optional[Reporter] = None,
        settings: Optional[BuildSettings] = None,
        synthesizers: Optional[InputSynthesizers] = None,
    ) -> None:
        self.node_store = node_store if node_store is not None else InMemoryNodeStore()
        self.inferrer = inferrer or ExampleValueInferrer()
        self.hooks = hooks or HookRunner()
        self.reporter = reporter or LoggingReporter()
        self.settings = settings or BuildSettings()
        self.synthesizers = synthesizers or InputSynthesizers()

    def _session(self, registry: TypeRegistry) -> BuildSession:
        return BuildSession(
            registry=registry,
            node_store=self.node_store,
            inferrer=self.inferrer,
            hooks=self.hooks,
            reporter=self.reporter,
            settings=self.settings,
            synthesizers=self.synthesizers,
        )

    async def build(
        self,
        types: Iterable[Any] = (),
        third_party_schemas: Iterable[GraphQLSchema] = (),
    ) -> BuiltSchema:
        """Build a schema from scratch.

        Args:
            types: Explicit definitions (SDL strings, descriptors, graphql-core
                named types or kind-tagged dicts)
            third_party_schemas: Foreign schemas to merge

        Raises:
            NameConflictError: Reserved or duplicate type names
            ParseFailureError: Malformed SDL
            HookContractError: A plugin hook broke its contract
            SchemaValidationError: The composed graph is not a valid schema
        """
        registry = TypeRegistry(query_type_name=self.settings.query_type_name)
        install_builtins(registry)
        session = self._session(registry)

        await session.add_explicit_types(types)
        install_site_page(registry, self.settings.site_page_type)
        await session.add_inferred_types()
        await session.add_set_fields_on_node_types()
        await session.enrich()
        await session.add_third_party_schemas(third_party_schemas)
        await session.add_custom_resolvers()
        return session.result(session.finalize())

    async def rebuild_with_site_page(self, previous: BuiltSchema) -> BuiltSchema:
        """Re-infer and re-enrich only the site page type of a previous build."""
        site_page = self.settings.site_page_type
        session = self._session(previous.registry.copy())
        await session.add_inferred_types([site_page])
        await session.enrich([site_page])
        logger.debug(f"Rebuilt {site_page} on a copy of the previous registry")
        return session.result(session.finalize())


async def build_schema(
    node_store: Optional[NodeStore] = None,
    types: Iterable[Any] = (),
    third_party_schemas: Iterable[GraphQLSchema] = (),
    **options: Any,
) -> BuiltSchema:
    """Build a schema; `options` are passed to SchemaBuilder."""
    return await SchemaBuilder(node_store, **options).build(types, third_party_schemas)


async def rebuild_schema_with_site_page(
    previous: BuiltSchema,
    node_store: Optional[NodeStore] = None,
    **options: Any,
) -> BuiltSchema:
    return await SchemaBuilder(node_store, **options).rebuild_with_site_page(previous)
