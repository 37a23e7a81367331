"""
Schema module for typegraph.

This module provides the composition pipeline, including:
- Type descriptors (ObjectTypeDef, FieldDef, ...) and the TypeRegistry
- Type source adapters (SDL, descriptors, inference, third-party schemas)
- Node-type enrichment and the createResolvers overlay
- Finalization into a graphql-core GraphQLSchema

Invariants:
    - Type references stay names until finalization
    - Generated types are owned by the node type that caused them
    - Explicit fields always win over inferred ones

How to change safely:
    - Route every new type source through TypeRegistry.register
    - Run the registry fingerprint before and after a change to a
      synthesizer; identical inputs must give identical fingerprints
"""

from .builder import BuildSession, BuiltSchema, SchemaBuilder, build_schema, rebuild_schema_with_site_page
from .chain import OverlayInfo, ResolverChain
from .enricher import InputSynthesizers, NodeTypeEnricher
from .infer import ExampleValueInferrer
from .overlay import ResolverPatch, apply_resolver_patches
from .registry import TypeRegistry, check_type_name
from .remote import fetch_remote_schema
from .resolvers import ResolveContext, paginate
from .sdl import parse_type_defs
from .types import (
    ArgumentDef,
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    TypeKind,
    UnionTypeDef,
    type_def_from_dict,
)

__all__ = [
    # Descriptors
    "ArgumentDef",
    "FieldDef",
    "ObjectTypeDef",
    "InputObjectTypeDef",
    "InterfaceTypeDef",
    "UnionTypeDef",
    "EnumTypeDef",
    "ScalarTypeDef",
    "TypeKind",
    "type_def_from_dict",
    "parse_type_defs",
    # Registry
    "TypeRegistry",
    "check_type_name",
    # Resolution
    "ResolverChain",
    "OverlayInfo",
    "ResolverPatch",
    "apply_resolver_patches",
    "ResolveContext",
    "paginate",
    # Pipeline
    "ExampleValueInferrer",
    "InputSynthesizers",
    "NodeTypeEnricher",
    "BuildSession",
    "BuiltSchema",
    "SchemaBuilder",
    "build_schema",
    "rebuild_schema_with_site_page",
    "fetch_remote_schema",
]
