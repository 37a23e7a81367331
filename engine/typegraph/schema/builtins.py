"""Types present in every build besides the caller-supplied definitions."""

from __future__ import annotations

import logging

from .node_interface import install_node_interface
from .registry import TypeRegistry
from .scalars import GraphQLDate, GraphQLJSON
from .types import FieldDef, ObjectTypeDef, ScalarTypeDef

logger = logging.getLogger(__name__)


def site_page_type(name: str = "SitePage") -> ObjectTypeDef:
    """The always-present page node type."""
    return ObjectTypeDef(
        name=name,
        interfaces=("Node",),
        fields={
            "path": FieldDef("path", "String!"),
            "component": FieldDef("component", "String"),
            "internalComponentName": FieldDef("internalComponentName", "String"),
            "componentChunkName": FieldDef("componentChunkName", "String"),
            "matchPath": FieldDef("matchPath", "String"),
        },
    )


def install_builtins(registry: TypeRegistry) -> None:
    """Add Date, JSON, Node and Internal."""
    registry.add_internal(ScalarTypeDef("Date", native=GraphQLDate))
    registry.add_internal(ScalarTypeDef("JSON", native=GraphQLJSON))
    install_node_interface(registry)


def install_site_page(registry: TypeRegistry, name: str = "SitePage") -> bool:
    """Add the default site page type unless an explicit definition took the name.

    Returns:
        True if the default type was added
    """
    if name in registry:
        logger.debug(f"Keeping explicit definition of {name}")
        return False
    registry.register(site_page_type(name))
    return True
