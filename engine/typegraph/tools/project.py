"""
YAML/JSON project files for the schema CLI.

A project file lists explicit type definitions, example nodes and remote
schemas to merge:

    types:
      - |
        type Person implements Node {
          name: String!
        }
    nodes:
      - id: person-1
        type: Person
        children: [pet-1]
        name: Ada
      - id: pet-1
        type: Pet
        parent: person-1
        name: Rex
    remote:
      - url: https://example.com/graphql
        headers:
          Authorization: Bearer token
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..store.base import Node, create_node

# Keys that would collide with create_node parameters or node metadata.
RESERVED_NODE_KEYS = frozenset(("internal", "node_id", "owner", "type_name"))


class NodeRecord(BaseModel):
    """One example node. Every extra key becomes a node field."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Unique node id")
    type: str = Field(..., description="Node type name (internal.type)")
    parent: Optional[str] = Field(default=None, description="Parent node id")
    children: List[str] = Field(default_factory=list, description="Child node ids")

    @model_validator(mode="after")
    def check_reserved_keys(self) -> "NodeRecord":
        reserved = sorted(RESERVED_NODE_KEYS.intersection(self.model_extra or {}))
        if reserved:
            raise ValueError(f"Node {self.id!r} uses reserved key(s): {', '.join(reserved)}")
        return self

    def to_node(self) -> Node:
        return create_node(
            self.id,
            self.type,
            parent=self.parent,
            children=self.children,
            owner="typegraph-cli",
            **(self.model_extra or {}),
        )


class RemoteSchemaRef(BaseModel):
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)


class ProjectFile(BaseModel):
    """Contents of a project file."""

    types: List[str] = Field(default_factory=list, description="SDL type definitions")
    nodes: List[NodeRecord] = Field(default_factory=list)
    remote: List[RemoteSchemaRef] = Field(default_factory=list)


def parse_project(content: str, format: str = "yaml") -> ProjectFile:
    """Parse project content.

    Raises:
        pydantic.ValidationError: If the content does not match ProjectFile
        ValueError: If the content is not valid YAML/JSON
    """
    if format == "json":
        data: Any = json.loads(content)
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
    return ProjectFile.model_validate(data or {})


def load_project(path: str) -> ProjectFile:
    """Load a project file; `.json` files are read as JSON, anything else as YAML."""
    file_path = Path(path)
    fmt = "json" if file_path.suffix.lower() == ".json" else "yaml"
    return parse_project(file_path.read_text(encoding="utf-8"), fmt)
