"""
CLI tools for typegraph.

This module provides command-line tools for:
- print: Build a project and print its schema as SDL
- check: Build a project and report fingerprint and diagnostics

Invariants:
    - Tools work offline unless a remote schema is requested
    - A failed build never prints a partial schema
"""

from .project import ProjectFile, load_project, parse_project
from .schema_cli import SchemaCLI

__all__ = ["ProjectFile", "SchemaCLI", "load_project", "parse_project"]
