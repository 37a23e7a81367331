"""
Schema CLI tool for typegraph.

This tool builds a schema from a project file:
- print: Print the SDL of the built schema
- check: Print the registry fingerprint and every diagnostic

Usage:
    typegraph print --project site.yaml > schema.graphql
    typegraph print --project site.yaml --remote https://example.com/graphql
    typegraph check --project site.yaml

Invariants:
    - A build that aborts exits non-zero and prints the reason on stderr
    - Output for the same project file is identical across runs

How to change safely:
    - Add new commands, don't modify existing ones
    - Keep check output stable for CI parsing
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from graphql import print_schema
from pydantic import ValidationError

from ..config import BuildSettings, setup_logging
from ..errors import TypeGraphError
from ..schema.builder import BuiltSchema, SchemaBuilder
from ..schema.remote import fetch_remote_schema
from ..store.memory import InMemoryNodeStore
from .project import ProjectFile, load_project

logger = logging.getLogger(__name__)


class SchemaCLI:
    """CLI tool for building schemas from project files.

    Example:
        >>> cli = SchemaCLI()
        >>> built = asyncio.run(cli.build(load_project("site.yaml")))
        >>> print(cli.print_sdl(built))
    """

    def __init__(self, settings: Optional[BuildSettings] = None) -> None:
        self.settings = settings or BuildSettings()

    async def build(self, project: ProjectFile, remote_urls: Sequence[str] = ()) -> BuiltSchema:
        """Build the schema described by `project`.

        Args:
            project: Parsed project file
            remote_urls: Extra remote schemas to merge, besides those in the file
        """
        store = InMemoryNodeStore(record.to_node() for record in project.nodes)
        remotes = [(ref.url, ref.headers) for ref in project.remote]
        remotes.extend((url, {}) for url in remote_urls)
        third_party = [await fetch_remote_schema(url, headers=headers) for url, headers in remotes]

        builder = SchemaBuilder(store, settings=self.settings)
        return await builder.build(types=project.types, third_party_schemas=third_party)

    def print_sdl(self, built: BuiltSchema) -> str:
        return print_schema(built.schema)

    def check(self, built: BuiltSchema) -> List[str]:
        """Report lines: the fingerprint followed by one line per diagnostic."""
        lines = [f"fingerprint: {built.fingerprint}", f"types: {len(built.registry)}"]
        lines.extend(str(d) for d in built.diagnostics)
        return lines


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for the schema tool."""
    parser = argparse.ArgumentParser(description="typegraph schema tool")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # print command
    print_parser = subparsers.add_parser("print", help="Print the built schema as SDL")
    print_parser.add_argument("--project", "-p", required=True, help="YAML or JSON project file")
    print_parser.add_argument(
        "--remote", action="append", default=[], help="Remote GraphQL endpoint to merge"
    )
    print_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    # check command
    check_parser = subparsers.add_parser("check", help="Build and report diagnostics")
    check_parser.add_argument("--project", "-p", required=True, help="YAML or JSON project file")
    check_parser.add_argument(
        "--remote", action="append", default=[], help="Remote GraphQL endpoint to merge"
    )
    check_parser.add_argument(
        "--strict", action="store_true", help="Exit non-zero when any warning is reported"
    )

    args = parser.parse_args(argv)
    settings = BuildSettings()
    setup_logging(settings)
    cli = SchemaCLI(settings)

    try:
        project = load_project(args.project)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Cannot load project {args.project}: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        built = asyncio.run(cli.build(project, args.remote))
    except TypeGraphError as e:
        print(f"Build FAILED [{e.code}]:\n{e.message}", file=sys.stderr)
        sys.exit(1)

    if args.command == "print":
        output = cli.print_sdl(built)
        if args.output:
            with open(args.output, "w") as f:
                f.write(output + "\n")
            print(f"Schema written to {args.output}", file=sys.stderr)
        else:
            print(output)

    elif args.command == "check":
        for line in cli.check(built):
            print(line)
        if args.strict and built.warnings:
            sys.exit(1)


if __name__ == "__main__":
    main()
