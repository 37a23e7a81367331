"""
Configuration for typegraph.

Uses pydantic-settings for environment variable loading. Every setting has a
default suitable for local development; override with TYPEGRAPH_* variables.
"""

from __future__ import annotations

import logging

import json_log_formatter
from pydantic import Field
from pydantic_settings import BaseSettings


class BuildSettings(BaseSettings):
    """Schema build configuration loaded from environment."""

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="text", description="Log format: 'text' or 'json'")

    # Well-known type names
    query_type_name: str = Field(default="Query", description="Root query type name")
    site_page_type: str = Field(
        default="SitePage",
        description="Always-present node type rebuilt by rebuild_schema_with_site_page",
    )

    # Parse error excerpts
    code_frame_lines_above: int = Field(default=5, description="Context lines before an error")
    code_frame_lines_below: int = Field(default=5, description="Context lines after an error")

    # Build behaviour
    enrich_concurrently: bool = Field(
        default=True, description="Enrich node types with asyncio.gather"
    )
    print_schema: bool = Field(
        default=False, description="Debug-log the SDL of every finalized schema"
    )

    model_config = {"env_prefix": "TYPEGRAPH_"}


def setup_logging(settings: BuildSettings) -> None:
    """Configure logging based on configuration.

    Args:
        settings: Build settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
