"""
Error types for typegraph.

This module defines all exception types raised while composing a schema:
- TypeGraphError: Base exception
- NameConflictError: Reserved or duplicate type name
- ParseFailureError: Malformed explicit type definitions
- HookContractError: Plugin hook returned something outside its contract
- SchemaValidationError: Finalized graph failed graphql-core validation
- BuildAbortedError: Build stopped by a fatal report
- RemoteSchemaError: Remote schema could not be introspected

Invariants:
    - All errors inherit from TypeGraphError
    - Errors include context for debugging
    - Error messages name the rule that was violated
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class TypeGraphError(Exception):
    """Base exception for all typegraph errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "TYPEGRAPH_ERROR"
        self.details = details or {}


class NameConflictError(TypeGraphError):
    """A type name collides with a reserved or already registered name.

    Raised when:
    - The name is the reserved `Node` interface
    - The name ends with a reserved generated-input suffix
    - The name shadows a built-in scalar
    - The name is not a valid GraphQL identifier
    - The name is already registered
    """

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        rule: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="NAME_CONFLICT",
            details={"type_name": type_name, "rule": rule},
        )
        self.type_name = type_name
        self.rule = rule


class ParseFailureError(TypeGraphError):
    """Explicit type definitions could not be parsed.

    When the parser reported a location, `excerpt` holds a code frame of
    the surrounding lines and is already part of the message.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        excerpt: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="PARSE_FAILURE",
            details={"line": line, "column": column},
        )
        self.line = line
        self.column = column
        self.excerpt = excerpt


class HookContractError(TypeGraphError):
    """A plugin hook returned a value outside its declared contract."""

    def __init__(self, message: str, hook: Optional[str] = None) -> None:
        super().__init__(message, code="HOOK_CONTRACT", details={"hook": hook})
        self.hook = hook


class SchemaValidationError(TypeGraphError):
    """The composed type graph is not a valid GraphQL schema.

    Attributes:
        errors: Human-readable validation failures
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = errors
        super().__init__(
            f"Schema validation failed with {len(errors)} error(s):\n" + "\n".join(errors),
            code="SCHEMA_INVALID",
            details={"errors": errors},
        )


class BuildAbortedError(TypeGraphError):
    """A fatal report aborted the build."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="BUILD_ABORTED")


class RemoteSchemaError(TypeGraphError):
    """Fetching or building a remote schema failed."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message, code="REMOTE_SCHEMA", details={"url": url})
        self.url = url
