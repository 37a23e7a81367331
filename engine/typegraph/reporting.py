"""
Diagnostics and reporting.

Every warned or rejected operation during a build becomes a Diagnostic and is
handed to a Reporter. The default LoggingReporter logs each one and keeps the
list for callers; panic() additionally raises, aborting the build.

Invariants:
    - Diagnostics are never dropped; warn() always records and logs
    - panic() never returns
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, NoReturn, Optional, Protocol, runtime_checkable

from .errors import BuildAbortedError

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Categories of build diagnostics."""

    # Non-fatal
    TYPE_MISMATCH = "type_mismatch"
    UNKNOWN_TARGET_TYPE = "unknown_target_type"
    MISSING_TARGET = "missing_target"
    INCOMPLETE_PATCH = "incomplete_patch"
    INFERENCE_CONFLICT = "inference_conflict"
    FOREIGN_TYPE_SKIPPED = "foreign_type_skipped"
    UNKNOWN_CHILD_TYPE = "unknown_child_type"

    # Fatal
    NAME_CONFLICT = "name_conflict"
    PARSE_FAILURE = "parse_failure"
    HOOK_CONTRACT = "hook_contract"
    INVALID_SCHEMA = "invalid_schema"
    FATAL = "fatal"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported build issue.

    Attributes:
        kind: Category of the issue
        message: Operator-facing description
        fatal: Whether the issue aborted the build
        type_name: Type the issue concerns, if any
        field_name: Field the issue concerns, if any
    """

    kind: DiagnosticKind
    message: str
    fatal: bool = False
    type_name: Optional[str] = None
    field_name: Optional[str] = None

    def __str__(self) -> str:
        status = "FATAL" if self.fatal else "WARN"
        return f"[{status}] {self.kind.name}: {self.message}"


@runtime_checkable
class Reporter(Protocol):
    """Sink for build diagnostics."""

    def warn(
        self,
        message: str,
        kind: DiagnosticKind = ...,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        ...

    def panic(
        self,
        message: str,
        error: Optional[BaseException] = None,
        kind: DiagnosticKind = ...,
    ) -> NoReturn:
        ...


class LoggingReporter:
    """Reporter that logs diagnostics and keeps them for inspection.

    Example:
        >>> reporter = LoggingReporter()
        >>> reporter.warn("Type `Foo` does not exist", DiagnosticKind.MISSING_TARGET)
        >>> reporter.warnings[0].kind
        <DiagnosticKind.MISSING_TARGET: 'missing_target'>
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger
        self.diagnostics: List[Diagnostic] = []

    @property
    def warnings(self) -> List[Diagnostic]:
        """Non-fatal diagnostics recorded so far."""
        return [d for d in self.diagnostics if not d.fatal]

    def warn(
        self,
        message: str,
        kind: DiagnosticKind = DiagnosticKind.TYPE_MISMATCH,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        self.diagnostics.append(
            Diagnostic(kind=kind, message=message, type_name=type_name, field_name=field_name)
        )
        self._logger.warning(message)

    def panic(
        self,
        message: str,
        error: Optional[BaseException] = None,
        kind: DiagnosticKind = DiagnosticKind.FATAL,
    ) -> NoReturn:
        """Record a fatal diagnostic and abort.

        Raises `error` when given, otherwise BuildAbortedError(message).
        """
        self.diagnostics.append(Diagnostic(kind=kind, message=message, fatal=True))
        self._logger.error(message)
        if error is not None:
            raise error
        raise BuildAbortedError(message)


def code_frame(
    body: str,
    line: int,
    column: int,
    lines_above: int = 5,
    lines_below: int = 5,
) -> str:
    """Render the lines around a 1-based (line, column) with a caret marker.

    Example:
        >>> print(code_frame("type A {\\n  a: In t\\n}", 2, 9))
          1 | type A {
        > 2 |   a: In t
            |         ^
          3 | }
    """
    lines = body.split("\n")
    start = max(line - lines_above, 1)
    end = min(line + lines_below, len(lines))
    width = len(str(end))

    out = []
    for number in range(start, end + 1):
        text = lines[number - 1]
        gutter = str(number).rjust(width)
        if number == line:
            out.append(f"> {gutter} | {text}".rstrip())
            out.append(f"  {' ' * width} | {' ' * (column - 1)}^")
        else:
            out.append(f"  {gutter} | {text}".rstrip())
    return "\n".join(out)
