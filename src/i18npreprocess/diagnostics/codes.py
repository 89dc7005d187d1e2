"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Extraction problems (malformed values inside templates)
        2000-2999: Registry construction problems
        3000-3999: Input/transport errors
        4000-4999: Traversal limits
    """

    # Extraction (1000-1999)
    INVALID_JSON_ATTRIBUTE = 1001
    INVALID_JSON_TEXT = 1002

    # Registry (2000-2999)
    REGISTRY_SOURCE_UNREADABLE = 2001
    REGISTRY_CONTAINER_MISSING = 2002
    REGISTRY_MAPPING_INVALID = 2003

    # Input (3000-3999)
    STREAMING_NOT_SUPPORTED = 3001
    INVALID_ENCODING = 3002

    # Traversal (4000-4999)
    MAX_DEPTH_EXCEEDED = 4001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the problem
        location: Where the problem was found (e.g. "<paper-input label>")
        source_path: File the problem was found in, when known
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    location: str | None = None
    source_path: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic in compiler style.

        Example output:
            warning[INVALID_JSON_ATTRIBUTE]: Invalid JSON at <google-chart data> with value = {a}
              = at: <google-chart data>
              = help: Use double-quoted keys and strings, or bind the value instead

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
