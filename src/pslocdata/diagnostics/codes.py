"""Diagnostic values reported while extracting localized data.

A Diagnostic pairs a numbered DiagnosticCode with a message, an optional
source location and the binding it concerns.

Python 3.13+.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Numbered diagnostic kinds.

    The thousands digit gives the area:
        1000-1999: Input errors (module file lookup, empty results)
        2000-2999: Call-site errors (argument resolution)
        3000-3999: Syntax errors (parser failures)
        4000-4999: Locale-data errors (data file lookup and loading)
    """

    # Module input
    FILE_NOT_FOUND = 1001
    NO_CALL_SITES = 1002

    # Call arguments
    MALFORMED_CALL = 2001
    MISSING_BINDING_VARIABLE = 2002
    UNRESOLVED_SPLAT = 2003

    # Parsing
    PARSE_ERROR = 3001
    UNEXPECTED_EOF = 3002
    NESTING_DEPTH_EXCEEDED = 3003
    PARSE_JUNK = 3004
    SOURCE_TOO_LARGE = 3005

    # Data files
    MISSING_LOCALE_DATA = 4001
    INVALID_LOCALE_DATA = 4002
    UNKNOWN_LOCALE = 4003


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open character range in a module, with its 1-based line and column.

    Offsets count code points of the decoded source, not bytes.
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One problem found in a module or one of its data files.

    Attributes:
        code: Kind of problem
        message: Text shown to the user
        span: Location in the module, when there is one
        hint: How to fix it
        file_path: Module or data file concerned
        binding: Binding variable concerned
        severity: "error" marks a failed call; "warning" is informational
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    file_path: str | None = None
    binding: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return self.message

    @property
    def is_error(self) -> bool:
        """True for error severity."""
        return self.severity == "error"

    def format_error(self) -> str:
        """This diagnostic in DiagnosticFormatter's default layout."""
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
