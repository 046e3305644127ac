"""Enumerations for pslocdata type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class StringKind(StrEnum):
    """Quoting style of a string constant.

    StrEnum provides automatic string conversion: str(StringKind.BARE_WORD) == "bare_word"
    """

    SINGLE_QUOTED = "single_quoted"
    """Verbatim string: 'Strings.psd1'"""

    DOUBLE_QUOTED = "double_quoted"
    """Expandable string without any interpolation: "Strings.psd1\""""

    SINGLE_QUOTED_HERE = "single_quoted_here"
    """Verbatim here-string: @' ... '@"""

    DOUBLE_QUOTED_HERE = "double_quoted_here"
    """Expandable here-string without any interpolation: @" ... "@"""

    BARE_WORD = "bare_word"
    """Unquoted command argument: -FileName Strings.psd1"""


class CallStatus(StrEnum):
    """Outcome of extracting one Import-LocalizedData call site."""

    LOADED = "loaded"
    """Arguments resolved and the message table was loaded."""

    MALFORMED = "malformed"
    """An argument element of an unrecognized kind aborted resolution."""

    NO_BINDING = "no_binding"
    """No binding variable could be determined; results discarded."""

    MISSING_DATA = "missing_data"
    """The locale-data file does not exist for the requested locale."""

    INVALID_DATA = "invalid_data"
    """The locale-data file exists but does not declare a message table."""


class ExtractionStatus(StrEnum):
    """Overall outcome of one extraction run."""

    SUCCESS = "success"
    """Every call site produced a binding."""

    PARTIAL = "partial"
    """At least one call site failed; the others still produced bindings."""

    NO_CALL_SITES = "no_call_sites"
    """The module parsed but contains no Import-LocalizedData call."""

    NOT_FOUND = "not_found"
    """The module path does not resolve to an existing file."""


__all__ = [
    "CallStatus",
    "ExtractionStatus",
    "StringKind",
]
