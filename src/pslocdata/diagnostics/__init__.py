"""Diagnostic system for localization-data extraction.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics.

Python 3.13+.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    LocaleDataFormatError,
    LocalizationDataError,
    MalformedCallError,
    MissingLocaleDataError,
    ScriptNotFoundError,
    ScriptParseError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "LocaleDataFormatError",
    "LocalizationDataError",
    "MalformedCallError",
    "MissingLocaleDataError",
    "OutputFormat",
    "ScriptNotFoundError",
    "ScriptParseError",
    "SourceSpan",
]
