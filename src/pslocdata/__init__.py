"""pslocdata - static extraction of PowerShell localized data.

Reads a PowerShell module without running it, finds its
Import-LocalizedData calls, resolves their arguments (including variables
and splatted hashtables) and loads the message tables each call would bind
for a given locale.

Public API:
    extract - {binding: {key: value}} for a module and locale
    LocalizationExtractor - Reusable extractor with per-call results
    ExtractorConfig - Immutable extraction settings
    ExtractionResult - Bindings, per-call outcomes and diagnostics
    parse_script - Parse PowerShell source to a ScriptTree
    load_message_table - Read a .psd1 message table from text
    scan_modules - Find modules that call Import-LocalizedData
    find_localized_references - Pair $Binding.Key usages with values

Exceptions:
    LocalizationDataError - Base exception class
    ScriptNotFoundError - Module file does not exist
    ScriptParseError - Module text cannot be parsed
    MalformedCallError - A call contains an unsupported argument
    MissingLocaleDataError - No data file for the requested locale
    LocaleDataFormatError - Data file is not a message table

Submodules:
    pslocdata.syntax - PowerShell parser, AST nodes and visitor
    pslocdata.extraction - Call sites, argument resolution, results
    pslocdata.datafile - Locale-data loading and message tables
    pslocdata.diagnostics - Diagnostic codes, templates and formatting
"""

from .config import ExtractorConfig
from .datafile import load_message_table
from .diagnostics import (
    LocaleDataFormatError,
    LocalizationDataError,
    MalformedCallError,
    MissingLocaleDataError,
    ScriptNotFoundError,
    ScriptParseError,
)
from .extraction import ExtractionResult, LocalizationExtractor, extract
from .references import find_localized_references
from .scanning import scan_modules
from .syntax import parse_script

# Version information - auto-populated from package metadata
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("pslocdata")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ExtractionResult",
    "ExtractorConfig",
    "LocaleDataFormatError",
    "LocalizationDataError",
    "LocalizationExtractor",
    "MalformedCallError",
    "MissingLocaleDataError",
    "ScriptNotFoundError",
    "ScriptParseError",
    "__version__",
    "extract",
    "find_localized_references",
    "load_message_table",
    "parse_script",
    "scan_modules",
]
