"""Shared constants for pslocdata.

This module provides centralized configuration constants used across the
syntax, extraction and data-file packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Cmdlet surface: command names and parameter names of Import-LocalizedData
- Locale defaults: default locale and data-file naming
- Depth limits: Recursion protection for parsing and tree traversal
- Input limits: DoS prevention via size constraints

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Cmdlet surface
    "IMPORT_COMMAND_NAME",
    "STRING_DATA_COMMAND_NAME",
    "PARAM_BINDING_VARIABLE",
    "PARAM_UI_CULTURE",
    "PARAM_BASE_DIRECTORY",
    "PARAM_FILE_NAME",
    "PARAM_SUPPORTED_COMMAND",
    "PARAM_STRING_DATA",
    "IMPORT_PARAMETERS",
    "POSITIONAL_PARAMETERS",
    "COMMON_PARAMETERS",
    # Locale defaults
    "DEFAULT_LOCALE",
    "DATA_FILE_EXTENSION",
    "MODULE_FILE_EXTENSION",
    "SCRIPT_FILE_EXTENSIONS",
    "DEFAULT_ENCODING",
    "DEFAULT_SEARCH_EXCLUDES",
    # Depth limits
    "MAX_NESTING_DEPTH",
    "MAX_TREE_DEPTH",
    # Input limits
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# CMDLET SURFACE
# ============================================================================

# The localization-import primitive. Matched case-insensitively, optionally
# module-qualified (Microsoft.PowerShell.Utility\Import-LocalizedData).
IMPORT_COMMAND_NAME: str = "Import-LocalizedData"

# The only command permitted inside a locale-data file.
STRING_DATA_COMMAND_NAME: str = "ConvertFrom-StringData"

PARAM_BINDING_VARIABLE: str = "BindingVariable"
PARAM_UI_CULTURE: str = "UICulture"
PARAM_BASE_DIRECTORY: str = "BaseDirectory"
PARAM_FILE_NAME: str = "FileName"
PARAM_SUPPORTED_COMMAND: str = "SupportedCommand"
PARAM_STRING_DATA: str = "StringData"

# Parameters declared by Import-LocalizedData itself.
IMPORT_PARAMETERS: tuple[str, ...] = (
    PARAM_BINDING_VARIABLE,
    PARAM_UI_CULTURE,
    PARAM_BASE_DIRECTORY,
    PARAM_FILE_NAME,
    PARAM_SUPPORTED_COMMAND,
)

# Positional binding order of Import-LocalizedData (position 0, position 1).
POSITIONAL_PARAMETERS: tuple[str, ...] = (PARAM_BINDING_VARIABLE, PARAM_UI_CULTURE)

# Cmdlet common parameters. Accepted on every call, never acted upon.
COMMON_PARAMETERS: tuple[str, ...] = (
    "Debug",
    "ErrorAction",
    "ErrorVariable",
    "InformationAction",
    "InformationVariable",
    "OutBuffer",
    "OutVariable",
    "PipelineVariable",
    "ProgressAction",
    "Verbose",
    "WarningAction",
    "WarningVariable",
)

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Locale used when the caller does not request one.
DEFAULT_LOCALE: str = "en-US"

# Appended to a FileName argument that carries no extension.
DATA_FILE_EXTENSION: str = ".psd1"

MODULE_FILE_EXTENSION: str = ".psm1"

SCRIPT_FILE_EXTENSIONS: tuple[str, ...] = (".psm1", ".ps1", ".psd1")

# utf-8-sig transparently drops the BOM that Windows editors write.
DEFAULT_ENCODING: str = "utf-8-sig"

# Glob patterns skipped by the workspace scanner.
DEFAULT_SEARCH_EXCLUDES: tuple[str, ...] = (
    "**/node_modules/**",
    "**/out/**",
    "**/dist/**",
    "**/.git/**",
)

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum syntactic nesting (script blocks, parentheses, hashtables, ...).
# Each nesting level costs several Python frames in the recursive descent
# parser, so the limit stays well below the interpreter recursion limit.
MAX_NESTING_DEPTH: int = 50

# Maximum node depth for ASTVisitor traversal. A syntactic nesting level maps
# to roughly six tree levels (block -> statement -> pipeline -> command ->
# argument -> expression).
MAX_TREE_DEPTH: int = 350

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MB).
# Prevents unbounded memory use from pathological module or data files.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
