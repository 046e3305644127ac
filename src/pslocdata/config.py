"""Extraction configuration.

A single frozen dataclass carries every tunable of an extraction run.
``ExtractorConfig()`` with no arguments reproduces the PowerShell defaults.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DATA_FILE_EXTENSION,
    DEFAULT_ENCODING,
    DEFAULT_LOCALE,
    IMPORT_COMMAND_NAME,
    MAX_NESTING_DEPTH,
    MAX_SOURCE_SIZE,
)

__all__ = ["ExtractorConfig"]


@dataclass(frozen=True, slots=True)
class ExtractorConfig:
    """Immutable configuration for LocalizationExtractor.

    Attributes:
        default_locale: Locale used when a call does not pass UICulture and
            the caller requests none (default: "en-US").
        command_name: Command whose call sites are extracted
            (default: "Import-LocalizedData"). Matched case-insensitively.
        data_file_extension: Appended to FileName arguments without an
            extension (default: ".psd1").
        encoding: Encoding of module and data files (default: "utf-8-sig").
        max_source_size: Maximum characters per parsed file.
        max_nesting_depth: Maximum syntactic nesting accepted by the parser.
        check_locale: Emit an UNKNOWN_LOCALE warning when Babel does not
            recognise the requested locale (default: True).

    Example:
        >>> config = ExtractorConfig(default_locale="de-DE")
        >>> extractor = LocalizationExtractor(config)
    """

    default_locale: str = DEFAULT_LOCALE
    command_name: str = IMPORT_COMMAND_NAME
    data_file_extension: str = DATA_FILE_EXTENSION
    encoding: str = DEFAULT_ENCODING
    max_source_size: int = MAX_SOURCE_SIZE
    max_nesting_depth: int = MAX_NESTING_DEPTH
    check_locale: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a name is empty, the extension lacks a leading dot,
                or a limit is not positive.
        """
        if not self.default_locale:
            msg = "default_locale must not be empty"
            raise ValueError(msg)
        if not self.command_name:
            msg = "command_name must not be empty"
            raise ValueError(msg)
        if not self.data_file_extension.startswith("."):
            msg = f"data_file_extension must start with '.', got {self.data_file_extension!r}"
            raise ValueError(msg)
        if self.max_source_size <= 0:
            msg = "max_source_size must be positive"
            raise ValueError(msg)
        if self.max_nesting_depth <= 0:
            msg = "max_nesting_depth must be positive"
            raise ValueError(msg)
