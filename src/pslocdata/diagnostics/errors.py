"""Exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Per-call and per-binding failures are raised internally, caught by the
extractor and turned into collected diagnostics; only ScriptNotFoundError
and ScriptParseError describe failures of a whole extraction.

Python 3.13+.
"""

from .codes import Diagnostic


class LocalizationDataError(Exception):
    """Base exception for all pslocdata errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocalizationDataError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class ScriptNotFoundError(LocalizationDataError):
    """Module path does not resolve to an existing file.

    Non-fatal from the caller's perspective: extract() reports it as a
    warning and returns no data.
    """


class ScriptParseError(LocalizationDataError):
    """Source text cannot be parsed into a syntax tree.

    Raised for unterminated strings, here-strings and block comments,
    missing closing delimiters at end of input, and exceeded size or
    nesting limits. Fatal to the whole extraction.
    """


class MalformedCallError(LocalizationDataError):
    """Argument element of an unrecognized kind in an Import-LocalizedData call.

    Fatal to that call only; other call sites still produce results.

    Attributes:
        element_kind: AST node type name of the offending element
    """

    def __init__(self, message: str | Diagnostic, *, element_kind: str = "") -> None:
        """Initialize MalformedCallError.

        Args:
            message: Error message string OR Diagnostic object
            element_kind: AST node type name of the offending element
        """
        super().__init__(message)
        self.element_kind = element_kind


class MissingLocaleDataError(LocalizationDataError):
    """Resolved locale-data file does not exist for the requested locale.

    Fatal to that binding's entry only.

    Attributes:
        locale: Requested locale
        data_path: Path that was looked up
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        locale: str = "",
        data_path: str = "",
    ) -> None:
        """Initialize MissingLocaleDataError.

        Args:
            message: Error message string OR Diagnostic object
            locale: Requested locale
            data_path: Path that was looked up
        """
        super().__init__(message)
        self.locale = locale
        self.data_path = data_path


class LocaleDataFormatError(LocalizationDataError):
    """Locale-data file exists but does not declare a plain message table.

    Fatal to that binding's entry only.
    """
