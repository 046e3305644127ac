"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # ========================================================================
    # Input errors
    # ========================================================================

    @staticmethod
    def file_not_found(file_path: str) -> Diagnostic:
        """Module file does not exist.

        Args:
            file_path: Path as given by the caller

        Returns:
            Diagnostic for FILE_NOT_FOUND
        """
        msg = f"Module file '{file_path}' not found"
        return Diagnostic(
            code=DiagnosticCode.FILE_NOT_FOUND,
            message=msg,
            hint="No localization data is available for a file that does not exist",
            file_path=file_path,
            severity="warning",
        )

    @staticmethod
    def no_call_sites(file_path: str, command_name: str) -> Diagnostic:
        """Module contains no localization-import call.

        Args:
            file_path: Module path
            command_name: Command that was searched for

        Returns:
            Diagnostic for NO_CALL_SITES
        """
        msg = f"No {command_name} call found in '{file_path}'"
        return Diagnostic(
            code=DiagnosticCode.NO_CALL_SITES,
            message=msg,
            file_path=file_path,
            severity="warning",
        )

    # ========================================================================
    # Call-site errors
    # ========================================================================

    @staticmethod
    def malformed_call(
        element_kind: str,
        span: SourceSpan | None = None,
        file_path: str | None = None,
    ) -> Diagnostic:
        """Argument element of an unrecognized kind.

        Args:
            element_kind: AST node type name of the element
            span: Location of the element
            file_path: Module path

        Returns:
            Diagnostic for MALFORMED_CALL
        """
        msg = f"Unsupported argument of kind '{element_kind}'"
        return Diagnostic(
            code=DiagnosticCode.MALFORMED_CALL,
            message=msg,
            span=span,
            hint="Pass the value as a string, a variable or a splatted hashtable",
            file_path=file_path,
        )

    @staticmethod
    def missing_binding_variable(
        span: SourceSpan | None = None,
        file_path: str | None = None,
    ) -> Diagnostic:
        """Call site without a binding variable.

        Args:
            span: Location of the call
            file_path: Module path

        Returns:
            Diagnostic for MISSING_BINDING_VARIABLE
        """
        return Diagnostic(
            code=DiagnosticCode.MISSING_BINDING_VARIABLE,
            message="Call has no BindingVariable and is not assigned to a variable",
            span=span,
            hint="Add -BindingVariable <Name> so the loaded table has a name",
            file_path=file_path,
            severity="warning",
        )

    @staticmethod
    def unresolved_splat(
        variable: str,
        span: SourceSpan | None = None,
        file_path: str | None = None,
    ) -> Diagnostic:
        """Splatted variable that does not resolve to a hashtable literal.

        Args:
            variable: Variable name without sigil
            span: Location of the splat
            file_path: Module path

        Returns:
            Diagnostic for UNRESOLVED_SPLAT
        """
        msg = f"Splatted variable '@{variable}' does not resolve to a hashtable literal"
        return Diagnostic(
            code=DiagnosticCode.UNRESOLVED_SPLAT,
            message=msg,
            span=span,
            hint="Assign the hashtable literal to the variable before the call",
            file_path=file_path,
            severity="warning",
        )

    # ========================================================================
    # Syntax errors
    # ========================================================================

    @staticmethod
    def parse_error(message: str, span: SourceSpan | None = None) -> Diagnostic:
        """Generic syntax error.

        Args:
            message: Parser message
            span: Error location

        Returns:
            Diagnostic for PARSE_ERROR
        """
        return Diagnostic(
            code=DiagnosticCode.PARSE_ERROR,
            message=message,
            span=span,
        )

    @staticmethod
    def unexpected_eof(expected: str, span: SourceSpan | None = None) -> Diagnostic:
        """End of input inside an open construct.

        Args:
            expected: What the parser needed to close the construct
            span: Position of the end of input

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        msg = f"Unexpected end of input (expected {expected})"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=msg,
            span=span,
            hint="Check for an unterminated string, comment or bracket",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan | None = None) -> Diagnostic:
        """Syntactic nesting limit exceeded.

        Args:
            max_depth: Configured limit
            span: Position where the limit was hit

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=span,
        )

    @staticmethod
    def parse_junk(content: str, span: SourceSpan | None = None) -> Diagnostic:
        """Recovered statement-level syntax error.

        Args:
            content: Skipped source text
            span: Location of the skipped text

        Returns:
            Diagnostic for PARSE_JUNK
        """
        msg = f"Skipped unparseable statement: {content[:50]!r}"
        return Diagnostic(
            code=DiagnosticCode.PARSE_JUNK,
            message=msg,
            span=span,
            severity="warning",
        )

    @staticmethod
    def source_too_large(size: int, max_size: int) -> Diagnostic:
        """Source exceeds the configured size limit.

        Args:
            size: Source length in characters
            max_size: Configured limit

        Returns:
            Diagnostic for SOURCE_TOO_LARGE
        """
        msg = f"Source size ({size:,} characters) exceeds maximum ({max_size:,} characters)"
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=msg,
            hint="Configure max_source_size to increase the limit",
        )

    # ========================================================================
    # Locale-data errors
    # ========================================================================

    @staticmethod
    def missing_locale_data(binding: str, locale: str, data_path: str) -> Diagnostic:
        """Locale-data file missing for the requested locale.

        Args:
            binding: Binding variable the call would populate
            locale: Requested locale
            data_path: Path that was looked up

        Returns:
            Diagnostic for MISSING_LOCALE_DATA
        """
        msg = f"No '{locale}' data for binding '{binding}': '{data_path}' does not exist"
        return Diagnostic(
            code=DiagnosticCode.MISSING_LOCALE_DATA,
            message=msg,
            hint=f"Create '{data_path}' or request a locale that has a data directory",
            file_path=data_path,
            binding=binding,
        )

    @staticmethod
    def invalid_locale_data(
        data_path: str,
        reason: str,
        binding: str | None = None,
    ) -> Diagnostic:
        """Locale-data file does not declare a plain message table.

        Args:
            data_path: Data file path
            reason: What the loader rejected
            binding: Binding variable the call would populate

        Returns:
            Diagnostic for INVALID_LOCALE_DATA
        """
        msg = f"Invalid locale data in '{data_path}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_LOCALE_DATA,
            message=msg,
            hint="Data files may only contain @{ Key = 'Value' } or ConvertFrom-StringData",
            file_path=data_path,
            binding=binding,
        )

    @staticmethod
    def unknown_locale(locale: str) -> Diagnostic:
        """Locale tag that Babel does not recognise.

        Args:
            locale: Requested locale

        Returns:
            Diagnostic for UNKNOWN_LOCALE
        """
        msg = f"Unknown locale '{locale}'"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_LOCALE,
            message=msg,
            hint="Locale directories are still looked up by exact name",
            severity="warning",
        )
