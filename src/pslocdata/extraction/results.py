"""Result types for localization-data extraction.

Components:
    CallSiteResult - Immutable outcome of one Import-LocalizedData call
    ExtractionResult - Immutable aggregate of one extraction run

Python 3.13+.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from pslocdata.diagnostics import Diagnostic
from pslocdata.enums import CallStatus, ExtractionStatus

from .arguments import ArgumentRecord

__all__ = ["CallSiteResult", "ExtractionResult"]


@dataclass(frozen=True, slots=True)
class CallSiteResult:
    """Outcome of extracting a single call site.

    Attributes:
        line: Source line of the call
        status: Outcome (loaded, malformed, no_binding, missing_data, invalid_data)
        binding: Binding variable name, when one was determined
        arguments: Resolved arguments after locale and base directory
            injection (None when resolution failed)
        data_path: Locale-data file that was looked up, if any
        diagnostic: Diagnostic explaining a failure, None when loaded
    """

    line: int
    status: CallStatus
    binding: str | None = None
    arguments: ArgumentRecord | None = None
    data_path: str | None = None
    diagnostic: Diagnostic | None = None

    @property
    def is_loaded(self) -> bool:
        """Check if the call produced a binding."""
        return self.status == CallStatus.LOADED


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Immutable aggregate of one extraction run.

    Attributes:
        file_path: Absolute module path (as given when the file is missing)
        locale: Effective locale
        status: Overall outcome
        bindings: Binding name to message table; later calls with the same
            binding overwrite earlier ones
        call_sites: Per-call outcomes in source order
        diagnostics: Every diagnostic collected during the run

    Example:
        >>> result = LocalizationExtractor().analyze("Module.psm1")
        >>> if result.has_errors:
        ...     for diagnostic in result.errors:
        ...         print(diagnostic.format_error())
        >>> result.to_dict()
        {'Strings': {'Hello': 'Hello'}}
    """

    file_path: str
    locale: str
    status: ExtractionStatus
    bindings: Mapping[str, Mapping[str, str]]
    call_sites: tuple[CallSiteResult, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"ExtractionResult(status={self.status.value}, "
            f"bindings={len(self.bindings)}, "
            f"calls={len(self.call_sites)}, "
            f"diagnostics={len(self.diagnostics)})"
        )

    @property
    def is_success(self) -> bool:
        """Check if every call site produced a binding."""
        return self.status == ExtractionStatus.SUCCESS

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        """Error-severity diagnostics."""
        return tuple(d for d in self.diagnostics if d.is_error)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Warning-severity diagnostics."""
        return tuple(d for d in self.diagnostics if not d.is_error)

    @property
    def has_errors(self) -> bool:
        """Check if any error-severity diagnostic was collected."""
        return any(d.is_error for d in self.diagnostics)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return bindings as plain, JSON-serializable dictionaries."""
        return {binding: dict(table) for binding, table in self.bindings.items()}
