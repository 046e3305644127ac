"""Rendering of diagnostics for terminals, logs and tools.

Three layouts are available: a multi-line compiler style, a one-line
``CODE: message`` form, and one JSON object per diagnostic. Messages often
quote module source, so the text layouts escape control characters.

Python 3.13+.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]

_CONTROL_ESCAPES: dict[int, str] = {
    **{code: f"\\x{code:02x}" for code in range(0x20)},
    0x7F: "\\x7f",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
}

_SEVERITY_COLORS = {"error": "\033[1;31m", "warning": "\033[1;33m"}
_RESET = "\033[0m"


class OutputFormat(StrEnum):
    """Layouts understood by DiagnosticFormatter."""

    RUST = "rust"
    SIMPLE = "simple"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Turns Diagnostic values into text.

    Attributes:
        output_format: Layout to produce
        sanitize: Cut messages and hints at max_content_length
        color: Highlight the severity with ANSI codes (RUST layout only)
        max_content_length: Cut-off used when sanitize is set

    Example:
        >>> diagnostic = ErrorTemplate.no_call_sites("Mod.psm1", "Import-LocalizedData")
        >>> print(DiagnosticFormatter().format(diagnostic))
        warning[NO_CALL_SITES]: No Import-LocalizedData call found in 'Mod.psm1'
          --> Mod.psm1
        >>> print(DiagnosticFormatter(output_format=OutputFormat.SIMPLE).format(diagnostic))
        NO_CALL_SITES: No Import-LocalizedData call found in 'Mod.psm1'
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Render one diagnostic in the configured layout."""
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return json.dumps(self.to_dict(diagnostic), ensure_ascii=False)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Render several diagnostics.

        JSON output is one object per line; the text layouts put a blank
        line between entries.
        """
        separator = "\n" if self.output_format is OutputFormat.JSON else "\n\n"
        return separator.join(map(self.format, diagnostics))

    def to_dict(self, diagnostic: Diagnostic) -> dict[str, str | int | None]:
        """JSON-ready mapping of a diagnostic; unset optional fields are left out.

        Example:
            >>> DiagnosticFormatter().to_dict(ErrorTemplate.parse_error("bad"))
            {'code': 'PARSE_ERROR', 'code_value': 3001, 'message': 'bad', 'severity': 'error'}
        """
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._truncate(diagnostic.message),
            "severity": diagnostic.severity,
        }
        if span := diagnostic.span:
            data.update(line=span.line, column=span.column, start=span.start, end=span.end)
        if diagnostic.file_path:
            data["file_path"] = diagnostic.file_path
        if diagnostic.binding:
            data["binding"] = diagnostic.binding
        if diagnostic.hint:
            data["hint"] = self._truncate(diagnostic.hint)
        return data

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Header line followed by indented location, binding and help lines.

        Example output:
            error[MALFORMED_CALL]: Unsupported argument of kind 'ScriptBlockExpression'
              --> Module.psm1:12:44
              = binding: Strings
              = help: Pass the value as a string, a variable or a splatted hashtable
        """
        severity = diagnostic.severity
        if self.color:
            severity = f"{_SEVERITY_COLORS.get(severity, '')}{severity}{_RESET}"

        lines = [f"{severity}[{diagnostic.code.name}]: {self._text(diagnostic.message)}"]
        if location := _location(diagnostic):
            lines.append(f"  --> {_escape_control(location)}")
        if diagnostic.binding:
            lines.append(f"  = binding: {_escape_control(diagnostic.binding)}")
        if diagnostic.hint:
            lines.append(f"  = help: {self._text(diagnostic.hint)}")
        return "\n".join(lines)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        return f"{diagnostic.code.name}: {self._text(diagnostic.message)}"

    def _text(self, text: str) -> str:
        return _escape_control(self._truncate(text))

    def _truncate(self, text: str) -> str:
        if self.sanitize and len(text) > self.max_content_length:
            return f"{text[: self.max_content_length]}..."
        return text


def _location(diagnostic: Diagnostic) -> str | None:
    """``file:line:col``, ``line N, column M`` or the bare file path."""
    span = diagnostic.span
    if span is None:
        return diagnostic.file_path
    if diagnostic.file_path:
        return f"{diagnostic.file_path}:{span.line}:{span.column}"
    return f"line {span.line}, column {span.column}"


def _escape_control(text: str) -> str:
    """Show ASCII control characters as backslash escapes."""
    return text.translate(_CONTROL_ESCAPES)
