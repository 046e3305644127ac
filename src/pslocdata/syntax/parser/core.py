"""Core PowerShell parser implementation.

This module provides the PowerShellParser class that orchestrates parsing
of PowerShell module source into the AST defined in :mod:`pslocdata.syntax.ast`.

Architecture:
    The parser uses an immutable cursor pattern (:class:`~pslocdata.syntax.cursor.Cursor`)
    to traverse source text. Each rule (in :mod:`~pslocdata.syntax.parser.rules`
    and :mod:`~pslocdata.syntax.parser.primitives`) returns either a
    :class:`~pslocdata.syntax.cursor.ParseResult` containing the parsed node
    and updated cursor position, or None on a recoverable failure.

Error Model:
    - Recoverable statement-level errors become :class:`~pslocdata.syntax.ast.Junk`
      statements and are also collected in ``ScriptTree.junk``.
    - Unterminated strings, here-strings, block comments and brackets,
      exceeded nesting depth and oversized input raise ScriptParseError.

Security:
    Includes configurable input size and nesting limits so hostile input
    cannot exhaust memory or the interpreter stack.
"""

import logging

from pslocdata.constants import MAX_NESTING_DEPTH, MAX_SOURCE_SIZE
from pslocdata.diagnostics import ErrorTemplate, ScriptParseError
from pslocdata.syntax.ast import Junk, ScriptBlock, ScriptTree
from pslocdata.syntax.cursor import Cursor, LineOffsetCache
from pslocdata.syntax.parser.primitives import clear_parse_error
from pslocdata.syntax.parser.rules import ParseContext, parse_statement_list
from pslocdata.syntax.visitor import ASTVisitor

__all__ = ["PowerShellParser"]

logger = logging.getLogger(__name__)


class _JunkCollector(ASTVisitor[None]):
    """Collect Junk statements at any nesting level, in source order."""

    __slots__ = ("junk",)

    def __init__(self) -> None:
        super().__init__()
        self.junk: list[Junk] = []

    def visit_Junk(self, node: Junk) -> None:  # noqa: N802 - visitor naming
        self.junk.append(node)


class PowerShellParser:
    """PowerShell parser using immutable cursor pattern.

    Design:
    - Immutable cursor prevents infinite loops (every rule must advance)
    - Recoverable errors produce Junk instead of aborting the file
    - Node spans carry line numbers for lexical variable lookup

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MB)
        max_nesting_depth: Maximum allowed syntactic nesting depth (default: 50)

    Thread Safety:
        Instances hold only immutable configuration; one parser can serve
        concurrent parse() calls.
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MB).
                Set to 0 to disable the size limit.
            max_nesting_depth: Maximum nesting of blocks, brackets and
                operands (default: 50).
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = (
            max_nesting_depth if max_nesting_depth is not None else MAX_NESTING_DEPTH
        )

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed syntactic nesting depth."""
        return self._max_nesting_depth

    def parse(self, source: str) -> ScriptTree:
        """Parse PowerShell source into a ScriptTree.

        Args:
            source: Module text (already decoded)

        Returns:
            ScriptTree whose root ScriptBlock holds the top-level statements

        Raises:
            ScriptParseError: On oversized input or an unrecoverable syntax
                error (see module docstring)

        Example:
            >>> tree = PowerShellParser().parse("Import-LocalizedData Strings")
            >>> tree.root.statements[0].single_command.command_name
            'Import-LocalizedData'
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            raise ScriptParseError(
                ErrorTemplate.source_too_large(len(source), self._max_source_size)
            )

        context = ParseContext(
            lines=LineOffsetCache(source),
            max_nesting_depth=self._max_nesting_depth,
        )
        clear_parse_error()
        try:
            result = parse_statement_list(Cursor(source, 0), context)
        finally:
            clear_parse_error()

        root = ScriptBlock(result.value, context.span(0, len(source)))
        collector = _JunkCollector()
        collector.visit(root)
        if collector.junk:
            logger.debug("Recovered %d unparseable statement(s)", len(collector.junk))
        return ScriptTree(root=root, source=source, junk=tuple(collector.junk))
