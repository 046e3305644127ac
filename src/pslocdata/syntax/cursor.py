"""Source cursor and line index for the PowerShell parser.

A Cursor is a (source, offset) pair that never changes: moving it yields a
new Cursor, so a rule that fails leaves its caller's position intact and
backtracking is just keeping the old value. End of input is queried with
is_eof rather than signalled by a sentinel character.

Line Endings:
    Module files arrive with LF or CRLF endings. Line numbers count \\n only;
    a lone CR separates statements (the parser handles that) but does not
    start a new line for span purposes.

Python 3.13+.
"""

from bisect import bisect_right
from dataclasses import dataclass

__all__ = ["Cursor", "LineOffsetCache", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Read position in a PowerShell source string.

    Example:
        >>> start = Cursor("$x = 1", 0)
        >>> start.current, start.advance().current
        ('$', 'x')
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once every character has been consumed."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character under the cursor.

        Raises:
            EOFError: At end of input. Rules test is_eof first, so this
                only fires on a parser bug.
        """
        if self.is_eof:
            msg = f"Read past end of source at offset {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character offset positions ahead, or None past the end."""
        index = self.pos + offset
        return self.source[index] if index < len(self.source) else None

    def advance(self, count: int = 1) -> "Cursor":
        """Cursor moved count characters forward, stopping at end of input."""
        return Cursor(self.source, min(self.pos + count, len(self.source)))

    def slice_to(self, end_pos: int) -> str:
        """Source text from this cursor up to (not including) end_pos.

        Example:
            >>> Cursor("Get-Item foo", 0).slice_to(8)
            'Get-Item'
        """
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """The next n characters (fewer near the end).

        Example:
            >>> Cursor("@{a=1}", 0).slice_ahead(2)
            '@{'
        """
        return self.source[self.pos : self.pos + n]

    def startswith_word(self, word: str) -> bool:
        """Check for a case-insensitive keyword at the cursor.

        The keyword must be followed by a character that cannot continue
        a bareword (whitespace, bracket, separator) or by EOF.

        Example:
            >>> Cursor("If ($x) {}", 0).startswith_word("if")
            True
            >>> Cursor("ifdef", 0).startswith_word("if")
            False
        """
        if self.slice_ahead(len(word)).lower() != word:
            return False
        following = self.peek(len(word))
        return following is None or not (following.isalnum() or following in "_-")

    def skip_line_end(self) -> "Cursor":
        """Cursor past one CRLF, LF or CR; unchanged when not on a line break."""
        if self.slice_ahead(2) == "\r\n":
            return self.advance(2)
        if not self.is_eof and self.source[self.pos] in "\r\n":
            return self.advance()
        return self

    def skip_to_line_end(self) -> "Cursor":
        """Cursor on the next CR or LF (left unconsumed), or at end of input."""
        end = self.pos
        length = len(self.source)
        while end < length and self.source[end] not in "\r\n":
            end += 1
        return Cursor(self.source, end)

    def compute_line_col(self) -> tuple[int, int]:
        """1-based (line, column) of the cursor, found by scanning the prefix.

        Linear in the offset; used for error positions only. Spans use
        LineOffsetCache.

        Example:
            >>> Cursor("a\\nbc", 3).compute_line_col()
            (2, 2)
        """
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return self.source.count("\n", 0, self.pos) + 1, self.pos - line_start + 1


class LineOffsetCache:
    """Offset-to-(line, column) index over one source string.

    Line start offsets are collected once; each lookup is a bisection over
    them. The parser builds one per file and stamps every span with it.

    Example:
        >>> index = LineOffsetCache("line1\\nline2")
        >>> index.get_line_col(0), index.get_line_col(8)
        ((1, 1), (2, 3))
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        starts = [0]
        starts.extend(i + 1 for i, char in enumerate(source) if char == "\n")
        self._offsets: tuple[int, ...] = tuple(starts)
        self._source_len = len(source)

    @property
    def line_count(self) -> int:
        """Number of lines in the indexed source."""
        return len(self._offsets)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """1-based (line, column) of an offset; out-of-range offsets are clamped."""
        pos = max(0, min(pos, self._source_len))
        line_index = bisect_right(self._offsets, pos) - 1
        return line_index + 1, pos - self._offsets[line_index] + 1


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """A parsed value together with the cursor just past it.

    Rules have the shape ``rule(cursor, context) -> ParseResult[Node] | None``.
    None means the construct is not here and the caller may try something
    else or turn the statement into Junk; unrecoverable input raises
    ScriptParseError.
    """

    value: T
    cursor: Cursor
