"""Tests for whitespace, comment and separator skipping."""

from __future__ import annotations

import pytest

from pslocdata.diagnostics import ScriptParseError
from pslocdata.syntax.cursor import Cursor
from pslocdata.syntax.parser.whitespace import (
    is_statement_end,
    skip_blank,
    skip_inline,
    skip_separators,
)


class TestSkipInline:
    """skip_inline stays on the logical line."""

    def test_stops_at_line_break(self) -> None:
        cursor = skip_inline(Cursor("   # comment\nnext", 0))
        assert cursor.current == "\n"

    def test_follows_line_continuation(self) -> None:
        cursor = skip_inline(Cursor(" `\n   -FileName", 0))
        assert cursor.current == "-"

    def test_block_comment_spanning_lines(self) -> None:
        cursor = skip_inline(Cursor("<# one\ntwo #> x", 0))
        assert cursor.current == "x"

    def test_noop_on_significant_character(self) -> None:
        cursor = Cursor("x", 0)
        assert skip_inline(cursor) == cursor

    def test_unterminated_block_comment(self) -> None:
        with pytest.raises(ScriptParseError):
            skip_inline(Cursor("<# open", 0))


class TestSkipBlank:
    """skip_blank also crosses line breaks."""

    def test_crosses_lines_and_comments(self) -> None:
        cursor = skip_blank(Cursor("\n\n  # c\r\n\t x", 0))
        assert cursor.current == "x"

    def test_reaches_eof(self) -> None:
        assert skip_blank(Cursor(" \n # tail", 0)).is_eof


class TestSkipSeparators:
    """Statement separators are flattened."""

    def test_semicolons_and_chains(self) -> None:
        cursor = skip_separators(Cursor(";\n && || ; x", 0))
        assert cursor.current == "x"

    def test_background_operator(self) -> None:
        cursor = skip_separators(Cursor("&\nx", 0))
        assert cursor.current == "x"

    def test_call_operator_is_not_a_separator(self) -> None:
        cursor = skip_separators(Cursor("& $block", 0))
        assert cursor.current == "&"


class TestIsStatementEnd:
    """Statement boundaries."""

    @pytest.mark.parametrize(
        ("source", "terminator", "expected"),
        [
            ("", None, True),
            ("\nx", None, True),
            ("; x", None, True),
            ("}", "}", True),
            ("}", None, False),
            (")", "}", False),
            ("&& x", None, True),
            ("&", None, True),
            ("x", None, False),
        ],
    )
    def test_boundaries(self, source: str, terminator: str | None, expected: bool) -> None:
        assert is_statement_end(Cursor(source, 0), terminator) is expected
