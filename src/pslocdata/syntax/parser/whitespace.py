"""Whitespace handling utilities for the PowerShell parser.

This module provides whitespace, comment and line-continuation skipping.
Comments count as whitespace everywhere a token may start.
"""

from pslocdata.syntax.cursor import Cursor
from pslocdata.syntax.parser.primitives import is_inline_whitespace, skip_block_comment


def skip_inline(cursor: Cursor) -> Cursor:
    """Skip whitespace that keeps the parser on the same logical line.

    Skips spaces and tabs, backtick line continuations, <# #> block
    comments (which may span lines) and a trailing # comment (up to, not
    including, the line break).

    Args:
        cursor: Current position in source

    Returns:
        New cursor at the first significant character, line break or EOF

    Raises:
        ScriptParseError: On an unterminated block comment
    """
    while not cursor.is_eof:
        ch = cursor.current
        if is_inline_whitespace(ch):
            cursor = cursor.advance()
        elif ch == "`" and cursor.peek(1) in ("\n", "\r"):
            cursor = cursor.advance().skip_line_end()
        elif ch == "<" and cursor.peek(1) == "#":
            cursor = skip_block_comment(cursor)
        elif ch == "#":
            cursor = cursor.skip_to_line_end()
        else:
            break
    return cursor


def skip_blank(cursor: Cursor) -> Cursor:
    """Skip whitespace, comments and line breaks.

    Used where a line break cannot end the construct: after '|', ',',
    a binary operator, an opening bracket, or an assignment operator.
    """
    while True:
        cursor = skip_inline(cursor)
        if cursor.is_eof or cursor.current not in ("\n", "\r"):
            return cursor
        cursor = cursor.skip_line_end()


def skip_separators(cursor: Cursor) -> Cursor:
    """Skip blank space and statement separators (';', '&&', '||', '&').

    Pipeline chains are flattened into sibling statements; the
    extractor never needs their control-flow meaning.
    """
    while True:
        cursor = skip_blank(cursor)
        if cursor.is_eof:
            return cursor
        if cursor.current == ";":
            cursor = cursor.advance()
        elif cursor.slice_ahead(2) in ("&&", "||"):
            cursor = cursor.advance(2)
        elif cursor.current == "&" and _is_background_operator(cursor):
            cursor = cursor.advance()
        else:
            return cursor


def _is_background_operator(cursor: Cursor) -> bool:
    following = cursor.peek(1)
    return following is None or following in ("\n", "\r", ";", "}", ")")


def is_statement_end(cursor: Cursor, terminator: str | None) -> bool:
    """Check whether a statement may end at the cursor.

    Args:
        cursor: Position after skip_inline()
        terminator: Closing character of the enclosing block, if any

    Returns:
        True at EOF, a line break, a separator, or the enclosing closer
    """
    if cursor.is_eof:
        return True
    ch = cursor.current
    if ch in ("\n", "\r", ";") or (terminator is not None and ch == terminator):
        return True
    if cursor.slice_ahead(2) in ("&&", "||"):
        return True
    return ch == "&" and _is_background_operator(cursor)
