"""Primitive parsing utilities for the PowerShell parser.

This module provides low-level scanners for variable names, string
constants (including here-strings), numbers and generic bareword tokens,
plus the balanced-bracket skipper used for regions the parser does not
model (class bodies, $( ) inside strings).

Error Context:
    Scanners store error context on recoverable failure via
    _set_parse_error(). Retrieve with get_last_parse_error() for the
    annotation attached to Junk nodes. Unrecoverable errors (end of input
    inside an open construct) raise ScriptParseError immediately.
"""

from dataclasses import dataclass
from threading import local as thread_local
from typing import NoReturn

from pslocdata.diagnostics import ErrorTemplate, ScriptParseError, SourceSpan
from pslocdata.syntax.cursor import Cursor, ParseResult

# PowerShell accepts typographic quotes wherever ASCII quotes are allowed.
SINGLE_QUOTES: str = "'\u2018\u2019\u201a\u201b"
DOUBLE_QUOTES: str = '"\u201c\u201d\u201e'

# Characters that end a generic (bareword) token in argument mode.
_BAREWORD_DELIMITERS: frozenset[str] = frozenset(" \t\f\v\u00a0\r\n;|&(){},>")

_ASCII_DIGITS: str = "0123456789"
_HEX_DIGITS: str = "0123456789abcdefABCDEF"

_NUMBER_TYPE_SUFFIXES: tuple[str, ...] = ("ul", "us", "uy", "l", "d", "u", "y", "s", "n")
_NUMBER_MULTIPLIERS: dict[str, int] = {
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
    "tb": 1024**4,
    "pb": 1024**5,
}

# Backtick escapes recognized in expandable strings.
_BACKTICK_ESCAPES: dict[str, str] = {
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

_OPENERS: dict[str, str] = {"(": ")", "{": "}", "[": "]"}

_error_thread_local = thread_local()


@dataclass(frozen=True, slots=True)
class ParseErrorContext:
    """Context information for recoverable parse failures.

    Attributes:
        message: Human-readable error description
        position: Character position in source where error occurred
    """

    message: str
    position: int


def _set_parse_error(message: str, position: int) -> None:
    """Store parse error context for later retrieval."""
    _error_thread_local.last_error = ParseErrorContext(message=message, position=position)


def get_last_parse_error() -> ParseErrorContext | None:
    """Get the last parse error context (if any)."""
    return getattr(_error_thread_local, "last_error", None)


def clear_parse_error() -> None:
    """Clear the last parse error context."""
    _error_thread_local.last_error = None


def _span_at(cursor: Cursor) -> SourceSpan:
    line, column = cursor.compute_line_col()
    return SourceSpan(start=cursor.pos, end=cursor.pos, line=line, column=column)


def raise_unexpected_eof(cursor: Cursor, expected: str) -> NoReturn:
    """Abort parsing: input ended inside an open construct.

    Raises:
        ScriptParseError: Always
    """
    raise ScriptParseError(ErrorTemplate.unexpected_eof(expected, _span_at(cursor)))


# =============================================================================
# Character classes
# =============================================================================


def is_inline_whitespace(ch: str) -> bool:
    """Whitespace that does not end a line."""
    return ch not in ("\n", "\r") and (ch.isspace() or ch == "\ufeff")


def is_variable_start(ch: str) -> bool:
    """First character of a plain variable name."""
    return ch.isalnum() or ch == "_"


def is_variable_char(ch: str) -> bool:
    """Continuation character of a plain variable name."""
    return ch.isalnum() or ch in ("_", "?")


def is_bareword_delimiter(ch: str) -> bool:
    """Character that ends a generic token in argument mode."""
    return ch in _BAREWORD_DELIMITERS or ch.isspace()


# =============================================================================
# Variables
# =============================================================================


def parse_variable_token(cursor: Cursor) -> ParseResult[tuple[str, bool]] | None:
    """Parse a variable token: $name, $scope:name, ${any text}, $_, $$, @name

    Examples:
        $Strings -> ("Strings", False)
        $script:Strings -> ("script:Strings", False)
        ${my var} -> ("my var", False)
        @params -> ("params", True)

    Args:
        cursor: Position of the '$' or '@' sigil

    Returns:
        ParseResult((name, splatted), cursor) or None if not a variable
    """
    if cursor.is_eof or cursor.current not in ("$", "@"):
        return None
    splatted = cursor.current == "@"
    cursor = cursor.advance()
    if cursor.is_eof:
        return None

    if cursor.current == "{" and not splatted:
        return _parse_braced_variable(cursor)

    if not splatted and cursor.current in ("$", "?", "^"):
        return ParseResult((cursor.current, False), cursor.advance())

    if not is_variable_start(cursor.current):
        _set_parse_error("Expected variable name", cursor.pos)
        return None

    start = cursor.pos
    has_qualifier = False
    while not cursor.is_eof:
        ch = cursor.current
        if is_variable_char(ch):
            cursor = cursor.advance()
        elif ch == ":" and not has_qualifier and _is_name_next(cursor):
            has_qualifier = True
            cursor = cursor.advance()
        else:
            break
    return ParseResult((cursor.source[start : cursor.pos], splatted), cursor)


def _is_name_next(cursor: Cursor) -> bool:
    following = cursor.peek(1)
    return following is not None and is_variable_start(following)


def _parse_braced_variable(cursor: Cursor) -> ParseResult[tuple[str, bool]]:
    """Parse ${...} with the cursor on '{'. Backtick escapes the next character."""
    cursor = cursor.advance()
    chars: list[str] = []
    while not cursor.is_eof:
        ch = cursor.current
        if ch == "}":
            return ParseResult(("".join(chars), False), cursor.advance())
        if ch == "`" and cursor.peek(1) is not None:
            cursor = cursor.advance()
            ch = cursor.current
        chars.append(ch)
        cursor = cursor.advance()
    raise_unexpected_eof(cursor, "'}'")


# =============================================================================
# Strings
# =============================================================================


def parse_single_quoted_string(cursor: Cursor) -> ParseResult[str] | None:
    """Parse verbatim string: 'text' with '' as an embedded quote.

    Examples:
        'Strings.psd1' -> "Strings.psd1"
        'It''s' -> "It's"

    Raises:
        ScriptParseError: If the string is not terminated
    """
    if cursor.is_eof or cursor.current not in SINGLE_QUOTES:
        return None
    cursor = cursor.advance()
    chars: list[str] = []
    while not cursor.is_eof:
        ch = cursor.current
        if ch in SINGLE_QUOTES:
            following = cursor.peek(1)
            if following is not None and following in SINGLE_QUOTES:
                chars.append(ch)
                cursor = cursor.advance(2)
                continue
            return ParseResult("".join(chars), cursor.advance())
        chars.append(ch)
        cursor = cursor.advance()
    raise_unexpected_eof(cursor, "closing \"'\"")


def parse_double_quoted_string(cursor: Cursor) -> ParseResult[tuple[str, str, bool]] | None:
    """Parse expandable string: "text" with backtick escapes and "" as a quote.

    Interpolations ($name, ${name}, $(...)) are detected but not evaluated;
    the caller decides between a constant and an expandable string.

    Examples:
        "Strings.psd1" -> ("Strings.psd1", "Strings.psd1", False)
        "a`tb" -> ("a\\tb", "a`tb", False)
        "$PSScriptRoot\\x" -> (..., "$PSScriptRoot\\x", True)

    Returns:
        ParseResult((value, raw_inner_text, expandable), cursor)

    Raises:
        ScriptParseError: If the string (or an embedded $( )) is not terminated
    """
    if cursor.is_eof or cursor.current not in DOUBLE_QUOTES:
        return None
    cursor = cursor.advance()
    inner_start = cursor.pos
    chars: list[str] = []
    expandable = False
    while not cursor.is_eof:
        ch = cursor.current
        if ch in DOUBLE_QUOTES:
            following = cursor.peek(1)
            if following is not None and following in DOUBLE_QUOTES:
                chars.append(ch)
                cursor = cursor.advance(2)
                continue
            raw = cursor.source[inner_start : cursor.pos]
            return ParseResult(("".join(chars), raw, expandable), cursor.advance())
        if ch == "`":
            escaped, cursor = _parse_backtick_escape(cursor)
            chars.append(escaped)
            continue
        if ch == "$":
            interpolation = _skip_interpolation(cursor)
            if interpolation is not None:
                expandable = True
                chars.append(cursor.slice_to(interpolation.pos))
                cursor = interpolation
                continue
        chars.append(ch)
        cursor = cursor.advance()
    raise_unexpected_eof(cursor, "closing '\"'")


def _parse_backtick_escape(cursor: Cursor) -> tuple[str, Cursor]:
    """Decode a backtick escape with the cursor on the backtick."""
    cursor = cursor.advance()
    if cursor.is_eof:
        return ("`", cursor)
    ch = cursor.current
    if ch == "u" and cursor.peek(1) == "{":
        end = cursor.source.find("}", cursor.pos + 2)
        digits = cursor.source[cursor.pos + 2 : end] if end > 0 else ""
        if digits and len(digits) <= 6 and all(c in _HEX_DIGITS for c in digits):
            code_point = int(digits, 16)
            if code_point <= 0x10FFFF:
                return (chr(code_point), Cursor(cursor.source, end + 1))
    return (_BACKTICK_ESCAPES.get(ch, ch), cursor.advance())


def _skip_interpolation(cursor: Cursor) -> Cursor | None:
    """Skip $name, ${name} or $( ... ) inside an expandable string.

    Returns:
        Cursor after the interpolation, or None if the '$' is literal
    """
    following = cursor.peek(1)
    if following is None:
        return None
    if following == "(":
        return skip_balanced(cursor.advance())
    if following == "{" or following in ("$", "?", "^") or is_variable_start(following):
        result = parse_variable_token(cursor)
        return result.cursor if result is not None else None
    return None


def parse_here_string(cursor: Cursor) -> ParseResult[tuple[str, bool, bool]] | None:
    """Parse here-string: @' ... '@ or @" ... "@

    The header must end its line and the terminator must start a line.
    The value excludes the line break after the header and before the
    terminator.

    Returns:
        ParseResult((value, double_quoted, expandable), cursor) or None if
        the cursor is not on a here-string header

    Raises:
        ScriptParseError: If the terminator is missing
    """
    if cursor.is_eof or cursor.current != "@":
        return None
    quote = cursor.peek(1)
    if quote is None or quote not in SINGLE_QUOTES + DOUBLE_QUOTES:
        return None
    double_quoted = quote in DOUBLE_QUOTES
    quotes = DOUBLE_QUOTES if double_quoted else SINGLE_QUOTES

    header_end = cursor.advance(2)
    while not header_end.is_eof and is_inline_whitespace(header_end.current):
        header_end = header_end.advance()
    if header_end.is_eof:
        raise_unexpected_eof(header_end, "here-string body")
    if header_end.current not in ("\n", "\r"):
        _set_parse_error("Here-string header must be followed by a line break", header_end.pos)
        return None

    cursor = header_end.skip_line_end()
    chars: list[str] = []
    expandable = False
    at_line_start = True
    while not cursor.is_eof:
        if at_line_start and cursor.current in quotes and cursor.peek(1) == "@":
            value = "".join(chars)
            if value.endswith("\r\n"):
                value = value[:-2]
            elif value.endswith(("\n", "\r")):
                value = value[:-1]
            return ParseResult((value, double_quoted, expandable), cursor.advance(2))
        ch = cursor.current
        at_line_start = ch in ("\n", "\r")
        if double_quoted and ch == "`":
            escaped, cursor = _parse_backtick_escape(cursor)
            chars.append(escaped)
            continue
        if double_quoted and ch == "$":
            interpolation = _skip_interpolation(cursor)
            if interpolation is not None:
                expandable = True
                chars.append(cursor.slice_to(interpolation.pos))
                at_line_start = chars[-1].endswith(("\n", "\r"))
                cursor = interpolation
                continue
        chars.append(ch)
        cursor = cursor.advance()
    raise_unexpected_eof(cursor, f"here-string terminator '{quote}@'")


# =============================================================================
# Numbers
# =============================================================================


def parse_number(cursor: Cursor) -> ParseResult[int | float] | None:
    """Parse numeric literal with optional type suffix and multiplier.

    Examples:
        42 -> 42
        0x1F -> 31
        1.5e3 -> 1500.0
        10kb -> 10240
        7L -> 7

    The caller checks what follows: in argument mode "1.psd1" is a
    bareword, not a number followed by garbage.

    Returns:
        ParseResult(value, cursor) or None if no number starts here
    """
    start = cursor.pos
    if cursor.slice_ahead(2).lower() == "0x":
        digits_cursor = cursor.advance(2)
        end = digits_cursor
        while not end.is_eof and end.current in _HEX_DIGITS:
            end = end.advance()
        if end.pos == digits_cursor.pos:
            return None
        value: int | float = int(digits_cursor.slice_to(end.pos), 16)
        return _parse_number_suffixes(value, end)

    is_float = False
    while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
        cursor = cursor.advance()
    following = cursor.peek(1)
    if (
        not cursor.is_eof
        and cursor.current == "."
        and following is not None
        and following in _ASCII_DIGITS
    ):
        is_float = True
        cursor = cursor.advance()
        while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
            cursor = cursor.advance()
    if cursor.pos == start:
        return None

    if not cursor.is_eof and cursor.current in ("e", "E"):
        exponent = cursor.advance()
        if not exponent.is_eof and exponent.current in ("+", "-"):
            exponent = exponent.advance()
        if not exponent.is_eof and exponent.current in _ASCII_DIGITS:
            is_float = True
            while not exponent.is_eof and exponent.current in _ASCII_DIGITS:
                exponent = exponent.advance()
            cursor = exponent

    text = Cursor(cursor.source, start).slice_to(cursor.pos)
    value = float(text) if is_float else int(text)
    return _parse_number_suffixes(value, cursor)


def _parse_number_suffixes(value: int | float, cursor: Cursor) -> ParseResult[int | float]:
    for suffix in _NUMBER_TYPE_SUFFIXES:
        if cursor.slice_ahead(len(suffix)).lower() == suffix:
            cursor = cursor.advance(len(suffix))
            break
    multiplier = _NUMBER_MULTIPLIERS.get(cursor.slice_ahead(2).lower())
    if multiplier is not None:
        value *= multiplier
        cursor = cursor.advance(2)
    return ParseResult(value, cursor)


# =============================================================================
# Generic tokens
# =============================================================================


def parse_bareword(cursor: Cursor) -> ParseResult[tuple[str, bool]] | None:
    """Parse a generic argument-mode token.

    The token runs until whitespace or a delimiter. Backtick escapes the
    next character; embedded quoted segments are unquoted and joined to
    the token, as PowerShell does for Write-Output a'b c'd.

    Examples:
        Strings.psd1 -> ("Strings.psd1", False)
        $PSScriptRoot\\en-US -> ("$PSScriptRoot\\en-US", True)

    Returns:
        ParseResult((value, expandable), cursor) or None for an empty token
    """
    start = cursor.pos
    chars: list[str] = []
    expandable = False
    while not cursor.is_eof and not is_bareword_delimiter(cursor.current):
        ch = cursor.current
        if ch == "`":
            if cursor.peek(1) in ("\n", "\r"):
                break
            escaped, cursor = _parse_backtick_escape(cursor)
            chars.append(escaped)
            continue
        if ch in SINGLE_QUOTES:
            quoted = parse_single_quoted_string(cursor)
            if quoted is not None:
                chars.append(quoted.value)
                cursor = quoted.cursor
                continue
        if ch in DOUBLE_QUOTES:
            expanded = parse_double_quoted_string(cursor)
            if expanded is not None:
                value, _, is_expandable = expanded.value
                expandable = expandable or is_expandable
                chars.append(value)
                cursor = expanded.cursor
                continue
        if ch == "$":
            interpolation = _skip_interpolation(cursor)
            if interpolation is not None:
                expandable = True
                chars.append(cursor.slice_to(interpolation.pos))
                cursor = interpolation
                continue
        chars.append(ch)
        cursor = cursor.advance()
    if cursor.pos == start:
        return None
    return ParseResult(("".join(chars), expandable), cursor)


def skip_balanced(cursor: Cursor) -> Cursor:
    """Skip a bracketed region without parsing it.

    Nested brackets, strings, here-strings and comments are respected, so a
    closing bracket inside a string does not end the region.

    Args:
        cursor: Position of the opening '(', '{' or '['

    Returns:
        Cursor after the matching closing bracket

    Raises:
        ScriptParseError: If input ends before the region is closed
    """
    stack = [_OPENERS[cursor.current]]
    cursor = cursor.advance()
    while not cursor.is_eof:
        ch = cursor.current
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch == stack[-1]:
            stack.pop()
            if not stack:
                return cursor.advance()
        elif ch == "`":
            cursor = cursor.advance()
        elif ch in SINGLE_QUOTES or ch in DOUBLE_QUOTES:
            cursor = _skip_string(cursor)
            continue
        elif ch == "@":
            here = parse_here_string(cursor)
            if here is not None:
                cursor = here.cursor
                continue
        elif ch == "<" and cursor.peek(1) == "#":
            cursor = skip_block_comment(cursor)
            continue
        elif ch == "#":
            cursor = cursor.skip_to_line_end()
            continue
        cursor = cursor.advance()
    raise_unexpected_eof(cursor, f"'{stack[-1]}'")


def _skip_string(cursor: Cursor) -> Cursor:
    if cursor.current in SINGLE_QUOTES:
        single = parse_single_quoted_string(cursor)
        assert single is not None  # noqa: S101 - guarded by the quote check
        return single.cursor
    double = parse_double_quoted_string(cursor)
    assert double is not None  # noqa: S101 - guarded by the quote check
    return double.cursor


def skip_block_comment(cursor: Cursor) -> Cursor:
    """Skip <# ... #> with the cursor on '<'.

    Raises:
        ScriptParseError: If the comment is not terminated
    """
    end = cursor.source.find("#>", cursor.pos + 2)
    if end < 0:
        raise_unexpected_eof(Cursor(cursor.source, len(cursor.source)), "'#>'")
    return Cursor(cursor.source, end + 2)
