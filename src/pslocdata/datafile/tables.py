"""Restricted reader for .psd1 message tables.

Locale-data files are read without executing them. Supported shapes (the
first top-level statement that matches wins):

    @{ Key1 = 'Value1'; Key2 = "Value2" }

    ConvertFrom-StringData @'
    Key1 = Value1
    Key2 = Value2
    '@

Either may be the right-hand side of an assignment ($Messages = @{...})
or sit inside a data { ... } section.

Python 3.13+.
"""

import logging
import re

from pslocdata.constants import PARAM_STRING_DATA, STRING_DATA_COMMAND_NAME
from pslocdata.diagnostics import ErrorTemplate, LocaleDataFormatError, ScriptParseError
from pslocdata.syntax import parse_script
from pslocdata.syntax.ast import (
    AssignmentStatement,
    CommandInvocation,
    CommandParameter,
    ConvertExpression,
    DataSection,
    HashtableLiteral,
    NumberConstant,
    Pipeline,
    ScriptTree,
    Statement,
    StringConstant,
)

__all__ = ["load_message_table", "parse_string_data"]

logger = logging.getLogger(__name__)

_ESCAPE_PATTERN = re.compile(
    r"\\(x[0-9A-Fa-f]{2}|u[0-9A-Fa-f]{4}|[0-7]{1,3}|c[A-Za-z]|.)", re.DOTALL
)

_SIMPLE_ESCAPES: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "f": "\f",
    "n": "\n",
    "e": "\x1b",
}


def _invalid(data_path: str, reason: str) -> LocaleDataFormatError:
    return LocaleDataFormatError(ErrorTemplate.invalid_locale_data(data_path, reason))


def _unescape(value: str, data_path: str) -> str:
    """Apply regular-expression style backslash escapes (\\n, \\t, \\x41, \\\\ ...)."""
    if value.endswith("\\") and (len(value) - len(value.rstrip("\\"))) % 2 == 1:
        raise _invalid(data_path, f"illegal trailing backslash in {value!r}")

    def replace(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        if len(escape) > 1:
            match escape[0]:
                case "x" | "u":
                    return chr(int(escape[1:], 16))
                case "c":
                    return chr(ord(escape[1].upper()) - 64)
        if escape[0] in "01234567":
            return chr(int(escape, 8))
        return escape

    return _ESCAPE_PATTERN.sub(replace, value)


def parse_string_data(text: str, data_path: str = "<string>") -> dict[str, str]:
    """Parse ConvertFrom-StringData text into a table.

    Each non-blank line that does not start with '#' must be ``key = value``.
    Keys and values are trimmed; values are unescaped. Keys compare
    case-insensitively and may not repeat.

    Raises:
        LocaleDataFormatError: On a line without '=', an empty or repeated key

    Example:
        >>> parse_string_data("Greeting = Hello\\\\n# note\\nBye=Good bye")
        {'Greeting': 'Hello\\n', 'Bye': 'Good bye'}
    """
    table: dict[str, str] = {}
    seen: set[str] = set()
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, separator, value = line.partition("=")
        key = key.strip()
        if not separator:
            raise _invalid(data_path, f"line {number} of string data has no '='")
        if not key:
            raise _invalid(data_path, f"line {number} of string data has an empty key")
        if key.casefold() in seen:
            raise _invalid(data_path, f"key '{key}' is defined more than once")
        seen.add(key.casefold())
        table[key] = _unescape(value.strip(), data_path)
    return table


def _table_from_hashtable(
    tree: ScriptTree, table: HashtableLiteral, data_path: str
) -> dict[str, str]:
    result: dict[str, str] = {}
    seen: set[str] = set()
    for entry in table.entries:
        key_node = entry.key
        if StringConstant.guard(key_node):
            key = key_node.value
        elif isinstance(key_node, NumberConstant):
            key = tree.text_of(key_node)
        else:
            raise _invalid(data_path, f"unsupported key {tree.text_of(key_node)!r}")

        if key.casefold() in seen:
            raise _invalid(data_path, f"key '{key}' is defined more than once")
        seen.add(key.casefold())

        value = entry.value.single_expression if isinstance(entry.value, Pipeline) else None
        if StringConstant.guard(value):
            result[key] = value.value
        elif isinstance(value, NumberConstant):
            result[key] = tree.text_of(value)
        else:
            raise _invalid(data_path, f"value of '{key}' is not a string or number constant")
    return result


def _string_data_argument(
    tree: ScriptTree, command: CommandInvocation, data_path: str
) -> str:
    """Return the string passed to ConvertFrom-StringData (named or positional)."""
    argument = None
    expecting_value = False
    for element in command.elements:
        if isinstance(element, CommandParameter):
            if not PARAM_STRING_DATA.casefold().startswith(element.name.casefold()):
                raise _invalid(data_path, f"unsupported parameter '-{element.name}'")
            if element.argument is not None:
                argument = element.argument
            else:
                expecting_value = True
            continue
        if argument is None or expecting_value:
            argument = element
            expecting_value = False
        else:
            raise _invalid(data_path, f"unexpected argument {tree.text_of(element)!r}")

    if argument is None:
        raise _invalid(data_path, f"{STRING_DATA_COMMAND_NAME} has no string argument")
    if not StringConstant.guard(argument):
        raise _invalid(
            data_path,
            f"{STRING_DATA_COMMAND_NAME} argument must be a constant string",
        )
    return argument.value


def _find_table(tree: ScriptTree, statement: Statement, data_path: str) -> dict[str, str] | None:
    match statement:
        case AssignmentStatement(value=value):
            return _find_table(tree, value, data_path)
        case DataSection(body=body):
            for inner in body.statements:
                table = _find_table(tree, inner, data_path)
                if table is not None:
                    return table
            return None
        case Pipeline():
            command = statement.single_command
            if command is not None and command.matches(STRING_DATA_COMMAND_NAME):
                return parse_string_data(_string_data_argument(tree, command, data_path), data_path)
            expression = statement.single_expression
            while isinstance(expression, ConvertExpression):
                expression = expression.operand
            if HashtableLiteral.guard(expression):
                return _table_from_hashtable(tree, expression, data_path)
            return None
        case _:
            return None


def load_message_table(
    source: str,
    *,
    data_path: str = "<string>",
    max_source_size: int | None = None,
    max_nesting_depth: int | None = None,
) -> dict[str, str]:
    """Read a message table from locale-data file text.

    Args:
        source: File text
        data_path: Path used in diagnostics
        max_source_size: Parser size limit (default: MAX_SOURCE_SIZE)
        max_nesting_depth: Parser nesting limit (default: MAX_NESTING_DEPTH)

    Returns:
        Flat key to value table in declaration order

    Raises:
        LocaleDataFormatError: If the file has syntax errors or does not
            declare a supported message table

    Example:
        >>> load_message_table("@{ Hello = 'Hello'; Bye = \\"Bye\\" }")
        {'Hello': 'Hello', 'Bye': 'Bye'}
    """
    try:
        tree = parse_script(
            source,
            max_source_size=max_source_size,
            max_nesting_depth=max_nesting_depth,
        )
    except ScriptParseError as exc:
        reason = exc.diagnostic.message if exc.diagnostic is not None else str(exc)
        raise _invalid(data_path, reason) from exc

    if tree.has_junk:
        first = tree.junk[0]
        line = first.span.start_line if first.span is not None else 1
        raise _invalid(data_path, f"syntax error on line {line}")

    for statement in tree.root.statements:
        table = _find_table(tree, statement, data_path)
        if table is not None:
            logger.debug("Read %d message(s) from %s", len(table), data_path)
            return table

    raise _invalid(data_path, "no message table found")
