"""PowerShell syntax package.

Provides the parser, AST definitions and visitor pattern. Separate from
extraction so tooling (scanners, reference finders) can reuse the tree.

Python 3.13+.
"""

from .ast import (
    Annotation,
    ArrayLiteral,
    AssignmentStatement,
    ASTNode,
    CommandElement,
    CommandExpression,
    CommandInvocation,
    CommandParameter,
    DataSection,
    ExpandableString,
    Expression,
    HashtableEntry,
    HashtableLiteral,
    Junk,
    NumberConstant,
    ParenExpression,
    Pipeline,
    ScriptBlock,
    ScriptBlockExpression,
    ScriptTree,
    Span,
    Statement,
    StringConstant,
    TypeLiteral,
    VariableExpression,
)
from .cursor import Cursor, LineOffsetCache, ParseResult
from .parser import PowerShellParser
from .visitor import ASTVisitor

__all__ = [
    "ASTNode",
    "ASTVisitor",
    "Annotation",
    "ArrayLiteral",
    "AssignmentStatement",
    "CommandElement",
    "CommandExpression",
    "CommandInvocation",
    "CommandParameter",
    "Cursor",
    "DataSection",
    "ExpandableString",
    "Expression",
    "HashtableEntry",
    "HashtableLiteral",
    "Junk",
    "LineOffsetCache",
    "NumberConstant",
    "ParenExpression",
    "ParseResult",
    "Pipeline",
    "PowerShellParser",
    "ScriptBlock",
    "ScriptBlockExpression",
    "ScriptTree",
    "Span",
    "Statement",
    "StringConstant",
    "TypeLiteral",
    "VariableExpression",
    "parse_script",
]


def parse_script(
    source: str,
    *,
    max_source_size: int | None = None,
    max_nesting_depth: int | None = None,
) -> ScriptTree:
    """Parse PowerShell source into a ScriptTree.

    Convenience function for PowerShellParser().parse().

    Args:
        source: Module text
        max_source_size: Size limit in characters (default: MAX_SOURCE_SIZE)
        max_nesting_depth: Nesting limit (default: MAX_NESTING_DEPTH)

    Returns:
        ScriptTree with the top-level statements and any recovered Junk

    Raises:
        ScriptParseError: On an unrecoverable syntax error

    Example:
        >>> from pslocdata.syntax import parse_script
        >>> tree = parse_script("$x = 'a'")
        >>> tree.root.statements[0].target_variable.name
        'x'
    """
    parser = PowerShellParser(
        max_source_size=max_source_size,
        max_nesting_depth=max_nesting_depth,
    )
    return parser.parse(source)
