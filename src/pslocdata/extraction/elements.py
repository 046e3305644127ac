"""Classification of command elements into argument kinds.

Every element after the command name of an Import-LocalizedData call is
classified into exactly one of four kinds:

    ParameterMarker   -FileName, -BindingVariable:
    LiteralValue      'Strings.psd1', "Strings.psd1", Strings.psd1, here-strings
    VariableReference $Name, @Splat
    BareExpression    numbers, (parenthesized), arrays, [types]

The union is closed: resolution matches exhaustively over it, and any
other syntax raises MalformedCallError.

Python 3.13+.
"""

from dataclasses import dataclass

from pslocdata.diagnostics import ErrorTemplate, MalformedCallError, SourceSpan
from pslocdata.enums import StringKind
from pslocdata.syntax.ast import (
    ArrayLiteral,
    ASTNode,
    CommandElement,
    CommandParameter,
    NumberConstant,
    ParenExpression,
    ScriptTree,
    StringConstant,
    TypeLiteral,
    VariableExpression,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Element kinds
    "ParameterMarker",
    "LiteralValue",
    "VariableReference",
    "BareExpression",
    "Element",
    # Classification
    "classify_element",
    "to_source_span",
    "HERE_STRING_KINDS",
]

HERE_STRING_KINDS: frozenset[StringKind] = frozenset(
    {StringKind.SINGLE_QUOTED_HERE, StringKind.DOUBLE_QUOTED_HERE}
)


@dataclass(frozen=True, slots=True)
class ParameterMarker:
    """Parameter name token. Sets the parameter that following values bind to.

    Attributes:
        name: Parameter name without leading '-' or trailing ':'
        line: Source line of the marker
    """

    name: str
    line: int = 1


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """String constant argument.

    Attributes:
        text: Source text, quotes included
        kind: Quoting style
        value: Parsed string value (escapes applied, quotes removed)
        line: Source line of the literal
    """

    text: str
    kind: StringKind
    value: str
    line: int = 1


@dataclass(frozen=True, slots=True)
class VariableReference:
    """Variable argument: $Name, or @Name when splatted.

    Attributes:
        name: Variable name without sigil (scope prefix kept)
        splatted: True for @Name (argument bundle expansion)
        text: Source text, sigil included
        line: Source line of the reference
    """

    name: str
    splatted: bool
    text: str
    line: int = 1


@dataclass(frozen=True, slots=True)
class BareExpression:
    """Argument that does not contribute a value (number, array, ...).

    Attributes:
        node_kind: AST node type name
        text: Source text
    """

    node_kind: str
    text: str


type Element = ParameterMarker | LiteralValue | VariableReference | BareExpression


def _line_of(node: ASTNode) -> int:
    span = getattr(node, "span", None)
    return span.start_line if span is not None else 1


def to_source_span(node: ASTNode) -> SourceSpan | None:
    """Convert a node's span to a diagnostic SourceSpan."""
    span = getattr(node, "span", None)
    if span is None:
        return None
    return SourceSpan(
        start=span.start,
        end=span.end,
        line=span.start_line,
        column=span.start_column,
    )


def classify_element(tree: ScriptTree, element: CommandElement) -> tuple[Element, ...]:
    """Classify one command element.

    A parameter with an attached argument (-FileName:Strings.psd1) yields the
    marker followed by the argument's classification; every other element
    yields exactly one Element.

    Args:
        tree: Tree the element belongs to (for source text)
        element: Parameter or argument node from CommandInvocation.elements

    Returns:
        Classified elements in source order

    Raises:
        MalformedCallError: If the element is of an unsupported kind
    """
    match element:
        case CommandParameter(name=name, argument=None):
            return (ParameterMarker(name.lstrip("-").rstrip(":"), _line_of(element)),)
        case CommandParameter(name=name, argument=argument) if argument is not None:
            marker = ParameterMarker(name.lstrip("-").rstrip(":"), _line_of(element))
            return (marker, *classify_element(tree, argument))
        case StringConstant(value=value, kind=kind):
            return (LiteralValue(tree.text_of(element), kind, value, _line_of(element)),)
        case VariableExpression(name=name, splatted=splatted):
            return (VariableReference(name, splatted, tree.text_of(element), _line_of(element)),)
        case NumberConstant() | ParenExpression() | ArrayLiteral() | TypeLiteral():
            return (BareExpression(type(element).__name__, tree.text_of(element)),)
        case _:
            kind = type(element).__name__
            raise MalformedCallError(
                ErrorTemplate.malformed_call(kind, to_source_span(element)),
                element_kind=kind,
            )
