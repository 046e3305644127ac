"""Static argument resolution for Import-LocalizedData calls.

Walks a call's classified elements in source order and builds the
ArgumentRecord the cmdlet would receive, resolving variables through the
lexically last assignment at or before the reference and expanding
splatted hashtables.

Lookup Rule:
    Only the source line matters. Branches and loops are not evaluated,
    so a reference may resolve to an assignment that never runs. This
    mirrors the approximation the PowerShell-hosted extractor makes.

All functions are pure: they receive the tree explicitly and keep no
state between calls.

Python 3.13+.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import assert_never

from pslocdata.constants import COMMON_PARAMETERS, IMPORT_PARAMETERS, POSITIONAL_PARAMETERS
from pslocdata.syntax.ast import (
    AssignmentStatement,
    CommandInvocation,
    ConvertExpression,
    Expression,
    HashtableLiteral,
    Pipeline,
    ScriptTree,
    Statement,
    StringConstant,
    VariableExpression,
)
from pslocdata.syntax.parser.primitives import DOUBLE_QUOTES, SINGLE_QUOTES
from pslocdata.syntax.visitor import ASTVisitor

from .elements import (
    HERE_STRING_KINDS,
    BareExpression,
    LiteralValue,
    ParameterMarker,
    VariableReference,
    classify_element,
)

__all__ = [
    "ArgumentRecord",
    "canonical_parameter_name",
    "collect_assignments",
    "find_last_assignment",
    "resolve_arguments",
    "strip_quotes",
]

logger = logging.getLogger(__name__)

_KNOWN_PARAMETERS: tuple[str, ...] = IMPORT_PARAMETERS + COMMON_PARAMETERS


@dataclass(frozen=True, slots=True, eq=False)
class ArgumentRecord(Mapping[str, str]):
    """Resolved parameters of one call, in first-binding order.

    Read-only mapping of canonical parameter name to string value. Built
    once per call; derived records come from without() and with_values().

    Attributes:
        entries: (name, value) pairs in first-binding order
        unresolved_splats: Splatted variables that did not resolve to a
            hashtable literal (reported as warnings)

    Example:
        >>> record = ArgumentRecord((("FileName", "Strings.psd1"),))
        >>> record["FileName"]
        'Strings.psd1'
        >>> dict(record.with_values({"UICulture": "fr-FR"}))
        {'FileName': 'Strings.psd1', 'UICulture': 'fr-FR'}
    """

    entries: tuple[tuple[str, str], ...] = ()
    unresolved_splats: tuple[str, ...] = ()

    def __getitem__(self, key: str) -> str:
        for name, value in self.entries:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"ArgumentRecord({dict(self.entries)!r})"

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, str], unresolved_splats: tuple[str, ...] = ()
    ) -> "ArgumentRecord":
        """Build a record from a mapping, preserving its iteration order."""
        return cls(tuple(values.items()), unresolved_splats)

    def without(self, name: str) -> "ArgumentRecord":
        """Return a record with the named parameter removed."""
        return ArgumentRecord(
            tuple(entry for entry in self.entries if entry[0] != name),
            self.unresolved_splats,
        )

    def with_values(self, values: Mapping[str, str]) -> "ArgumentRecord":
        """Return a record with the given parameters set (added or replaced)."""
        merged = dict(self.entries)
        merged.update(values)
        return ArgumentRecord.from_mapping(merged, self.unresolved_splats)


def strip_quotes(text: str) -> str:
    """Strip one layer of matching surrounding quotes.

    Example:
        >>> strip_quotes("'Strings.psd1'")
        'Strings.psd1'
        >>> strip_quotes("\\"'x'\\"")
        "'x'"
        >>> strip_quotes("'unbalanced")
        "'unbalanced"
    """
    if len(text) >= 2:
        first, last = text[0], text[-1]
        if (first in SINGLE_QUOTES and last in SINGLE_QUOTES) or (
            first in DOUBLE_QUOTES and last in DOUBLE_QUOTES
        ):
            return text[1:-1]
    return text


def canonical_parameter_name(name: str) -> str:
    """Canonicalize a parameter name the way the cmdlet binder does.

    Matching is case-insensitive and accepts any unique prefix of the
    cmdlet's own or common parameters. Unknown or ambiguous names are
    returned as written.

    Example:
        >>> canonical_parameter_name("binding")
        'BindingVariable'
        >>> canonical_parameter_name("FILENAME")
        'FileName'
        >>> canonical_parameter_name("Custom")
        'Custom'
    """
    lowered = name.casefold()
    for candidate in _KNOWN_PARAMETERS:
        if candidate.casefold() == lowered:
            return candidate
    if not lowered:
        return name
    matches = [c for c in _KNOWN_PARAMETERS if c.casefold().startswith(lowered)]
    if len(matches) == 1:
        return matches[0]
    return name


class _AssignmentCollector(ASTVisitor[None]):
    __slots__ = ("assignments",)

    def __init__(self) -> None:
        super().__init__()
        self.assignments: list[AssignmentStatement] = []

    def visit_AssignmentStatement(self, node: AssignmentStatement) -> None:  # noqa: N802
        self.assignments.append(node)
        self.generic_visit(node)


def collect_assignments(tree: ScriptTree) -> tuple[AssignmentStatement, ...]:
    """Return every assignment in the tree, in encounter order.

    Nested script blocks and function bodies are included; parameter
    defaults are not assignments.
    """
    collector = _AssignmentCollector()
    collector.visit(tree.root)
    return tuple(collector.assignments)


def find_last_assignment(
    tree: ScriptTree,
    name: str,
    line: int,
    assignments: tuple[AssignmentStatement, ...] | None = None,
) -> AssignmentStatement | None:
    """Find the lexically last assignment to a variable at or before a line.

    Variable names compare case-insensitively; scope prefixes (script:,
    global:) are part of the name. Among assignments starting on the same
    line the later one wins.

    Args:
        tree: Tree to search
        name: Variable name without sigil
        line: Line of the reference (1-indexed)
        assignments: Precomputed collect_assignments(tree) result

    Returns:
        The matching AssignmentStatement, or None
    """
    if assignments is None:
        assignments = collect_assignments(tree)
    wanted = name.casefold()
    best: AssignmentStatement | None = None
    best_line = 0
    for assignment in assignments:
        target = assignment.target_variable
        if target is None or target.name.casefold() != wanted:
            continue
        start_line = assignment.span.start_line if assignment.span is not None else 1
        if start_line <= line and start_line >= best_line:
            best = assignment
            best_line = start_line
    return best


def _single_expression(statement: Statement) -> Expression | None:
    if isinstance(statement, Pipeline):
        return statement.single_expression
    return None


def _hashtable_of(statement: Statement) -> HashtableLiteral | None:
    """Return the hashtable literal a statement consists of, through casts."""
    expression = _single_expression(statement)
    while isinstance(expression, ConvertExpression):
        expression = expression.operand
    if HashtableLiteral.guard(expression):
        return expression
    return None


def _resolve_variable(
    tree: ScriptTree,
    name: str,
    text: str,
    line: int,
    assignments: tuple[AssignmentStatement, ...],
) -> str:
    """Value of $name at line.

    A here-string assignment gives its parsed value, any other assignment its
    right-hand text with quotes removed. Without a prior assignment the raw
    reference text is kept.
    """
    assignment = find_last_assignment(tree, name, line, assignments)
    if assignment is None:
        logger.debug("No assignment to $%s before line %d; using raw text", name, line)
        return text
    expression = _single_expression(assignment.value)
    if StringConstant.guard(expression) and expression.kind in HERE_STRING_KINDS:
        return expression.value
    return strip_quotes(tree.text_of(assignment.value))


def _entry_value(
    tree: ScriptTree,
    value: Statement,
    assignments: tuple[AssignmentStatement, ...],
) -> str:
    expression = _single_expression(value)
    match expression:
        case StringConstant(kind=kind, value=constant) if kind in HERE_STRING_KINDS:
            return constant
        case StringConstant():
            return strip_quotes(tree.text_of(expression))
        case VariableExpression(name=name, splatted=False):
            span = expression.span
            line = span.start_line if span is not None else 1
            return _resolve_variable(tree, name, tree.text_of(expression), line, assignments)
        case _:
            return tree.text_of(value)


def _entry_key(tree: ScriptTree, key: Expression) -> str:
    if StringConstant.guard(key):
        return canonical_parameter_name(key.value)
    return canonical_parameter_name(strip_quotes(tree.text_of(key)))


def resolve_arguments(tree: ScriptTree, call: CommandInvocation) -> ArgumentRecord:
    """Resolve the effective arguments of one call.

    Elements are processed in source order with a sticky active parameter:
    a marker sets it and it stays set until the next marker. Values seen
    while no parameter is active bind positionally (BindingVariable, then
    UICulture). Splatted hashtables merge their entries directly into the
    record.

    Args:
        tree: Tree containing the call
        call: The Import-LocalizedData invocation

    Returns:
        ArgumentRecord with canonical parameter names

    Raises:
        MalformedCallError: If an element of unsupported kind is present
    """
    assignments = collect_assignments(tree)
    values: dict[str, str] = {}
    unresolved: list[str] = []
    current: str | None = None

    def store(value: str) -> None:
        if current is not None:
            values[current] = value
            return
        position = next((p for p in POSITIONAL_PARAMETERS if p not in values), None)
        if position is None:
            logger.debug("Ignoring extra positional argument %r", value)
            return
        values[position] = value

    for command_element in call.elements:
        for element in classify_element(tree, command_element):
            match element:
                case ParameterMarker(name=name):
                    current = canonical_parameter_name(name)
                case LiteralValue(kind=kind, value=value) if kind in HERE_STRING_KINDS:
                    store(value)
                case LiteralValue(text=text):
                    store(strip_quotes(text))
                case VariableReference(splatted=False) as reference:
                    store(
                        _resolve_variable(
                            tree, reference.name, reference.text, reference.line, assignments
                        )
                    )
                case VariableReference(splatted=True) as reference:
                    assignment = find_last_assignment(
                        tree, reference.name, reference.line, assignments
                    )
                    bundle = _hashtable_of(assignment.value) if assignment is not None else None
                    if bundle is None:
                        logger.info(
                            "Splatted variable @%s is not a hashtable literal", reference.name
                        )
                        unresolved.append(reference.name)
                        if current is not None:
                            values[current] = reference.text
                        continue
                    for entry in bundle.entries:
                        values[_entry_key(tree, entry.key)] = _entry_value(
                            tree, entry.value, assignments
                        )
                case BareExpression():
                    continue
                case _:
                    assert_never(element)

    return ArgumentRecord.from_mapping(values, tuple(unresolved))
