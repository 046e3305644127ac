"""PowerShell AST (Abstract Syntax Tree) node definitions.

Covers the subset of the PowerShell language needed to locate command
invocations and assignments statically: statements, pipelines, commands
and their arguments, and the expression forms that can appear as
arguments or assignment values. Includes type guards as static methods.

Python 3.13+.
"""

from dataclasses import dataclass
from typing import TypeIs

from pslocdata.enums import StringKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Span",
    "Annotation",
    "Junk",
    # Tree structure
    "ScriptTree",
    "ScriptBlock",
    "NamedBlock",
    "ParamBlock",
    "ParameterDeclaration",
    # Statements
    "Pipeline",
    "AssignmentStatement",
    "FunctionDefinition",
    "IfStatement",
    "IfClause",
    "LoopStatement",
    "SwitchStatement",
    "SwitchClause",
    "TryStatement",
    "CatchClause",
    "TrapStatement",
    "FlowStatement",
    "DataSection",
    "TypeDefinition",
    "UsingStatement",
    # Commands
    "CommandInvocation",
    "CommandExpression",
    "CommandParameter",
    # Expressions
    "StringConstant",
    "ExpandableString",
    "NumberConstant",
    "VariableExpression",
    "HashtableLiteral",
    "HashtableEntry",
    "ArrayLiteral",
    "ArraySubExpression",
    "SubExpression",
    "ParenExpression",
    "ScriptBlockExpression",
    "TypeLiteral",
    "ConvertExpression",
    "MemberExpression",
    "IndexExpression",
    "InvokeMemberExpression",
    "UnaryExpression",
    "BinaryExpression",
    # Type aliases
    "Statement",
    "Expression",
    "CommandElement",
    "PipelineElement",
    "ASTNode",
]

# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Span:
    """Source position span.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)
        start_line: Line of the first character (1-indexed)
        start_column: Column of the first character (1-indexed)
        end_line: Line of the last character (1-indexed)

    Example:
        Source: "$x = 'a'"
        Assignment span: Span(start=0, end=8, start_line=1, start_column=1, end_line=1)
    """

    start: int
    end: int
    start_line: int = 1
    start_column: int = 1
    end_line: int = 1

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.start_line < 1 or self.start_column < 1:
            msg = (
                f"Span line/column are 1-indexed, got "
                f"{self.start_line}:{self.start_column}"
            )
            raise ValueError(msg)
        if self.end_line < self.start_line:
            msg = f"Span end_line ({self.end_line}) must be >= start_line ({self.start_line})"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Parse error annotation attached to Junk nodes.

    Attributes:
        code: DiagnosticCode name (e.g., "PARSE_JUNK")
        message: Human-readable error message
        span: Location of the error (optional)
    """

    code: str
    message: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Junk:
    """Statement the parser could not understand and skipped.

    Junk keeps the surrounding statements intact: a syntax problem on one
    line does not hide call sites on other lines.
    """

    content: str
    annotations: tuple[Annotation, ...] = ()
    span: Span | None = None


# ============================================================================
# TREE STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class ScriptBlock:
    """Statement list: a whole file or the body between braces."""

    statements: tuple["Statement", ...]
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ScriptTree:
    """Root of a parsed file.

    Attributes:
        root: Top-level script block
        source: Source text the spans refer to
        junk: Every Junk node in the tree, in source order
    """

    root: ScriptBlock
    source: str
    junk: tuple[Junk, ...] = ()

    def text_of(self, node: "ASTNode") -> str:
        """Return the source text a node was parsed from.

        Raises:
            ValueError: If the node carries no span
        """
        span = getattr(node, "span", None)
        if span is None:
            msg = f"{type(node).__name__} has no source span"
            raise ValueError(msg)
        return self.source[span.start : span.end]

    @property
    def has_junk(self) -> bool:
        """Check if any statement had to be skipped."""
        return len(self.junk) > 0


@dataclass(frozen=True, slots=True)
class NamedBlock:
    """begin / process / end / dynamicparam / clean block."""

    name: str
    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ParameterDeclaration:
    """One parameter of a param block or function parameter list.

    A default value is not an assignment: it never participates in
    variable lookup.
    """

    variable: "VariableExpression"
    attributes: tuple["TypeLiteral", ...] = ()
    default: "Expression | None" = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ParamBlock:
    """param( ... ) declaration, with attributes written before it.

    The block may share a line with the statement after it.
    """

    parameters: tuple[ParameterDeclaration, ...]
    attributes: tuple["TypeLiteral", ...] = ()
    span: Span | None = None


# ============================================================================
# STATEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Pipeline:
    """One or more pipeline elements joined by '|'."""

    elements: tuple["PipelineElement", ...]
    span: Span | None = None

    @property
    def single_expression(self) -> "Expression | None":
        """The expression when the pipeline is a lone expression, else None."""
        if len(self.elements) == 1 and isinstance(self.elements[0], CommandExpression):
            return self.elements[0].expression
        return None

    @property
    def single_command(self) -> "CommandInvocation | None":
        """The command when the pipeline is a lone command, else None."""
        if len(self.elements) == 1 and isinstance(self.elements[0], CommandInvocation):
            return self.elements[0]
        return None


@dataclass(frozen=True, slots=True)
class AssignmentStatement:
    """Assignment: target operator value.

    Attributes:
        target: Left-hand side expression
        operator: "=", "+=", "-=", "*=", "/=", "%=" or "??="
        value: Right-hand side statement (pipeline or keyword statement)
    """

    target: "Expression"
    operator: str
    value: "Statement"
    span: Span | None = None

    @property
    def target_variable(self) -> "VariableExpression | None":
        """Assigned variable, looking through type constraints like [string]$x."""
        target = self.target
        while isinstance(target, ConvertExpression):
            target = target.operand
        if isinstance(target, VariableExpression) and not target.splatted:
            return target
        return None

    @staticmethod
    def guard(node: object) -> TypeIs["AssignmentStatement"]:
        """Type guard for AssignmentStatement."""
        return isinstance(node, AssignmentStatement)


@dataclass(frozen=True, slots=True)
class FunctionDefinition:
    """function / filter / workflow definition."""

    name: str
    kind: str
    parameters: tuple[ParameterDeclaration, ...]
    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class IfClause:
    """if / elseif condition with its body."""

    condition: "Statement"
    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class IfStatement:
    """if / elseif / else chain."""

    clauses: tuple[IfClause, ...]
    else_body: ScriptBlock | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class LoopStatement:
    """foreach / for / while / do loop.

    Attributes:
        keyword: Lower-cased loop keyword ("do" loops store "do-while" or "do-until")
        header: foreach -> (variable, pipeline); for -> present clauses;
            while / do -> (condition,)
        body: Loop body
        label: Loop label without the leading ':'
    """

    keyword: str
    header: tuple["ASTNode", ...]
    body: ScriptBlock
    label: str | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class SwitchClause:
    """Switch case: condition followed by a script block."""

    condition: "Expression"
    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class SwitchStatement:
    """switch statement."""

    options: tuple[str, ...]
    subject: "Statement | Expression | None"
    clauses: tuple[SwitchClause, ...]
    label: str | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class CatchClause:
    """catch [Type1], [Type2] { ... }"""

    types: tuple["TypeLiteral", ...]
    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TryStatement:
    """try / catch / finally."""

    body: ScriptBlock
    catch_clauses: tuple[CatchClause, ...] = ()
    finally_body: ScriptBlock | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TrapStatement:
    """trap [Type] { ... }"""

    body: ScriptBlock
    trap_type: "TypeLiteral | None" = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class FlowStatement:
    """return / throw / exit / break / continue."""

    keyword: str
    pipeline: "Statement | None" = None
    label: str | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class DataSection:
    """data [name] [-SupportedCommand ...] { ... }"""

    body: ScriptBlock
    name: str | None = None
    supported_commands: tuple[str, ...] = ()
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TypeDefinition:
    """class / enum definition. The body is skipped, not parsed."""

    kind: str
    name: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class UsingStatement:
    """using module / namespace / assembly line."""

    text: str
    span: Span | None = None


# ============================================================================
# COMMANDS
# ============================================================================


@dataclass(frozen=True, slots=True)
class CommandParameter:
    """Command parameter token: -Name or -Name:argument.

    Attributes:
        name: Parameter name without the leading '-' and trailing ':'
        argument: Attached argument of the -Name:value form
    """

    name: str
    argument: "Expression | None" = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """Command in argument mode: name followed by parameters and arguments.

    Attributes:
        command_name: Command name as written (string constants unquoted)
        name_element: Node the command name was parsed from
        elements: Everything after the command name, in source order
        invocation_operator: "&" or "." when the call uses one
    """

    command_name: str
    name_element: "Expression"
    elements: tuple["CommandElement", ...] = ()
    invocation_operator: str | None = None
    span: Span | None = None

    def matches(self, name: str) -> bool:
        """Check the command name case-insensitively, ignoring a module qualifier.

        Example:
            Microsoft.PowerShell.Utility\\Import-LocalizedData matches
            "import-localizeddata".
        """
        unqualified = self.command_name.rsplit("\\", 1)[-1]
        return unqualified.casefold() == name.casefold()

    @staticmethod
    def guard(node: object) -> TypeIs["CommandInvocation"]:
        """Type guard for CommandInvocation."""
        return isinstance(node, CommandInvocation)


@dataclass(frozen=True, slots=True)
class CommandExpression:
    """Expression used as a pipeline element."""

    expression: "Expression"
    span: Span | None = None


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class StringConstant:
    """String without interpolation.

    Attributes:
        value: String value with quotes removed and escapes applied
        kind: Quoting style
    """

    value: str
    kind: StringKind
    span: Span | None = None

    @staticmethod
    def guard(node: object) -> TypeIs["StringConstant"]:
        """Type guard for StringConstant."""
        return isinstance(node, StringConstant)


@dataclass(frozen=True, slots=True)
class ExpandableString:
    """Double-quoted string or bareword containing $ interpolation.

    Attributes:
        value: Text between the quotes, escapes and interpolations untouched
        kind: Quoting style
    """

    value: str
    kind: StringKind
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class NumberConstant:
    """Numeric literal (multiplier suffixes such as 1kb applied)."""

    value: int | float
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class VariableExpression:
    """Variable reference: $name, ${name} or splatted @name.

    Attributes:
        name: Variable name including any scope or drive qualifier
            ("script:Strings", "env:PATH"), without the sigil
        splatted: True for @name
    """

    name: str
    splatted: bool = False
    span: Span | None = None

    @property
    def unqualified_name(self) -> str:
        """Name without a scope qualifier such as script: or global:."""
        return self.name.rsplit(":", 1)[-1]

    @staticmethod
    def guard(node: object) -> TypeIs["VariableExpression"]:
        """Type guard for VariableExpression."""
        return isinstance(node, VariableExpression)


@dataclass(frozen=True, slots=True)
class HashtableEntry:
    """key = value inside a hashtable literal."""

    key: "Expression"
    value: "Statement"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class HashtableLiteral:
    """@{ key = value; ... }"""

    entries: tuple[HashtableEntry, ...]
    span: Span | None = None

    @staticmethod
    def guard(node: object) -> TypeIs["HashtableLiteral"]:
        """Type guard for HashtableLiteral."""
        return isinstance(node, HashtableLiteral)


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    """Comma-separated list: a, b, c"""

    elements: tuple["Expression", ...]
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ArraySubExpression:
    """@( statements )"""

    statements: tuple["Statement", ...]
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class SubExpression:
    """$( statements )"""

    statements: tuple["Statement", ...]
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ParenExpression:
    """( pipeline )"""

    pipeline: "Statement"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ScriptBlockExpression:
    """{ statements } used as a value."""

    body: ScriptBlock
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TypeLiteral:
    """[TypeName] (also attributes such as [CmdletBinding()])."""

    type_name: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ConvertExpression:
    """Cast or type constraint: [type]operand"""

    type: TypeLiteral
    operand: "Expression"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class MemberExpression:
    """target.member or target::member"""

    target: "Expression"
    member: "Expression"
    static: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class IndexExpression:
    """target[index]"""

    target: "Expression"
    index: "Expression"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class InvokeMemberExpression:
    """target.method(arguments) or target::method(arguments)"""

    target: "Expression"
    member: "Expression"
    arguments: tuple["Expression", ...] = ()
    static: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class UnaryExpression:
    """Prefix or postfix operator applied to one operand."""

    operator: str
    operand: "Expression"
    postfix: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class BinaryExpression:
    """left operator right. Operator precedence is not modelled."""

    left: "Expression"
    operator: str
    right: "Expression"
    span: Span | None = None


# ============================================================================
# TYPE ALIASES
# ============================================================================

type Expression = (
    StringConstant
    | ExpandableString
    | NumberConstant
    | VariableExpression
    | HashtableLiteral
    | ArrayLiteral
    | ArraySubExpression
    | SubExpression
    | ParenExpression
    | ScriptBlockExpression
    | TypeLiteral
    | ConvertExpression
    | MemberExpression
    | IndexExpression
    | InvokeMemberExpression
    | UnaryExpression
    | BinaryExpression
)
type Statement = (
    Pipeline
    | AssignmentStatement
    | FunctionDefinition
    | IfStatement
    | LoopStatement
    | SwitchStatement
    | TryStatement
    | TrapStatement
    | FlowStatement
    | DataSection
    | TypeDefinition
    | UsingStatement
    | ParamBlock
    | NamedBlock
    | Junk
)
type CommandElement = CommandParameter | Expression
type PipelineElement = CommandInvocation | CommandExpression

type ASTNode = (
    ScriptTree
    | ScriptBlock
    | Statement
    | ParameterDeclaration
    | IfClause
    | SwitchClause
    | CatchClause
    | CommandInvocation
    | CommandExpression
    | CommandParameter
    | HashtableEntry
    | Expression
    | Annotation
    | Span
)
