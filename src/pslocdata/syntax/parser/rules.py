"""Grammar rules for the PowerShell parser.

This module provides all parsing rules for the supported grammar:
- Statement lists with statement-level error recovery (Junk)
- Keyword statements (function, if, loops, switch, try, data, ...)
- Pipelines, assignments and argument-mode commands
- Expression-mode primaries, postfix operators and operator chains

All grammar rules are co-located in a single module because they are
mutually recursive (a command argument may hold a script block, which
holds statements, which hold commands).

Modes:
    PowerShell parses a statement in one of two modes, decided by its
    first character. Argument mode (commands) treats unquoted text as
    strings and '-Name' as parameters; expression mode treats them as
    operators. _starts_command() makes that decision.

Failure contract:
    Every rule returns ParseResult or None. None is recoverable: the
    enclosing statement list turns the statement into Junk and resumes on
    the next line. End of input inside an open construct and exceeded
    nesting depth raise ScriptParseError instead.
"""

from dataclasses import dataclass, replace

from pslocdata.constants import MAX_NESTING_DEPTH
from pslocdata.diagnostics import DiagnosticCode, ErrorTemplate, ScriptParseError, SourceSpan
from pslocdata.enums import StringKind
from pslocdata.syntax.ast import (
    Annotation,
    ArrayLiteral,
    ArraySubExpression,
    AssignmentStatement,
    BinaryExpression,
    CatchClause,
    CommandElement,
    CommandExpression,
    CommandInvocation,
    CommandParameter,
    ConvertExpression,
    DataSection,
    ExpandableString,
    Expression,
    FlowStatement,
    FunctionDefinition,
    HashtableEntry,
    HashtableLiteral,
    IfClause,
    IfStatement,
    IndexExpression,
    InvokeMemberExpression,
    Junk,
    LoopStatement,
    MemberExpression,
    NamedBlock,
    NumberConstant,
    ParamBlock,
    ParameterDeclaration,
    ParenExpression,
    Pipeline,
    PipelineElement,
    ScriptBlock,
    ScriptBlockExpression,
    Span,
    Statement,
    StringConstant,
    SubExpression,
    SwitchClause,
    SwitchStatement,
    TrapStatement,
    TryStatement,
    TypeDefinition,
    TypeLiteral,
    UnaryExpression,
    UsingStatement,
    VariableExpression,
)
from pslocdata.syntax.cursor import Cursor, LineOffsetCache, ParseResult
from pslocdata.syntax.parser.primitives import (
    DOUBLE_QUOTES,
    SINGLE_QUOTES,
    _set_parse_error,
    clear_parse_error,
    get_last_parse_error,
    is_bareword_delimiter,
    is_variable_char,
    parse_bareword,
    parse_double_quoted_string,
    parse_here_string,
    parse_number,
    parse_single_quoted_string,
    parse_variable_token,
    raise_unexpected_eof,
    skip_balanced,
    skip_block_comment,
)
from pslocdata.syntax.parser.whitespace import (
    is_statement_end,
    skip_blank,
    skip_inline,
    skip_separators,
)

__all__ = ["ParseContext", "parse_statement", "parse_statement_list"]

_QUOTES: str = SINGLE_QUOTES + DOUBLE_QUOTES

_FUNCTION_KEYWORDS: frozenset[str] = frozenset({"function", "filter", "workflow", "configuration"})
_NAMED_BLOCK_KEYWORDS: frozenset[str] = frozenset(
    {"begin", "process", "end", "dynamicparam", "clean"}
)
_LOOP_KEYWORDS: frozenset[str] = frozenset({"foreach", "for", "while", "do", "switch"})
_STATEMENT_KEYWORDS: frozenset[str] = (
    _FUNCTION_KEYWORDS
    | _NAMED_BLOCK_KEYWORDS
    | _LOOP_KEYWORDS
    | frozenset(
        {
            "if",
            "try",
            "trap",
            "return",
            "throw",
            "exit",
            "break",
            "continue",
            "param",
            "class",
            "enum",
            "using",
            "data",
        }
    )
)

_COMPARISON_OPERATORS: tuple[str, ...] = (
    "eq",
    "ne",
    "gt",
    "ge",
    "lt",
    "le",
    "like",
    "notlike",
    "match",
    "notmatch",
    "contains",
    "notcontains",
    "in",
    "notin",
    "replace",
    "split",
)
_BINARY_WORD_OPERATORS: frozenset[str] = frozenset(
    {
        *_COMPARISON_OPERATORS,
        *(f"i{op}" for op in _COMPARISON_OPERATORS),
        *(f"c{op}" for op in _COMPARISON_OPERATORS),
        "join",
        "is",
        "isnot",
        "as",
        "and",
        "or",
        "xor",
        "band",
        "bor",
        "bxor",
        "shl",
        "shr",
        "f",
    }
)
_UNARY_WORD_OPERATORS: frozenset[str] = frozenset({"not", "bnot", "split", "join"})

# Checked longest first.
_ASSIGNMENT_OPERATORS: tuple[str, ...] = ("??=", "+=", "-=", "*=", "/=", "%=", "=")
_SYMBOL_OPERATORS: tuple[str, ...] = ("??", "..", "+", "-", "*", "/", "%")

_OPERAND_START: str = "$@([" + _QUOTES + "0123456789"


@dataclass(slots=True)
class ParseContext:
    """Explicit context for parsing operations.

    Carries the line index used to stamp node spans and the nesting depth
    used to bound recursion. Passed explicitly instead of thread-local
    state so parsers stay reentrant.

    Attributes:
        lines: Line offsets of the source being parsed
        max_nesting_depth: Maximum allowed syntactic nesting depth
        current_depth: Current nesting depth (0 = top level)
    """

    lines: LineOffsetCache
    max_nesting_depth: int = MAX_NESTING_DEPTH
    current_depth: int = 0

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been exceeded."""
        return self.current_depth >= self.max_nesting_depth

    def enter_nested(self, cursor: Cursor) -> "ParseContext":
        """Create new context one level deeper.

        Raises:
            ScriptParseError: If the nesting limit is reached
        """
        if self.is_depth_exceeded():
            line, column = self.lines.get_line_col(cursor.pos)
            span = SourceSpan(start=cursor.pos, end=cursor.pos, line=line, column=column)
            raise ScriptParseError(
                ErrorTemplate.nesting_depth_exceeded(self.max_nesting_depth, span)
            )
        return ParseContext(
            lines=self.lines,
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
        )

    def span(self, start: int, end: int) -> Span:
        """Build a node span with line information."""
        start_line, start_column = self.lines.get_line_col(start)
        end_line, _ = self.lines.get_line_col(max(start, end - 1))
        return Span(
            start=start,
            end=end,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
        )


# =============================================================================
# Statement lists and recovery
# =============================================================================


def parse_statement_list(
    cursor: Cursor,
    context: ParseContext,
    terminator: str | None = None,
) -> ParseResult[tuple[Statement, ...]]:
    """Parse statements until the terminator (not consumed) or EOF.

    A statement that fails to parse, or that is followed by unexpected
    tokens, becomes a Junk node covering the rest of its line; parsing
    resumes after it.

    Args:
        cursor: Start of the statement list
        context: Parse context
        terminator: Closing character of the enclosing block ('}' or ')'),
            None at file level

    Raises:
        ScriptParseError: If EOF is reached while a terminator is expected
    """
    statements: list[Statement] = []
    while True:
        cursor = skip_separators(cursor)
        if cursor.is_eof:
            if terminator is not None:
                raise_unexpected_eof(cursor, f"'{terminator}'")
            break
        if terminator is not None and cursor.current == terminator:
            break

        clear_parse_error()
        result = parse_statement(cursor, context)
        if result is not None:
            end = skip_inline(result.cursor)
            if isinstance(result.value, ParamBlock) or is_statement_end(end, terminator):
                statements.append(result.value)
                cursor = end
                continue
            if get_last_parse_error() is None:
                _set_parse_error(f"Unexpected token '{end.current}'", end.pos)

        junk = _parse_junk(cursor, context)
        statements.append(junk.value)
        cursor = junk.cursor

    return ParseResult(tuple(statements), cursor)


def _parse_junk(cursor: Cursor, context: ParseContext) -> ParseResult[Junk]:
    """Consume the rest of an unparseable statement as Junk.

    Junk extends to the end of the line, or further while brackets opened
    on that line are still open. An unmatched closing bracket ends it.
    """
    start = cursor.pos
    error = get_last_parse_error()
    message = error.message if error is not None else "Unparseable statement"
    error_pos = error.position if error is not None and error.position >= start else start

    depth = 0
    while not cursor.is_eof:
        ch = cursor.current
        if ch in ("\n", "\r") and depth == 0:
            break
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            if depth == 0:
                break
            depth -= 1
        elif ch == "`":
            cursor = cursor.advance()
        elif ch in _QUOTES:
            cursor = _skip_quoted(cursor)
            continue
        elif ch == "@" and cursor.peek(1) in tuple(_QUOTES):
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

    if cursor.pos == start:
        cursor = cursor.advance()

    annotation = Annotation(
        code=DiagnosticCode.PARSE_JUNK.name,
        message=message,
        span=context.span(error_pos, error_pos),
    )
    content = cursor.source[start : cursor.pos]
    return ParseResult(
        Junk(content=content, annotations=(annotation,), span=context.span(start, cursor.pos)),
        cursor,
    )


def _skip_quoted(cursor: Cursor) -> Cursor:
    if cursor.current in SINGLE_QUOTES:
        single = parse_single_quoted_string(cursor)
        return single.cursor if single is not None else cursor.advance()
    double = parse_double_quoted_string(cursor)
    return double.cursor if double is not None else cursor.advance()


def _parse_braced_block(cursor: Cursor, context: ParseContext) -> ParseResult[ScriptBlock] | None:
    """Parse '{' statements '}' with the cursor on '{'.

    Raises:
        ScriptParseError: If input ends before '{' or the closing '}'
    """
    if cursor.is_eof:
        raise_unexpected_eof(cursor, "'{'")
    if cursor.current != "{":
        _set_parse_error("Expected '{'", cursor.pos)
        return None
    start = cursor.pos
    nested = context.enter_nested(cursor)
    body = parse_statement_list(cursor.advance(), nested, "}")
    end = body.cursor.advance()
    return ParseResult(ScriptBlock(body.value, context.span(start, end.pos)), end)


def _parse_condition(cursor: Cursor, context: ParseContext) -> ParseResult[Statement] | None:
    """Parse '(' pipeline ')' as used by if / while / switch."""
    if cursor.is_eof:
        raise_unexpected_eof(cursor, "'('")
    if cursor.current != "(":
        _set_parse_error("Expected '('", cursor.pos)
        return None
    nested = context.enter_nested(cursor)
    inner = skip_blank(cursor.advance())
    if inner.is_eof:
        raise_unexpected_eof(inner, "condition")
    statement = parse_statement(inner, nested)
    if statement is None:
        return None
    closing = _expect(skip_blank(statement.cursor), ")")
    if closing is None:
        return None
    return ParseResult(statement.value, closing)


def _expect(cursor: Cursor, char: str) -> Cursor | None:
    """Consume a required closing character.

    Raises:
        ScriptParseError: At EOF
    """
    if cursor.is_eof:
        raise_unexpected_eof(cursor, f"'{char}'")
    if cursor.current != char:
        _set_parse_error(f"Expected '{char}'", cursor.pos)
        return None
    return cursor.advance()


# =============================================================================
# Statements
# =============================================================================


def _peek_keyword(cursor: Cursor) -> str | None:
    end = cursor.pos
    source = cursor.source
    while end < len(source) and source[end].isascii() and source[end].isalpha():
        end += 1
    word = source[cursor.pos : end].lower()
    if word in _STATEMENT_KEYWORDS and cursor.startswith_word(word):
        return word
    return None


def parse_statement(cursor: Cursor, context: ParseContext) -> ParseResult[Statement] | None:
    """Parse a single statement.

    Note: PLR0911/PLR0912 are acceptable for a keyword dispatcher; each
    branch is one grammar alternative.

    Args:
        cursor: Position of the statement's first character
        context: Parse context

    Returns:
        ParseResult with the statement, or None on a recoverable error
    """
    if cursor.current == ":":
        return _parse_labeled_statement(cursor, context)
    if cursor.current == "[":
        attributed = _parse_attributed_param_block(cursor, context)
        if attributed is not None:
            return attributed

    keyword = _peek_keyword(cursor)
    if keyword is not None:
        after = cursor.advance(len(keyword))
        if keyword in _FUNCTION_KEYWORDS:
            return _parse_function_definition(cursor, after, keyword, context)
        match keyword:
            case "if":
                return _parse_if(cursor, after, context)
            case "foreach" | "for" | "while" | "do" | "switch":
                return _parse_loop(cursor, after, keyword, None, context)
            case "try":
                return _parse_try(cursor, after, context)
            case "trap":
                return _parse_trap(cursor, after, context)
            case "return" | "throw" | "exit" | "break" | "continue":
                return _parse_flow(cursor, after, keyword, context)
            case "class" | "enum":
                return _parse_type_definition(cursor, after, keyword, context)
            case "using":
                end = cursor.skip_to_line_end()
                text = cursor.slice_to(end.pos).rstrip()
                return ParseResult(
                    UsingStatement(text, context.span(cursor.pos, end.pos)), end
                )
            case "param":
                block = _parse_param_block(cursor, after, context)
                if block is not None:
                    return block
            case "data":
                section = _parse_data_section(cursor, after, context)
                if section is not None:
                    return section
                clear_parse_error()
            case _:
                named = _parse_named_block(cursor, after, keyword, context)
                if named is not None:
                    return named

    return _parse_pipeline(cursor, context)


def _parse_labeled_statement(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse ':label loop'."""
    start = cursor
    label_end = cursor.advance()
    while not label_end.is_eof and is_variable_char(label_end.current):
        label_end = label_end.advance()
    label = cursor.advance().slice_to(label_end.pos)
    loop_cursor = skip_blank(label_end)
    keyword = _peek_keyword(loop_cursor) if label and not loop_cursor.is_eof else None
    if keyword is None or keyword not in _LOOP_KEYWORDS:
        _set_parse_error("Expected a loop after label", loop_cursor.pos)
        return None
    after = loop_cursor.advance(len(keyword))
    return _parse_loop(start, after, keyword, label, context)


def _parse_function_definition(
    start: Cursor, cursor: Cursor, kind: str, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse function Name [(params)] { body }"""
    cursor = skip_inline(cursor)
    name = parse_bareword(cursor)
    if name is None:
        _set_parse_error("Expected function name", cursor.pos)
        return None
    cursor = skip_inline(name.cursor)
    parameters: tuple[ParameterDeclaration, ...] = ()
    if not cursor.is_eof and cursor.current == "(":
        parameter_list = _parse_parameter_list(cursor, context)
        if parameter_list is None:
            return None
        parameters = parameter_list.value
        cursor = parameter_list.cursor
    body = _parse_braced_block(skip_blank(cursor), context)
    if body is None:
        return None
    node = FunctionDefinition(
        name=name.value[0],
        kind=kind,
        parameters=parameters,
        body=body.value,
        span=context.span(start.pos, body.cursor.pos),
    )
    return ParseResult(node, body.cursor)


def _parse_parameter_list(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[ParameterDeclaration, ...]] | None:
    """Parse '(' [attributes] $name [= default], ... ')' with the cursor on '('.

    Default values are parsed as expressions but never become assignments.
    """
    nested = context.enter_nested(cursor)
    cursor = skip_blank(cursor.advance())
    parameters: list[ParameterDeclaration] = []
    while True:
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "')'")
        if cursor.current == ")":
            return ParseResult(tuple(parameters), cursor.advance())

        start = cursor.pos
        attributes: list[TypeLiteral] = []
        while not cursor.is_eof and cursor.current == "[":
            attribute = _parse_type_literal(cursor, nested)
            attributes.append(attribute.value)
            cursor = skip_blank(attribute.cursor)
        variable = _parse_variable(cursor, nested)
        if variable is None or variable.value.splatted:
            _set_parse_error("Expected parameter variable", cursor.pos)
            return None
        cursor = skip_blank(variable.cursor)

        default: Expression | None = None
        if not cursor.is_eof and cursor.current == "=":
            value = parse_expression(skip_blank(cursor.advance()), nested, allow_comma=False)
            if value is None:
                return None
            default = value.value
            cursor = skip_blank(value.cursor)

        parameters.append(
            ParameterDeclaration(
                variable=variable.value,
                attributes=tuple(attributes),
                default=default,
                span=context.span(start, cursor.pos),
            )
        )
        if not cursor.is_eof and cursor.current == ",":
            cursor = skip_blank(cursor.advance())
        elif not cursor.is_eof and cursor.current != ")":
            _set_parse_error("Expected ',' or ')' in parameter list", cursor.pos)
            return None


def _parse_param_block(
    start: Cursor, cursor: Cursor, context: ParseContext
) -> ParseResult[ParamBlock] | None:
    cursor = skip_blank(cursor)
    if cursor.is_eof or cursor.current != "(":
        return None
    parameters = _parse_parameter_list(cursor, context)
    if parameters is None:
        return None
    span = context.span(start.pos, parameters.cursor.pos)
    return ParseResult(ParamBlock(parameters.value, span=span), parameters.cursor)


def _parse_attributed_param_block(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse [Attribute()]... param(...) with the cursor on the first '['.

    Returns None when the attributes are not followed by param, leaving the
    text to the pipeline rules.
    """
    start = cursor
    attributes: list[TypeLiteral] = []
    while not cursor.is_eof and cursor.current == "[":
        attribute = _parse_type_literal(cursor, context)
        attributes.append(attribute.value)
        cursor = skip_blank(attribute.cursor)
    if cursor.is_eof or _peek_keyword(cursor) != "param":
        return None
    block = _parse_param_block(start, cursor.advance(len("param")), context)
    if block is None:
        return None
    node = replace(block.value, attributes=tuple(attributes))
    return ParseResult(node, block.cursor)


def _parse_named_block(
    start: Cursor, cursor: Cursor, name: str, context: ParseContext
) -> ParseResult[Statement] | None:
    cursor = skip_blank(cursor)
    if cursor.is_eof or cursor.current != "{":
        return None
    body = _parse_braced_block(cursor, context)
    if body is None:
        return None
    span = context.span(start.pos, body.cursor.pos)
    return ParseResult(NamedBlock(name, body.value, span), body.cursor)


def _parse_if(
    start: Cursor, cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse if (...) {...} [elseif (...) {...}]* [else {...}]"""
    clauses: list[IfClause] = []
    else_body: ScriptBlock | None = None
    while True:
        clause_start = cursor.pos
        condition = _parse_condition(skip_blank(cursor), context)
        if condition is None:
            return None
        body = _parse_braced_block(skip_blank(condition.cursor), context)
        if body is None:
            return None
        clauses.append(
            IfClause(condition.value, body.value, context.span(clause_start, body.cursor.pos))
        )
        cursor = body.cursor

        lookahead = skip_blank(cursor)
        if lookahead.startswith_word("elseif"):
            cursor = lookahead.advance(len("elseif"))
            continue
        if lookahead.startswith_word("else"):
            else_block = _parse_braced_block(skip_blank(lookahead.advance(len("else"))), context)
            if else_block is None:
                return None
            else_body = else_block.value
            cursor = else_block.cursor
        break

    node = IfStatement(tuple(clauses), else_body, context.span(start.pos, cursor.pos))
    return ParseResult(node, cursor)


def _parse_loop(
    start: Cursor,
    cursor: Cursor,
    keyword: str,
    label: str | None,
    context: ParseContext,
) -> ParseResult[Statement] | None:
    """Parse foreach / for / while / do / switch (the labelable statements)."""
    if keyword == "switch":
        return _parse_switch(start, cursor, label, context)

    if keyword == "do":
        body = _parse_braced_block(skip_blank(cursor), context)
        if body is None:
            return None
        lookahead = skip_blank(body.cursor)
        for word in ("while", "until"):
            if lookahead.startswith_word(word):
                condition = _parse_condition(
                    skip_blank(lookahead.advance(len(word))), context
                )
                if condition is None:
                    return None
                node = LoopStatement(
                    keyword=f"do-{word}",
                    header=(condition.value,),
                    body=body.value,
                    label=label,
                    span=context.span(start.pos, condition.cursor.pos),
                )
                return ParseResult(node, condition.cursor)
        _set_parse_error("Expected 'while' or 'until' after do block", lookahead.pos)
        return None

    if keyword == "foreach":
        header = _parse_foreach_header(skip_inline(cursor), context)
    elif keyword == "for":
        header = _parse_for_header(skip_blank(cursor), context)
    else:
        condition = _parse_condition(skip_blank(cursor), context)
        header = (
            ParseResult((condition.value,), condition.cursor) if condition is not None else None
        )
    if header is None:
        return None

    body = _parse_braced_block(skip_blank(header.cursor), context)
    if body is None:
        return None
    node = LoopStatement(
        keyword=keyword,
        header=header.value,
        body=body.value,
        label=label,
        span=context.span(start.pos, body.cursor.pos),
    )
    return ParseResult(node, body.cursor)


def _parse_foreach_header(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[VariableExpression, Statement]] | None:
    """Parse [-Parallel] ($item in pipeline)"""
    while not cursor.is_eof and cursor.current == "-":
        option = parse_bareword(cursor)
        if option is None:
            return None
        cursor = skip_inline(option.cursor)
    cursor = skip_blank(cursor)
    if cursor.is_eof:
        raise_unexpected_eof(cursor, "'('")
    if cursor.current != "(":
        _set_parse_error("Expected '(' after foreach", cursor.pos)
        return None
    nested = context.enter_nested(cursor)
    variable = _parse_variable(skip_blank(cursor.advance()), nested)
    if variable is None:
        return None
    cursor = skip_blank(variable.cursor)
    if not cursor.startswith_word("in"):
        _set_parse_error("Expected 'in' in foreach", cursor.pos)
        return None
    pipeline_cursor = skip_blank(cursor.advance(2))
    if pipeline_cursor.is_eof:
        raise_unexpected_eof(pipeline_cursor, "collection")
    collection = parse_statement(pipeline_cursor, nested)
    if collection is None:
        return None
    closing = _expect(skip_blank(collection.cursor), ")")
    if closing is None:
        return None
    return ParseResult((variable.value, collection.value), closing)


def _parse_for_header(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[Statement, ...]] | None:
    """Parse (init; condition; iterator) with every clause optional."""
    if cursor.is_eof:
        raise_unexpected_eof(cursor, "'('")
    if cursor.current != "(":
        _set_parse_error("Expected '(' after for", cursor.pos)
        return None
    nested = context.enter_nested(cursor)
    cursor = cursor.advance()
    clauses: list[Statement] = []
    while True:
        cursor = skip_blank(cursor)
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "')'")
        if cursor.current == ")":
            return ParseResult(tuple(clauses), cursor.advance())
        if cursor.current == ";":
            cursor = cursor.advance()
            continue
        clause = parse_statement(cursor, nested)
        if clause is None:
            return None
        clauses.append(clause.value)
        cursor = clause.cursor


def _parse_switch(
    start: Cursor, cursor: Cursor, label: str | None, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse switch [-options] (subject) | -File path { condition { body } ... }"""
    options: list[str] = []
    subject: Statement | Expression | None = None
    cursor = skip_inline(cursor)
    while not cursor.is_eof and cursor.current == "-":
        option = parse_bareword(cursor)
        if option is None:
            return None
        options.append(option.value[0].lower())
        cursor = skip_inline(option.cursor)
        if options[-1] == "-file":
            path = parse_command_argument(cursor, context)
            if path is None:
                return None
            subject = path.value
            cursor = skip_inline(path.cursor)

    cursor = skip_blank(cursor)
    if subject is None:
        condition = _parse_condition(cursor, context)
        if condition is None:
            return None
        subject = condition.value
        cursor = skip_blank(condition.cursor)

    opening = _expect(cursor, "{")
    if opening is None:
        return None
    nested = context.enter_nested(cursor)
    cursor = opening
    clauses: list[SwitchClause] = []
    while True:
        cursor = skip_separators(cursor)
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "'}'")
        if cursor.current == "}":
            cursor = cursor.advance()
            break
        clause_start = cursor.pos
        clause_condition = _parse_argument_primary(cursor, nested)
        if clause_condition is None:
            return None
        body = _parse_braced_block(skip_blank(clause_condition.cursor), nested)
        if body is None:
            return None
        clauses.append(
            SwitchClause(
                clause_condition.value, body.value, context.span(clause_start, body.cursor.pos)
            )
        )
        cursor = body.cursor

    node = SwitchStatement(
        options=tuple(options),
        subject=subject,
        clauses=tuple(clauses),
        label=label,
        span=context.span(start.pos, cursor.pos),
    )
    return ParseResult(node, cursor)


def _parse_try(
    start: Cursor, cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse try {...} [catch [types] {...}]* [finally {...}]"""
    body = _parse_braced_block(skip_blank(cursor), context)
    if body is None:
        return None
    cursor = body.cursor
    catch_clauses: list[CatchClause] = []
    finally_body: ScriptBlock | None = None
    while True:
        lookahead = skip_blank(cursor)
        if lookahead.startswith_word("catch"):
            clause_start = lookahead.pos
            clause_cursor = skip_blank(lookahead.advance(len("catch")))
            types: list[TypeLiteral] = []
            while not clause_cursor.is_eof and clause_cursor.current == "[":
                type_literal = _parse_type_literal(clause_cursor, context)
                types.append(type_literal.value)
                clause_cursor = skip_blank(type_literal.cursor)
                if not clause_cursor.is_eof and clause_cursor.current == ",":
                    clause_cursor = skip_blank(clause_cursor.advance())
            handler = _parse_braced_block(clause_cursor, context)
            if handler is None:
                return None
            catch_clauses.append(
                CatchClause(
                    tuple(types), handler.value, context.span(clause_start, handler.cursor.pos)
                )
            )
            cursor = handler.cursor
            continue
        if lookahead.startswith_word("finally"):
            final = _parse_braced_block(skip_blank(lookahead.advance(len("finally"))), context)
            if final is None:
                return None
            finally_body = final.value
            cursor = final.cursor
        break

    node = TryStatement(
        body=body.value,
        catch_clauses=tuple(catch_clauses),
        finally_body=finally_body,
        span=context.span(start.pos, cursor.pos),
    )
    return ParseResult(node, cursor)


def _parse_trap(
    start: Cursor, cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    cursor = skip_blank(cursor)
    trap_type: TypeLiteral | None = None
    if not cursor.is_eof and cursor.current == "[":
        type_literal = _parse_type_literal(cursor, context)
        trap_type = type_literal.value
        cursor = skip_blank(type_literal.cursor)
    body = _parse_braced_block(cursor, context)
    if body is None:
        return None
    node = TrapStatement(body.value, trap_type, context.span(start.pos, body.cursor.pos))
    return ParseResult(node, body.cursor)


def _parse_flow(
    start: Cursor, cursor: Cursor, keyword: str, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse return / throw / exit [pipeline] and break / continue [label]."""
    cursor = skip_inline(cursor)
    if is_statement_end(cursor, None) or cursor.current in (")", "}"):
        return ParseResult(FlowStatement(keyword, span=context.span(start.pos, cursor.pos)), cursor)

    if keyword in ("break", "continue"):
        label = parse_bareword(cursor)
        if label is None:
            return None
        span = context.span(start.pos, label.cursor.pos)
        node = FlowStatement(keyword, label=label.value[0], span=span)
        return ParseResult(node, label.cursor)

    pipeline = parse_statement(cursor, context.enter_nested(cursor))
    if pipeline is None:
        return None
    node = FlowStatement(keyword, pipeline.value, span=context.span(start.pos, pipeline.cursor.pos))
    return ParseResult(node, pipeline.cursor)


def _parse_type_definition(
    start: Cursor, cursor: Cursor, kind: str, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse class / enum Name ... { ... } without modelling the body."""
    cursor = skip_inline(cursor)
    name = parse_bareword(cursor)
    if name is None:
        _set_parse_error(f"Expected {kind} name", cursor.pos)
        return None
    cursor = name.cursor
    while not cursor.is_eof and cursor.current != "{":
        cursor = cursor.advance()
    if cursor.is_eof:
        raise_unexpected_eof(cursor, "'{'")
    end = skip_balanced(cursor)
    node = TypeDefinition(kind, name.value[0], context.span(start.pos, end.pos))
    return ParseResult(node, end)


def _parse_data_section(
    start: Cursor, cursor: Cursor, context: ParseContext
) -> ParseResult[Statement] | None:
    """Parse data [name] [-SupportedCommand cmd, ...] { ... }

    Returns None when 'data' turns out to be a command name.
    """
    cursor = skip_inline(cursor)
    name: str | None = None
    if not cursor.is_eof and cursor.current not in ("{", "-"):
        word = parse_bareword(cursor)
        if word is None:
            return None
        name = word.value[0]
        cursor = skip_inline(word.cursor)

    supported: tuple[str, ...] = ()
    if not cursor.is_eof and cursor.current == "-":
        parameter = _parse_command_parameter(cursor, context)
        if parameter is None or not "supportedcommand".startswith(parameter.value.name.lower()):
            return None
        cursor = skip_inline(parameter.cursor)
        argument = parameter.value.argument
        if argument is None:
            argument_result = parse_command_argument(cursor, context)
            if argument_result is None:
                return None
            argument = argument_result.value
            cursor = skip_inline(argument_result.cursor)
        items = argument.elements if isinstance(argument, ArrayLiteral) else (argument,)
        supported = tuple(item.value for item in items if isinstance(item, StringConstant))

    cursor = skip_blank(cursor)
    if cursor.is_eof or cursor.current != "{":
        return None
    body = _parse_braced_block(cursor, context)
    if body is None:
        return None
    node = DataSection(
        body=body.value,
        name=name,
        supported_commands=supported,
        span=context.span(start.pos, body.cursor.pos),
    )
    return ParseResult(node, body.cursor)


# =============================================================================
# Pipelines, assignments and commands
# =============================================================================


def _match_assignment_operator(cursor: Cursor) -> str | None:
    for operator in _ASSIGNMENT_OPERATORS:
        if cursor.slice_ahead(len(operator)) == operator:
            return operator
    return None


def _starts_command(cursor: Cursor) -> bool:
    """Decide between argument mode and expression mode for a pipeline element."""
    ch = cursor.current
    following = cursor.peek(1)
    if ch == "&":
        return True
    if ch == ".":
        if following is None or following.isspace():
            return True
        return not following.isdigit()
    if ch in "$@({[,!+-" or ch in _QUOTES:
        return False
    if ch.isdigit():
        number = parse_number(cursor)
        if number is None or number.cursor.is_eof:
            return False
        after = number.cursor.current
        return not (is_bareword_delimiter(after) or after in "+-*/%.[=!")
    return True


def _parse_pipeline(cursor: Cursor, context: ParseContext) -> ParseResult[Statement] | None:
    """Parse an assignment or a pipeline of commands and expressions."""
    start = cursor.pos
    first: ParseResult[PipelineElement]
    if _starts_command(cursor):
        command = parse_command(cursor, context)
        if command is None:
            return None
        first = ParseResult(command.value, command.cursor)
    else:
        expression = parse_expression(cursor, context)
        if expression is None:
            return None
        after = skip_inline(expression.cursor)
        operator = _match_assignment_operator(after)
        if operator is not None:
            return _parse_assignment(start, expression.value, operator, after, context)
        first = ParseResult(
            CommandExpression(expression.value, expression.value.span), expression.cursor
        )

    elements: list[PipelineElement] = [first.value]
    cursor = first.cursor
    while True:
        after = skip_inline(cursor)
        if after.is_eof or after.current != "|" or after.peek(1) == "|":
            break
        cursor = skip_blank(after.advance())
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "command after '|'")
        element = _parse_pipeline_element(cursor, context)
        if element is None:
            return None
        elements.append(element.value)
        cursor = element.cursor

    return ParseResult(Pipeline(tuple(elements), context.span(start, cursor.pos)), cursor)


def _parse_pipeline_element(
    cursor: Cursor, context: ParseContext
) -> ParseResult[PipelineElement] | None:
    if _starts_command(cursor):
        command = parse_command(cursor, context)
        return ParseResult(command.value, command.cursor) if command is not None else None
    expression = parse_expression(cursor, context)
    if expression is None:
        return None
    return ParseResult(
        CommandExpression(expression.value, expression.value.span), expression.cursor
    )


def _parse_assignment(
    start: int,
    target: Expression,
    operator: str,
    cursor: Cursor,
    context: ParseContext,
) -> ParseResult[Statement] | None:
    """Parse the value of 'target operator value' with the cursor on the operator."""
    value_cursor = skip_blank(cursor.advance(len(operator)))
    if value_cursor.is_eof:
        raise_unexpected_eof(value_cursor, f"value after '{operator}'")
    value = parse_statement(value_cursor, context.enter_nested(value_cursor))
    if value is None:
        return None
    node = AssignmentStatement(
        target=target,
        operator=operator,
        value=value.value,
        span=context.span(start, value.cursor.pos),
    )
    return ParseResult(node, value.cursor)


def parse_command(cursor: Cursor, context: ParseContext) -> ParseResult[CommandInvocation] | None:
    """Parse an argument-mode command: [& | .] name elements...

    Examples:
        Import-LocalizedData -BindingVariable Strings -FileName Strings.psd1
        & $scriptBlock -Verbose
        Microsoft.PowerShell.Utility\\Import-LocalizedData Strings

    Args:
        cursor: Position of the command name or invocation operator
        context: Parse context

    Returns:
        ParseResult with CommandInvocation, or None on a recoverable error
    """
    start = cursor.pos
    operator: str | None = None
    name: Expression
    following = cursor.peek(1)
    if cursor.current == "&" or (
        cursor.current == "." and (following is None or following.isspace())
    ):
        operator = cursor.current
        cursor = skip_inline(cursor.advance())
        if cursor.is_eof:
            raise_unexpected_eof(cursor, f"command after '{operator}'")
        name_result = _parse_argument_primary(cursor, context)
        if name_result is None:
            return None
        name = name_result.value
        cursor = name_result.cursor
    else:
        name_start = cursor.pos
        word = parse_bareword(cursor)
        if word is None:
            _set_parse_error("Expected command name", cursor.pos)
            return None
        name = _bareword_node(word.value, name_start, word.cursor, context)
        cursor = word.cursor

    if isinstance(name, StringConstant):
        command_name = name.value
    else:
        command_name = cursor.source[name.span.start : name.span.end] if name.span else ""

    elements = _parse_command_elements(cursor, context)
    if elements is None:
        return None
    node = CommandInvocation(
        command_name=command_name,
        name_element=name,
        elements=elements.value,
        invocation_operator=operator,
        span=context.span(start, elements.cursor.pos),
    )
    return ParseResult(node, elements.cursor)


def _parse_command_elements(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[CommandElement, ...]] | None:
    """Parse parameters and arguments up to the end of the command."""
    elements: list[CommandElement] = []
    end_of_parameters = False
    while True:
        after = skip_inline(cursor)
        if after.is_eof or after.current in "\n\r;|)},&":
            break
        if _at_redirection(after):
            redirected = _skip_redirection(after, context)
            if redirected is None:
                return None
            cursor = redirected
            continue
        if after.current == "-" and not end_of_parameters:
            if after.slice_ahead(2) == "--" and (
                after.peek(2) is None or is_bareword_delimiter(after.peek(2) or " ")
            ):
                end_of_parameters = True
                cursor = after.advance(2)
                continue
            parameter = _parse_command_parameter(after, context)
            if parameter is not None:
                elements.append(parameter.value)
                cursor = parameter.cursor
                continue
        argument = parse_command_argument(after, context)
        if argument is None:
            return None
        elements.append(argument.value)
        cursor = argument.cursor
    return ParseResult(tuple(elements), cursor)


def _at_redirection(cursor: Cursor) -> bool:
    ch = cursor.current
    if ch == ">":
        return True
    return (ch.isdigit() or ch == "*") and cursor.peek(1) == ">"


def _skip_redirection(cursor: Cursor, context: ParseContext) -> Cursor | None:
    """Skip 2>&1, >> file, *> $null and similar; the target is discarded."""
    if cursor.current != ">":
        cursor = cursor.advance()
    cursor = cursor.advance()
    if not cursor.is_eof and cursor.current == ">":
        cursor = cursor.advance()
    if cursor.slice_ahead(1) == "&" and (cursor.peek(1) or "").isdigit():
        return cursor.advance(2)
    cursor = skip_inline(cursor)
    if is_statement_end(cursor, None):
        _set_parse_error("Missing redirection target", cursor.pos)
        return None
    target = _parse_argument_primary(cursor, context)
    return target.cursor if target is not None else None


def _parse_command_parameter(
    cursor: Cursor, context: ParseContext
) -> ParseResult[CommandParameter] | None:
    """Parse -Name or -Name:argument with the cursor on '-'.

    Returns None when the dash does not start a parameter (-5, a lone '-').
    """
    start = cursor.pos
    first = cursor.peek(1)
    if first is None or not (first.isalpha() or first in "_?"):
        return None
    end = cursor.advance()
    while not end.is_eof and not is_bareword_delimiter(end.current) and end.current != ":":
        end = end.advance()
    name = cursor.advance().slice_to(end.pos)

    if end.is_eof or end.current != ":":
        return ParseResult(CommandParameter(name, span=context.span(start, end.pos)), end)

    cursor = skip_inline(end.advance())
    if is_statement_end(cursor, None) or cursor.current in (")", "}", "|"):
        return ParseResult(CommandParameter(name, span=context.span(start, end.pos + 1)), cursor)
    argument = parse_command_argument(cursor, context)
    if argument is None:
        return None
    node = CommandParameter(name, argument.value, context.span(start, argument.cursor.pos))
    return ParseResult(node, argument.cursor)


def parse_command_argument(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse one argument-mode value; comma-separated values form an ArrayLiteral.

    Examples:
        Strings.psd1 -> StringConstant (bare word)
        'Strings.psd1' -> StringConstant (single quoted)
        $PSScriptRoot\\en-US -> ExpandableString
        a, b -> ArrayLiteral
    """
    start = cursor.pos
    first = _parse_argument_primary(cursor, context)
    if first is None:
        return None
    items: list[Expression] = [first.value]
    cursor = first.cursor
    while True:
        after = skip_inline(cursor)
        if after.is_eof or after.current != ",":
            break
        item_cursor = skip_blank(after.advance())
        if item_cursor.is_eof:
            raise_unexpected_eof(item_cursor, "argument after ','")
        item = _parse_argument_primary(item_cursor, context)
        if item is None:
            return None
        items.append(item.value)
        cursor = item.cursor
    if len(items) == 1:
        return first
    return ParseResult(ArrayLiteral(tuple(items), context.span(start, cursor.pos)), cursor)


def _parse_argument_primary(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Expression] | None:
    """Parse a single argument-mode value (no comma lists).

    A value immediately followed by more token characters (for example
    $PSScriptRoot\\Data or 'a'b) is re-read as one bare word.
    """
    start = cursor
    ch = cursor.current
    following = cursor.peek(1)
    result: ParseResult[Expression] | None

    if ch == "@":
        here = _parse_here_string_node(cursor, context)
        if here is not None:
            return here
        if following == "{":
            return _parse_hashtable(cursor, context)
        if following == "(":
            result = _parse_statement_group(cursor, context)
        else:
            result = _parse_variable(cursor, context)
            if result is None:
                return _parse_bareword_argument(start, context)
    elif ch in SINGLE_QUOTES or ch in DOUBLE_QUOTES:
        result = _parse_string_node(cursor, context)
    elif ch == "$":
        primary = (
            _parse_statement_group(cursor, context)
            if following == "("
            else _parse_variable(cursor, context)
        )
        if primary is None:
            return _parse_bareword_argument(start, context)
        result = _parse_postfix(primary, start.pos, context)
    elif ch == "(":
        primary = _parse_paren(cursor, context)
        if primary is None:
            return None
        result = _parse_postfix(primary, start.pos, context)
    elif ch == "{":
        return _parse_script_block_expression(cursor, context)
    elif ch.isdigit() or (ch in "-+." and following is not None and following.isdigit()):
        number_cursor = cursor.advance() if ch in "-+" else cursor
        number = parse_number(number_cursor)
        if number is None:
            return _parse_bareword_argument(start, context)
        value = -number.value if ch == "-" else number.value
        result = ParseResult(
            NumberConstant(value, context.span(start.pos, number.cursor.pos)), number.cursor
        )
    else:
        return _parse_bareword_argument(start, context)

    if result is None:
        return None
    if not result.cursor.is_eof and not is_bareword_delimiter(result.cursor.current):
        return _parse_bareword_argument(start, context)
    return result


def _parse_bareword_argument(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Expression] | None:
    word = parse_bareword(cursor)
    if word is None:
        _set_parse_error(f"Unexpected character '{cursor.current}'", cursor.pos)
        return None
    return ParseResult(_bareword_node(word.value, cursor.pos, word.cursor, context), word.cursor)


def _bareword_node(
    word: tuple[str, bool], start: int, end: Cursor, context: ParseContext
) -> Expression:
    value, expandable = word
    span = context.span(start, end.pos)
    if expandable:
        return ExpandableString(end.source[start : end.pos], StringKind.BARE_WORD, span)
    return StringConstant(value, StringKind.BARE_WORD, span)


# =============================================================================
# Expressions
# =============================================================================


def _match_binary_operator(cursor: Cursor) -> str | None:
    """Return the binary operator at the cursor, lower-cased, or None."""
    if cursor.is_eof:
        return None
    ch = cursor.current
    following = cursor.peek(1)
    if ch == "-" and following is not None and following.isalpha():
        end = cursor.advance()
        while not end.is_eof and end.current.isalpha():
            end = end.advance()
        word = cursor.advance().slice_to(end.pos).lower()
        if word in _BINARY_WORD_OPERATORS and cursor.advance().startswith_word(word):
            return f"-{word}"
        return None
    for operator in _SYMBOL_OPERATORS:
        if cursor.slice_ahead(len(operator)) == operator:
            after = cursor.peek(len(operator))
            if after == "=" or (operator in ("+", "-") and after == operator):
                return None
            return operator
    return None


def parse_expression(
    cursor: Cursor,
    context: ParseContext,
    *,
    allow_comma: bool = True,
) -> ParseResult[Expression] | None:
    """Parse an expression-mode operator chain.

    Operators are kept left-associative and flat; precedence is not
    modelled because no consumer evaluates expressions. A line break is
    allowed after an operator, not before it.

    Args:
        cursor: Start of the expression
        context: Parse context
        allow_comma: Parse comma lists as ArrayLiteral operands (False inside
            method arguments and parameter defaults, where ',' separates)
    """
    start = cursor.pos
    operand = _parse_array_operand if allow_comma else _parse_unary
    left = operand(cursor, context)
    if left is None:
        return None
    expression = left.value
    cursor = left.cursor
    while True:
        after = skip_inline(cursor)
        operator = _match_binary_operator(after)
        if operator is None:
            break
        right_cursor = skip_blank(after.advance(len(operator)))
        if right_cursor.is_eof:
            raise_unexpected_eof(right_cursor, f"operand after '{operator}'")
        right = operand(right_cursor, context)
        if right is None:
            return None
        expression = BinaryExpression(
            expression, operator.lower(), right.value, context.span(start, right.cursor.pos)
        )
        cursor = right.cursor
    return ParseResult(expression, cursor)


def _parse_array_operand(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    start = cursor.pos
    first = _parse_unary(cursor, context)
    if first is None:
        return None
    items: list[Expression] = [first.value]
    cursor = first.cursor
    while True:
        after = skip_inline(cursor)
        if after.is_eof or after.current != ",":
            break
        item_cursor = skip_blank(after.advance())
        if item_cursor.is_eof:
            raise_unexpected_eof(item_cursor, "element after ','")
        item = _parse_unary(item_cursor, context)
        if item is None:
            return None
        items.append(item.value)
        cursor = item.cursor
    if len(items) == 1:
        return first
    return ParseResult(ArrayLiteral(tuple(items), context.span(start, cursor.pos)), cursor)


def _parse_unary(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse prefix operators, casts and postfix chains."""
    start = cursor.pos
    ch = cursor.current
    operator: str | None = None

    if cursor.slice_ahead(2) in ("++", "--"):
        operator = cursor.slice_ahead(2)
    elif ch == "-" and (cursor.peek(1) or "").isalpha():
        end = cursor.advance()
        while not end.is_eof and end.current.isalpha():
            end = end.advance()
        word = cursor.advance().slice_to(end.pos).lower()
        if word not in _UNARY_WORD_OPERATORS or not cursor.advance().startswith_word(word):
            _set_parse_error(f"Unexpected operator '-{word}'", start)
            return None
        operator = f"-{word}"
    elif ch in "!-+,":
        operator = ch

    if operator is not None:
        nested = context.enter_nested(cursor)
        operand_cursor = skip_blank(cursor.advance(len(operator)))
        if operand_cursor.is_eof:
            raise_unexpected_eof(operand_cursor, f"operand after '{operator}'")
        operand = _parse_unary(operand_cursor, nested)
        if operand is None:
            return None
        span = context.span(start, operand.cursor.pos)
        if operator == ",":
            return ParseResult(ArrayLiteral((operand.value,), span), operand.cursor)
        return ParseResult(UnaryExpression(operator, operand.value, span=span), operand.cursor)

    if ch == "[":
        type_literal = _parse_type_literal(cursor, context)
        if type_literal.cursor.slice_ahead(2) != "::":
            operand_cursor = skip_inline(type_literal.cursor)
            if not operand_cursor.is_eof and operand_cursor.current in _OPERAND_START:
                operand = _parse_unary(operand_cursor, context.enter_nested(cursor))
                if operand is None:
                    return None
                node = ConvertExpression(
                    type_literal.value, operand.value, context.span(start, operand.cursor.pos)
                )
                return ParseResult(node, operand.cursor)
            return ParseResult(type_literal.value, type_literal.cursor)
        return _parse_postfix(
            ParseResult[Expression](type_literal.value, type_literal.cursor), start, context
        )

    primary = _parse_primary(cursor, context)
    if primary is None:
        return None
    return _parse_postfix(primary, start, context)


def _parse_primary(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse an expression-mode primary (no postfix operators)."""
    ch = cursor.current
    following = cursor.peek(1)
    if ch == "$":
        if following == "(":
            return _parse_statement_group(cursor, context)
        variable = _parse_variable(cursor, context)
        if variable is None:
            _set_parse_error("Expected variable name after '$'", cursor.pos)
        return variable
    if ch == "@":
        here = _parse_here_string_node(cursor, context)
        if here is not None:
            return here
        if following == "{":
            return _parse_hashtable(cursor, context)
        if following == "(":
            return _parse_statement_group(cursor, context)
        _set_parse_error("Unexpected '@'", cursor.pos)
        return None
    if ch in SINGLE_QUOTES or ch in DOUBLE_QUOTES:
        return _parse_string_node(cursor, context)
    if ch == "(":
        return _parse_paren(cursor, context)
    if ch == "{":
        return _parse_script_block_expression(cursor, context)
    if ch.isdigit() or (ch == "." and following is not None and following.isdigit()):
        number = parse_number(cursor)
        if number is None or (
            not number.cursor.is_eof
            and (number.cursor.current.isalnum() or number.cursor.current == "_")
        ):
            _set_parse_error("Invalid numeric literal", cursor.pos)
            return None
        return ParseResult(
            NumberConstant(number.value, context.span(cursor.pos, number.cursor.pos)),
            number.cursor,
        )
    _set_parse_error(f"Unexpected character '{ch}'", cursor.pos)
    return None


def _parse_postfix(  # noqa: PLR0912
    primary: ParseResult[Expression], start: int, context: ParseContext
) -> ParseResult[Expression] | None:
    """Apply member access, indexing, method calls and ++/-- to a primary.

    Postfix operators must follow the primary without whitespace.
    """
    expression = primary.value
    cursor = primary.cursor
    while not cursor.is_eof:
        ch = cursor.current
        if (ch == "." and cursor.peek(1) != ".") or cursor.slice_ahead(2) == "::":
            static = ch == ":"
            member_cursor = cursor.advance(2 if static else 1)
            member = _parse_member_name(member_cursor, context)
            if member is None:
                break
            cursor = member.cursor
            if not cursor.is_eof and cursor.current == "(":
                arguments = _parse_method_arguments(cursor, context)
                if arguments is None:
                    return None
                cursor = arguments.cursor
                span = context.span(start, cursor.pos)
                expression = InvokeMemberExpression(
                    expression, member.value, arguments.value, static, span
                )
            else:
                expression = MemberExpression(
                    expression, member.value, static, context.span(start, cursor.pos)
                )
        elif ch == "[":
            nested = context.enter_nested(cursor)
            index_cursor = skip_blank(cursor.advance())
            if index_cursor.is_eof:
                raise_unexpected_eof(index_cursor, "index expression")
            index = parse_expression(index_cursor, nested)
            if index is None:
                return None
            closing = _expect(skip_blank(index.cursor), "]")
            if closing is None:
                return None
            cursor = closing
            expression = IndexExpression(expression, index.value, context.span(start, cursor.pos))
        elif cursor.slice_ahead(2) in ("++", "--"):
            operator = cursor.slice_ahead(2)
            cursor = cursor.advance(2)
            expression = UnaryExpression(
                operator, expression, postfix=True, span=context.span(start, cursor.pos)
            )
        else:
            break
    return ParseResult(expression, cursor)


def _parse_member_name(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    if cursor.is_eof:
        return None
    ch = cursor.current
    if ch in SINGLE_QUOTES or ch in DOUBLE_QUOTES:
        return _parse_string_node(cursor, context)
    if ch == "$":
        return _parse_variable(cursor, context)
    if ch == "(":
        return _parse_paren(cursor, context)
    end = cursor
    while not end.is_eof and (is_variable_char(end.current) or end.current == "-"):
        end = end.advance()
    if end.pos == cursor.pos:
        return None
    name = cursor.slice_to(end.pos)
    return ParseResult(
        StringConstant(name, StringKind.BARE_WORD, context.span(cursor.pos, end.pos)), end
    )


def _parse_method_arguments(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[Expression, ...]] | None:
    """Parse '(' [expression (',' expression)*] ')' with the cursor on '('."""
    nested = context.enter_nested(cursor)
    cursor = skip_blank(cursor.advance())
    arguments: list[Expression] = []
    while True:
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "')'")
        if cursor.current == ")":
            return ParseResult(tuple(arguments), cursor.advance())
        argument = parse_expression(cursor, nested, allow_comma=False)
        if argument is None:
            return None
        arguments.append(argument.value)
        cursor = skip_blank(argument.cursor)
        if not cursor.is_eof and cursor.current == ",":
            cursor = skip_blank(cursor.advance())
        elif not cursor.is_eof and cursor.current != ")":
            _set_parse_error("Expected ',' or ')' in argument list", cursor.pos)
            return None


def _parse_variable(
    cursor: Cursor, context: ParseContext
) -> ParseResult[VariableExpression] | None:
    token = parse_variable_token(cursor)
    if token is None:
        return None
    name, splatted = token.value
    node = VariableExpression(name, splatted, context.span(cursor.pos, token.cursor.pos))
    return ParseResult(node, token.cursor)


def _parse_type_literal(cursor: Cursor, context: ParseContext) -> ParseResult[TypeLiteral]:
    """Parse [TypeName] with the cursor on '['.

    Raises:
        ScriptParseError: If the closing ']' is missing
    """
    end = skip_balanced(cursor)
    type_name = cursor.advance().slice_to(end.pos - 1).strip()
    return ParseResult(TypeLiteral(type_name, context.span(cursor.pos, end.pos)), end)


def _parse_string_node(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    start = cursor.pos
    if cursor.current in SINGLE_QUOTES:
        single = parse_single_quoted_string(cursor)
        if single is None:
            return None
        span = context.span(start, single.cursor.pos)
        constant = StringConstant(single.value, StringKind.SINGLE_QUOTED, span)
        return ParseResult(constant, single.cursor)

    double = parse_double_quoted_string(cursor)
    if double is None:
        return None
    value, raw, expandable = double.value
    span = context.span(start, double.cursor.pos)
    node: Expression = (
        ExpandableString(raw, StringKind.DOUBLE_QUOTED, span)
        if expandable
        else StringConstant(value, StringKind.DOUBLE_QUOTED, span)
    )
    return ParseResult(node, double.cursor)


def _parse_here_string_node(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Expression] | None:
    here = parse_here_string(cursor)
    if here is None:
        return None
    value, double_quoted, expandable = here.value
    kind = StringKind.DOUBLE_QUOTED_HERE if double_quoted else StringKind.SINGLE_QUOTED_HERE
    span = context.span(cursor.pos, here.cursor.pos)
    node: Expression = (
        ExpandableString(value, kind, span) if expandable else StringConstant(value, kind, span)
    )
    return ParseResult(node, here.cursor)


def _parse_paren(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse '(' pipeline ')' as an expression."""
    start = cursor.pos
    statement = _parse_condition(cursor, context)
    if statement is None:
        return None
    node = ParenExpression(statement.value, context.span(start, statement.cursor.pos))
    return ParseResult(node, statement.cursor)


def _parse_statement_group(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Expression] | None:
    """Parse $( statements ) or @( statements ) with the cursor on the sigil."""
    start = cursor.pos
    sigil = cursor.current
    nested = context.enter_nested(cursor)
    body = parse_statement_list(cursor.advance(2), nested, ")")
    end = body.cursor.advance()
    span = context.span(start, end.pos)
    node: Expression = (
        SubExpression(body.value, span) if sigil == "$" else ArraySubExpression(body.value, span)
    )
    return ParseResult(node, end)


def _parse_script_block_expression(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Expression] | None:
    block = _parse_braced_block(cursor, context)
    if block is None:
        return None
    return ParseResult(ScriptBlockExpression(block.value, block.value.span), block.cursor)


def _parse_hashtable(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse @{ key = value; ... } with the cursor on '@'.

    Entries are separated by ';' or line breaks. Keys are bare words,
    strings, numbers, variables or parenthesized expressions; values are
    full statements.
    """
    start = cursor.pos
    nested = context.enter_nested(cursor)
    cursor = cursor.advance(2)
    entries: list[HashtableEntry] = []
    while True:
        cursor = skip_blank(cursor)
        while not cursor.is_eof and cursor.current == ";":
            cursor = skip_blank(cursor.advance())
        if cursor.is_eof:
            raise_unexpected_eof(cursor, "'}'")
        if cursor.current == "}":
            cursor = cursor.advance()
            break

        entry_start = cursor.pos
        key = _parse_hashtable_key(cursor, nested)
        if key is None:
            return None
        equals = skip_inline(key.cursor)
        if equals.is_eof:
            raise_unexpected_eof(equals, "'='")
        if equals.current != "=":
            _set_parse_error("Expected '=' after hashtable key", equals.pos)
            return None
        value_cursor = skip_blank(equals.advance())
        if value_cursor.is_eof:
            raise_unexpected_eof(value_cursor, "hashtable value")
        value = parse_statement(value_cursor, nested)
        if value is None:
            return None
        entries.append(
            HashtableEntry(key.value, value.value, context.span(entry_start, value.cursor.pos))
        )
        cursor = skip_inline(value.cursor)
        if not cursor.is_eof and cursor.current not in "\n\r;}":
            _set_parse_error("Expected ';', line break or '}' after hashtable entry", cursor.pos)
            return None

    return ParseResult(HashtableLiteral(tuple(entries), context.span(start, cursor.pos)), cursor)


def _parse_hashtable_key(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    ch = cursor.current
    if ch in SINGLE_QUOTES or ch in DOUBLE_QUOTES or ch in "$(" or ch.isdigit():
        return _parse_unary(cursor, context)
    end = cursor
    while not end.is_eof and not (
        end.current.isspace() or end.current in "=;}"
    ):
        end = end.advance()
    if end.pos == cursor.pos:
        _set_parse_error("Expected hashtable key", cursor.pos)
        return None
    key = cursor.slice_to(end.pos)
    return ParseResult(
        StringConstant(key, StringKind.BARE_WORD, context.span(cursor.pos, end.pos)), end
    )
