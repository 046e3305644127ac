"""Locate Import-LocalizedData invocations in a parsed module."""

from dataclasses import dataclass

from pslocdata.constants import IMPORT_COMMAND_NAME
from pslocdata.syntax.ast import AssignmentStatement, CommandInvocation, Pipeline, ScriptTree
from pslocdata.syntax.visitor import ASTVisitor

__all__ = ["CallSite", "find_call_sites"]


@dataclass(frozen=True, slots=True)
class CallSite:
    """One invocation of the localization-import command.

    Attributes:
        command: The invocation node
        assigned_to: Variable name when the call is the whole right-hand
            side of an assignment ($Strings = Import-LocalizedData ...)
    """

    command: CommandInvocation
    assigned_to: str | None = None

    @property
    def line(self) -> int:
        """Source line of the command name."""
        span = self.command.span
        return span.start_line if span is not None else 1


class _CallSiteFinder(ASTVisitor[None]):
    __slots__ = ("_assigned", "_command_name", "sites")

    def __init__(self, command_name: str) -> None:
        super().__init__()
        self._command_name = command_name
        self._assigned: dict[int, str] = {}
        self.sites: list[CallSite] = []

    def visit_AssignmentStatement(self, node: AssignmentStatement) -> None:  # noqa: N802
        target = node.target_variable
        value = node.value
        if target is not None and node.operator == "=" and isinstance(value, Pipeline):
            command = value.single_command
            if command is not None and command.matches(self._command_name):
                self._assigned[id(command)] = target.name
        self.generic_visit(node)

    def visit_CommandInvocation(self, node: CommandInvocation) -> None:  # noqa: N802
        if node.matches(self._command_name):
            self.sites.append(CallSite(node, self._assigned.get(id(node))))
        self.generic_visit(node)


def find_call_sites(
    tree: ScriptTree, command_name: str = IMPORT_COMMAND_NAME
) -> tuple[CallSite, ...]:
    """Find every invocation of command_name, in source order.

    Calls nested in script blocks, function bodies, subexpressions and
    arguments of other commands are included.

    Example:
        >>> tree = parse_script("$S = Import-LocalizedData -FileName a.psd1")
        >>> [site.assigned_to for site in find_call_sites(tree)]
        ['S']
    """
    finder = _CallSiteFinder(command_name)
    finder.visit(tree.root)
    return tuple(finder.sites)
