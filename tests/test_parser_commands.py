"""Tests for argument-mode command parsing.

Import-LocalizedData calls are commands, so every argument form that can
carry a binding name, culture, directory or file name is covered here.
"""

from __future__ import annotations

import pytest

from pslocdata.enums import StringKind
from pslocdata.syntax import parse_script
from pslocdata.syntax.ast import (
    ArrayLiteral,
    CommandInvocation,
    CommandParameter,
    ExpandableString,
    HashtableLiteral,
    NumberConstant,
    ParenExpression,
    Pipeline,
    ScriptBlockExpression,
    StringConstant,
    SubExpression,
    VariableExpression,
)


def _command(source: str) -> CommandInvocation:
    tree = parse_script(source)
    assert not tree.has_junk
    statement = tree.root.statements[0]
    assert isinstance(statement, Pipeline)
    command = statement.single_command
    assert command is not None
    return command


# ============================================================================
# COMMAND NAMES
# ============================================================================


class TestCommandNames:
    """Test how command names are read and matched."""

    def test_plain_name(self) -> None:
        command = _command("Import-LocalizedData Strings")

        assert command.command_name == "Import-LocalizedData"
        assert command.invocation_operator is None
        assert command.matches("Import-LocalizedData")

    def test_case_insensitive_match(self) -> None:
        assert _command("import-LOCALIZEDdata S").matches("Import-LocalizedData")

    def test_module_qualified_name(self) -> None:
        command = _command("Microsoft.PowerShell.Utility\\Import-LocalizedData S")

        assert command.matches("Import-LocalizedData")
        assert not command.matches("Import-Module")

    def test_call_operator(self) -> None:
        command = _command("& $block -Verbose")

        assert command.invocation_operator == "&"
        assert isinstance(command.name_element, VariableExpression)
        assert command.command_name == "$block"

    def test_dot_source(self) -> None:
        command = _command(". ./helpers.ps1")

        assert command.invocation_operator == "."
        assert command.command_name == "./helpers.ps1"

    def test_quoted_name_after_call_operator(self) -> None:
        command = _command("& 'Import-LocalizedData' S")

        assert command.command_name == "Import-LocalizedData"
        assert command.matches("Import-LocalizedData")


# ============================================================================
# PARAMETERS
# ============================================================================


class TestParameters:
    """Test -Name and -Name:value parameters."""

    def test_named_parameters(self) -> None:
        command = _command(
            "Import-LocalizedData -BindingVariable Strings -FileName Strings.psd1"
        )

        first, second, third, fourth = command.elements
        assert isinstance(first, CommandParameter)
        assert first.name == "BindingVariable"
        assert first.argument is None
        assert isinstance(second, StringConstant)
        assert second.value == "Strings"
        assert second.kind == StringKind.BARE_WORD
        assert isinstance(third, CommandParameter)
        assert isinstance(fourth, StringConstant)
        assert fourth.value == "Strings.psd1"

    def test_attached_arguments(self) -> None:
        command = _command("Import-LocalizedData -BindingVariable:Strings -UICulture:'fr-FR'")

        binding, culture = command.elements
        assert isinstance(binding, CommandParameter)
        assert binding.name == "BindingVariable"
        assert isinstance(binding.argument, StringConstant)
        assert binding.argument.value == "Strings"
        assert isinstance(culture, CommandParameter)
        assert isinstance(culture.argument, StringConstant)
        assert culture.argument.value == "fr-FR"
        assert culture.argument.kind == StringKind.SINGLE_QUOTED

    def test_trailing_colon_without_argument(self) -> None:
        command = _command("Get-Thing -Switch:")

        parameter = command.elements[0]
        assert isinstance(parameter, CommandParameter)
        assert parameter.name == "Switch"
        assert parameter.argument is None

    def test_negative_number_is_argument(self) -> None:
        command = _command("Write-Output -5")

        argument = command.elements[0]
        assert isinstance(argument, NumberConstant)
        assert argument.value == -5

    def test_end_of_parameters_marker(self) -> None:
        command = _command("Write-Output -- -NotAParam")

        (argument,) = command.elements
        assert isinstance(argument, StringConstant)
        assert argument.value == "-NotAParam"

    def test_line_continuations(self) -> None:
        command = _command(
            "Import-LocalizedData `\n    -BindingVariable S `\n    -FileName S.psd1"
        )

        assert len(command.elements) == 4

    def test_redirections_are_dropped(self) -> None:
        command = _command("Get-Item x 2>&1 > $null")

        assert len(command.elements) == 1


# ============================================================================
# ARGUMENTS
# ============================================================================


class TestArguments:
    """Test argument value forms."""

    def test_splatted_variable(self) -> None:
        command = _command("Import-LocalizedData @params")

        argument = command.elements[0]
        assert isinstance(argument, VariableExpression)
        assert argument.name == "params"
        assert argument.splatted

    def test_expandable_bareword(self) -> None:
        command = _command("Import-LocalizedData S -BaseDirectory $PSScriptRoot\\Data")

        argument = command.elements[-1]
        assert isinstance(argument, ExpandableString)
        assert argument.value == "$PSScriptRoot\\Data"
        assert argument.kind == StringKind.BARE_WORD

    def test_expandable_double_quoted(self) -> None:
        command = _command('Import-LocalizedData S -BaseDirectory "$PSScriptRoot\\Data"')

        argument = command.elements[-1]
        assert isinstance(argument, ExpandableString)
        assert argument.kind == StringKind.DOUBLE_QUOTED

    def test_constant_double_quoted(self) -> None:
        command = _command('Import-LocalizedData S -FileName "S.psd1"')

        argument = command.elements[-1]
        assert isinstance(argument, StringConstant)
        assert argument.value == "S.psd1"
        assert argument.kind == StringKind.DOUBLE_QUOTED

    def test_here_string_argument(self) -> None:
        command = _command("Import-LocalizedData -FileName @'\nS.psd1\n'@")

        argument = command.elements[-1]
        assert isinstance(argument, StringConstant)
        assert argument.kind == StringKind.SINGLE_QUOTED_HERE
        assert argument.value == "S.psd1"

    def test_array_argument(self) -> None:
        command = _command("Get-Thing -Name a, b ,c")

        argument = command.elements[-1]
        assert isinstance(argument, ArrayLiteral)
        assert [e.value for e in argument.elements if isinstance(e, StringConstant)] == [
            "a",
            "b",
            "c",
        ]

    def test_number_followed_by_text_is_bareword(self) -> None:
        command = _command("Write-Output 1.psd1")

        argument = command.elements[0]
        assert isinstance(argument, StringConstant)
        assert argument.value == "1.psd1"

    @pytest.mark.parametrize(
        ("source", "node_type"),
        [
            ("ForEach-Object { $_ }", ScriptBlockExpression),
            ("New-Thing @{ A = 1 }", HashtableLiteral),
            ("Write-Output $(Get-Date)", SubExpression),
            ("Import-LocalizedData -FileName ('S' + '.psd1')", ParenExpression),
        ],
    )
    def test_compound_arguments(self, source: str, node_type: type) -> None:
        command = _command(source)

        assert isinstance(command.elements[-1], node_type)

    def test_nested_call_inside_script_block(self) -> None:
        command = _command("Invoke-Command { Import-LocalizedData -BindingVariable S }")

        block = command.elements[0]
        assert isinstance(block, ScriptBlockExpression)
        inner = block.body.statements[0]
        assert isinstance(inner, Pipeline)
        assert inner.single_command is not None
        assert inner.single_command.matches("Import-LocalizedData")
