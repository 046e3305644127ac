"""Tests for locating Import-LocalizedData call sites."""

from __future__ import annotations

import pytest

from pslocdata.extraction import find_call_sites
from pslocdata.syntax import parse_script


def _sites(source: str, **kwargs: str) -> list[tuple[int, str | None]]:
    sites = find_call_sites(parse_script(source), **kwargs)
    return [(site.line, site.assigned_to) for site in sites]


class TestFindCallSites:
    """Call sites are found wherever a command can appear."""

    def test_no_calls(self) -> None:
        assert _sites("$x = 1\nWrite-Output 'Import-LocalizedData'") == []

    def test_source_order_across_nesting(self) -> None:
        source = (
            "Import-LocalizedData -BindingVariable A\n"
            "function Initialize {\n"
            "    if ($true) {\n"
            "        Import-LocalizedData -BindingVariable B\n"
            "    }\n"
            "}\n"
            "Invoke-Command { Import-LocalizedData -BindingVariable C }\n"
            "$x = $(Import-LocalizedData -BindingVariable D)\n"
        )

        assert [line for line, _ in _sites(source)] == [1, 4, 7, 8]

    def test_module_qualified_and_case_insensitive(self) -> None:
        source = (
            "Microsoft.PowerShell.Utility\\Import-LocalizedData S\n"
            "import-localizeddata S\n"
        )

        assert len(_sites(source)) == 2

    @pytest.mark.parametrize(
        "name",
        ["Import-LocalizedDataEx", "Import-Localized", "Export-LocalizedData"],
    )
    def test_near_miss_names_are_ignored(self, name: str) -> None:
        assert _sites(f"{name} -BindingVariable S") == []

    def test_custom_command_name(self) -> None:
        source = "Import-LocalizedData A\nImport-MyData B\n"

        assert _sites(source, command_name="import-mydata") == [(2, None)]

    def test_call_passed_through_call_operator(self) -> None:
        assert _sites("& 'Import-LocalizedData' -BindingVariable S") == [(1, None)]


class TestAssignedTo:
    """Plain assignments of a lone call record the target variable."""

    def test_plain_assignment(self) -> None:
        assert _sites("$Strings = Import-LocalizedData -FileName S.psd1") == [(1, "Strings")]

    def test_typed_target(self) -> None:
        assert _sites("[hashtable]$Strings = Import-LocalizedData") == [(1, "Strings")]

    def test_scope_qualified_target(self) -> None:
        assert _sites("$script:Strings = Import-LocalizedData") == [(1, "script:Strings")]

    @pytest.mark.parametrize(
        "source",
        [
            "$Strings += Import-LocalizedData",
            "$Strings = Import-LocalizedData | Select-Object -First 1",
            "$Strings = (Import-LocalizedData)",
            "Import-LocalizedData -BindingVariable S",
        ],
    )
    def test_other_forms_are_not_assigned(self, source: str) -> None:
        assert _sites(source) == [(1, None)]

    def test_assignment_inside_function(self) -> None:
        source = "function Get-Strings {\n    $local = Import-LocalizedData\n}\n"

        assert _sites(source) == [(2, "local")]
