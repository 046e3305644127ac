"""End-to-end tests for LocalizationExtractor and extract().

Modules and their locale-data directories are written under tmp_path by
the make_module fixture.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from pslocdata import ExtractorConfig, LocalizationExtractor, extract
from pslocdata.diagnostics import DiagnosticCode, ScriptParseError
from pslocdata.enums import CallStatus, ExtractionStatus
from tests.strategies import (
    culture_names,
    hashtable_source,
    message_tables,
    string_data_source,
    variable_names,
)

_HELLO = "@{ Hello = 'Hello' }"
_BONJOUR = "@{ Hello = 'Bonjour' }"

type ModuleFactory = Callable[..., Path]


def _codes(result: object) -> list[DiagnosticCode]:
    return [d.code for d in result.diagnostics]  # type: ignore[attr-defined]


# ============================================================================
# LOCALE SELECTION
# ============================================================================


class TestLocaleSelection:
    """The requested locale picks the data directory; en-US by default."""

    def test_default_locale_equals_explicit_en_us(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable Strings -FileName Strings.psd1",
            data={"en-US/Strings.psd1": _HELLO, "fr-FR/Strings.psd1": _BONJOUR},
        )

        assert extract(module) == {"Strings": {"Hello": "Hello"}}
        assert extract(module, "en-US") == extract(module)
        assert extract(module, "") == extract(module)

    def test_requested_locale(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable Strings -FileName Strings.psd1",
            data={"en-US/Strings.psd1": _HELLO, "fr-FR/Strings.psd1": _BONJOUR},
        )

        assert extract(module, "fr-FR") == {"Strings": {"Hello": "Bonjour"}}

    def test_three_key_tables_per_locale(self, make_module: ModuleFactory) -> None:
        english = {f"Key{i}": f"Value{i}" for i in range(1, 4)}
        french = {f"Key{i}": f"Valeur{i}" for i in range(1, 4)}
        module = make_module(
            "$Messages = @{ BindingVariable = 'Messages'; FileName = 'X.psd1' }\n"
            "Import-LocalizedData @Messages\n",
            data={
                "en-US/X.psd1": hashtable_source(english),
                "fr-FR/X.psd1": string_data_source(french),
            },
        )

        assert extract(module) == extract(module, "en-US") == {"Messages": english}
        assert extract(module, "fr-FR") == {"Messages": french}

    def test_requested_locale_overrides_call_culture(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -UICulture de-DE -FileName S.psd1",
            data={"en-US/S.psd1": _HELLO, "de-DE/S.psd1": "@{ Hello = 'Hallo' }"},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"S": {"Hello": "Hello"}}
        arguments = result.call_sites[0].arguments
        assert arguments is not None
        assert arguments["UICulture"] == "en-US"
        assert arguments["BaseDirectory"] == str(module.parent)

    def test_configured_default_locale(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName S.psd1",
            data={"de-DE/S.psd1": "@{ Hello = 'Hallo' }"},
        )

        config = ExtractorConfig(default_locale="de-DE")

        assert extract(module, config=config) == {"S": {"Hello": "Hallo"}}

    @given(table=message_tables(), culture=culture_names, binding=variable_names)
    def test_any_locale_round_trips(
        self,
        make_module: ModuleFactory,
        table: dict[str, str],
        culture: str,
        binding: str,
    ) -> None:
        event(f"culture={culture}")
        module = make_module(
            f"Import-LocalizedData -BindingVariable {binding} -FileName Data.psd1",
            data={f"{culture}/Data.psd1": hashtable_source(table)},
            directory=f"Module-{culture}-{binding}",
        )

        assert extract(module, culture) == {binding: table}

    def test_unknown_locale_is_a_warning(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName S.psd1",
            data={"zz-ZZ/S.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module, "zz-ZZ")

        assert result.to_dict() == {"S": {"Hello": "Hello"}}
        assert _codes(result) == [DiagnosticCode.UNKNOWN_LOCALE]
        assert not result.has_errors

    def test_locale_check_disabled(self, make_module: ModuleFactory) -> None:
        module = make_module("Import-LocalizedData S", data={"zz-ZZ/Module.psd1": _HELLO})

        result = LocalizationExtractor(ExtractorConfig(check_locale=False)).analyze(module, "zz-ZZ")

        assert result.diagnostics == ()


# ============================================================================
# BINDINGS AND FILE NAMES
# ============================================================================


class TestBindings:
    """Binding names and data file names."""

    def test_file_name_defaults_to_module_stem(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S",
            data={"en-US/Module.psd1": _HELLO},
        )

        assert extract(module) == {"S": {"Hello": "Hello"}}

    def test_extension_is_appended(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName Strings",
            data={"en-US/Strings.psd1": _HELLO},
        )

        assert extract(module) == {"S": {"Hello": "Hello"}}

    def test_assignment_target_is_the_binding(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "$Messages = Import-LocalizedData -FileName S.psd1",
            data={"en-US/S.psd1": _HELLO},
        )

        assert extract(module) == {"Messages": {"Hello": "Hello"}}

    def test_binding_variable_wins_over_assignment(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "$Ignored = Import-LocalizedData -BindingVariable S -FileName S.psd1",
            data={"en-US/S.psd1": _HELLO},
        )

        assert extract(module) == {"S": {"Hello": "Hello"}}

    def test_later_call_overwrites_binding(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName A.psd1\n"
            "Import-LocalizedData -BindingVariable T -FileName A.psd1\n"
            "Import-LocalizedData -BindingVariable S -FileName B.psd1\n",
            data={"en-US/A.psd1": "@{ K = 'a' }", "en-US/B.psd1": "@{ K = 'b' }"},
        )

        bindings = extract(module)

        assert bindings == {"S": {"K": "b"}, "T": {"K": "a"}}
        assert list(bindings) == ["S", "T"]

    def test_resolved_through_variables_and_splat(self, make_module: ModuleFactory) -> None:
        source = (
            "$name = 'Strings'\n"
            "$file = 'Old.psd1'\n"
            "$file = 'Strings.psd1'\n"
            "$params = @{ BindingVariable = $name; FileName = $file }\n"
            "function Initialize-Strings {\n"
            "    Import-LocalizedData @params\n"
            "}\n"
        )
        module = make_module(source, data={"en-US/Strings.psd1": _HELLO})

        assert extract(module) == {"Strings": {"Hello": "Hello"}}

    def test_string_data_file(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S",
            data={"en-US/Module.psd1": "ConvertFrom-StringData @'\nHello = Hi\\tthere\n'@\n"},
        )

        assert extract(module) == {"S": {"Hello": "Hi\tthere"}}


# ============================================================================
# FAILURE ISOLATION
# ============================================================================


class TestFailureIsolation:
    """A failing call or binding never hides the others."""

    def test_malformed_call_is_skipped(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable Bad -FileName { 'x' }\n"
            "Import-LocalizedData -BindingVariable Good -FileName S.psd1\n",
            data={"en-US/S.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"Good": {"Hello": "Hello"}}
        assert result.status == ExtractionStatus.PARTIAL
        bad, good = result.call_sites
        assert bad.status == CallStatus.MALFORMED
        assert bad.line == 1
        assert good.is_loaded
        (error,) = result.errors
        assert error.code == DiagnosticCode.MALFORMED_CALL
        assert error.file_path == str(module)

    def test_missing_data_is_skipped(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable A -FileName A.psd1\n"
            "Import-LocalizedData -BindingVariable B -FileName B.psd1\n",
            data={"en-US/B.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"B": {"Hello": "Hello"}}
        missing = result.call_sites[0]
        assert missing.status == CallStatus.MISSING_DATA
        assert missing.data_path == str(module.parent / "en-US" / "A.psd1")
        diagnostic = missing.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.MISSING_LOCALE_DATA
        assert diagnostic.binding == "A"

    def test_missing_locale_directory(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName S.psd1",
            data={"en-US/S.psd1": _HELLO},
        )

        assert extract(module, "fr-FR") == {}

    def test_invalid_data_is_skipped(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable Bad -FileName Bad.psd1\n"
            "Import-LocalizedData -BindingVariable Good -FileName Good.psd1\n",
            data={"en-US/Bad.psd1": "@{ Now = Get-Date }", "en-US/Good.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"Good": {"Hello": "Hello"}}
        bad = result.call_sites[0]
        assert bad.status == CallStatus.INVALID_DATA
        assert bad.diagnostic is not None
        assert bad.diagnostic.code == DiagnosticCode.INVALID_LOCALE_DATA
        assert bad.diagnostic.binding == "Bad"

    def test_traversal_counts_as_missing(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -BindingVariable S -FileName '..\\..\\secret.psd1'",
            data={"en-US/S.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {}
        assert result.call_sites[0].status == CallStatus.MISSING_DATA

    def test_call_without_binding(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData -FileName S.psd1",
            data={"en-US/S.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {}
        assert result.call_sites[0].status == CallStatus.NO_BINDING
        assert _codes(result) == [DiagnosticCode.MISSING_BINDING_VARIABLE]
        assert not result.has_errors

    def test_unresolved_splat_warning(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-LocalizedData @extra -BindingVariable S",
            data={"en-US/Module.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"S": {"Hello": "Hello"}}
        assert _codes(result) == [DiagnosticCode.UNRESOLVED_SPLAT]
        assert result.is_success

    def test_junk_statement_is_reported(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "if $broken { }\nImport-LocalizedData -BindingVariable S",
            data={"en-US/Module.psd1": _HELLO},
        )

        result = LocalizationExtractor().analyze(module)

        assert result.to_dict() == {"S": {"Hello": "Hello"}}
        (warning,) = result.warnings
        assert warning.code == DiagnosticCode.PARSE_JUNK
        assert warning.span is not None
        assert warning.span.line == 1

    def test_fatal_syntax_error_raises(self, make_module: ModuleFactory) -> None:
        module = make_module("Import-LocalizedData -BindingVariable 'S")

        with pytest.raises(ScriptParseError):
            extract(module)

    def test_undecodable_module_raises(self, make_module: ModuleFactory) -> None:
        module = make_module("")
        module.write_bytes(b"Import-LocalizedData \xff\xfe\xfa")

        with pytest.raises(ScriptParseError) as exc_info:
            extract(module)

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.PARSE_ERROR


# ============================================================================
# EMPTY RESULTS
# ============================================================================


class TestEmptyResults:
    """Missing modules and modules without calls yield no data."""

    def test_missing_module(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        missing = tmp_path / "Nope.psm1"

        with caplog.at_level(logging.WARNING, logger="pslocdata"):
            result = LocalizationExtractor().analyze(missing)

        assert result.status == ExtractionStatus.NOT_FOUND
        assert result.to_dict() == {}
        assert _codes(result) == [DiagnosticCode.FILE_NOT_FOUND]
        assert "not found" in caplog.text
        assert extract(missing) == {}

    def test_directory_is_not_a_module(self, tmp_path: Path) -> None:
        assert extract(tmp_path) == {}

    def test_no_call_sites(self, make_module: ModuleFactory) -> None:
        module = make_module("function Get-Thing { 'thing' }\n")

        result = LocalizationExtractor().analyze(module)

        assert result.status == ExtractionStatus.NO_CALL_SITES
        assert result.to_dict() == {}
        assert _codes(result) == [DiagnosticCode.NO_CALL_SITES]

    def test_custom_command_name(self, make_module: ModuleFactory) -> None:
        module = make_module(
            "Import-MyData -BindingVariable S\nImport-LocalizedData -BindingVariable T",
            data={"en-US/Module.psd1": _HELLO},
        )

        config = ExtractorConfig(command_name="Import-MyData")

        assert extract(module, config=config) == {"S": {"Hello": "Hello"}}


# ============================================================================
# IN-MEMORY SOURCES AND RESULT OBJECTS
# ============================================================================


class TestExtractSource:
    """extract_source reads modules that are not on disk."""

    def test_base_directory_from_module_path(self, tmp_path: Path) -> None:
        (tmp_path / "en-US").mkdir()
        (tmp_path / "en-US" / "Virtual.psd1").write_text(_HELLO, encoding="utf-8")

        result = LocalizationExtractor().extract_source(
            "Import-LocalizedData -BindingVariable S", tmp_path / "Virtual.psm1"
        )

        assert result.is_success
        assert result.to_dict() == {"S": {"Hello": "Hello"}}
        assert result.locale == "en-US"

    def test_result_repr(self, tmp_path: Path) -> None:
        result = LocalizationExtractor().extract_source(
            "Import-LocalizedData -BindingVariable S", tmp_path / "M.psm1"
        )

        assert repr(result) == (
            "ExtractionResult(status=partial, bindings=0, calls=1, diagnostics=1)"
        )

    @given(count=st.integers(min_value=1, max_value=4))
    def test_one_result_per_call(self, count: int) -> None:
        source = "\n".join(f"Import-LocalizedData -BindingVariable B{i}" for i in range(count))

        result = LocalizationExtractor().extract_source(source, "/nonexistent/M.psm1")

        assert [site.line for site in result.call_sites] == list(range(1, count + 1))
        assert all(site.status == CallStatus.MISSING_DATA for site in result.call_sites)
