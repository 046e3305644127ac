"""Tests for the pslocdata command line."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from pslocdata import cli

type ModuleFactory = Callable[..., Path]

_SOURCE = "Import-LocalizedData -BindingVariable Strings\nWrite-Host $Strings.Hello\n"
_DATA = {
    "en-US/Module.psd1": "@{ Hello = 'Hello' }",
    "fr-FR/Module.psd1": "@{ Hello = 'Bonjour' }",
}


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = cli.main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


# ============================================================================
# EXTRACT
# ============================================================================


class TestExtractCommand:
    """pslocdata extract."""

    def test_default_locale(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module(_SOURCE, data=_DATA)

        code, out, err = _run(capsys, "extract", str(module))

        assert code == 0
        assert json.loads(out) == {"Strings": {"Hello": "Hello"}}
        assert err == ""

    def test_locale_option(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module(_SOURCE, data=_DATA)

        code, out, _ = _run(capsys, "extract", str(module), "--locale", "fr-FR")

        assert code == 0
        assert json.loads(out) == {"Strings": {"Hello": "Bonjour"}}

    def test_system_locale_option(
        self,
        make_module: ModuleFactory,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(cli, "get_system_locale", lambda: "fr-FR")
        module = make_module(_SOURCE, data=_DATA)

        _, out, _ = _run(capsys, "extract", str(module), "--system-locale")

        assert json.loads(out) == {"Strings": {"Hello": "Bonjour"}}

    def test_locale_options_are_exclusive(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["extract", "M.psm1", "--locale", "fr-FR", "--system-locale"])

        assert exc_info.value.code == 2
        assert "not allowed with" in capsys.readouterr().err

    def test_missing_module(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, err = _run(capsys, "extract", str(tmp_path / "Nope.psm1"))

        assert code == 0
        assert out == ""
        assert "warning[FILE_NOT_FOUND]" in err

    def test_error_diagnostic_sets_exit_code(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module(_SOURCE, data=_DATA)

        code, out, err = _run(capsys, "extract", str(module), "--locale", "de-DE")

        assert code == 1
        assert json.loads(out) == {}
        assert "error[MISSING_LOCALE_DATA]" in err

    def test_json_diagnostics(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module("Import-LocalizedData -FileName x.psd1")

        code, _, err = _run(capsys, "extract", str(module), "--diagnostics", "json")

        assert code == 0
        (line,) = [text for text in err.splitlines() if text.startswith("{")]
        assert json.loads(line)["code"] == "MISSING_BINDING_VARIABLE"

    def test_parse_error(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module("Import-LocalizedData -BindingVariable 'S")

        code, out, err = _run(capsys, "extract", str(module))

        assert code == 1
        assert out == ""
        assert "error[UNEXPECTED_EOF]" in err


# ============================================================================
# SCAN AND REFS
# ============================================================================


class TestScanCommand:
    """pslocdata scan."""

    def test_lists_localized_modules(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module(_SOURCE, directory="ws/A", name="A.psm1")
        make_module("'plain'", directory="ws/B", name="B.psm1")
        make_module(_SOURCE, directory="ws/dist/C", name="C.psm1")

        code, out, _ = _run(capsys, "scan", str(module.parent.parent))

        assert code == 0
        assert json.loads(out) == [str(module.resolve())]

    def test_all_and_exclude(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module("'plain'", directory="ws/B", name="B.psm1")

        _, out, _ = _run(capsys, "scan", str(module.parent.parent), "--all", "--exclude", "A/**")

        assert json.loads(out) == [
            {"file_path": str(module.resolve()), "has_localization": False}
        ]

    def test_root_must_exist(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = _run(capsys, "scan", str(tmp_path / "missing"))

        assert code == 2
        assert "Not a directory" in err


class TestRefsCommand:
    """pslocdata refs."""

    def test_lists_references(
        self, make_module: ModuleFactory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        module = make_module(_SOURCE, data=_DATA)

        code, out, _ = _run(capsys, "refs", str(module), "--locale", "fr-FR")

        assert code == 0
        (reference,) = json.loads(out)
        assert reference["line"] == 2
        assert reference["binding"] == "Strings"
        assert reference["key"] == "Hello"
        assert reference["value"] == "Bonjour"

    def test_missing_module(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, err = _run(capsys, "refs", str(tmp_path / "Nope.psm1"))

        assert code == 0
        assert out == ""
        assert "FILE_NOT_FOUND" in err


class TestArgumentParsing:
    """Parser-level behaviour."""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.main([])

    def test_log_level_is_case_insensitive(self) -> None:
        args = cli.build_parser().parse_args(["--log-level", "debug", "scan", "."])

        assert args.log_level == "DEBUG"
