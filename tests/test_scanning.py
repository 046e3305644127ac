"""Tests for workspace module scanning."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pslocdata.scanning import ModuleInfo, is_path_excluded, scan_modules


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    _write(tmp_path, "A/A.psm1", "Import-LocalizedData -BindingVariable S")
    _write(tmp_path, "B/B.psm1", "function Get-B { 'b' }")
    _write(tmp_path, "C/nested/C.PSM1", "import-localizeddata S")
    _write(tmp_path, "C/helper.ps1", "Import-LocalizedData S")
    _write(tmp_path, "node_modules/pkg/D.psm1", "Import-LocalizedData S")
    _write(tmp_path, "out/E.psm1", "Import-LocalizedData S")
    return tmp_path


class TestIsPathExcluded:
    """Recursive glob matching of root-relative paths."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("node_modules/pkg/a.psm1", True),
            ("src/node_modules/a.psm1", True),
            ("src/a.psm1", False),
            ("node_modules.psm1", False),
        ],
    )
    def test_double_star(self, path: str, expected: bool) -> None:
        assert is_path_excluded(path, ["**/node_modules/**"]) is expected

    def test_any_pattern_matches(self) -> None:
        assert is_path_excluded("build/x.psm1", ["**/dist/**", "build/*"])

    def test_no_patterns(self) -> None:
        assert not is_path_excluded("a.psm1", [])


class TestScanModules:
    """Module discovery under a root directory."""

    def test_localized_modules_only(self, workspace: Path) -> None:
        modules = scan_modules(workspace)

        assert [Path(m.file_path).relative_to(workspace).as_posix() for m in modules] == [
            "A/A.psm1",
            "C/nested/C.PSM1",
        ]
        assert all(m.has_localization for m in modules)

    def test_all_modules(self, workspace: Path) -> None:
        modules = scan_modules(workspace, localized_only=False)

        assert ModuleInfo(str((workspace / "B" / "B.psm1").resolve()), False) in modules
        assert len(modules) == 3

    def test_custom_excludes(self, workspace: Path) -> None:
        modules = scan_modules(workspace, exclude=["A/**"])

        names = sorted(Path(m.file_path).name for m in modules)
        assert names == ["C.PSM1", "D.psm1", "E.psm1"]

    def test_custom_extension(self, workspace: Path) -> None:
        modules = scan_modules(workspace, extension=".ps1")

        assert [Path(m.file_path).name for m in modules] == ["helper.ps1"]

    def test_custom_command_name(self, workspace: Path) -> None:
        _write(workspace, "F/F.psm1", "Import-MyData S")

        modules = scan_modules(workspace, command_name="import-mydata")

        assert [Path(m.file_path).name for m in modules] == ["F.psm1"]

    def test_undecodable_file_is_not_localized(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "Bad.psm1").write_bytes(b"\xff\xfe\x00Import-LocalizedData")

        modules = scan_modules(tmp_path, localized_only=False)

        assert modules == (ModuleInfo(str((tmp_path / "Bad.psm1").resolve()), False),)
        assert "Failed to read module file" in caplog.text

    def test_root_must_be_a_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotADirectoryError):
            scan_modules(tmp_path / "missing")

    def test_empty_root(self, tmp_path: Path) -> None:
        assert scan_modules(tmp_path) == ()


class TestExcludedDirectories:
    """Directories covered by a "<prefix>/**" pattern are not descended into."""

    def test_excluded_directory_is_pruned(
        self, workspace: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="pslocdata.scanning")

        scan_modules(workspace)

        assert "Excluded node_modules/" in caplog.messages
        assert "Excluded out/" in caplog.messages
        assert not any("D.psm1" in message for message in caplog.messages)

    def test_nested_excluded_directory_is_pruned(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write(tmp_path, "src/node_modules/deep/x/X.psm1", "Import-LocalizedData S")
        _write(tmp_path, "src/Y.psm1", "Import-LocalizedData S")
        caplog.set_level(logging.DEBUG, logger="pslocdata.scanning")

        modules = scan_modules(tmp_path)

        assert [Path(m.file_path).name for m in modules] == ["Y.psm1"]
        assert "Excluded src/node_modules/" in caplog.messages

    def test_single_level_pattern_keeps_deeper_files(self, tmp_path: Path) -> None:
        _write(tmp_path, "build/Top.psm1", "Import-LocalizedData S")
        _write(tmp_path, "build/sub/Deep.psm1", "Import-LocalizedData S")

        modules = scan_modules(tmp_path, exclude=["build/*"])

        assert [Path(m.file_path).name for m in modules] == ["Deep.psm1"]

    def test_results_sorted_by_path(self, tmp_path: Path) -> None:
        for relative in ("b/M.psm1", "a-b/M.psm1", "a/z/M.psm1", "a/M.psm1"):
            _write(tmp_path, relative, "Import-LocalizedData S")

        modules = scan_modules(tmp_path)

        relative_paths = [Path(m.file_path).relative_to(tmp_path.resolve()) for m in modules]
        assert relative_paths == sorted(relative_paths)
        assert len(relative_paths) == 4
