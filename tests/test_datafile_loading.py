"""Tests for PathLocaleDataLoader path resolution and traversal protection."""

from __future__ import annotations

from pathlib import Path

import pytest

from pslocdata.datafile import LocaleDataLoader, PathLocaleDataLoader


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    root = tmp_path / "Module"
    (root / "en-US").mkdir(parents=True)
    (root / "en-US" / "Strings.psd1").write_text("@{ Hello = 'Hello' }", encoding="utf-8")
    return root


class TestLoad:
    """Files resolve as <base_dir>/<locale>/<file_name>."""

    def test_reads_file(self, module_dir: Path) -> None:
        loader = PathLocaleDataLoader(str(module_dir))

        assert loader.load("en-US", "Strings.psd1") == "@{ Hello = 'Hello' }"

    def test_byte_order_mark_is_dropped(self, module_dir: Path) -> None:
        (module_dir / "en-US" / "Bom.psd1").write_bytes(b"\xef\xbb\xbf@{}")

        assert PathLocaleDataLoader(str(module_dir)).load("en-US", "Bom.psd1") == "@{}"

    def test_backslash_separators(self, module_dir: Path) -> None:
        (module_dir / "en-US" / "sub").mkdir()
        (module_dir / "en-US" / "sub" / "S.psd1").write_text("@{}", encoding="utf-8")

        assert PathLocaleDataLoader(str(module_dir)).load("en-US", "sub\\S.psd1") == "@{}"

    def test_missing_locale_directory(self, module_dir: Path) -> None:
        loader = PathLocaleDataLoader(str(module_dir))

        with pytest.raises(FileNotFoundError):
            loader.load("fr-FR", "Strings.psd1")

    def test_directory_is_not_a_file(self, module_dir: Path) -> None:
        (module_dir / "en-US" / "Dir.psd1").mkdir()

        with pytest.raises(FileNotFoundError):
            PathLocaleDataLoader(str(module_dir)).load("en-US", "Dir.psd1")

    def test_describe_path(self, module_dir: Path) -> None:
        loader = PathLocaleDataLoader(str(module_dir))

        assert loader.describe_path("de-DE", "S.psd1") == str(module_dir / "de-DE" / "S.psd1")

    def test_path_for(self, module_dir: Path) -> None:
        loader = PathLocaleDataLoader(str(module_dir))

        assert loader.path_for("en-US", "Strings.psd1") == (
            module_dir.resolve() / "en-US" / "Strings.psd1"
        )

    def test_satisfies_protocol(self, module_dir: Path) -> None:
        loader: LocaleDataLoader = PathLocaleDataLoader(str(module_dir))

        assert loader.describe_path("en-US", "a.psd1").endswith("a.psd1")


class TestTraversalProtection:
    """Unsafe locale and file names are rejected before any read."""

    @pytest.mark.parametrize("locale", ["", "..", "en-US/..", "a\\b", "../en-US"])
    def test_unsafe_locale(self, module_dir: Path, locale: str) -> None:
        with pytest.raises(ValueError, match="locale|Locale"):
            PathLocaleDataLoader(str(module_dir)).load(locale, "Strings.psd1")

    @pytest.mark.parametrize(
        "file_name",
        [
            "",
            " Strings.psd1",
            "Strings.psd1 ",
            "/etc/passwd",
            "\\share\\x.psd1",
            "../x.psd1",
            "sub\\..\\..\\x.psd1",
            "en-US/../../x.psd1",
        ],
    )
    def test_unsafe_file_name(self, module_dir: Path, file_name: str) -> None:
        with pytest.raises(ValueError, match="[Ff]ile name"):
            PathLocaleDataLoader(str(module_dir)).load("en-US", file_name)

    @pytest.mark.parametrize("file_name", ["My..Strings.psd1", "..Strings.psd1", "Strings..psd1"])
    def test_dots_inside_a_name_are_allowed(self, module_dir: Path, file_name: str) -> None:
        (module_dir / "en-US" / file_name).write_text("@{ A = 'a' }", encoding="utf-8")

        assert PathLocaleDataLoader(str(module_dir)).load("en-US", file_name) == "@{ A = 'a' }"

    def test_symlink_escaping_base_directory(self, module_dir: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside.psd1"
        outside.write_text("@{ Secret = 'x' }", encoding="utf-8")
        (module_dir / "en-US" / "Link.psd1").symlink_to(outside)

        with pytest.raises(ValueError, match="Path traversal detected"):
            PathLocaleDataLoader(str(module_dir)).load("en-US", "Link.psd1")
