"""Reading locale data files from a module directory.

Import-LocalizedData looks for ``<BaseDirectory>/<UICulture>/<FileName>``.
Both the culture and the file name come from module source, so neither
may lead the read outside the module directory.

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Protocol

from pslocdata.constants import DEFAULT_ENCODING

__all__ = ["LocaleDataLoader", "PathLocaleDataLoader"]

logger = logging.getLogger(__name__)


class LocaleDataLoader(Protocol):
    """Source of data file text, keyed by culture and file name.

    Example:
        >>> class MemoryLoader:
        ...     def __init__(self, files: dict[str, str]) -> None:
        ...         self.files = files
        ...     def load(self, locale: str, file_name: str) -> str:
        ...         return self.files[f"{locale}/{file_name}"]
        ...     def describe_path(self, locale: str, file_name: str) -> str:
        ...         return f"{locale}/{file_name}"
    """

    def load(self, locale: str, file_name: str) -> str:
        """Text of the data file.

        Raises:
            FileNotFoundError: No such file for this culture
            ValueError: locale or file_name would leave the base directory
            OSError: The file exists but cannot be read
        """

    def describe_path(self, locale: str, file_name: str) -> str:
        """Path shown in diagnostics."""
        return f"{locale}/{file_name}"


def _check_locale(locale: str) -> None:
    if not locale:
        msg = "Locale cannot be empty"
        raise ValueError(msg)
    if ".." in locale or any(sep in locale for sep in "/\\"):
        msg = f"Locale must be a single directory name, got '{locale}'"
        raise ValueError(msg)


def _check_file_name(file_name: str) -> None:
    if not file_name or file_name != file_name.strip():
        msg = f"File name must be non-empty without surrounding spaces, got {file_name!r}"
        raise ValueError(msg)
    if file_name[0] in "/\\" or PureWindowsPath(file_name).drive or Path(file_name).is_absolute():
        msg = f"File name must be relative, got '{file_name}'"
        raise ValueError(msg)
    if ".." in PurePosixPath(file_name.replace("\\", "/")).parts:
        msg = f"File name must not contain a '..' component, got '{file_name}'"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PathLocaleDataLoader:
    """Loader over one module directory on disk.

    Culture names are single directory names. File names are relative and
    may use either slash; the resolved path, symlinks followed, must stay
    under base_dir.

    Example:
        >>> loader = PathLocaleDataLoader("/modules/MyModule")
        >>> loader.path_for("de-DE", "Strings.psd1")
        PosixPath('/modules/MyModule/de-DE/Strings.psd1')

    Attributes:
        base_dir: Module directory holding one subdirectory per culture
        encoding: Text encoding; the default accepts a UTF-8 BOM
    """

    base_dir: str
    encoding: str = DEFAULT_ENCODING
    _root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_root", Path(self.base_dir).resolve())

    def path_for(self, locale: str, file_name: str) -> Path:
        """Absolute data file path for a culture.

        Raises:
            ValueError: Unsafe locale or file_name, or a path that resolves
                outside base_dir
        """
        _check_locale(locale)
        _check_file_name(file_name)
        candidate = self._root / locale / file_name.replace("\\", "/")
        if not candidate.resolve().is_relative_to(self._root):
            msg = (
                f"Path traversal detected: '{locale}/{file_name}' "
                f"resolves outside '{self._root}'"
            )
            raise ValueError(msg)
        return candidate

    def describe_path(self, locale: str, file_name: str) -> str:
        return str(Path(self.base_dir) / locale / file_name)

    def load(self, locale: str, file_name: str) -> str:
        """Read the data file for a culture.

        Raises:
            ValueError: See path_for
            FileNotFoundError: Missing file, or a directory in its place
            OSError: Read failure
        """
        path = self.path_for(locale, file_name)
        if not path.is_file():
            msg = f"No such locale-data file: '{path}'"
            raise FileNotFoundError(msg)
        logger.debug("Reading %s data from %s", locale, path)
        return path.read_text(encoding=self.encoding)
