"""Workspace scan for modules that call Import-LocalizedData.

Walks a directory tree for module files, pruning excluded directories,
and checks each file's text for the localization-import command.
Detection is a case-insensitive text match, so it is cheap enough to run
over a whole workspace before extracting individual modules.

Python 3.13+.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .constants import (
    DEFAULT_ENCODING,
    DEFAULT_SEARCH_EXCLUDES,
    IMPORT_COMMAND_NAME,
    MODULE_FILE_EXTENSION,
)

__all__ = ["ModuleInfo", "is_path_excluded", "scan_modules"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModuleInfo:
    """Scan result for one module file.

    Attributes:
        file_path: Absolute path of the module
        has_localization: True if the module text mentions the command
    """

    file_path: str
    has_localization: bool


def is_path_excluded(relative_path: str | PurePosixPath, patterns: Iterable[str]) -> bool:
    """Check a root-relative path against glob exclude patterns.

    Patterns use recursive glob syntax, where ``**`` spans any number of
    directories (including none).

    Example:
        >>> is_path_excluded("node_modules/pkg/a.psm1", ["**/node_modules/**"])
        True
        >>> is_path_excluded("src/a.psm1", ["**/node_modules/**"])
        False
    """
    path = PurePosixPath(relative_path)
    return any(path.full_match(pattern) for pattern in patterns)


def _is_tree_excluded(relative_dir: PurePosixPath | Path, patterns: Iterable[str]) -> bool:
    # A directory is skipped whole only when a "<prefix>/**" pattern covers
    # every path beneath it; other patterns are checked per file.
    path = PurePosixPath(relative_dir.as_posix())
    return any(
        pattern.endswith("/**") and path.full_match(pattern.removesuffix("/**"))
        for pattern in patterns
    )


def _mentions_command(path: Path, pattern: re.Pattern[str], encoding: str) -> bool:
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read module file %s: %s", path, exc)
        return False
    return pattern.search(text) is not None


def scan_modules(
    root: str | Path,
    *,
    exclude: Iterable[str] = DEFAULT_SEARCH_EXCLUDES,
    command_name: str = IMPORT_COMMAND_NAME,
    extension: str = MODULE_FILE_EXTENSION,
    encoding: str = DEFAULT_ENCODING,
    localized_only: bool = True,
) -> tuple[ModuleInfo, ...]:
    """Find module files under root and detect localization calls.

    Args:
        root: Directory to walk
        exclude: Glob patterns (relative to root) of paths to skip
        command_name: Command to look for (case-insensitive)
        extension: Module file extension (default: ".psm1")
        encoding: Text encoding of module files
        localized_only: Return only modules that mention the command

    Returns:
        ModuleInfo per module, sorted by path. Unreadable files are logged
        and reported without localization.

    Raises:
        NotADirectoryError: If root is not a directory
    """
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        msg = f"Not a directory: '{root}'"
        raise NotADirectoryError(msg)

    patterns = tuple(exclude)
    logger.debug("Scanning %s for *%s (excluding %s)", root_path, extension, ", ".join(patterns))
    command_pattern = re.compile(re.escape(command_name), re.IGNORECASE)
    suffix = extension.casefold()

    modules: list[ModuleInfo] = []
    for directory, dirnames, filenames in root_path.walk():
        relative_dir = directory.relative_to(root_path)
        kept: list[str] = []
        for name in dirnames:
            if _is_tree_excluded(relative_dir / name, patterns):
                logger.debug("Excluded %s/", (relative_dir / name).as_posix())
            else:
                kept.append(name)
        dirnames[:] = kept
        for name in filenames:
            path = directory / name
            if path.suffix.casefold() != suffix or not path.is_file():
                continue
            relative = path.relative_to(root_path).as_posix()
            if is_path_excluded(relative, patterns):
                logger.debug("Excluded %s", relative)
                continue
            has_localization = _mentions_command(path, command_pattern, encoding)
            if has_localization:
                logger.info("Detected %s in: %s", command_name, path)
            modules.append(ModuleInfo(str(path), has_localization))

    modules.sort(key=lambda module: Path(module.file_path))
    logger.info("Found %d %s file(s)", len(modules), extension)
    if localized_only:
        return tuple(m for m in modules if m.has_localization)
    return tuple(modules)
