"""Culture names, Babel locales and the system locale.

Locale data directories use .NET culture names (``en-US``, ``zh-Hans-CN``);
Babel parses POSIX identifiers (``en_US``). Extraction itself only needs
the directory name; Babel is consulted to warn about cultures CLDR does
not know.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import TYPE_CHECKING

from .constants import DEFAULT_LOCALE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "is_known_locale",
    "normalize_locale",
    "to_culture_name",
]

logger = logging.getLogger(__name__)

_PSEUDO_LOCALES = frozenset({"", "C", "POSIX"})
_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


def normalize_locale(locale_code: str) -> str:
    """Culture name in Babel's underscore form.

    Example:
        >>> normalize_locale("zh-Hans-CN")
        'zh_Hans_CN'
    """
    return locale_code.replace("-", "_")


def to_culture_name(locale_code: str) -> str:
    """POSIX identifier in culture-name form; culture names pass through."""
    return locale_code.replace("_", "-")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parsed Babel Locale for a culture name, cached per name.

    Raises:
        babel.core.UnknownLocaleError: CLDR has no such locale
        ValueError: locale_code is not a locale identifier

    Example:
        >>> parsed = get_babel_locale("pt-BR")
        >>> parsed.language, parsed.territory
        ('pt', 'BR')
    """
    from babel import Locale  # noqa: PLC0415 - CLDR data loads on import

    return Locale.parse(normalize_locale(locale_code))


def is_known_locale(locale_code: str) -> bool:
    """Whether Babel can parse locale_code.

    An unknown culture is still looked up on disk by its exact name; this
    answer only decides whether UNKNOWN_LOCALE is reported.
    """
    from babel import UnknownLocaleError  # noqa: PLC0415

    if not locale_code:
        return False
    try:
        get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError, TypeError):
        logger.debug("Babel does not recognise locale %r", locale_code)
        return False
    return True


def _culture_from_posix(value: str | None) -> str | None:
    """``de_DE.UTF-8`` -> ``de-DE``; pseudo-locales give None."""
    if value is None:
        return None
    name = value.partition(".")[0]
    return None if name in _PSEUDO_LOCALES else to_culture_name(name)


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Culture name of the running process.

    Tried in order: locale.getlocale(), then the LC_ALL, LC_MESSAGES and
    LANG environment variables. C and POSIX count as undetermined.

    Args:
        raise_on_failure: Raise instead of returning DEFAULT_LOCALE when
            nothing usable is found

    Raises:
        RuntimeError: raise_on_failure is set and no locale was found
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        candidates = [locale_module.getlocale()[0]]
    except (ValueError, AttributeError):
        candidates = []
    candidates.extend(os.environ.get(var) for var in _LOCALE_ENV_VARS)

    for candidate in candidates:
        culture = _culture_from_posix(candidate)
        if culture:
            return culture

    if raise_on_failure:
        msg = "Could not determine system locale; set LC_ALL, LC_MESSAGES or LANG"
        raise RuntimeError(msg)
    logger.debug("System locale undetermined, using %s", DEFAULT_LOCALE)
    return DEFAULT_LOCALE
