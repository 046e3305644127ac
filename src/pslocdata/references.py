"""Locate binding usages in module text and pair them with extracted values.

After extraction, ``$Strings.Greeting`` in a module can be shown next to
its localized text. Two usage shapes are recognised:

    $Binding.Key   -> value of Key in the binding's table
    $Binding       -> every "key: value" pair of the table, comma-joined

Variable and key names compare case-insensitively, as PowerShell variable
names and hashtable keys do. Usages whose binding or key has no value are
not reported.

Python 3.13+.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

__all__ = ["LocalizedReference", "find_localized_references", "summarize_table"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalizedReference:
    """One usage of a binding variable.

    Attributes:
        line: 1-based line number
        column: 1-based column of the '$'
        end_column: 1-based column just past the usage
        binding: Binding name as written in the module's extraction result
        key: Key name as written in the table, None for a bare binding usage
        text: Usage text as written in the source
        value: Localized value (or table summary for a bare usage)
    """

    line: int
    column: int
    end_column: int
    binding: str
    key: str | None
    text: str
    value: str


def summarize_table(table: Mapping[str, str]) -> str:
    """Render a table as ``key: value`` pairs joined by ", "."""
    return ", ".join(f"{key}: {value}" for key, value in table.items())


def _usage_pattern(bindings: Mapping[str, Mapping[str, str]]) -> re.Pattern[str]:
    names = sorted(bindings, key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in names)
    return re.compile(
        rf"\$({alternatives})(?![\w:])(?:\.([A-Za-z_][A-Za-z0-9_]*))?",
        re.IGNORECASE,
    )


def _lookup[V](mapping: Mapping[str, V], name: str) -> tuple[str, V] | None:
    if name in mapping:
        return name, mapping[name]
    folded = name.casefold()
    for candidate, value in mapping.items():
        if candidate.casefold() == folded:
            return candidate, value
    return None


def find_localized_references(
    source: str,
    bindings: Mapping[str, Mapping[str, str]],
) -> tuple[LocalizedReference, ...]:
    """Find ``$Binding`` and ``$Binding.Key`` usages in source.

    Args:
        source: Module text
        bindings: Extraction result ({binding: {key: value}})

    Returns:
        References in source order

    Example:
        >>> refs = find_localized_references(
        ...     "Write-Host $Strings.Hello",
        ...     {"Strings": {"Hello": "Bonjour"}},
        ... )
        >>> refs[0].value
        'Bonjour'
    """
    if not bindings:
        return ()

    pattern = _usage_pattern(bindings)
    references: list[LocalizedReference] = []
    for line_number, line in enumerate(source.splitlines(), start=1):
        for match in pattern.finditer(line):
            found = _lookup(bindings, match.group(1))
            if found is None:
                continue
            binding, table = found
            key_name = match.group(2)
            if key_name is None:
                if not table:
                    continue
                key, value = None, summarize_table(table)
            else:
                entry = _lookup(table, key_name)
                if entry is None:
                    logger.debug(
                        "No key %r in binding %r (line %d)", key_name, binding, line_number
                    )
                    continue
                key, value = entry
            references.append(
                LocalizedReference(
                    line=line_number,
                    column=match.start() + 1,
                    end_column=match.end() + 1,
                    binding=binding,
                    key=key,
                    text=match.group(0),
                    value=value,
                )
            )

    logger.debug("Found %d localized reference(s)", len(references))
    return tuple(references)
