"""Hypothesis strategies for PowerShell source and locale-data generation.

Provides strategies for variable names, quoted literals, culture names and
message tables, plus renderers that turn a table into .psd1 text.

Usage:
    from hypothesis import given
    from tests.strategies.powershell import message_tables, hashtable_source

    @given(table=message_tables())
    def test_table_reads_back(table):
        ...
"""

from __future__ import annotations

import string
from typing import TYPE_CHECKING

from hypothesis import event
from hypothesis import strategies as st
from hypothesis.strategies import composite

if TYPE_CHECKING:
    from hypothesis.strategies import SearchStrategy

# ============================================================================
# NAMES
# ============================================================================

variable_names: SearchStrategy[str] = st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,15}", fullmatch=True)

message_keys: SearchStrategy[str] = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,12}", fullmatch=True)

# File names that survive bareword, single- and double-quoted rendering.
data_file_names: SearchStrategy[str] = st.from_regex(
    r"[A-Za-z][A-Za-z0-9_]{0,10}\.psd1", fullmatch=True
)

_SAMPLE_CULTURE_NAMES = [
    "en-US", "en-GB", "fr-FR", "fr-CA", "de-DE", "de-CH", "es-ES", "es-MX",
    "it-IT", "ja-JP", "ko-KR", "zh-CN", "pt-BR", "nl-NL", "sv-SE", "lv-LV",
]

culture_names: SearchStrategy[str] = st.sampled_from(_SAMPLE_CULTURE_NAMES)


# ============================================================================
# LITERALS
# ============================================================================

# No quotes, backticks, '$', '#' or line breaks: safe inside any quoting style.
_PLAIN_ALPHABET = string.ascii_letters + string.digits + " .,_-!?"

plain_text: SearchStrategy[str] = st.text(alphabet=_PLAIN_ALPHABET, min_size=1, max_size=24)


@composite
def quoted_literals(draw: st.DrawFn) -> tuple[str, str]:
    """Generate (source_text, value) for a single- or double-quoted string."""
    value = draw(plain_text)
    style = draw(st.sampled_from(["single", "double"]))
    event(f"quote_style={style}")
    if style == "single":
        return f"'{value}'", value
    return f'"{value}"', value


# ============================================================================
# MESSAGE TABLES
# ============================================================================

message_values: SearchStrategy[str] = plain_text.map(str.strip).filter(bool)


@composite
def message_tables(draw: st.DrawFn, *, min_size: int = 1, max_size: int = 6) -> dict[str, str]:
    """Generate a message table with keys unique under case folding."""
    keys = draw(
        st.lists(
            message_keys,
            min_size=min_size,
            max_size=max_size,
            unique_by=str.casefold,
        )
    )
    table = {key: draw(message_values) for key in keys}
    event(f"table_size={len(table)}")
    return table


def hashtable_source(table: dict[str, str]) -> str:
    """Render a table as a .psd1 hashtable literal, one entry per line."""
    lines = ["@{"]
    lines.extend(f"    {key} = '{value}'" for key, value in table.items())
    lines.append("}")
    return "\n".join(lines) + "\n"


def string_data_source(table: dict[str, str]) -> str:
    """Render a table as ConvertFrom-StringData over a here-string."""
    lines = ["ConvertFrom-StringData @'"]
    lines.extend(f"{key} = {value}" for key, value in table.items())
    lines.append("'@")
    return "\n".join(lines) + "\n"
