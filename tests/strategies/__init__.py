"""Hypothesis strategies for pslocdata property-based testing.

Usage:
    from tests.strategies import variable_names, message_tables
    from tests.strategies.powershell import hashtable_source
"""

from .powershell import (
    culture_names,
    data_file_names,
    hashtable_source,
    message_keys,
    message_tables,
    message_values,
    plain_text,
    quoted_literals,
    string_data_source,
    variable_names,
)

__all__ = [
    "culture_names",
    "data_file_names",
    "hashtable_source",
    "message_keys",
    "message_tables",
    "message_values",
    "plain_text",
    "quoted_literals",
    "string_data_source",
    "variable_names",
]
