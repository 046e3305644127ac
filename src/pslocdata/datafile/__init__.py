"""Locale-data files: path-safe loading and message-table reading."""

from .loading import LocaleDataLoader, PathLocaleDataLoader
from .tables import load_message_table, parse_string_data

__all__ = [
    "LocaleDataLoader",
    "PathLocaleDataLoader",
    "load_message_table",
    "parse_string_data",
]
