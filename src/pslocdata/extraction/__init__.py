"""Static extraction of Import-LocalizedData calls.

Pipeline: classify call elements, resolve arguments (assignment lookup and
splat expansion), locate and load the locale-data file per binding.

Python 3.13+.
"""

from .arguments import (
    ArgumentRecord,
    canonical_parameter_name,
    collect_assignments,
    find_last_assignment,
    resolve_arguments,
    strip_quotes,
)
from .call_sites import CallSite, find_call_sites
from .elements import (
    BareExpression,
    Element,
    LiteralValue,
    ParameterMarker,
    VariableReference,
    classify_element,
)
from .extractor import LocalizationExtractor, extract
from .results import CallSiteResult, ExtractionResult

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Entry points
    "LocalizationExtractor",
    "extract",
    # Results
    "CallSiteResult",
    "ExtractionResult",
    # Call sites and elements
    "CallSite",
    "find_call_sites",
    "Element",
    "ParameterMarker",
    "LiteralValue",
    "VariableReference",
    "BareExpression",
    "classify_element",
    # Argument resolution
    "ArgumentRecord",
    "resolve_arguments",
    "find_last_assignment",
    "collect_assignments",
    "canonical_parameter_name",
    "strip_quotes",
]
