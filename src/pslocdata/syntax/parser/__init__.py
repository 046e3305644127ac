"""PowerShell parser module.

This module provides the PowerShellParser class and related parsing
utilities organized into focused submodules.

Module Organization:
- core.py: PowerShellParser class and parse() entry point
- primitives.py: Tokens (variables, strings, here-strings, numbers, barewords)
- whitespace.py: Whitespace, comment, continuation and separator handling
- rules.py: All grammar rules (statements, commands, expressions)

Public API:
    PowerShellParser: Main parser class
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from pslocdata.syntax.parser.core import PowerShellParser
from pslocdata.syntax.parser.rules import ParseContext

__all__ = ["ParseContext", "PowerShellParser"]
