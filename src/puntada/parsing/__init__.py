"""Parsing subsystem for the Puntada parser.

Provides mixin classes for modular parsing functionality:
- `ScriptScanningMixin`: Skips JavaScript/TypeScript code, finds markup
- `MarkupParsingMixin`: JSX elements, fragments, attributes, text

Architecture:
The parser uses a mixin-based design for separation of concerns. Script
scanning and markup parsing call into each other: expression containers
switch back to script scanning, and ``<`` in expression position switches
to markup parsing.

Example:
    >>> from puntada.parsing import MarkupParsingMixin, ScriptScanningMixin
    >>> class Parser(ScriptScanningMixin, MarkupParsingMixin):
    ...     pass

"""

from puntada.parsing.markup import MarkupParsingMixin
from puntada.parsing.script import ScriptScanningMixin

__all__ = [
    "MarkupParsingMixin",
    "ScriptScanningMixin",
]
