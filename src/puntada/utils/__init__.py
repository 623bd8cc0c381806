"""Utility modules for Puntada.

Provides:
- text: JSX text layout splitting and escaping
- hashing: hash_str, hash_parts for cache keys
- logger: get_logger for logging, trace for opt-in tracing
"""

from puntada.utils.hashing import hash_parts, hash_str
from puntada.utils.logger import get_logger, trace
from puntada.utils.text import (
    escape_jsx_text,
    is_layout_only,
    render_attribute,
    split_layout,
    utf16_len,
)

__all__ = [
    "escape_jsx_text",
    "get_logger",
    "hash_parts",
    "hash_str",
    "is_layout_only",
    "render_attribute",
    "split_layout",
    "trace",
    "utf16_len",
]
