"""Text helpers for JSX source.

JSX text follows its own whitespace rules: a run of whitespace that contains
a line break is layout and never reaches the rendered output. The helpers
here split a raw text run into layout and content, and escape user text so it
can be written back as JSX text or as an attribute value.

Example:
    >>> from puntada.utils.text import split_layout, escape_jsx_text
    >>> split_layout("\\n    Hello\\n  ")
    ('\\n    ', 'Hello', '\\n  ')
    >>> escape_jsx_text("a < b")
    'a &lt; b'
"""

from __future__ import annotations

import json
import re

# Characters with syntactic meaning inside JSX children
_JSX_TEXT_ESCAPES: dict[str, str] = {
    "{": "{'{'}",
    "}": "{'}'}",
    "<": "&lt;",
    ">": "&gt;",
}

# An & that would be read as the start of an entity
_CHARACTER_REFERENCE = re.compile(r"&(?=#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")

# JSX trims only spaces, tabs and line breaks; other whitespace is content
_JSX_WHITESPACE = " \t\n\r"
_LINE_BREAKS = "\n\r"


def utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units.

    Characters outside the Basic Multilingual Plane take two units.

    Examples:
        >>> utf16_len("abc")
        3
        >>> utf16_len("🚩")
        2
    """
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


def _leading_layout(raw: str) -> int:
    """Length of the leading whitespace if it contains a line break, else 0."""
    end = len(raw) - len(raw.lstrip(_JSX_WHITESPACE))
    head = raw[:end]
    if any(char in _LINE_BREAKS for char in head):
        return end
    return 0


def _trailing_layout(raw: str) -> int:
    """Length of the trailing whitespace if it contains a line break, else 0."""
    start = len(raw.rstrip(_JSX_WHITESPACE))
    tail = raw[start:]
    if any(char in _LINE_BREAKS for char in tail):
        return len(tail)
    return 0


def is_layout_only(raw: str) -> bool:
    """True if a raw JSX text run renders nothing.

    That is the case for the empty string and for whitespace-only runs that
    contain a line break.

    Examples:
        >>> is_layout_only("\\n   ")
        True
        >>> is_layout_only(" ")
        False
    """
    if not raw:
        return True
    if raw.strip(_JSX_WHITESPACE):
        return False
    return any(char in _LINE_BREAKS for char in raw)


def split_layout(raw: str) -> tuple[str, str, str]:
    """Split a raw text run into (leading layout, content, trailing layout).

    Layout is whitespace that contains a line break. Whitespace without a
    line break is part of the content, since JSX renders it.

    Returns:
        Three strings that concatenate back to ``raw``.
    """
    if is_layout_only(raw):
        return raw, "", ""
    lead = _leading_layout(raw)
    trail = _trailing_layout(raw)
    return raw[:lead], raw[lead : len(raw) - trail], raw[len(raw) - trail :]


def escape_jsx_text(value: str) -> str:
    """Escape a value for literal use as JSX text.

    Only characters that would otherwise be parsed as markup or code are
    rewritten; everything else is written verbatim. An ``&`` is escaped only
    where it starts a character reference, so ``a & b`` stays as typed
    while ``&lt;`` renders as ``&lt;`` rather than ``<``.

    Examples:
        >>> escape_jsx_text("Tom & Jerry")
        'Tom & Jerry'
        >>> escape_jsx_text("&lt;")
        '&amp;lt;'
    """
    if "&" in value:
        value = _CHARACTER_REFERENCE.sub("&amp;", value)
    if not any(char in _JSX_TEXT_ESCAPES for char in value):
        return value
    return "".join(_JSX_TEXT_ESCAPES.get(char, char) for char in value)


def render_attribute(name: str, value: str) -> str:
    """Render ``name="value"`` for a JSX opening tag.

    JSX string attributes have no escape sequences, so a value containing a
    double quote falls back to single quotes, and a value containing both
    becomes an expression container holding a JSON string literal.

    Examples:
        >>> render_attribute("data-edit-id", "a.tsx:1:1")
        'data-edit-id="a.tsx:1:1"'
        >>> render_attribute("title", 'say "hi"')
        'title=\\'say "hi"\\''
    """
    if '"' not in value:
        return f'{name}="{value}"'
    if "'" not in value:
        return f"{name}='{value}'"
    return f"{name}={{{json.dumps(value)}}}"
