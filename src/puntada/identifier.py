"""Location identifier codec.

An identifier names one element by where its opening ``<`` sits in the
unstamped source: ``relativePath:line:column``. The stamping pass writes it
into the markup; the patch engine reads it back. Paths may themselves
contain colons, so decoding takes the last two fields as the position and
joins the rest back into the path.

Example:
    >>> encode("src/App.tsx", 3, 5)
    'src/App.tsx:3:5'
    >>> decode("src/a:b.tsx:3:5")
    EditId(path='src/a:b.tsx', line=3, column=5)
"""

from __future__ import annotations

from typing import NamedTuple

from puntada.errors import InvalidIdentifier

_SEPARATOR = ":"
_ASCII_DIGITS = frozenset("0123456789")


class EditId(NamedTuple):
    """A decoded location identifier. Line and column are 1-based."""

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return encode(self.path, self.line, self.column)


def encode(path: str, line: int, column: int) -> str:
    """Encode a position as ``path:line:column``."""
    return f"{path}{_SEPARATOR}{line}{_SEPARATOR}{column}"


def _parse_coordinate(identifier: str, field: str, name: str) -> int:
    # int() alone would accept "+3", " 3", "3_0" and non-ASCII digits
    if not field or not all(char in _ASCII_DIGITS for char in field):
        raise InvalidIdentifier(identifier, f"{name} is not a number")
    value = int(field)
    if value < 1:
        raise InvalidIdentifier(identifier, f"{name} must be at least 1")
    return value


def decode(identifier: str) -> EditId:
    """Decode ``path:line:column``.

    Raises:
        InvalidIdentifier: Fewer than three fields, a non-numeric or
            zero coordinate, or an empty path
    """
    if not isinstance(identifier, str):
        raise InvalidIdentifier(identifier, "not a string")
    parts = identifier.split(_SEPARATOR)
    if len(parts) < 3:
        raise InvalidIdentifier(identifier, "expected path:line:column")
    column = _parse_coordinate(identifier, parts.pop(), "column")
    line = _parse_coordinate(identifier, parts.pop(), "line")
    path = _SEPARATOR.join(parts)
    if not path:
        raise InvalidIdentifier(identifier, "empty path")
    return EditId(path, line, column)


__all__ = ["EditId", "decode", "encode"]
