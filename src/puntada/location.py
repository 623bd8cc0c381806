"""Source location tracking and the shared position scheme.

Provides the SourceLocation dataclass attached to every node, and the one
function both the stamping pass and the patch engine use to turn an offset
into a ``(line, column)`` pair. Identifiers minted by one pass are matched by
the other, so this module is the single definition of the convention:

- lines are 1-based; ``\\n``, ``\\r\\n``, ``\\r``, U+2028 and U+2029 end a line
- columns are 1-based and count UTF-16 code units from the start of the line

``POSITION_SCHEME`` names this convention. Changing any rule above is a new
scheme and invalidates every identifier already stamped into a build.

Thread Safety:
SourceLocation is frozen and LineIndex is read-only after construction;
both are safe to share across threads.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from puntada.utils.text import utf16_len

POSITION_SCHEME = 1

_LINE_TERMINATORS = frozenset("\n\r\u2028\u2029")


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location of a node.

    All positions are 1-indexed (lineno and col_offset start at 1).
    Columns are UTF-16 code units, matching what browser tooling reports.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed, UTF-16 units)
        offset: Absolute start offset in the source string
        end_offset: Absolute end offset in the source string
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(lineno=3, col_offset=5, offset=40, end_offset=52)
            >>> str(loc)
            '3:5'
            >>> str(SourceLocation(1, 1, source_file="src/App.tsx"))
            'src/App.tsx:1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "App.tsx:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def position(self) -> tuple[int, int]:
        """The ``(lineno, col_offset)`` pair used for addressing."""
        return (self.lineno, self.col_offset)

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a new location spanning from this location to end."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_offset=end.end_offset or end.offset,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location.

        Use for nodes created synthetically when no position applies.
        """
        return cls(lineno=0, col_offset=0)


class LineIndex:
    """Offset to (line, column) lookup for one source string.

    Built once per parse; lookups are a binary search over line starts.

    """

    __slots__ = ("_source", "_starts")

    def __init__(self, source: str) -> None:
        self._source = source
        starts = [0]
        pos = 0
        length = len(source)
        while pos < length:
            char = source[pos]
            if char in _LINE_TERMINATORS:
                if char == "\r" and pos + 1 < length and source[pos + 1] == "\n":
                    pos += 1
                starts.append(pos + 1)
            pos += 1
        self._starts = starts

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_start(self, lineno: int) -> int:
        """Offset of the first character of a 1-based line."""
        return self._starts[lineno - 1]

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of an offset.

        Args:
            offset: Absolute offset, clamped to ``[0, len(source)]``

        Returns:
            Line and UTF-16 column, both starting at 1
        """
        offset = max(0, min(offset, len(self._source)))
        line = bisect_right(self._starts, offset)
        start = self._starts[line - 1]
        return line, utf16_len(self._source[start:offset]) + 1

    def location(
        self,
        offset: int,
        end_offset: int,
        source_file: str | None = None,
    ) -> SourceLocation:
        """Build a SourceLocation for the span ``[offset, end_offset)``."""
        line, column = self.position(offset)
        return SourceLocation(
            lineno=line,
            col_offset=column,
            offset=offset,
            end_offset=end_offset,
            source_file=source_file,
        )


def source_position(source: str, offset: int) -> tuple[int, int]:
    """Canonical ``(line, column)`` of an offset in source text.

    Convenience wrapper over LineIndex for one-off lookups. Prefer a shared
    LineIndex when resolving many offsets in the same source.

    Examples:
        >>> source_position("a\\n    <p>Hi</p>", 6)
        (2, 5)
        >>> source_position("🚩<b/>", 1)
        (1, 3)
    """
    return LineIndex(source).position(offset)


__all__ = [
    "POSITION_SCHEME",
    "LineIndex",
    "SourceLocation",
    "source_position",
]
