"""Source Map v3 generation.

Builds the ``mappings`` string (Base64 VLQ segments) that relates positions
in stamped output back to the original file, so stack traces and devtools
keep pointing at the code the developer wrote.

Columns are UTF-16 code units, as in browser devtools. Lines and columns in
the map are 0-based, unlike SourceLocation.

Example:
    >>> encode_vlq(0), encode_vlq(1), encode_vlq(-1), encode_vlq(16)
    ('A', 'C', 'D', 'gB')
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from puntada.location import LineIndex
from puntada.printer import Chunk

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_VLQ_SHIFT = 5
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_CONTINUATION - 1

_LINE_TERMINATORS = frozenset("\n\r\u2028\u2029")


def encode_vlq(value: int) -> str:
    """Encode one signed integer as Base64 VLQ."""
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        out.append(_BASE64[digit])
        if not vlq:
            return "".join(out)


class SourceMapBuilder:
    """Accumulates mappings for a single-source map.

    Mappings must be added in generated order (line, then column).

    """

    __slots__ = ("_file", "_source_name", "_source_content", "_lines")

    def __init__(self, file: str, source_name: str, source_content: str) -> None:
        self._file = file
        self._source_name = source_name
        self._source_content = source_content
        # One list of (generated column, original line, original column) per line
        self._lines: list[list[tuple[int, int, int]]] = [[]]

    def add_mapping(
        self,
        generated_line: int,
        generated_column: int,
        original_line: int,
        original_column: int,
    ) -> None:
        """Map a 0-based generated position to a 0-based original position."""
        while len(self._lines) <= generated_line:
            self._lines.append([])
        segments = self._lines[generated_line]
        if segments and segments[-1][0] == generated_column:
            return
        segments.append((generated_column, original_line, original_column))

    def mappings(self) -> str:
        prev_line = 0
        prev_column = 0
        encoded_lines = []
        for segments in self._lines:
            prev_generated = 0
            encoded = []
            for generated_column, line, column in segments:
                encoded.append(
                    encode_vlq(generated_column - prev_generated)
                    + encode_vlq(0)
                    + encode_vlq(line - prev_line)
                    + encode_vlq(column - prev_column)
                )
                prev_generated = generated_column
                prev_line = line
                prev_column = column
            encoded_lines.append(",".join(encoded))
        return ";".join(encoded_lines)

    def build(self) -> dict[str, Any]:
        return {
            "version": 3,
            "file": self._file,
            "sources": [self._source_name],
            "sourcesContent": [self._source_content],
            "names": [],
            "mappings": self.mappings(),
        }


def build_source_map(
    chunks: Iterable[Chunk],
    source: str,
    *,
    file: str,
    source_name: str | None = None,
) -> dict[str, Any]:
    """Build a Source Map v3 dict from printer chunks.

    Every mapped chunk gets a segment at its start. Verbatim chunks also get
    a segment at the start of every generated line they contain, so lines
    copied from the original map one to one.

    Args:
        chunks: Output of ``Printer.print``
        source: The original source the chunks refer to
        file: Name of the generated file
        source_name: Name of the original file (defaults to ``file``)
    """
    lines = LineIndex(source)
    builder = SourceMapBuilder(file, source_name or file, source)
    gen_line = 0
    gen_column = 0

    for text, original, verbatim in chunks:
        if original is not None:
            line, column = lines.position(original)
            builder.add_mapping(gen_line, gen_column, line - 1, column - 1)

        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            index += 1
            if char in _LINE_TERMINATORS:
                if char == "\r" and index < length and text[index] == "\n":
                    index += 1
                gen_line += 1
                gen_column = 0
                if verbatim and original is not None and index < length:
                    line, column = lines.position(original + index)
                    builder.add_mapping(gen_line, 0, line - 1, column - 1)
            else:
                gen_column += 2 if ord(char) > 0xFFFF else 1

    return builder.build()


__all__ = ["SourceMapBuilder", "build_source_map", "encode_vlq"]
