"""Format-preserving printer for Puntada trees.

Regenerates source text from a tree parsed out of ``source``. Bytes the tree
does not model (code between markup, whitespace inside tags, quotes, closing
tags) are copied from ``source`` verbatim, so printing an untouched tree
reproduces the input exactly. Only two kinds of change are emitted:

- a Text node whose ``content`` differs from the source it spans
- a synthetic Attribute, written at its zero-width location

Every emitted chunk remembers where it came from, which is what the source
map builder consumes.

Thread Safety:
    Printer instances are local to each call. ``to_source`` is pure.

"""

from __future__ import annotations

from typing import NamedTuple

from puntada.nodes import Attribute, Document, Node, Text
from puntada.utils.text import render_attribute
from puntada.visitor import iter_children


class Chunk(NamedTuple):
    """One piece of printed output.

    Attributes:
        text: Emitted text
        original: Offset in the original source this text maps to, or None
            for inserted text
        verbatim: ``text`` is an exact copy of the source at ``original``
    """

    text: str
    original: int | None
    verbatim: bool


class PrintResult(NamedTuple):
    code: str
    chunks: tuple[Chunk, ...]


class Printer:
    """Walks a tree in source order, copying the gaps between nodes.

    Usage:
            >>> from puntada.parser import Parser
            >>> source = "x = <p>Hi</p>"
            >>> Printer(source).print(Parser(source).parse()).code == source
            True

    """

    __slots__ = ("_source", "_cursor", "_chunks")

    def __init__(self, source: str) -> None:
        self._source = source
        self._cursor = 0
        self._chunks: list[Chunk] = []

    def print(self, doc: Document) -> PrintResult:
        self._cursor = 0
        self._chunks = []
        self._emit(doc)
        self._copy_to(len(self._source))
        return PrintResult(
            code="".join(chunk.text for chunk in self._chunks),
            chunks=tuple(self._chunks),
        )

    def _emit(self, node: Node) -> None:
        location = node.location
        match node:
            case Attribute(synthetic=True):
                self._copy_to(location.offset)
                self._append(" " + render_attribute(node.name, node.value or ""), None, False)
            case Text():
                self._copy_to(location.offset)
                original = self._source[location.offset : location.end_offset]
                if node.content == original:
                    self._append(original, location.offset, True)
                else:
                    self._append(node.content, location.offset, False)
                self._cursor = location.end_offset
            case _:
                self._copy_to(location.offset)
                for child in iter_children(node):
                    self._emit(child)
                self._copy_to(location.end_offset)

    def _copy_to(self, offset: int) -> None:
        """Copy source from the cursor up to ``offset`` unchanged."""
        if offset > self._cursor:
            self._append(self._source[self._cursor : offset], self._cursor, True)
            self._cursor = offset

    def _append(self, text: str, original: int | None, verbatim: bool) -> None:
        if text:
            self._chunks.append(Chunk(text, original, verbatim))


def to_source(doc: Document, source: str) -> str:
    """Print ``doc`` back to text, copying unmodelled bytes from ``source``.

    Args:
        doc: Tree parsed from ``source``, possibly transformed
        source: The exact text the tree was parsed from

    Returns:
        Regenerated source text
    """
    return Printer(source).print(doc).code


__all__ = ["Chunk", "PrintResult", "Printer", "to_source"]
