"""Error-recovering parser producing a typed markup tree.

Scans JavaScript/TypeScript source and builds typed nodes for the JSX
markup it contains. Code between markup is skipped, not modelled; it stays
in the source text, which the printer copies unchanged.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `ScriptScanningMixin`: Code mode (strings, comments, templates, regex)
- `MarkupParsingMixin`: Markup mode (elements, attributes, children)

Thread Safety:
- Parser instances are single-use; create one per parse
- Configuration is read from ContextVar (thread-local)
- The resulting tree is immutable and safe to share

"""

from __future__ import annotations

from puntada.config import get_engine_config
from puntada.errors import ParseError
from puntada.location import LineIndex, SourceLocation
from puntada.nodes import Diagnostic, Document
from puntada.parsing import MarkupParsingMixin, ScriptScanningMixin


class Parser(
    ScriptScanningMixin,
    MarkupParsingMixin,
):
    """Best-effort parser for JSX/TSX source.

    Malformed markup does not stop the parse: problems are recorded as
    diagnostics on the Document and the parser resynchronizes. With
    ``strict`` set on the active EngineConfig, the first problem raises
    ParseError instead.

    Usage:
            >>> doc = Parser("const a = <p>Hello</p>;").parse()
            >>> doc.children[0].name
            'p'
            >>> doc.children[0].location.position
            (1, 11)

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation.

    """

    __slots__ = (
        "_source",
        "_length",
        "_pos",
        "_lines",
        "_source_file",
        "_open_tags",
        "_diagnostics",
        "_strict",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: JavaScript/TypeScript source text
            source_file: Optional source file path for locations and errors

        """
        self._source = source
        self._length = len(source)
        self._pos = 0
        self._lines = LineIndex(source)
        self._source_file = source_file
        self._open_tags: list[str] = []
        self._diagnostics: list[Diagnostic] = []
        self._strict = get_engine_config().strict

    def parse(self) -> Document:
        """Parse the whole source.

        Returns:
            Document whose children are the top-level markup nodes

        Raises:
            ParseError: In strict mode, on the first malformed construct
        """
        children = self._scan_script()
        return Document(
            location=SourceLocation(
                lineno=1,
                col_offset=1,
                offset=0,
                end_offset=self._length,
                source_file=self._source_file,
            ),
            children=tuple(children),
            diagnostics=tuple(self._diagnostics),
        )

    @property
    def line_index(self) -> LineIndex:
        """Line index of the source, shared with callers that need positions."""
        return self._lines

    def _error(self, message: str, offset: int) -> None:
        """Record a recovered problem, or raise in strict mode."""
        location = self._lines.location(offset, offset, self._source_file)
        if self._strict:
            raise ParseError(
                message,
                lineno=location.lineno,
                col_offset=location.col_offset,
                source_file=self._source_file,
            )
        self._diagnostics.append(Diagnostic(message=message, location=location))
