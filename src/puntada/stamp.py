"""Stamping pass: tag every JSX element with its source position.

Runs inside a build pipeline on each markup file it reads. Every element's
opening tag gets an attribute (``data-edit-id`` by default) whose value is
the identifier of the element's own ``<`` in the unstamped file:

    <p>Hello</p>   ->   <p data-edit-id="src/App.tsx:3:5">Hello</p>

Only the inserted attributes differ from the input, and a Source Map v3
relates the output back to the original.

The pass never fails the build. Files it should not touch, and files it
cannot process, come back unchanged with status SKIPPED and a reason.

Thread Safety:
    ``stamp`` is safe to call from many threads at once, given a thread-safe
    cache (or none).

"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from puntada.cache import hash_config, hash_content
from puntada.config import EngineConfig, engine_config_context, resolve_config
from puntada.errors import AccessDenied, PuntadaError
from puntada.identifier import encode
from puntada.nodes import Attribute, Element, Node
from puntada.parser import Parser
from puntada.paths import relative_to_root
from puntada.printer import Printer
from puntada.sourcemap import build_source_map
from puntada.utils.logger import get_logger, trace
from puntada.visitor import transform

if TYPE_CHECKING:
    from puntada.cache import StampCache
    from puntada.location import LineIndex

logger = get_logger(__name__)


class StampStatus(Enum):
    """Outcome of stamping one file."""

    TRANSFORMED = "transformed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class StampResult:
    """Result handed back to the build pipeline.

    Attributes:
        code: Output text; the input itself unless TRANSFORMED
        map: Source Map v3 dict when TRANSFORMED, else None
        status: What happened
        stamped: Number of attributes inserted
        reason: Why the file was SKIPPED
        diagnostics: Number of syntax problems the parser recovered from

    """

    code: str
    map: dict[str, Any] | None
    status: StampStatus
    stamped: int = 0
    reason: str | None = None
    diagnostics: int = 0

    @property
    def changed(self) -> bool:
        return self.status is StampStatus.TRANSFORMED


class _Stamper:
    """Transform callback adding the identifier attribute to each element."""

    __slots__ = ("_lines", "_path", "_attribute_name", "count")

    def __init__(self, lines: LineIndex, path: str, attribute_name: str) -> None:
        self._lines = lines
        self._path = path
        self._attribute_name = attribute_name
        self.count = 0

    def __call__(self, node: Node) -> Node:
        if not isinstance(node, Element):
            return node
        # An unterminated opening tag has no safe insertion point
        if not node.complete or node.has_attribute(self._attribute_name):
            return node
        line, column = node.location.position
        attribute = Attribute(
            location=self._lines.location(node.attrs_end, node.attrs_end, self._path),
            name=self._attribute_name,
            value=encode(self._path, line, column),
            synthetic=True,
        )
        self.count += 1
        return dataclasses.replace(node, attributes=(*node.attributes, attribute))


def stamp(
    file_path: str | Path,
    content: str,
    *,
    project_root: str | Path | None = None,
    config: EngineConfig | None = None,
    cache: StampCache | None = None,
) -> StampResult:
    """Stamp every element in one file with its location identifier.

    Args:
        file_path: Path of the file, absolute or relative to the project root
        content: File content as read by the build pipeline
        project_root: Overrides the configured project root
        config: Overrides the active EngineConfig
        cache: Optional content-addressed stamp cache

    Returns:
        StampResult; never raises for bad input

    Example:
        >>> result = stamp("/srv/app/a.tsx", "x = <p>Hi</p>", project_root="/srv/app")
        >>> result.code
        'x = <p data-edit-id="a.tsx:1:5">Hi</p>'
    """
    active = resolve_config(config, project_root)
    with engine_config_context(active):
        return _stamp(file_path, content, active, cache)


def _skipped(content: str, reason: str) -> StampResult:
    return StampResult(code=content, map=None, status=StampStatus.SKIPPED, reason=reason)


def _stamp(
    file_path: str | Path,
    content: str,
    config: EngineConfig,
    cache: StampCache | None,
) -> StampResult:
    try:
        relative = relative_to_root(file_path, config)
    except AccessDenied as e:
        trace("stamp.skipped", path=str(file_path), reason=e.message)
        return _skipped(content, e.message)

    if cache is not None:
        content_hash = hash_content(content)
        config_hash = hash_config(config)
        cached = cache.get(content_hash, relative, config_hash)
        if cached is not None:
            trace("stamp.cache_hit", path=relative)
            return cached

    result = _stamp_source(relative, content, config)

    if cache is not None:
        cache.put(content_hash, relative, config_hash, result)
    return result


def _stamp_source(relative: str, content: str, config: EngineConfig) -> StampResult:
    trace("stamp.start", path=relative, length=len(content))
    try:
        parser = Parser(content, source_file=relative)
        doc = parser.parse()
        stamper = _Stamper(parser.line_index, relative, config.attribute_name)
        stamped_doc = transform(doc, stamper)
        if stamper.count == 0:
            trace("stamp.unchanged", path=relative)
            return StampResult(
                code=content,
                map=None,
                status=StampStatus.UNCHANGED,
                diagnostics=len(doc.diagnostics),
            )
        printed = Printer(content).print(stamped_doc)
        source_map = build_source_map(printed.chunks, content, file=relative, source_name=relative)
    except PuntadaError as e:
        logger.warning("Skipping %s: %s", relative, e)
        return _skipped(content, str(e))
    except RecursionError:
        logger.warning("Skipping %s: markup is nested too deeply", relative)
        return _skipped(content, "Markup is nested too deeply")

    if doc.diagnostics:
        logger.debug("%s: recovered from %d syntax problem(s)", relative, len(doc.diagnostics))
    trace("stamp.done", path=relative, stamped=stamper.count, diagnostics=len(doc.diagnostics))
    return StampResult(
        code=printed.code,
        map=source_map,
        status=StampStatus.TRANSFORMED,
        stamped=stamper.count,
        diagnostics=len(doc.diagnostics),
    )


__all__ = ["StampResult", "StampStatus", "stamp"]
