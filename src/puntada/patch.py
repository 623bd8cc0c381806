"""Patch engine: write an edited text value back into its source file.

Given an identifier minted by the stamping pass and a new value, the engine
re-reads the file from disk, parses it afresh, finds the element whose
opening ``<`` sits at the identifier's position, and replaces the content of
its first text child. The file is printed back from the original text, so
every byte outside that one text run is preserved.

Steps, each with its own failure class:

1. decode the identifier                        InvalidIdentifier
2. resolve the path inside the project root     AccessDenied
3. read the file                                NotFound
4. parse and locate the element                 TargetNotFound
5. pick its first text child                    NotMutable
6. print and atomically replace the file        InternalFailure

A failure at any step leaves the file untouched.

Thread Safety:
    Edits to the same file are serialized by a process-wide lock per
    resolved path. Edits to different files run in parallel.

"""

from __future__ import annotations

import dataclasses
import os
import shutil
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from puntada.config import EngineConfig, engine_config_context, resolve_config
from puntada.errors import InternalFailure, NotFound, NotMutable, PuntadaError, TargetNotFound
from puntada.identifier import EditId, decode
from puntada.nodes import Document, Element, Node, Text
from puntada.parser import Parser
from puntada.paths import resolve_target
from puntada.printer import to_source
from puntada.utils.logger import get_logger, trace
from puntada.utils.text import escape_jsx_text, is_layout_only, split_layout
from puntada.visitor import BaseVisitor, transform

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PatchResult:
    """A successful edit.

    Attributes:
        file_path: The identifier's root-relative path
        new_content: Full file content as written

    """

    file_path: str
    new_content: str


class _PathLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class FileLockRegistry:
    """Hands out one lock per absolute file path.

    A path's lock exists only while some thread holds it or waits for it,
    so the registry stays as small as the number of files being edited at
    that moment.

    """

    __slots__ = ("_guard", "_locks")

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, _PathLock] = {}

    @contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        """Hold the lock for ``path`` for the duration of the block."""
        with self._guard:
            entry = self._locks.get(path)
            if entry is None:
                entry = self._locks[path] = _PathLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[path]

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, path: object) -> bool:
        return path in self._locks


_file_locks = FileLockRegistry()


def get_file_locks() -> FileLockRegistry:
    """The process-wide registry used by ``apply_patch``."""
    return _file_locks


class ElementLocator(BaseVisitor[None]):
    """Finds the element whose opening ``<`` is at a given position.

    Stops at the first match in source order.
    """

    def __init__(self, line: int, column: int) -> None:
        self.position = (line, column)
        self.found: Element | None = None

    def visit_element(self, node: Element) -> None:
        if node.location.position == self.position:
            self.found = node
            self.stop()


def locate_element(doc: Document, line: int, column: int) -> Element | None:
    """Return the element starting at ``(line, column)``, if any."""
    locator = ElementLocator(line, column)
    locator.visit(doc)
    return locator.found


def first_text_child(element: Element) -> Text | None:
    """First direct text child with rendered content.

    Runs of layout whitespace (whitespace containing a line break) are
    skipped, since JSX drops them.
    """
    for child in element.children:
        if isinstance(child, Text) and not is_layout_only(child.content):
            return child
    return None


def replace_text(text: Text, new_value: str) -> Text:
    """Return ``text`` with its content replaced by ``new_value``.

    Layout whitespace at either end of the run is kept; characters that
    would be read as markup or code are escaped.
    """
    lead, _, trail = split_layout(text.content)
    return dataclasses.replace(text, content=lead + escape_jsx_text(new_value) + trail)


def apply_patch(
    identifier: str,
    new_value: str,
    project_root: str | Path | None = None,
    *,
    config: EngineConfig | None = None,
) -> PatchResult:
    """Replace the text of the element named by ``identifier``.

    Args:
        identifier: ``relativePath:line:column`` as stamped into the markup
        new_value: New text, used verbatim apart from escaping; may be empty
        project_root: Overrides the configured project root
        config: Overrides the active EngineConfig

    Returns:
        PatchResult with the file's new content

    Raises:
        InvalidIdentifier: The identifier is malformed
        AccessDenied: The path is absolute, escapes the root, is excluded,
            or is not a markup file
        NotFound: The file cannot be read
        TargetNotFound: No element starts at the position
        NotMutable: The element has no text child
        InternalFailure: Parsing, printing or writing failed
    """
    active = resolve_config(config, project_root)
    with engine_config_context(active):
        edit_id = decode(identifier)
        target = resolve_target(edit_id.path, active)
        trace("patch.start", path=edit_id.path, line=edit_id.line, column=edit_id.column)

        with _file_locks.hold(target):
            original = _read(target, edit_id.path, active.encoding)
            try:
                new_content = _patch_source(original, edit_id, identifier, new_value)
            except RecursionError as e:
                logger.warning("Cannot patch %s: markup is nested too deeply", identifier)
                raise InternalFailure(
                    f"Markup in {edit_id.path} is nested too deeply to patch",
                    file_path=edit_id.path,
                ) from e
            if new_content != original:
                _write_atomic(target, new_content, active.encoding, edit_id.path)

    logger.info("Patched %s", identifier)
    trace("patch.done", path=edit_id.path, length=len(new_content))
    return PatchResult(file_path=edit_id.path, new_content=new_content)


def _patch_source(original: str, edit_id: EditId, identifier: str, new_value: str) -> str:
    """Parse, locate, replace and print; return the new file content."""
    try:
        doc = Parser(original, source_file=edit_id.path).parse()
    except PuntadaError as e:
        raise InternalFailure(f"Could not parse {edit_id.path}: {e}", file_path=edit_id.path) from e

    element = locate_element(doc, edit_id.line, edit_id.column)
    if element is None:
        logger.warning("No element at %s", identifier)
        raise TargetNotFound(edit_id.path, edit_id.line, edit_id.column)
    trace("patch.located", path=edit_id.path, element=element.name)

    text = first_text_child(element)
    if text is None:
        logger.warning("Element <%s> at %s has no text to edit", element.name, identifier)
        raise NotMutable(
            f"Element <{element.name}> at {identifier} has no text child",
            file_path=edit_id.path,
        )

    replacement = replace_text(text, new_value)
    new_doc = transform(doc, lambda node: _swap(node, text, replacement))
    return to_source(new_doc, original)


def _swap(node: Node, old: Text, new: Text) -> Node:
    return new if node is old else node


def _read(target: Path, shown: str, encoding: str) -> str:
    """Read a file without newline translation."""
    try:
        with open(target, encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", shown, e)
        raise NotFound(f"Cannot read {shown}: {e}", file_path=shown) from e


def _write_atomic(target: Path, content: str, encoding: str, shown: str) -> None:
    """Replace ``target`` through a temporary file in the same directory."""
    tmp_path: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = f.name
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        shutil.copymode(target, tmp_path)
        os.replace(tmp_path, target)
    except (OSError, UnicodeEncodeError) as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        logger.warning("Cannot write %s: %s", shown, e)
        raise InternalFailure(f"Cannot write {shown}: {e}", file_path=shown) from e


__all__ = [
    "ElementLocator",
    "FileLockRegistry",
    "PatchResult",
    "apply_patch",
    "first_text_child",
    "get_file_locks",
    "locate_element",
    "replace_text",
]
