"""Path safety checks shared by the stamping pass and the patch engine.

Both passes only ever touch markup files inside the project root and
outside excluded directories. Identifiers carry root-relative paths with
``/`` separators on every platform.

"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath, PureWindowsPath

from puntada.config import EngineConfig
from puntada.errors import AccessDenied


def _check_markup(relative: PurePosixPath, config: EngineConfig, shown: str) -> None:
    excluded = set(config.excluded_dirs)
    if any(part in excluded for part in relative.parts[:-1]):
        raise AccessDenied(f"Path is in an excluded directory: {shown}", file_path=shown)
    if relative.suffix not in config.extensions:
        raise AccessDenied(f"Not a markup source file: {shown}", file_path=shown)


def _check_nul(raw: str) -> None:
    # Build tools prefix virtual module ids with NUL; no real file has one
    if "\0" in raw:
        shown = raw.replace("\0", "\\0")
        raise AccessDenied(f"Path contains a NUL byte: {shown}", file_path=shown)


def relative_to_root(file_path: str | Path, config: EngineConfig) -> str:
    """Return the root-relative ``/``-separated path of a file to stamp.

    Relative paths are taken against the project root. Symlinks are
    resolved before the containment check.

    Raises:
        AccessDenied: The path holds a NUL byte, or the file is outside the
            root, in an excluded directory, or not a markup file
    """
    _check_nul(str(file_path))
    root = config.root()
    path = Path(file_path)
    if not path.is_absolute():
        path = root / path
    resolved = path.resolve()
    if not resolved.is_relative_to(root):
        raise AccessDenied(f"Path is outside the project root: {file_path}", file_path=str(file_path))
    relative = PurePosixPath(*resolved.relative_to(root).parts)
    _check_markup(relative, config, relative.as_posix())
    return relative.as_posix()


def resolve_target(raw_path: str, config: EngineConfig) -> Path:
    """Resolve an identifier's path to an absolute file inside the root.

    Runs before any filesystem read. Rejects NUL bytes, absolute paths
    (POSIX or Windows style, plus drive-relative paths on Windows), any
    ``..`` segment, paths whose resolved location leaves the root, excluded
    directories and non-markup suffixes. On POSIX a colon is an ordinary
    file name character, so ``x:y.tsx`` is a relative path.

    Raises:
        AccessDenied: The path is rejected
    """
    _check_nul(raw_path)
    if (
        PurePosixPath(raw_path).is_absolute()
        or PureWindowsPath(raw_path).is_absolute()
        or (os.name == "nt" and PureWindowsPath(raw_path).drive)
    ):
        raise AccessDenied(f"Absolute paths are not allowed: {raw_path}", file_path=raw_path)
    segments = raw_path.replace("\\", "/").split("/")
    if ".." in segments:
        raise AccessDenied(f"Parent segments are not allowed: {raw_path}", file_path=raw_path)

    root = config.root()
    resolved = (root / raw_path).resolve()
    if not resolved.is_relative_to(root):
        raise AccessDenied(f"Path is outside the project root: {raw_path}", file_path=raw_path)
    _check_markup(PurePosixPath(*resolved.relative_to(root).parts), config, raw_path)
    return resolved


__all__ = ["relative_to_root", "resolve_target"]
