"""Content-addressed stamp cache for Puntada.

Provides (content_hash, path, config_hash) -> StampResult caching so a dev
server re-reading an unchanged file does not re-parse it. The path is part
of the key because the identifiers written into the output embed it.

Thread Safety:
    DictStampCache is not thread-safe. For parallel builds, use a cache
    implementation with internal locking (e.g. threading.Lock around get/put).

Example:
    >>> from puntada import stamp, DictStampCache
    >>> cache = DictStampCache()
    >>> first = stamp("/srv/app/src/App.tsx", source, cache=cache)
    >>> again = stamp("/srv/app/src/App.tsx", source, cache=cache)  # cache hit
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from puntada.location import POSITION_SCHEME
from puntada.utils.hashing import hash_parts, hash_str

if TYPE_CHECKING:
    from puntada.config import EngineConfig
    from puntada.stamp import StampResult


class StampCache(Protocol):
    """Protocol for content-addressed stamp caches.

    StampResult is immutable, safe to share across threads.
    """

    def get(self, content_hash: str, path: str, config_hash: str) -> StampResult | None:
        """Return the cached result if present, else None."""
        ...

    def put(self, content_hash: str, path: str, config_hash: str, result: StampResult) -> None:
        """Store a result."""
        ...


class DictStampCache:
    """In-memory stamp cache using a dict.

    Not thread-safe. For parallel builds, wrap with a lock or use a
    thread-safe implementation.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[tuple[str, str, str], StampResult] = {}

    def get(self, content_hash: str, path: str, config_hash: str) -> StampResult | None:
        """Return the cached result if present, else None."""
        return self._data.get((content_hash, path, config_hash))

    def put(self, content_hash: str, path: str, config_hash: str, result: StampResult) -> None:
        """Store a result."""
        self._data[(content_hash, path, config_hash)] = result

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._data.clear()


def hash_content(source: str) -> str:
    """Compute SHA256 hash of source for cache key.

    Args:
        source: File content as read by the build pipeline

    Returns:
        Hex digest of SHA256 hash
    """
    return hash_str(source)


def hash_config(config: EngineConfig) -> str:
    """Compute hash of the EngineConfig fields that shape stamped output.

    Tracing settings do not change output and are left out. The position
    scheme is included so identifiers from an older scheme are never served.

    Args:
        config: EngineConfig to hash

    Returns:
        Hex digest of config hash
    """
    return hash_parts(
        POSITION_SCHEME,
        str(config.root()),
        config.attribute_name,
        config.extensions,
        config.excluded_dirs,
        config.strict,
    )


__all__ = [
    "DictStampCache",
    "StampCache",
    "hash_config",
    "hash_content",
]
