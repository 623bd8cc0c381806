"""ContextVar-based engine configuration for Puntada.

Provides thread-local configuration using Python's ContextVars (PEP 567).
The stamping pass, the patch engine and the tracer all read the active
config, so a build tool sets it once and every call in that context sees it.

Thread Safety:
    Each thread (and each asyncio task) sees its own ContextVar value, so
    config is never shared across threads.

Usage:
    from puntada.config import EngineConfig, engine_config_context

    with engine_config_context(EngineConfig(project_root=root, trace_enabled=True)):
        result = stamp(path, content)

Every public operation also accepts an explicit ``config=`` argument, which
wins over the context.

"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

DEFAULT_ATTRIBUTE_NAME = "data-edit-id"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable engine configuration.

    Attributes:
        project_root: Directory all stamped and patched files must live in.
            None means the current working directory at call time.
        attribute_name: Name of the injected identifier attribute
        extensions: File suffixes the stamping pass and patch engine accept
        excluded_dirs: Directory names never parsed or written (at any depth)
        strict: Raise ParseError on the first malformed construct instead
            of recovering
        trace_enabled: Emit verbose trace events
        trace_sink: Receives ``(event, fields)`` for each trace event;
            None logs them at DEBUG level
        encoding: Text encoding of source files

    """

    project_root: Path | None = None
    attribute_name: str = DEFAULT_ATTRIBUTE_NAME
    extensions: tuple[str, ...] = (".jsx", ".tsx")
    excluded_dirs: tuple[str, ...] = ("node_modules",)
    strict: bool = False
    trace_enabled: bool = False
    trace_sink: Callable[[str, dict[str, Any]], None] | None = None
    encoding: str = "utf-8"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "EngineConfig":
        """Create EngineConfig from dictionary.

        Useful for build-tool integration where config comes from JSON or
        TOML. Unknown keys are silently ignored; lists become tuples and a
        string ``project_root`` becomes a Path.

        Example:
            >>> config = EngineConfig.from_dict({
            ...     "project_root": "/srv/app",
            ...     "extensions": [".tsx"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.extensions
            ('.tsx',)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        for key in ("extensions", "excluded_dirs"):
            if isinstance(filtered.get(key), list):
                filtered[key] = tuple(filtered[key])
        root = filtered.get("project_root")
        if isinstance(root, str):
            filtered["project_root"] = Path(root)
        return cls(**filtered)

    def root(self) -> Path:
        """The configured project root, resolved to an absolute path."""
        base = self.project_root if self.project_root is not None else Path.cwd()
        return Path(base).resolve()


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: EngineConfig = EngineConfig()

_engine_config: ContextVar[EngineConfig] = ContextVar(
    "engine_config",
    default=_DEFAULT_CONFIG,
)


def get_engine_config() -> EngineConfig:
    """Get current engine configuration (thread-local)."""
    return _engine_config.get()


def set_engine_config(config: EngineConfig) -> None:
    """Set engine configuration for current context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _engine_config.set(config)


def reset_engine_config() -> None:
    """Reset to default configuration."""
    _engine_config.set(_DEFAULT_CONFIG)


@contextmanager
def engine_config_context(config: EngineConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Example:
        >>> with engine_config_context(EngineConfig(strict=True)):
        ...     get_engine_config().strict
        True

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _engine_config.get()
    _engine_config.set(config)
    try:
        yield
    finally:
        _engine_config.set(previous)


def resolve_config(
    config: EngineConfig | None = None,
    project_root: str | Path | None = None,
) -> EngineConfig:
    """Pick the config for one call.

    An explicit ``config`` wins over the context; an explicit
    ``project_root`` overrides whichever config was picked.
    """
    active = config if config is not None else get_engine_config()
    if project_root is not None:
        active = replace(active, project_root=Path(project_root))
    return active


__all__ = [
    "DEFAULT_ATTRIBUTE_NAME",
    "EngineConfig",
    "engine_config_context",
    "get_engine_config",
    "reset_engine_config",
    "resolve_config",
    "set_engine_config",
]
