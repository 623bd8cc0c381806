"""Logging and tracing utilities for Puntada.

Provides a get_logger function that wraps the standard library logging, plus
a trace helper whose on/off switch and sink come from the active
EngineConfig rather than from module-level flags.

Example:
    >>> from puntada.utils.logger import get_logger, trace
    >>> logger = get_logger(__name__)
    >>> logger.info("Stamping file")
    >>> trace("stamp.start", path="src/App.tsx")  # no-op unless enabled
"""

from __future__ import annotations

import logging
from typing import Any


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "puntada." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'puntada.mymodule'
    """
    if not (name == "puntada" or name.startswith("puntada.")):
        name = f"puntada.{name}"
    return logging.getLogger(name)


_trace_logger = get_logger("puntada.trace")


def trace(event: str, **fields: Any) -> None:
    """Emit a verbose trace event when tracing is enabled.

    The active EngineConfig decides whether anything happens and where the
    event goes. Without a configured sink, events are logged at DEBUG level
    on the ``puntada.trace`` logger.

    Args:
        event: Dotted event name (e.g., "patch.located")
        **fields: Event payload
    """
    from puntada.config import get_engine_config

    config = get_engine_config()
    if not config.trace_enabled:
        return
    if config.trace_sink is not None:
        config.trace_sink(event, fields)
        return
    _trace_logger.debug("%s %s", event, fields)
