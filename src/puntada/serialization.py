"""Tree serialization for debugging and inspection.

Converts typed nodes to JSON-compatible dicts. Useful for:
- Inspecting what the parser saw in a file that stamps unexpectedly
- Snapshot tests of parser output

All output is deterministic (sorted keys) so snapshots are stable.

Example:
    from puntada import parse
    from puntada.serialization import to_json

    print(to_json(parse("x = <p>Hi</p>")))

Thread Safety:
    All functions are pure; safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from puntada.location import SourceLocation
from puntada.nodes import Diagnostic, Document, Node


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field naming the node class.
    Recursively serializes child nodes, locations and diagnostics.

    Args:
        node: Any Puntada tree node.

    Returns:
        Dict with ``_type`` and all node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}

    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, SourceLocation):
        return {
            "lineno": value.lineno,
            "col_offset": value.col_offset,
            "offset": value.offset,
            "end_offset": value.end_offset,
            "source_file": value.source_file,
        }
    if isinstance(value, Diagnostic):
        return {"message": value.message, "location": _serialize_value(value.location)}
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool, None
    return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Serialize a Document to a JSON string.

    Args:
        doc: Document to serialize.
        indent: JSON indentation (None for compact output).

    Returns:
        JSON string with sorted keys.

    """
    return json.dumps(to_dict(doc), indent=indent, sort_keys=True, ensure_ascii=False)


__all__ = ["to_dict", "to_json"]
