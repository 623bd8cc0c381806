"""Wire-level boundary for edit requests.

A host web server forwards the body of ``POST /api/apply-edit`` here and
writes back whatever status and JSON body it gets. No HTTP server lives in
this package; the relay only maps payloads to patch calls and patch outcomes
to responses.

Request:
    {"editId": "src/App.tsx:3:5", "newValue": "Hi"}

Responses:
    200 {"success": true, "filePath": ..., "newContent": ...}
    400 malformed request, invalid identifier, rejected path
    404 unreadable file, no element at the position
    409 element has no text child
    500 anything else

Every error body is ``{"error": message, "kind": category}``.

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, NamedTuple

from puntada.config import EngineConfig, resolve_config
from puntada.errors import PatchError
from puntada.patch import apply_patch
from puntada.utils.logger import get_logger

logger = get_logger(__name__)

_BAD_REQUEST = "bad_request"


class RelayResponse(NamedTuple):
    status: int
    body: dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(self.body, ensure_ascii=False)


def _error(status: int, kind: str, message: str) -> RelayResponse:
    return RelayResponse(status, {"error": message, "kind": kind})


def _parse_payload(payload: str | bytes | Mapping[str, Any]) -> tuple[str, str] | RelayResponse:
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return _error(400, _BAD_REQUEST, f"Invalid JSON: {e}")
    if not isinstance(payload, Mapping):
        return _error(400, _BAD_REQUEST, "Request body must be a JSON object")

    edit_id = payload.get("editId")
    new_value = payload.get("newValue")
    if not edit_id or new_value is None:
        return _error(400, _BAD_REQUEST, "Missing editId or newValue")
    if not isinstance(edit_id, str) or not isinstance(new_value, str):
        return _error(400, _BAD_REQUEST, "editId and newValue must be strings")
    return edit_id, new_value


def handle_edit_request(
    payload: str | bytes | Mapping[str, Any],
    *,
    project_root: str | Path | None = None,
    config: EngineConfig | None = None,
) -> RelayResponse:
    """Apply one edit request and build the response.

    Args:
        payload: Raw JSON body, or an already decoded mapping
        project_root: Overrides the configured project root
        config: Overrides the active EngineConfig

    Returns:
        RelayResponse; never raises
    """
    parsed = _parse_payload(payload)
    if isinstance(parsed, RelayResponse):
        logger.warning("Rejected edit request: %s", parsed.body["error"])
        return parsed
    edit_id, new_value = parsed

    try:
        result = apply_patch(edit_id, new_value, project_root, config=config)
    except PatchError as e:
        return _error(e.status, e.kind, e.message)
    except Exception:
        logger.exception("Unexpected failure applying %s", edit_id)
        return _error(500, "internal_failure", "Internal error while applying the edit")

    return RelayResponse(
        200,
        {"success": True, "filePath": result.file_path, "newContent": result.new_content},
    )


def status_report(
    *,
    project_root: str | Path | None = None,
    config: EngineConfig | None = None,
) -> dict[str, Any]:
    """Health report for a status endpoint.

    Returns:
        ``status``, ``projectRoot``, ``exists`` (root is a directory),
        ``timestamp`` (UTC, ISO 8601), ``traceEnabled`` and ``version``
    """
    from puntada import __version__

    active = resolve_config(config, project_root)
    root = active.root()
    return {
        "status": "ok",
        "projectRoot": str(root),
        "exists": root.is_dir(),
        "timestamp": datetime.now(UTC).isoformat(),
        "traceEnabled": active.trace_enabled,
        "version": __version__,
    }


__all__ = ["RelayResponse", "handle_edit_request", "status_report"]
