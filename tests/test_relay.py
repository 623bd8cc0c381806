"""Tests for the wire-level edit request boundary."""

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

import puntada
from puntada.config import EngineConfig
from puntada.relay import RelayResponse, handle_edit_request, status_report

Write = Callable[[str, str], Path]


class TestHandleEditRequest:
    def test_success_from_json_string(self, project: Path, write: Write) -> None:
        write("a.tsx", "x = <p>Hello</p>")
        response = handle_edit_request(
            json.dumps({"editId": "a.tsx:1:5", "newValue": "Hi"}), project_root=project
        )
        assert response == RelayResponse(
            200, {"success": True, "filePath": "a.tsx", "newContent": "x = <p>Hi</p>"}
        )

    def test_success_from_bytes_and_mapping(self, project: Path, write: Write) -> None:
        write("a.tsx", "x = <p>Hello</p>")
        body = b'{"editId": "a.tsx:1:5", "newValue": "Hi"}'
        assert handle_edit_request(body, project_root=project).status == 200
        mapping = {"editId": "a.tsx:1:5", "newValue": ""}
        assert handle_edit_request(mapping, project_root=project).status == 200

    def test_to_json(self) -> None:
        assert json.loads(RelayResponse(409, {"error": "x", "kind": "y"}).to_json()) == {
            "error": "x",
            "kind": "y",
        }

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            "{}",
            '{"editId": "a.tsx:1:5"}',
            '{"newValue": "x"}',
            '{"editId": "", "newValue": "x"}',
            '{"editId": 5, "newValue": "x"}',
            '{"editId": "a.tsx:1:5", "newValue": 5}',
            b"\xff\xfe",
        ],
    )
    def test_malformed_requests(self, project: Path, payload: str | bytes) -> None:
        response = handle_edit_request(payload, project_root=project)
        assert response.status == 400
        assert response.body["kind"] == "bad_request"
        assert response.body["error"]

    @pytest.mark.parametrize(
        ("edit_id", "status", "kind"),
        [
            ("nonsense", 400, "invalid_identifier"),
            ("../secret.tsx:1:1", 400, "access_denied"),
            ("a\0.tsx:1:5", 400, "access_denied"),
            ("missing.tsx:1:1", 404, "not_found"),
            ("a.tsx:7:7", 404, "target_not_found"),
            ("a.tsx:1:5", 409, "not_mutable"),
        ],
    )
    def test_failure_status_mapping(
        self, project: Path, write: Write, edit_id: str, status: int, kind: str
    ) -> None:
        write("a.tsx", "x = <img />")
        response = handle_edit_request({"editId": edit_id, "newValue": "x"}, project_root=project)
        assert response.status == status
        assert response.body["kind"] == kind
        assert "error" in response.body
        assert "success" not in response.body

    def test_internal_failure(self, project: Path, write: Write) -> None:
        write("a.tsx", "x = <div><p>Hi</div>")
        config = EngineConfig(project_root=project, strict=True)
        response = handle_edit_request({"editId": "a.tsx:1:10", "newValue": "x"}, config=config)
        assert response.status == 500
        assert response.body["kind"] == "internal_failure"


class TestStatusReport:
    def test_fields(self, project: Path) -> None:
        report = status_report(project_root=project)
        assert report["status"] == "ok"
        assert report["projectRoot"] == str(project)
        assert report["exists"] is True
        assert report["traceEnabled"] is False
        assert report["version"] == puntada.__version__
        assert datetime.fromisoformat(report["timestamp"]).utcoffset().total_seconds() == 0

    def test_missing_root(self, tmp_path: Path) -> None:
        report = status_report(project_root=tmp_path / "nope")
        assert report["exists"] is False

    def test_trace_flag(self, project: Path) -> None:
        report = status_report(config=EngineConfig(project_root=project, trace_enabled=True))
        assert report["traceEnabled"] is True
