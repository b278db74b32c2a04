from __future__ import annotations

import json
from pathlib import Path

from docs_mcp.server import StdioServer, create_server


def _server(tmp_path: Path) -> StdioServer:
    (tmp_path / "docs").mkdir()
    return create_server(root_dir=str(tmp_path))


def test_malformed_json_returns_invalid_json_error(tmp_path: Path) -> None:
    server = _server(tmp_path)

    response = server.handle_json_line("{not-json")

    assert response["ok"] is False
    assert response["error"] == {
        "code": "INVALID_JSON",
        "message": "Request must be valid JSON.",
    }
    assert str(response["request_id"]).startswith("req-")


def test_unknown_tool_returns_explicit_error(tmp_path: Path) -> None:
    server = _server(tmp_path)

    response = server.handle_payload(
        {"id": "abc-123", "method": "searchUnknown", "params": {"k": "v"}}
    )

    assert response["ok"] is False
    assert response["request_id"] == "abc-123"
    assert response["error"] == {
        "code": "UNKNOWN_TOOL",
        "message": "Unknown tool: searchUnknown",
    }


def test_invalid_tools_call_params_returns_invalid_params_error(tmp_path: Path) -> None:
    server = _server(tmp_path)
    payload = {"id": 7, "method": "tools/call", "params": {"name": "searchDocs", "arguments": []}}

    response = server.handle_payload(json.loads(json.dumps(payload)))

    assert response["ok"] is False
    assert response["request_id"] == "7"
    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "tools/call params.arguments must be an object.",
    }


def test_non_object_request_is_invalid(tmp_path: Path) -> None:
    server = _server(tmp_path)

    response = server.handle_payload(["not", "an", "object"])

    assert response["error"]["code"] == "INVALID_REQUEST"
    assert response["request_id"] == "req-000001"
