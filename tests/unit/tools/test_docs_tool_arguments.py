from __future__ import annotations

from pathlib import Path

import pytest

from docs_mcp.server import StdioServer, create_server


@pytest.fixture()
def server(tmp_path: Path) -> StdioServer:
    docs = tmp_path / "docs"
    (docs / "guides").mkdir(parents=True)
    (docs / "index.md").write_text("Welcome", encoding="utf-8")
    (docs / "guides" / "setup.md").write_text("# Setup", encoding="utf-8")
    return create_server(root_dir=str(tmp_path))


def _call(server: StdioServer, arguments: dict[str, object]) -> dict[str, object]:
    params = {"name": "searchDocs", "arguments": arguments}
    return server.handle_payload({"id": "req-tool", "method": "tools/call", "params": params})


@pytest.mark.parametrize(
    ("arguments", "message"),
    [
        ({}, "searchDocs paths must be a list of strings."),
        ({"paths": "index.md"}, "searchDocs paths must be a list of strings."),
        ({"paths": [1]}, "searchDocs paths must be a list of strings."),
        ({"paths": []}, "searchDocs paths must contain at least one path."),
        (
            {"paths": ["index.md"], "queryKeywords": "setup"},
            "searchDocs queryKeywords must be a list of strings.",
        ),
        (
            {"paths": ["index.md"], "format": "html"},
            "searchDocs format must be 'text' or 'structured'.",
        ),
    ],
)
def test_invalid_arguments_return_invalid_params(
    server: StdioServer, arguments: dict[str, object], message: str
) -> None:
    response = _call(server, arguments)

    assert response["ok"] is False
    assert response["error"] == {"code": "INVALID_PARAMS", "message": message}


def test_text_format_returns_single_text_block(server: StdioServer) -> None:
    response = _call(server, {"paths": ["index.md"]})

    assert response["ok"] is True
    assert response["result"] == {
        "content": [{"type": "text", "text": "## index.md\n\nWelcome\n\n---\n"}]
    }


def test_structured_format_returns_tagged_entries(server: StdioServer) -> None:
    response = _call(server, {"paths": ["index.md", "../secret"], "format": "structured"})

    entries = response["result"]["entries"]
    assert [entry["kind"] for entry in entries] == ["file", "error"]
    assert entries[1]["metadata"] == {"path": "../secret", "error": "Invalid path"}
    content = response["result"]["content"]
    assert content[0]["text"] == '---\nkind: file\npath: "index.md"\n---\n\nWelcome'


def test_tool_is_callable_as_direct_method(server: StdioServer) -> None:
    response = server.handle_payload(
        {"id": "req-direct", "method": "searchDocs", "params": {"paths": ["guides/setup.md"]}}
    )

    assert response["ok"] is True
    assert "# Setup" in response["result"]["content"][0]["text"]


def test_tools_list_advertises_schema_with_top_level_paths(server: StdioServer) -> None:
    response = server.handle_payload({"id": "req-list", "method": "tools/list", "params": {}})

    [tool] = response["result"]["tools"]
    assert tool["name"] == "searchDocs"
    schema = tool["inputSchema"]
    assert schema["required"] == ["paths"]
    assert schema["properties"]["format"]["enum"] == ["text", "structured"]
    description = schema["properties"]["paths"]["description"]
    assert "- guides" in description
    assert "- index.md" in description
