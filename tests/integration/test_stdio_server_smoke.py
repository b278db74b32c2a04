from __future__ import annotations

import io
import json
from pathlib import Path

from docs_mcp.server import create_server


def test_stdio_server_routes_multiple_requests(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "index.md").write_text("Welcome", encoding="utf-8")
    server = create_server(root_dir=str(tmp_path))
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": "req-1", "method": "initialize", "params": {}}),
                "",
                json.dumps({"id": "req-2", "method": "tools/list", "params": {}}),
                json.dumps(
                    {
                        "id": "req-3",
                        "method": "tools/call",
                        "params": {"name": "searchDocs", "arguments": {"paths": ["index.md"]}},
                    }
                ),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    lines = [line for line in out_stream.getvalue().splitlines() if line]

    assert len(lines) == 3
    first, second, third = (json.loads(line) for line in lines)

    assert first["request_id"] == "req-1"
    assert first["result"]["serverInfo"]["title"] == "Acme Documentation Server"
    assert first["result"]["tools"] == ["searchDocs"]

    assert second["request_id"] == "req-2"
    assert second["result"]["tools"][0]["name"] == "searchDocs"

    assert third["request_id"] == "req-3"
    assert third["ok"] is True
    assert third["result"]["content"][0]["text"] == "## index.md\n\nWelcome\n\n---\n"
