"""STDIO MCP server entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from docs_mcp.config import CONFIG_FILENAME, CliOverrides, ServerConfig, load_effective_config
from docs_mcp.docs import DocsQuery
from docs_mcp.logging import (
    LOG_LEVELS,
    AuditEvent,
    JsonlAuditLogger,
    JsonlEventLogger,
    sanitize_arguments,
    utc_timestamp,
)
from docs_mcp.tools.docs import register_docs_tool
from docs_mcp.tools.registry import ToolDispatchError, ToolRegistry


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="docs-mcp")
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--docs", required=False, default=None)
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--max-suggestions", type=int, required=False, default=None)
    parser.add_argument("--cache-ttl-seconds", type=int, required=False, default=None)
    parser.add_argument("--log-level", choices=LOG_LEVELS, required=False, default=None)
    return parser


class StdioServer:
    """Minimal deterministic STDIO server for tool routing."""

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
        self._events = JsonlEventLogger(
            path=config.data_dir / "events.jsonl",
            level=config.logging.level,
            stream=sys.stderr if config.logging.stderr else None,
        )
        self._docs_query = DocsQuery(
            doc_root=config.doc_root,
            events=self._events,
            max_suggestions=config.suggestions.max_results,
            cache_ttl_seconds=config.suggestions.cache_ttl_seconds,
            max_concurrent_reads=config.suggestions.max_concurrent_reads,
        )
        self._registry = ToolRegistry()
        register_docs_tool(
            self._registry,
            tool_name=config.tool,
            description=config.description,
            docs_query=self._docs_query,
            events=self._events,
        )
        self._fallback_request_counter = 0

    @property
    def config(self) -> ServerConfig:
        return self._config

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from stdin and write JSON-line responses."""
        self._events.info(
            "Documentation server started",
            {"tool": self._config.tool, "docRoot": self._config.doc_root.absolute_path},
        )
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                tool_name="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        if request.method == "initialize":
            return self._respond(request, "initialize", {}, self._server_info)
        if request.method == "tools/list":
            return self._respond(
                request, "tools/list", {}, lambda: {"tools": self._registry.definitions()}
            )

        tool_name: str
        arguments: dict[str, object]
        if request.method == "tools/call":
            tool_name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if not isinstance(tool_name_value, str) or not tool_name_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.name must be a non-empty string.",
                )
            if not isinstance(arguments_value, dict):
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="tools/call params.arguments must be an object.",
                )
            tool_name = tool_name_value
            arguments = arguments_value
        else:
            tool_name = request.method
            arguments = request.params

        return self._respond(
            request,
            tool_name,
            arguments,
            lambda: self._registry.dispatch(name=tool_name, arguments=arguments),
        )

    def _respond(
        self,
        request: Request,
        tool_name: str,
        arguments: dict[str, object],
        run: Callable[[], dict[str, object]],
    ) -> dict[str, object]:
        try:
            result = run()
        except ToolDispatchError as error:
            response = self.error_response(
                request_id=request.request_id,
                code=error.code,
                message=error.message,
            )
        except Exception as error:
            self._events.error(f"Unhandled error while executing {tool_name}", error)
            response = self.error_response(
                request_id=request.request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing tool.",
            )
        else:
            response = self.success_response(request_id=request.request_id, result=result)
        self.log_request(
            request_id=request.request_id,
            tool_name=tool_name,
            arguments=arguments,
            response=response,
        )
        return response

    def _server_info(self) -> dict[str, object]:
        return {
            "serverInfo": {
                "name": self._config.name,
                "title": self._config.title,
                "version": self._config.version,
            },
            "tools": list(self._registry.names()),
            "config": self._config.to_public_dict(),
        }

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize deterministic fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(request_id: str, result: dict[str, object]) -> dict[str, object]:
        """Build success envelope."""
        return {
            "request_id": request_id,
            "ok": True,
            "result": result,
            "warnings": [],
            "blocked": False,
        }

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "warnings": [],
            "blocked": False,
            "error": {"code": code, "message": message},
        }

    def log_request(
        self,
        request_id: str,
        tool_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        """Log one sanitized request event."""
        error_payload = response.get("error")
        error_code: str | None = None
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str):
                error_code = code_value
        event = AuditEvent(
            timestamp=utc_timestamp(),
            request_id=request_id,
            tool=tool_name,
            ok=bool(response.get("ok", False)),
            blocked=bool(response.get("blocked", False)),
            error_code=error_code,
            metadata=sanitize_arguments(arguments),
        )
        self._audit_logger.append(event)


def create_server(
    root_dir: str = ".",
    config_path: str | None = None,
    cli_overrides: CliOverrides | None = None,
) -> StdioServer:
    """Build a server from a config directory or an explicit config file."""
    path = Path(config_path) if config_path is not None else Path(root_dir) / CONFIG_FILENAME
    config = load_effective_config(config_path=path, overrides=cli_overrides)
    return StdioServer(config=config)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the documentation server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        docs=args.docs,
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        max_suggestions=args.max_suggestions,
        cache_ttl_seconds=args.cache_ttl_seconds,
        log_level=args.log_level,
    )
    server = create_server(config_path=args.config, cli_overrides=overrides)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
