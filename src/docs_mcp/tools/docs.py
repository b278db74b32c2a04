"""The documentation query tool."""

from __future__ import annotations

import asyncio

from docs_mcp.docs import DocsQuery
from docs_mcp.docs.render import render_frontmatter, render_structured, render_text
from docs_mcp.logging import JsonlEventLogger
from docs_mcp.tools.registry import ToolDefinition, ToolDispatchError, ToolHandler, ToolRegistry

OUTPUT_FORMATS = ("text", "structured")
QUERY_KEYWORDS_DESCRIPTION = (
    "Keywords from user query to use for matching documentation. Each keyword should be a "
    "single word or short phrase; whitespace-separated keywords will be split automatically."
)


def register_docs_tool(
    registry: ToolRegistry,
    tool_name: str,
    description: str,
    docs_query: DocsQuery,
    events: JsonlEventLogger,
) -> None:
    """Register the docs tool and its lazily built definition."""
    registry.register(
        tool_name,
        _docs_handler(tool_name, docs_query, events),
        definition=lambda: build_tool_definition(
            tool_name, description, asyncio.run(docs_query.paths_description())
        ),
    )


def build_tool_definition(name: str, description: str, paths_description: str) -> ToolDefinition:
    """Describe the docs tool and its JSON input schema."""
    return ToolDefinition(
        name=name,
        description=description,
        input_schema={
            "type": "object",
            "properties": {
                "paths": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 1,
                    "description": paths_description,
                },
                "queryKeywords": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": QUERY_KEYWORDS_DESCRIPTION,
                },
                "format": {
                    "type": "string",
                    "enum": list(OUTPUT_FORMATS),
                    "default": "text",
                },
            },
            "required": ["paths"],
        },
    )


def _string_list(value: object, field: str, tool_name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool_name} {field} must be a list of strings.",
        )
    return list(value)


def _docs_handler(tool_name: str, docs_query: DocsQuery, events: JsonlEventLogger) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        events.debug(f"Executing {tool_name} tool", {"args": arguments})
        paths = _string_list(arguments.get("paths"), "paths", tool_name)
        if not paths:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message=f"{tool_name} paths must contain at least one path.",
            )
        keywords_value = arguments.get("queryKeywords")
        query_keywords: list[str] = []
        if keywords_value is not None:
            query_keywords = _string_list(keywords_value, "queryKeywords", tool_name)
        output_format = arguments.get("format", "text")
        if output_format not in OUTPUT_FORMATS:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message=f"{tool_name} format must be 'text' or 'structured'.",
            )

        results = asyncio.run(docs_query.query(paths, query_keywords))
        if output_format == "text":
            return {"content": [{"type": "text", "text": render_text(results)}]}
        entries = render_structured(results)
        return {
            "content": [{"type": "text", "text": render_frontmatter(entry)} for entry in entries],
            "entries": entries,
        }

    return handler
