"""MCP tool interfaces and registrations."""

from .registry import ToolDefinition, ToolDispatchError, ToolHandler, ToolRegistry

__all__ = ["ToolDefinition", "ToolDispatchError", "ToolHandler", "ToolRegistry"]
