"""Deterministic tool registration primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

ToolHandler = Callable[[dict[str, object]], dict[str, object]]


@dataclass(slots=True, frozen=True)
class ToolDispatchError(Exception):
    """Represents deterministic tool dispatch failures."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class ToolDefinition:
    """Advertised tool metadata returned by ``tools/list``."""

    name: str
    description: str
    input_schema: dict[str, object]

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(slots=True)
class ToolRegistry:
    """In-memory tool registry preserving deterministic insertion order."""

    _handlers: dict[str, ToolHandler] = field(default_factory=dict)
    _definitions: dict[str, Callable[[], ToolDefinition]] = field(default_factory=dict)

    def register(
        self,
        name: str,
        handler: ToolHandler,
        definition: Callable[[], ToolDefinition] | None = None,
    ) -> None:
        """Register a named handler and an optional lazy definition builder."""
        self._handlers[name] = handler
        if definition is not None:
            self._definitions[name] = definition

    def get(self, name: str) -> ToolHandler | None:
        return self._handlers.get(name)

    def names(self) -> tuple[str, ...]:
        """Return registered tool names in deterministic order."""
        return tuple(self._handlers.keys())

    def definitions(self) -> list[dict[str, object]]:
        """Build definitions for every tool that advertises one."""
        return [
            self._definitions[name]().to_dict()
            for name in self.names()
            if name in self._definitions
        ]

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Dispatch to a registered tool by name."""
        handler = self.get(name)
        if handler is None:
            raise ToolDispatchError(code="UNKNOWN_TOOL", message=f"Unknown tool: {name}")
        return handler(arguments)
