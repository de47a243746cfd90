"""Static tool registry mapping tool names to connectors."""

from collections.abc import Iterable
from typing import Any

from mcp.types import Tool

from mcp_hub.connectors import Connector
from mcp_hub.exceptions import ToolNotFoundError


class ToolRegistry:
    """Ordered, read-only set of connectors keyed by tool name.

    Names must be unique; a duplicate fails at construction.
    """

    def __init__(self, connectors: Iterable[Connector]) -> None:
        self._connectors: dict[str, Connector] = {}
        for connector in connectors:
            if connector.name in self._connectors:
                raise ValueError(f"Duplicate tool name: {connector.name}")
            self._connectors[connector.name] = connector

    def __len__(self) -> int:
        return len(self._connectors)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._connectors

    @property
    def names(self) -> list[str]:
        return list(self._connectors)

    def get(self, name: object) -> Connector:
        """Resolve a tool name.

        Raises:
            ToolNotFoundError: If ``name`` is not a string naming a registered
                connector.
        """
        if not isinstance(name, str) or name not in self._connectors:
            raise ToolNotFoundError(name)
        return self._connectors[name]

    def descriptors(self) -> list[Tool]:
        """Tool descriptors in registration order."""
        return [connector.descriptor for connector in self._connectors.values()]

    def to_json(self) -> list[dict[str, Any]]:
        """Descriptors as plain JSON objects (name, description, inputSchema)."""
        return [
            tool.model_dump(mode="json", by_alias=True, exclude_none=True)
            for tool in self.descriptors()
        ]
