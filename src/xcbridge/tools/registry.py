"""
Tool registry for xcbridge.

Maps tool names (boot_sim, clean, session-set-defaults, ...) to tool
instances. The dispatcher resolves every incoming call here, and the CLI
lists and describes tools from here.

Usage:
    registry = ToolRegistry([BootSimTool(), CleanTool()])
    tool = registry.get("boot_sim")
    registry.describe(settings)  # advertised name/description/schema per tool
"""

from typing import Any, Iterable, Iterator

from xcbridge.config import Settings
from xcbridge.errors import ToolNotFoundError
from xcbridge.tools.base import Tool


class ToolRegistry:
    """
    Name -> tool lookup.

    A later registration under the same name replaces the earlier one.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._by_name: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """
        Add a tool under its name.

        Raises:
            ValueError: If tool is None or its name is empty
        """
        if tool is None:
            msg = "Cannot register None as a tool"
            raise ValueError(msg)
        if not tool.name:
            msg = f"{type(tool).__name__} has an empty name"
            raise ValueError(msg)

        self._by_name[tool.name] = tool

    def get(self, name: str) -> Tool:
        """
        The tool registered as name.

        Raises:
            ToolNotFoundError: If nothing is registered under name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise ToolNotFoundError(tool=name) from None

    def unregister(self, name: str) -> bool:
        """Remove a tool; False if it wasn't registered."""
        return self._by_name.pop(name, None) is not None

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def describe(self, settings: Settings) -> list[dict[str, Any]]:
        """Advertised name, description, annotations and input schema, by name."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "annotations": {
                    "title": tool.annotations.title,
                    "destructiveHint": tool.annotations.destructive_hint,
                },
                "inputSchema": tool.input_schema(settings),
            }
            for tool in (self._by_name[name] for name in self.names())
        ]

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"<ToolRegistry {self.names()}>"
