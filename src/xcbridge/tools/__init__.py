"""
Tools module for xcbridge.

Built-in tools:
    - session-set-defaults / session-clear-defaults / session-show-defaults
    - boot_sim: Boot a simulator
    - clean: Clean build products

Architecture:
    - Tool: Abstract base class; handle() resolves parameters then calls run()
    - ToolRegistry: Name -> tool lookup for the dispatcher
    - ToolContext: Runtime collaborators (session store, settings, executor)
"""

from typing import Iterable

from xcbridge.tools.base import Tool, ToolAnnotations, ToolContext
from xcbridge.tools.build import CleanTool
from xcbridge.tools.registry import ToolRegistry
from xcbridge.tools.session import (
    SessionClearDefaultsTool,
    SessionSetDefaultsTool,
    SessionShowDefaultsTool,
)
from xcbridge.tools.simulator import BootSimTool

BUILTIN_TOOLS: tuple[type[Tool], ...] = (
    SessionSetDefaultsTool,
    SessionClearDefaultsTool,
    SessionShowDefaultsTool,
    BootSimTool,
    CleanTool,
)


def create_registry(enabled: Iterable[str] = ()) -> ToolRegistry:
    """
    Registry with the built-in tools.

    Args:
        enabled: Tool names to keep; empty keeps all
    """
    wanted = set(enabled)
    registry = ToolRegistry()
    for tool_cls in BUILTIN_TOOLS:
        tool = tool_cls()
        if not wanted or tool.name in wanted:
            registry.register(tool)
    return registry


__all__ = [
    "BUILTIN_TOOLS",
    "Tool",
    "ToolAnnotations",
    "ToolContext",
    "ToolRegistry",
    "create_registry",
]
