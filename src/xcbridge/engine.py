"""
Call dispatcher for xcbridge.

The Dispatcher is the layer the transport talks to. It owns the
process-wide collaborators and turns every incoming call into exactly one
ToolResponse:
- Registry: finds the tool by name
- SessionStore: one instance for the life of the process
- Settings: wording toggle and limits
- CommandExecutor: runs external commands for tool logic

Execution Flow:
    1. Look up the tool (unknown name -> error response)
    2. tool.handle(): resolve parameters, then run the tool logic
    3. Any exception escaping the tool -> generic error response

The dispatcher never raises to the transport, so a single bad call can't
take the server down.
"""

import time
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from xcbridge.config import Settings, load_settings
from xcbridge.errors import SchemaValidationError, ToolExecutionError, ToolNotFoundError
from xcbridge.executor import CommandExecutor, get_default_executor
from xcbridge.logging_config import get_logger
from xcbridge.schema import SchemaIssue, ToolResponse
from xcbridge.session import SessionStore
from xcbridge.tools import ToolContext, ToolRegistry, create_registry

logger = get_logger(__name__)

HISTORY_SIZE = 256


@dataclass
class CallRecord:
    """
    Summary of one dispatched call.

    Attributes:
        tool_name: Name of the tool that was called
        is_error: Whether the response was an error
        duration_ms: Wall time spent in the dispatcher
    """

    tool_name: str
    is_error: bool
    duration_ms: float


class Dispatcher:
    """
    Routes tool calls to tools with shared session state.

    Usage:
        dispatcher = Dispatcher()
        dispatcher.call("session-set-defaults", {"simulatorId": "SIM-1"})
        response = dispatcher.call("boot_sim", {})

    Attributes:
        settings: Loaded settings
        registry: Tool registry
        store: Session defaults shared by every call
        executor: Command executor handed to tool logic
        history: CallRecord for the most recent calls, oldest first
            (at most history_size entries)
    """

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        store: SessionStore | None = None,
        settings: Settings | None = None,
        executor: CommandExecutor | None = None,
        history_size: int = HISTORY_SIZE,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        if registry is None:
            registry = create_registry(self.settings.enabled_tools)
        self.registry = registry
        self.store = store if store is not None else SessionStore()
        self.executor = executor if executor is not None else get_default_executor(self.settings)
        self.history: deque[CallRecord] = deque(maxlen=history_size)

    def context(self) -> ToolContext:
        return ToolContext(
            store=self.store,
            settings=self.settings,
            executor=self.executor,
        )

    def call(self, tool_name: str, args: Mapping[str, Any] | None = None) -> ToolResponse:
        """
        Dispatch one call.

        Args:
            tool_name: Registered tool name
            args: Raw caller arguments

        Returns:
            The tool's response or an error response; never raises
        """
        start = time.perf_counter()
        response = self._dispatch(tool_name, args)
        duration_ms = (time.perf_counter() - start) * 1000

        self.history.append(
            CallRecord(tool_name=tool_name, is_error=response.is_error, duration_ms=duration_ms)
        )
        logger.debug(
            "%s finished in %.1fms (error=%s)", tool_name, duration_ms, response.is_error
        )
        return response

    def _dispatch(self, tool_name: str, args: Mapping[str, Any] | None) -> ToolResponse:
        try:
            tool = self.registry.get(tool_name)
        except ToolNotFoundError as e:
            logger.warning("Unknown tool requested: %s", tool_name)
            return e.to_response()

        if args is not None and not isinstance(args, Mapping):
            issue = SchemaIssue(path="root", message="Arguments must be an object")
            return SchemaValidationError(tool=tool_name, issues=[issue]).to_response()

        try:
            return tool.handle(dict(args or {}), self.context())
        except Exception as e:
            logger.exception("Unexpected error in %s", tool_name)
            return ToolExecutionError(
                tool=tool_name,
                tool_args=dict(args or {}),
                underlying_error=f"{type(e).__name__}: {e}",
            ).to_response()

    def describe_tools(self) -> list[dict[str, Any]]:
        """Name, description, annotations and public schema for each tool."""
        return self.registry.describe(self.settings)
