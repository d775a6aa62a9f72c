"""
Base classes for the tool interface.

This module defines the core abstractions for tools in xcbridge:
- Tool: Abstract base class that all tools implement
- ToolContext: Runtime collaborators passed to every call
- ToolAnnotations: Hints advertised to the calling agent

Every tool call flows through Tool.handle():
    raw arguments -> ParameterResolver (session merge, rules, schema) -> Tool.run()

A tool only declares what it needs (params_model, requirements,
exclusive_pairs) and implements run(). Resolution failures are turned into
error responses here; run() never sees unresolved parameters.

Design Principles:
    - Tools are stateless; all state comes from ToolContext
    - run() returns a ToolResponse for expected failures (command failed,
      executor raised) instead of raising
    - Unexpected exceptions from run() propagate to the dispatcher, which
      converts them into a generic error response
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from xcbridge.config import Settings
from xcbridge.executor import CommandExecutor
from xcbridge.resolve import ParameterResolver, RequirementRule
from xcbridge.schema import ToolParams, ToolResponse, public_input_schema
from xcbridge.session import SessionStore


@dataclass(frozen=True)
class ToolAnnotations:
    """
    Behavior hints advertised with a tool.

    Attributes:
        title: Human-readable title
        destructive_hint: Whether the tool changes state outside the call
    """

    title: str
    destructive_hint: bool = False


@dataclass
class ToolContext:
    """
    Runtime context passed to tools during execution.

    Attributes:
        store: The process-wide session defaults
        settings: Loaded settings (wording toggle, limits)
        executor: Runs external commands
    """

    store: SessionStore
    settings: Settings
    executor: CommandExecutor


class Tool(ABC):
    """
    Abstract base class for all xcbridge tools.

    Subclasses set:
    - name property: The tool's unique identifier
    - params_model: Pydantic model for validated parameters
    - requirements: Ordered AllOf/OneOf/ExclusivePair rules
    - exclusive_pairs: Pairs the caller may not supply together
    - session_keys: Keys read from the session, hidden from the public schema
    and implement run().

    Example:
        class BootSimTool(Tool):
            params_model = BootSimParams
            requirements = (AllOf(("simulatorId",), "simulatorId is required"),)
            session_keys = ("simulatorId",)

            @property
            def name(self) -> str:
                return "boot_sim"

            def run(self, params, context) -> ToolResponse:
                ...
    """

    params_model: ClassVar[type[BaseModel]] = ToolParams
    requirements: ClassVar[tuple[RequirementRule, ...]] = ()
    exclusive_pairs: ClassVar[tuple[tuple[str, str], ...]] = ()
    session_keys: ClassVar[tuple[str, ...]] = ()
    uses_session_defaults: ClassVar[bool] = True

    @property
    @abstractmethod
    def name(self) -> str:
        """
        The unique identifier for this tool.

        Returns:
            The tool's unique name
        """
        ...

    @property
    def description(self) -> str:
        return f"Tool: {self.name}"

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title=self.name)

    @abstractmethod
    def run(self, params: Any, context: ToolContext) -> ToolResponse:
        """
        Execute the tool with resolved, validated parameters.

        Args:
            params: Instance of params_model
            context: Runtime context with store, settings and executor

        Returns:
            ToolResponse indicating success or failure

        Note:
            - Use ToolResponse.error() for expected failures
            - Only raise for unexpected/programming errors
        """
        ...

    def handle(self, args: dict[str, Any] | None, context: ToolContext) -> ToolResponse:
        """
        Resolve the caller's arguments and run the tool.

        Args:
            args: Raw arguments from the caller
            context: Runtime context

        Returns:
            The tool's response, or an error response describing the
            first resolution failure
        """
        resolver = ParameterResolver(
            context.store,
            session_defaults_enabled=context.settings.session_defaults_enabled,
        )
        resolution = resolver.resolve(
            args,
            requirements=self.requirements,
            exclusive_pairs=self.exclusive_pairs,
            model=self.params_model,
            tool=self.name,
            use_session_defaults=self.uses_session_defaults,
        )
        if resolution.failure is not None:
            return resolution.failure.to_response()

        return self.run(resolution.params, context)

    def input_schema(self, settings: Settings) -> dict[str, Any]:
        """
        JSON schema advertised to callers.

        With session defaults enabled, keys the tool reads from the session
        are hidden. With them disabled, the full schema is advertised.
        """
        hidden = self.session_keys if settings.session_defaults_enabled else ()
        return public_input_schema(self.params_model, hidden)

    def __repr__(self) -> str:
        """String representation of the tool."""
        return f"<Tool: {self.name}>"
