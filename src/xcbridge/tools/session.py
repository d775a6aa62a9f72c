"""
Session management tools.

These are the only tools that write to the session store:
- session-set-defaults: merge new defaults (pairs prune each other)
- session-clear-defaults: remove selected keys, or everything
- session-show-defaults: read-only snapshot

They validate their own input against the closed key set and never merge
existing defaults into their arguments.
"""

from xcbridge.logging_config import get_logger
from xcbridge.schema import (
    SessionClearDefaultsParams,
    SessionSetDefaultsParams,
    ToolParams,
    ToolResponse,
    format_snapshot,
)
from xcbridge.tools.base import Tool, ToolAnnotations, ToolContext

logger = get_logger(__name__)


class SessionSetDefaultsTool(Tool):
    """Merge a partial update into the session defaults and echo the result."""

    params_model = SessionSetDefaultsParams
    uses_session_defaults = False

    @property
    def name(self) -> str:
        return "session-set-defaults"

    @property
    def description(self) -> str:
        return (
            "Set the session defaults needed by many tools. Most tools require one or "
            "more session defaults to be set before they can be used. Agents should set "
            "all relevant defaults up front in a single call (e.g., project/workspace, "
            "scheme, simulator or device ID, useLatestOS) to avoid iterative prompts; "
            "only set the keys your workflow needs."
        )

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Set Session Defaults", destructive_hint=True)

    def run(self, params: SessionSetDefaultsParams, context: ToolContext) -> ToolResponse:
        partial = params.to_partial()
        current = context.store.set_defaults(partial)
        logger.info("Session defaults updated: %s", sorted(partial))
        return ToolResponse.ok(f"Defaults updated:\n{format_snapshot(current)}")


class SessionClearDefaultsTool(Tool):
    """Remove selected session defaults, or all of them."""

    params_model = SessionClearDefaultsParams
    uses_session_defaults = False

    @property
    def name(self) -> str:
        return "session-clear-defaults"

    @property
    def description(self) -> str:
        return "Clear selected or all session defaults."

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Clear Session Defaults", destructive_hint=True)

    def run(self, params: SessionClearDefaultsParams, context: ToolContext) -> ToolResponse:
        if params.all or params.keys is None:
            context.store.clear()
            logger.info("Session defaults cleared")
        else:
            context.store.clear(params.keys)
            logger.info("Session defaults cleared: %s", params.keys)
        return ToolResponse.ok("Session defaults cleared")


class SessionShowDefaultsTool(Tool):
    """Report the current session defaults without changing them."""

    params_model = ToolParams
    uses_session_defaults = False

    @property
    def name(self) -> str:
        return "session-show-defaults"

    @property
    def description(self) -> str:
        return "Show the current session defaults."

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Show Session Defaults")

    def run(self, params: ToolParams, context: ToolContext) -> ToolResponse:
        return ToolResponse.ok(format_snapshot(context.store.get_all()))
