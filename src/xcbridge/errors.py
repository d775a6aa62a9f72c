"""
Failure taxonomy for xcbridge.

All xcbridge failures inherit from XcbridgeError, allowing callers to catch
every xcbridge-specific exception with a single except clause.

Failure Categories:
    - MutuallyExclusiveParametersError: both sides of an exclusive pair supplied
    - MissingRequirementError: an allOf/oneOf rule unmet after the merge
    - SchemaValidationError: resolved parameters failed type/shape checks
    - ToolNotFoundError / ToolExecutionError: tool lookup and execution failures
    - ConfigError: settings could not be loaded

The resolution failures (1xxx) are returned as values by the resolver and
never raised. They are still exceptions so that the ambient layers can raise
the same objects where raising is the natural flow (registry lookup, config).

Every failure renders to a single ToolResponse via to_response(), so an
automated caller always receives one well-formed object.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from xcbridge.schema import SchemaIssue, ToolResponse


# =============================================================================
# Error Codes
# =============================================================================

# Resolution errors: 1xxx
ERROR_MUTUALLY_EXCLUSIVE = 1001
ERROR_MISSING_REQUIREMENT = 1002
ERROR_SCHEMA_VALIDATION = 1003

# Tool errors: 2xxx
ERROR_TOOL_NOT_FOUND = 2001
ERROR_TOOL_EXECUTION_FAILED = 2002

# Configuration errors: 3xxx
ERROR_CONFIG_INVALID = 3001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class XcbridgeError(Exception):
    """
    Base exception for all xcbridge errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def details(self) -> str:
        """Body text shown under the headline in a response."""
        return self.suggestion or ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }

    def to_response(self) -> "ToolResponse":
        """Render as a single error response for the transport."""
        from xcbridge.schema import ToolResponse

        return ToolResponse.error(self.message, self.details())


# =============================================================================
# Resolution Errors
# =============================================================================


@dataclass
class ResolutionError(XcbridgeError):
    """
    Base class for failures produced while resolving a call's parameters.

    Attributes:
        tool: Name of the tool whose parameters were being resolved
    """

    tool: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["tool"] = self.tool


@dataclass
class MutuallyExclusiveParametersError(ResolutionError):
    """Raised when the caller explicitly supplies both keys of an exclusive pair."""

    keys: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Parameter validation failed"
        if self.code == 0:
            self.code = ERROR_MUTUALLY_EXCLUSIVE
        super().__post_init__()
        self.context["keys"] = list(self.keys)

    def details(self) -> str:
        return (
            "Invalid parameters:\n"
            f"Mutually exclusive parameters provided: {', '.join(self.keys)}. "
            "Provide only one."
        )


@dataclass
class MissingRequirementError(ResolutionError):
    """
    Raised when an allOf/oneOf requirement is unmet after merging defaults.

    The wording depends on whether session defaults are enabled for this
    deployment; the resolution semantics do not.

    Attributes:
        rule_message: The message declared on the failing rule
        missing: Keys to suggest to the caller
        session_defaults_enabled: Select session-defaults wording when True
    """

    rule_message: str = ""
    missing: list[str] = field(default_factory=list)
    session_defaults_enabled: bool = True

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            if self.session_defaults_enabled:
                self.message = "Missing required session defaults"
            else:
                self.message = "Missing required parameters"
        if self.code == 0:
            self.code = ERROR_MISSING_REQUIREMENT
        super().__post_init__()
        self.context.update({
            "rule_message": self.rule_message,
            "missing": list(self.missing),
        })

    def details(self) -> str:
        if self.session_defaults_enabled:
            hint = ", ".join(f'"{key}": "..."' for key in self.missing)
            return f"{self.rule_message}\nSet with: session-set-defaults {{ {hint} }}"
        return f"{self.rule_message}\nProvide: {', '.join(self.missing)}"


@dataclass
class SchemaValidationError(ResolutionError):
    """Raised when the resolved parameters fail type/shape validation."""

    issues: list["SchemaIssue"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Parameter validation failed"
        if self.code == 0:
            self.code = ERROR_SCHEMA_VALIDATION
        super().__post_init__()
        self.context["issues"] = [f"{i.path}: {i.message}" for i in self.issues]

    def details(self) -> str:
        lines = [f"{issue.path}: {issue.message}" for issue in self.issues]
        return "Invalid parameters:\n" + "\n".join(lines)


# =============================================================================
# Tool Errors
# =============================================================================


@dataclass
class ToolError(XcbridgeError):
    """
    Base class for tool lookup and execution errors.

    Attributes:
        tool: Name of the tool that failed
        tool_args: Arguments that were provided
    """

    tool: str = ""
    tool_args: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context.update({
            "tool": self.tool,
            "tool_args": self.tool_args,
        })


@dataclass
class ToolNotFoundError(ToolError):
    """Raised when a tool is not registered."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Tool not found: {self.tool}"
        if self.code == 0:
            self.code = ERROR_TOOL_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Run 'xcbridge tools' to list the registered tools"
        super().__post_init__()


@dataclass
class ToolExecutionError(ToolError):
    """Raised when a tool fails unexpectedly during execution."""

    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Tool execution failed"
        if self.code == 0:
            self.code = ERROR_TOOL_EXECUTION_FAILED
        super().__post_init__()
        self.context["underlying_error"] = self.underlying_error

    def details(self) -> str:
        return f"{self.tool}: {self.underlying_error}"


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigError(XcbridgeError):
    """Raised when settings cannot be loaded or fail validation."""

    source: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid configuration: {self.source}"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID
        self.context["source"] = self.source
