"""
Schema definitions for xcbridge.

This module defines the Pydantic models used throughout xcbridge:
- SessionDefaults: The closed set of keys the session store recognizes
- SessionSetDefaultsParams/SessionClearDefaultsParams: Session tool inputs
- ToolParams: Base class for tool parameter models
- ToolResponse/TextContent: The single response object every call returns

It also hosts the adapter between the resolver and Pydantic:
validate_params() turns a ValidationError into a list of field-level
SchemaIssue values instead of raising.

Wire names are camelCase (projectPath, simulatorId, ...). Models expose
snake_case attributes with camelCase aliases and accept either spelling.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from xcbridge.session.store import SESSION_EXCLUSIVE_PAIRS

SessionKey = Literal[
    "projectPath",
    "workspacePath",
    "scheme",
    "configuration",
    "simulatorName",
    "simulatorId",
    "deviceId",
    "useLatestOS",
    "arch",
]


# =============================================================================
# Validation Adapter
# =============================================================================


@dataclass(frozen=True)
class SchemaIssue:
    """A single field-level violation reported by the schema layer."""

    path: str
    message: str


@dataclass(frozen=True)
class SchemaResult:
    """
    Outcome of validating a candidate against a parameter model.

    Attributes:
        success: Whether the candidate matched the model
        value: The validated model instance when success is True
        issues: Field-level violations when success is False
    """

    success: bool
    value: Any = None
    issues: list[SchemaIssue] = field(default_factory=list)


def validate_params(model: type[BaseModel], candidate: dict[str, Any]) -> SchemaResult:
    """
    Validate a candidate mapping against a Pydantic model.

    Only ValidationError is converted into issues; anything else the model
    raises propagates to the caller.

    Args:
        model: The Pydantic model class describing the parameters
        candidate: The resolved parameter mapping

    Returns:
        SchemaResult with the validated instance or the list of issues
    """
    try:
        value = model.model_validate(candidate)
    except ValidationError as e:
        issues = [
            SchemaIssue(
                path=".".join(str(part) for part in err["loc"]) or "root",
                message=err["msg"],
            )
            for err in e.errors()
        ]
        return SchemaResult(success=False, issues=issues)

    return SchemaResult(success=True, value=value)


def to_wire_names(args: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """
    Rename field-name keys (simulator_id) to their wire names (simulatorId).

    Models accept either spelling, but rules and exclusive pairs are keyed by
    wire name, so resolution has to see one spelling. When a caller sends
    both, the wire name wins, as it does in the model.
    """
    renamed: dict[str, Any] = {}
    for key, value in args.items():
        info = model.model_fields.get(key)
        wire = info.alias if info is not None and info.alias else key
        if wire != key and wire in args:
            continue
        renamed[wire] = value
    return renamed


def nullify_empty_strings(data: Any) -> Any:
    """Replace blank or whitespace-only string values with None."""
    if not isinstance(data, dict):
        return data
    return {
        key: None if isinstance(value, str) and not value.strip() else value
        for key, value in data.items()
    }


# =============================================================================
# Parameter Models
# =============================================================================


class ToolParams(BaseModel):
    """
    Base class for tool parameter models.

    Unknown keys are ignored rather than rejected: the resolved mapping
    carries every session default, including ones a given tool never reads.
    Blank strings are treated as absent.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_strings_are_absent(cls, data: Any) -> Any:
        return nullify_empty_strings(data)

    def to_args(self) -> dict[str, Any]:
        """Dump set fields back to wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SessionDefaults(BaseModel):
    """
    The closed set of keys the session store recognizes.

    Unknown keys are rejected here, at the boundary, never by the store.
    Blank strings are treated as absent, so they are never stored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    project_path: str | None = Field(
        default=None,
        alias="projectPath",
        description="Path to the .xcodeproj file",
    )
    workspace_path: str | None = Field(
        default=None,
        alias="workspacePath",
        description="Path to the .xcworkspace file",
    )
    scheme: str | None = Field(default=None, description="The scheme to use")
    configuration: str | None = Field(
        default=None,
        description="Build configuration (Debug, Release, ...)",
    )
    simulator_name: str | None = Field(
        default=None,
        alias="simulatorName",
        description="Name of the simulator (e.g. 'iPhone 16')",
    )
    simulator_id: str | None = Field(
        default=None,
        alias="simulatorId",
        description="UUID of the simulator",
    )
    device_id: str | None = Field(
        default=None,
        alias="deviceId",
        description="UDID of a physical device",
    )
    use_latest_os: bool | None = Field(
        default=None,
        alias="useLatestOS",
        description="Use the latest OS version for a named simulator",
    )
    arch: Literal["arm64", "x86_64"] | None = Field(
        default=None,
        description="Architecture for macOS builds",
    )

    @model_validator(mode="before")
    @classmethod
    def _blank_strings_are_absent(cls, data: Any) -> Any:
        return nullify_empty_strings(data)

    def to_partial(self) -> dict[str, Any]:
        """Keys the caller actually provided, by wire name, without None values."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class SessionSetDefaultsParams(SessionDefaults):
    """Input to session-set-defaults: the recognized keys plus tool extras."""

    suppress_warnings: bool | None = Field(
        default=None,
        alias="suppressWarnings",
        description="When true, warning messages are filtered from build output to conserve context",
    )

    def to_partial(self) -> dict[str, Any]:
        """Session keys only; suppressWarnings is not a session default."""
        return self.model_dump(
            by_alias=True,
            exclude_unset=True,
            exclude_none=True,
            exclude={"suppress_warnings"},
        )

    @model_validator(mode="after")
    def _reject_both_sides_of_a_pair(self) -> "SessionSetDefaultsParams":
        provided = self.model_dump(by_alias=True, exclude_none=True)
        for first, second in SESSION_EXCLUSIVE_PAIRS:
            if first in provided and second in provided:
                msg = f"{first} and {second} are mutually exclusive"
                raise ValueError(msg)
        return self


class SessionClearDefaultsParams(ToolParams):
    """Input to session-clear-defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    keys: list[SessionKey] | None = Field(
        default=None,
        description="Keys to clear; omit to clear everything",
    )
    all: bool | None = Field(
        default=None,
        description="Clear every session default",
    )


# =============================================================================
# Response Models
# =============================================================================


class TextContent(BaseModel):
    """A text block in a tool response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """
    The single response object every tool call produces.

    Failures are ordinary responses with is_error set; callers never see a
    raw exception.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def ok(cls, text: str) -> "ToolResponse":
        """Create a successful response."""
        return cls(content=[TextContent(text=text)], is_error=False)

    @classmethod
    def error(cls, message: str, details: str | None = None) -> "ToolResponse":
        """Create an error response: 'Error: <message>' plus optional details."""
        text = f"Error: {message}"
        if details:
            text = f"{text}\n{details}"
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with protocol field names."""
        return self.model_dump(by_alias=True)


class CallRequest(BaseModel):
    """
    One line of the stdio transport.

    Attributes:
        id: Opaque request id echoed in the reply
        tool: Name of the tool to call
        arguments: Raw caller arguments
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str | int | None = None
    tool: str = Field(..., min_length=1)
    arguments: dict[str, Any] | None = None


# =============================================================================
# Public Schema Helpers
# =============================================================================


def public_input_schema(
    model: type[BaseModel],
    hidden_keys: tuple[str, ...] | frozenset[str] = (),
) -> dict[str, Any]:
    """
    JSON schema advertised for a tool, without session-managed keys.

    Args:
        model: The tool's parameter model
        hidden_keys: Wire names to drop from properties and required

    Returns:
        A JSON schema dict
    """
    schema = model.model_json_schema(by_alias=True)
    properties = schema.get("properties", {})
    for key in hidden_keys:
        properties.pop(key, None)
    schema["properties"] = properties

    required = [key for key in schema.get("required", []) if key not in hidden_keys]
    if required:
        schema["required"] = required
    else:
        schema.pop("required", None)
    return schema


# =============================================================================
# YAML Loading Helpers
# =============================================================================


def load_defaults_file(path: Path | str) -> SessionDefaults:
    """
    Load session defaults from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated SessionDefaults object

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the YAML doesn't match the schema
    """
    path = Path(path)
    with path.open() as f:
        data = yaml.safe_load(f)

    return SessionDefaults.model_validate(data or {})


def format_snapshot(snapshot: dict[str, Any]) -> str:
    """Pretty JSON for a defaults snapshot."""
    return json.dumps(snapshot, indent=2, sort_keys=False)
