"""
Build tools.

- clean: remove build products for a project or a workspace (xcodebuild clean)

projectPath and workspacePath are an exclusive pair: supplying one drops a
session default for the other, supplying both is rejected.
"""

from typing import Literal

from pydantic import Field, model_validator

from xcbridge.logging_config import get_logger
from xcbridge.resolve import OneOf
from xcbridge.schema import ToolParams, ToolResponse
from xcbridge.tools.base import Tool, ToolAnnotations, ToolContext

logger = get_logger(__name__)

Platform = Literal[
    "macOS",
    "iOS",
    "iOS Simulator",
    "watchOS",
    "watchOS Simulator",
    "tvOS",
    "tvOS Simulator",
    "visionOS",
    "visionOS Simulator",
]

# Build products are shared between device and simulator, so clean targets
# the device platform.
CLEAN_PLATFORM = {
    "iOS Simulator": "iOS",
    "watchOS Simulator": "watchOS",
    "tvOS Simulator": "tvOS",
    "visionOS Simulator": "visionOS",
}


class CleanParams(ToolParams):
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
    scheme: str | None = Field(default=None, description="Optional: The scheme to clean")
    configuration: str | None = Field(
        default=None,
        description="Optional: Build configuration to clean (Debug, Release, etc.)",
    )
    derived_data_path: str | None = Field(
        default=None,
        alias="derivedDataPath",
        description="Optional: Path where derived data might be located",
    )
    extra_args: list[str] | None = Field(
        default=None,
        alias="extraArgs",
        description="Additional xcodebuild arguments",
    )
    platform: Platform | None = Field(
        default=None,
        description="Optional: Platform to clean for (defaults to iOS)",
    )

    @model_validator(mode="after")
    def _workspace_needs_scheme(self) -> "CleanParams":
        if self.workspace_path and not self.scheme:
            msg = "scheme is required when workspacePath is provided."
            raise ValueError(msg)
        return self


def build_clean_command(params: CleanParams) -> list[str]:
    """xcodebuild argv for a clean."""
    command = ["xcodebuild"]
    if params.project_path:
        command += ["-project", params.project_path]
    else:
        command += ["-workspace", params.workspace_path]
    if params.scheme:
        command += ["-scheme", params.scheme]
    command += ["-configuration", params.configuration or "Debug"]

    platform = params.platform or "iOS"
    command += ["-destination", f"generic/platform={CLEAN_PLATFORM.get(platform, platform)}"]

    if params.derived_data_path:
        command += ["-derivedDataPath", params.derived_data_path]
    command += params.extra_args or []
    command.append("clean")
    return command


class CleanTool(Tool):
    """Clean build products with xcodebuild."""

    params_model = CleanParams
    requirements = (OneOf(("projectPath", "workspacePath"), "Provide a project or workspace"),)
    exclusive_pairs = (("projectPath", "workspacePath"),)
    session_keys = ("projectPath", "workspacePath", "scheme", "configuration")

    @property
    def name(self) -> str:
        return "clean"

    @property
    def description(self) -> str:
        return "Cleans build products with xcodebuild."

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Clean", destructive_hint=True)

    def run(self, params: CleanParams, context: ToolContext) -> ToolResponse:
        command = build_clean_command(params)

        try:
            result = context.executor(command, "Clean", False)
        except Exception as e:
            logger.error("Error during clean operation: %s", e)
            return ToolResponse.error("Clean failed", str(e))

        if not result.success:
            return ToolResponse.error("Clean failed", result.error or result.output)

        return ToolResponse.ok("Clean succeeded.")
