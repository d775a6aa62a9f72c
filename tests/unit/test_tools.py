"""
Unit tests for the built-in tools.

Tests cover:
- boot_sim: session-sourced simulatorId, executor failures
- clean: argv construction, project/workspace switching, scheme rule
- session-set/clear/show-defaults
- Public schemas with session defaults on and off
"""

import json
from typing import Any

import pytest

from xcbridge.config import Settings
from xcbridge.executor import CommandResponse
from xcbridge.schema import ToolResponse
from xcbridge.session import SessionStore
from xcbridge.tools import ToolContext
from xcbridge.tools.build import CleanParams, CleanTool, build_clean_command
from xcbridge.tools.session import (
    SessionClearDefaultsTool,
    SessionSetDefaultsTool,
    SessionShowDefaultsTool,
)
from xcbridge.tools.simulator import BootSimTool


# =============================================================================
# boot_sim
# =============================================================================


class TestBootSim:
    """Tests for the boot_sim tool."""

    def test_uses_session_simulator(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"simulatorId": "SIM-1"})

        response = BootSimTool().handle({}, context)

        assert not response.is_error
        assert response.text.startswith(
            "Simulator booted successfully. To make it visible, use: open_sim()"
        )
        assert 'install_app_sim({ simulatorId: "SIM-1"' in response.text
        assert executor.calls == [
            {
                "argv": ["xcrun", "simctl", "boot", "SIM-1"],
                "description": "Boot Simulator",
                "use_shell": False,
            }
        ]

    def test_explicit_argument_wins(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"simulatorId": "SIM-1"})

        BootSimTool().handle({"simulatorId": "SIM-2"}, context)

        assert executor.calls[0]["argv"][-1] == "SIM-2"

    def test_field_name_argument_wins(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"simulatorId": "DEFAULT"})

        BootSimTool().handle({"simulator_id": "EXPLICIT"}, context)

        assert executor.calls[0]["argv"][-1] == "EXPLICIT"

    def test_missing_simulator(self, context: ToolContext, executor: Any) -> None:
        response = BootSimTool().handle({}, context)

        assert response.is_error
        assert response.text == (
            "Error: Missing required session defaults\n"
            "simulatorId is required\n"
            'Set with: session-set-defaults { "simulatorId": "..." }'
        )
        assert executor.calls == []

    def test_missing_simulator_parameter_wording(
        self,
        store: SessionStore,
        legacy_settings: Settings,
        executor: Any,
    ) -> None:
        context = ToolContext(store=store, settings=legacy_settings, executor=executor)

        response = BootSimTool().handle({}, context)

        assert response.text.startswith("Error: Missing required parameters\n")
        assert "session-set-defaults" not in response.text

    def test_command_failure(
        self, store: SessionStore, settings: Settings, make_executor: Any
    ) -> None:
        executor = make_executor(
            response=CommandResponse(success=False, error="Unable to boot device", exit_code=149)
        )
        context = ToolContext(store=store, settings=settings, executor=executor)

        response = BootSimTool().handle({"simulatorId": "SIM-1"}, context)

        assert response.is_error
        assert response.text == "Error: Boot simulator operation failed\nUnable to boot device"

    def test_executor_raises(
        self, store: SessionStore, settings: Settings, make_executor: Any
    ) -> None:
        executor = make_executor(raises=FileNotFoundError("xcrun not found"))
        context = ToolContext(store=store, settings=settings, executor=executor)

        response = BootSimTool().handle({"simulatorId": "SIM-1"}, context)

        assert response.is_error
        assert "xcrun not found" in response.text


# =============================================================================
# clean
# =============================================================================


class TestCleanCommand:
    """Tests for xcodebuild argv construction."""

    def test_project_defaults(self) -> None:
        params = CleanParams.model_validate({"projectPath": "/p/App.xcodeproj"})

        assert build_clean_command(params) == [
            "xcodebuild",
            "-project",
            "/p/App.xcodeproj",
            "-configuration",
            "Debug",
            "-destination",
            "generic/platform=iOS",
            "clean",
        ]

    def test_workspace_with_everything(self) -> None:
        params = CleanParams.model_validate({
            "workspacePath": "/w/App.xcworkspace",
            "scheme": "App",
            "configuration": "Release",
            "derivedDataPath": "/tmp/dd",
            "extraArgs": ["-quiet"],
            "platform": "macOS",
        })

        assert build_clean_command(params) == [
            "xcodebuild",
            "-workspace",
            "/w/App.xcworkspace",
            "-scheme",
            "App",
            "-configuration",
            "Release",
            "-destination",
            "generic/platform=macOS",
            "-derivedDataPath",
            "/tmp/dd",
            "-quiet",
            "clean",
        ]

    @pytest.mark.parametrize(
        ("platform", "expected"),
        [
            ("iOS Simulator", "iOS"),
            ("watchOS Simulator", "watchOS"),
            ("tvOS Simulator", "tvOS"),
            ("visionOS Simulator", "visionOS"),
            ("visionOS", "visionOS"),
        ],
    )
    def test_simulator_platforms_map_to_device(self, platform: str, expected: str) -> None:
        params = CleanParams.model_validate({"projectPath": "/p", "platform": platform})
        assert f"generic/platform={expected}" in build_clean_command(params)


class TestCleanTool:
    """Tests for the clean tool through handle()."""

    def test_project_from_session(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"projectPath": "/p.xcodeproj", "scheme": "App"})

        response = CleanTool().handle({}, context)

        assert response.text == "Clean succeeded."
        argv = executor.calls[0]["argv"]
        assert argv[1:3] == ["-project", "/p.xcodeproj"]
        assert ["-scheme", "App"] == argv[3:5]

    def test_workspace_argument_replaces_session_project(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"projectPath": "/p.xcodeproj", "scheme": "App"})

        response = CleanTool().handle({"workspacePath": "/w.xcworkspace"}, context)

        assert not response.is_error
        argv = executor.calls[0]["argv"]
        assert "-project" not in argv
        assert argv[1:3] == ["-workspace", "/w.xcworkspace"]
        # resolution leaves the store alone
        assert context.store.get("projectPath") == "/p.xcodeproj"

    def test_field_name_workspace_replaces_session_project(
        self, context: ToolContext, executor: Any
    ) -> None:
        context.store.set_defaults({"projectPath": "/p.xcodeproj"})

        response = CleanTool().handle(
            {"workspace_path": "/w.xcworkspace", "scheme": "S"}, context
        )

        assert not response.is_error
        argv = executor.calls[0]["argv"]
        assert "-project" not in argv
        assert argv[1:5] == ["-workspace", "/w.xcworkspace", "-scheme", "S"]

    def test_workspace_needs_scheme(self, context: ToolContext) -> None:
        response = CleanTool().handle({"workspacePath": "/w.xcworkspace"}, context)

        assert response.is_error
        assert response.text.startswith("Error: Parameter validation failed\nInvalid parameters:")
        assert "scheme is required when workspacePath is provided." in response.text

    def test_both_containers(self, context: ToolContext, executor: Any) -> None:
        response = CleanTool().handle(
            {"projectPath": "/p.xcodeproj", "workspacePath": "/w.xcworkspace"},
            context,
        )

        assert response.is_error
        assert (
            "Mutually exclusive parameters provided: projectPath, workspacePath. Provide only one."
            in response.text
        )
        assert executor.calls == []

    def test_no_container(self, context: ToolContext) -> None:
        response = CleanTool().handle({"scheme": "App"}, context)

        assert response.is_error
        assert "Provide a project or workspace" in response.text
        assert '"projectPath": "..."' in response.text

    def test_invalid_platform(self, context: ToolContext) -> None:
        response = CleanTool().handle({"projectPath": "/p", "platform": "Android"}, context)

        assert response.is_error
        assert "platform:" in response.text

    def test_build_failure(
        self, store: SessionStore, settings: Settings, make_executor: Any
    ) -> None:
        executor = make_executor(
            response=CommandResponse(success=False, error="** CLEAN FAILED **", exit_code=65)
        )
        context = ToolContext(store=store, settings=settings, executor=executor)

        response = CleanTool().handle({"projectPath": "/p"}, context)

        assert response.text == "Error: Clean failed\n** CLEAN FAILED **"


# =============================================================================
# Session Tools
# =============================================================================


class TestSessionTools:
    """Tests for the session management tools."""

    def test_set_defaults_echoes_snapshot(self, context: ToolContext) -> None:
        response = SessionSetDefaultsTool().handle(
            {"scheme": "App", "simulatorId": "SIM-1"},
            context,
        )

        assert not response.is_error
        header, body = response.text.split("\n", 1)
        assert header == "Defaults updated:"
        assert json.loads(body) == {"scheme": "App", "simulatorId": "SIM-1"}
        assert context.store.get_all() == {"scheme": "App", "simulatorId": "SIM-1"}

    def test_set_defaults_switches_pair(self, context: ToolContext) -> None:
        tool = SessionSetDefaultsTool()
        tool.handle({"projectPath": "/p.xcodeproj"}, context)
        tool.handle({"workspacePath": "/w.xcworkspace"}, context)

        assert context.store.get_all() == {"workspacePath": "/w.xcworkspace"}

    def test_set_defaults_rejects_both_sides(self, context: ToolContext) -> None:
        response = SessionSetDefaultsTool().handle(
            {"simulatorId": "SIM-1", "simulatorName": "iPhone 16"},
            context,
        )

        assert response.is_error
        assert "simulatorId and simulatorName are mutually exclusive" in response.text
        assert context.store.get_all() == {}

    def test_set_defaults_rejects_unknown_key(self, context: ToolContext) -> None:
        response = SessionSetDefaultsTool().handle({"target": "App"}, context)

        assert response.is_error
        assert "target" in response.text
        assert context.store.get_all() == {}

    def test_set_defaults_ignores_blank_values(self, context: ToolContext) -> None:
        context.store.set_defaults({"scheme": "App"})

        response = SessionSetDefaultsTool().handle({"scheme": "", "deviceId": "D-1"}, context)

        assert not response.is_error
        assert context.store.get_all() == {"scheme": "App", "deviceId": "D-1"}

    def test_clear_selected(self, context: ToolContext) -> None:
        context.store.set_defaults({"scheme": "App", "deviceId": "D-1"})

        response = SessionClearDefaultsTool().handle({"keys": ["scheme"]}, context)

        assert response.text == "Session defaults cleared"
        assert context.store.get_all() == {"deviceId": "D-1"}

    @pytest.mark.parametrize("args", [{}, {"all": True}, {"keys": ["scheme"], "all": True}])
    def test_clear_everything(self, context: ToolContext, args: dict) -> None:
        context.store.set_defaults({"scheme": "App", "deviceId": "D-1"})

        SessionClearDefaultsTool().handle(args, context)

        assert context.store.get_all() == {}

    def test_clear_unknown_key(self, context: ToolContext) -> None:
        context.store.set_defaults({"scheme": "App"})

        response = SessionClearDefaultsTool().handle({"keys": ["target"]}, context)

        assert response.is_error
        assert context.store.get_all() == {"scheme": "App"}

    def test_show(self, context: ToolContext) -> None:
        context.store.set_defaults({"scheme": "App"})

        response = SessionShowDefaultsTool().handle({}, context)

        assert json.loads(response.text) == {"scheme": "App"}

    def test_session_tools_do_not_read_defaults(self, context: ToolContext) -> None:
        """Existing defaults are never merged into session tool arguments."""
        context.store.set_defaults({"projectPath": "/p.xcodeproj"})

        response = SessionSetDefaultsTool().handle({"simulatorName": "iPhone 16"}, context)

        assert not response.is_error
        assert context.store.get_all() == {
            "projectPath": "/p.xcodeproj",
            "simulatorName": "iPhone 16",
        }


# =============================================================================
# Public Schemas
# =============================================================================


class TestInputSchema:
    """Tests for advertised schemas."""

    def test_boot_sim_hides_session_key(self, settings: Settings) -> None:
        schema = BootSimTool().input_schema(settings)

        assert "simulatorId" not in schema["properties"]
        assert "required" not in schema

    def test_boot_sim_full_schema_when_disabled(self, legacy_settings: Settings) -> None:
        schema = BootSimTool().input_schema(legacy_settings)

        assert "simulatorId" in schema["properties"]
        assert schema["required"] == ["simulatorId"]

    def test_clean_keeps_call_specific_keys(self, settings: Settings) -> None:
        properties = CleanTool().input_schema(settings)["properties"]

        assert {"platform", "derivedDataPath", "extraArgs"} <= set(properties)
        assert not {"projectPath", "workspacePath", "scheme", "configuration"} & set(properties)

    def test_set_defaults_schema_lists_all_keys(self, settings: Settings) -> None:
        properties = SessionSetDefaultsTool().input_schema(settings)["properties"]
        assert "projectPath" in properties
        assert "suppressWarnings" in properties

    def test_response_type(self, context: ToolContext) -> None:
        assert isinstance(SessionShowDefaultsTool().handle(None, context), ToolResponse)
