"""
Unit tests for settings loading and logging setup.
"""

import logging
from pathlib import Path
from typing import Generator

import pytest
from rich.logging import RichHandler

from xcbridge.config import Settings, load_settings
from xcbridge.errors import ConfigError
from xcbridge.logging_config import ROOT_LOGGER, get_logger, setup_logging


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self) -> None:
        settings = load_settings(env={})

        assert settings.session_defaults_enabled is True
        assert settings.log_level == "INFO"
        assert settings.silence_logs is False
        assert settings.command_timeout_seconds == 600
        assert settings.enabled_tools == ()

    @pytest.mark.parametrize("value", ["true", "1", "YES", "on"])
    def test_disable_session_defaults(self, value: str) -> None:
        settings = load_settings(env={"XCBRIDGE_DISABLE_SESSION_DEFAULTS": value})
        assert settings.session_defaults_enabled is False

    def test_disable_flag_falsy(self) -> None:
        settings = load_settings(env={"XCBRIDGE_DISABLE_SESSION_DEFAULTS": "false"})
        assert settings.session_defaults_enabled is True

    def test_reads_environment_on_each_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XCBRIDGE_DISABLE_SESSION_DEFAULTS", raising=False)
        assert load_settings().session_defaults_enabled is True

        monkeypatch.setenv("XCBRIDGE_DISABLE_SESSION_DEFAULTS", "1")
        assert load_settings().session_defaults_enabled is False

    def test_log_level_case_insensitive(self) -> None:
        assert load_settings(env={"XCBRIDGE_LOG_LEVEL": "debug"}).log_level == "DEBUG"

    def test_numeric_values(self) -> None:
        settings = load_settings(
            env={"XCBRIDGE_COMMAND_TIMEOUT": "30", "XCBRIDGE_MAX_OUTPUT_BYTES": "1024"}
        )
        assert settings.command_timeout_seconds == 30
        assert settings.max_output_bytes == 1024

    def test_enabled_tools(self) -> None:
        settings = load_settings(env={"XCBRIDGE_ENABLED_TOOLS": "clean, boot_sim,"})
        assert settings.enabled_tools == ("clean", "boot_sim")

    def test_invalid_value(self) -> None:
        with pytest.raises(ConfigError, match="command_timeout_seconds"):
            load_settings(env={"XCBRIDGE_COMMAND_TIMEOUT": "-1"})

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ConfigError):
            load_settings(env={"XCBRIDGE_LOG_LEVEL": "LOUD"})


class TestSettingsFile:
    """Tests for YAML settings files."""

    def test_file_values(self, temp_dir: Path) -> None:
        path = temp_dir / "settings.yaml"
        path.write_text("log_level: WARNING\ncommand_timeout_seconds: 120\n")

        settings = load_settings(env={}, path=path)

        assert settings.log_level == "WARNING"
        assert settings.command_timeout_seconds == 120

    def test_env_overrides_file(self, temp_dir: Path) -> None:
        path = temp_dir / "settings.yaml"
        path.write_text("session_defaults_enabled: true\n")

        settings = load_settings(env={"XCBRIDGE_DISABLE_SESSION_DEFAULTS": "1"}, path=path)

        assert settings.session_defaults_enabled is False

    def test_unknown_field(self, temp_dir: Path) -> None:
        path = temp_dir / "settings.yaml"
        path.write_text("colour: blue\n")

        with pytest.raises(ConfigError):
            load_settings(env={}, path=path)

    def test_not_a_mapping(self, temp_dir: Path) -> None:
        path = temp_dir / "settings.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_settings(env={}, path=path)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_settings(env={}, path=temp_dir / "nope.yaml")


class TestLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_logging(self) -> Generator[None, None, None]:
        yield
        setup_logging(Settings(silence_logs=True))

    def test_rich_handler_on_stderr(self) -> None:
        root = setup_logging(Settings(log_level="DEBUG"))

        assert root.name == ROOT_LOGGER
        assert root.level == logging.DEBUG
        assert root.propagate is False
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
        assert root.handlers[0].console.stderr is True

    def test_silenced(self) -> None:
        root = setup_logging(Settings(silence_logs=True))

        assert isinstance(root.handlers[0], logging.NullHandler)
        assert not root.isEnabledFor(logging.CRITICAL)

    def test_reconfigure_replaces_handler(self) -> None:
        setup_logging(Settings(log_level="INFO"))
        root = setup_logging(Settings(log_level="ERROR"))

        assert len(root.handlers) == 1
        assert root.level == logging.ERROR

    def test_module_loggers_are_children(self) -> None:
        root = setup_logging(Settings(log_level="WARNING"))
        child = get_logger("xcbridge.resolve.resolver")

        assert child.getEffectiveLevel() == root.level
