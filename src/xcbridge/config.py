"""
Configuration for xcbridge.

Settings come from, lowest precedence first:
    1. Field defaults
    2. An optional YAML file (same field names as Settings)
    3. XCBRIDGE_* environment variables

The environment is read each time load_settings() is called, not at import.
A Dispatcher loads its settings once, when it is built, so a running
`xcbridge serve` keeps the wording toggle it started with until restarted.

Environment variables:
    XCBRIDGE_DISABLE_SESSION_DEFAULTS  true/1/yes switches error wording to
                                       "parameters" and advertises full schemas
    XCBRIDGE_LOG_LEVEL                 DEBUG, INFO, WARNING, ERROR
    XCBRIDGE_SILENCE_LOGS              true/1/yes disables logging
    XCBRIDGE_COMMAND_TIMEOUT           seconds per external command
    XCBRIDGE_MAX_OUTPUT_BYTES          cap on captured command output
    XCBRIDGE_ENABLED_TOOLS             comma-separated tool names to register
"""

import os
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from xcbridge.errors import ConfigError

ENV_PREFIX = "XCBRIDGE_"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """
    Process settings.

    Attributes:
        session_defaults_enabled: Use session-defaults wording and hide
            session-managed keys from public schemas
        log_level: Minimum log level
        silence_logs: Drop all log output
        command_timeout_seconds: Timeout for each external command
        max_output_bytes: Maximum captured stdout/stderr per command
        enabled_tools: Restrict registration to these tool names (empty = all)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    session_defaults_enabled: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    silence_logs: bool = False
    command_timeout_seconds: float = Field(default=600, gt=0)
    max_output_bytes: int = Field(default=4 * 1024 * 1024, gt=0)
    enabled_tools: tuple[str, ...] = ()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in _TRUTHY


def _from_env(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}

    if f"{ENV_PREFIX}DISABLE_SESSION_DEFAULTS" in env:
        values["session_defaults_enabled"] = not _is_truthy(
            env[f"{ENV_PREFIX}DISABLE_SESSION_DEFAULTS"]
        )
    if f"{ENV_PREFIX}LOG_LEVEL" in env:
        values["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
    if f"{ENV_PREFIX}SILENCE_LOGS" in env:
        values["silence_logs"] = _is_truthy(env[f"{ENV_PREFIX}SILENCE_LOGS"])
    if f"{ENV_PREFIX}COMMAND_TIMEOUT" in env:
        values["command_timeout_seconds"] = env[f"{ENV_PREFIX}COMMAND_TIMEOUT"]
    if f"{ENV_PREFIX}MAX_OUTPUT_BYTES" in env:
        values["max_output_bytes"] = env[f"{ENV_PREFIX}MAX_OUTPUT_BYTES"]
    if f"{ENV_PREFIX}ENABLED_TOOLS" in env:
        names = env[f"{ENV_PREFIX}ENABLED_TOOLS"].split(",")
        values["enabled_tools"] = tuple(n.strip() for n in names if n.strip())

    return values


def load_settings(
    env: Mapping[str, str] | None = None,
    path: Path | str | None = None,
) -> Settings:
    """
    Build Settings from an optional YAML file and the environment.

    Args:
        env: Environment mapping (defaults to os.environ)
        path: Optional YAML file with Settings fields

    Returns:
        Validated Settings

    Raises:
        ConfigError: If the file can't be read or a value is invalid
    """
    env = os.environ if env is None else env
    source = str(path) if path else "environment"

    values: dict[str, Any] = {}
    if path is not None:
        try:
            with Path(path).open() as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(message=f"Cannot read settings file: {e}", source=source) from e
        if not isinstance(data, dict):
            raise ConfigError(
                message=f"Settings file must contain a mapping: {path}",
                source=source,
            )
        values.update(data)

    values.update(_from_env(env))

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(message=f"Invalid settings: {problems}", source=source) from e
