"""
Pytest configuration and fixtures for xcbridge tests.

This module provides shared fixtures used across unit and integration tests:
a fresh session store per test, settings with the session-defaults wording
on and off, and a recording executor that never spawns processes.
"""

import tempfile
from pathlib import Path
from typing import Generator, Sequence

import pytest

from xcbridge.config import Settings
from xcbridge.engine import Dispatcher
from xcbridge.executor import CommandResponse, ExecOptions
from xcbridge.session import SessionStore
from xcbridge.tools import ToolContext


class RecordingExecutor:
    """CommandExecutor test double: records argv and returns a canned response."""

    def __init__(
        self,
        response: CommandResponse | None = None,
        raises: Exception | None = None,
    ) -> None:
        self.response = response or CommandResponse(success=True, output="ok", exit_code=0)
        self.raises = raises
        self.calls: list[dict] = []

    def __call__(
        self,
        argv: Sequence[str],
        description: str = "",
        use_shell: bool = True,
        options: ExecOptions | None = None,
    ) -> CommandResponse:
        self.calls.append({
            "argv": list(argv),
            "description": description,
            "use_shell": use_shell,
        })
        if self.raises is not None:
            raise self.raises
        return self.response


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store() -> SessionStore:
    """A fresh, empty session store."""
    return SessionStore()


@pytest.fixture
def settings() -> Settings:
    """Default settings with logging silenced."""
    return Settings(silence_logs=True)


@pytest.fixture
def legacy_settings() -> Settings:
    """Settings with session defaults disabled (parameter wording)."""
    return Settings(silence_logs=True, session_defaults_enabled=False)


@pytest.fixture
def executor() -> RecordingExecutor:
    """An executor whose commands always succeed."""
    return RecordingExecutor()


@pytest.fixture
def make_executor() -> type[RecordingExecutor]:
    """The recording executor class, for tests that need a canned failure."""
    return RecordingExecutor


@pytest.fixture
def context(store: SessionStore, settings: Settings, executor: RecordingExecutor) -> ToolContext:
    """Tool context wired to the fixtures above."""
    return ToolContext(store=store, settings=settings, executor=executor)


@pytest.fixture
def dispatcher(
    store: SessionStore,
    settings: Settings,
    executor: RecordingExecutor,
) -> Dispatcher:
    """Dispatcher with all built-in tools and the recording executor."""
    return Dispatcher(store=store, settings=settings, executor=executor)


@pytest.fixture
def sample_defaults_yaml() -> str:
    """Session defaults file content for testing."""
    return """
scheme: App
projectPath: /path/App.xcodeproj
simulatorId: SIM-1
"""
