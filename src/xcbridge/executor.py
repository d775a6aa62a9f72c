"""
External command execution.

Tool logic never spawns processes directly; it receives a CommandExecutor
and calls it with an argument vector. Tests inject a fake executor, the
server uses SubprocessExecutor.

Execution Modes:
    use_shell=True   argv is quoted with shlex.join and run as sh -c "<cmd>"
    use_shell=False  argv is executed directly, no shell involved

Failure Handling:
    - Non-zero exit: CommandResponse(success=False, error=<stderr>)
    - Timeout: CommandResponse(success=False, error="... timed out ...")
    - Spawn failure (missing executable, permissions): OSError propagates;
      tool logic turns it into an error response
"""

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from xcbridge.config import Settings
from xcbridge.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResponse:
    """
    Result of running one external command.

    Attributes:
        success: Whether the command exited with status 0
        output: Captured stdout
        error: Captured stderr (or a description) when success is False
        exit_code: Process exit status, None if it never ran to completion
    """

    success: bool
    output: str = ""
    error: str | None = None
    exit_code: int | None = None


@dataclass(frozen=True)
class ExecOptions:
    """
    Per-call execution options.

    Attributes:
        env: Variables overlaid on the current environment
        cwd: Working directory
        timeout_seconds: Overrides the executor's default timeout
    """

    env: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None
    timeout_seconds: float | None = None


class CommandExecutor(Protocol):
    """Callable that runs an argument vector and reports the outcome."""

    def __call__(
        self,
        argv: Sequence[str],
        description: str = "",
        use_shell: bool = True,
        options: ExecOptions | None = None,
    ) -> CommandResponse: ...


def _decode(data: bytes, limit: int) -> str:
    if len(data) > limit:
        marker = f"\n... [truncated, exceeded {limit} bytes]".encode()
        data = data[: max(limit - len(marker), 0)] + marker
    return data.decode("utf-8", errors="replace")


class SubprocessExecutor:
    """
    CommandExecutor backed by subprocess.run.

    Attributes:
        timeout_seconds: Default timeout per command
        max_output_bytes: Cap applied separately to stdout and stderr
    """

    def __init__(self, timeout_seconds: float = 600, max_output_bytes: int = 4 * 1024 * 1024) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_output_bytes = max_output_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubprocessExecutor":
        return cls(
            timeout_seconds=settings.command_timeout_seconds,
            max_output_bytes=settings.max_output_bytes,
        )

    def __call__(
        self,
        argv: Sequence[str],
        description: str = "",
        use_shell: bool = True,
        options: ExecOptions | None = None,
    ) -> CommandResponse:
        if not argv:
            msg = "argv must contain at least the executable"
            raise ValueError(msg)

        options = options or ExecOptions()
        timeout = options.timeout_seconds or self.timeout_seconds

        if use_shell:
            display = shlex.join(argv)
            cmd = ["sh", "-c", display]
        else:
            cmd = list(argv)
            display = " ".join(cmd)

        logger.info("Executing %s command: %s", description or "external", display)

        env = os.environ.copy()
        env.update(options.env)

        try:
            result = subprocess.run(
                cmd,
                cwd=options.cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=timeout,
                shell=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("%s command timed out after %ss", description or "external", timeout)
            return CommandResponse(
                success=False,
                error=f"Command timed out after {timeout} seconds: {display}",
            )

        stdout = _decode(result.stdout, self.max_output_bytes)
        stderr = _decode(result.stderr, self.max_output_bytes)
        success = result.returncode == 0

        return CommandResponse(
            success=success,
            output=stdout,
            error=None if success else stderr,
            exit_code=result.returncode,
        )


_default_executor: SubprocessExecutor | None = None


def get_default_executor(settings: Settings | None = None) -> SubprocessExecutor:
    """
    The process-wide executor, created on first use.

    Passing settings rebuilds it with new limits.
    """
    global _default_executor
    if settings is not None or _default_executor is None:
        _default_executor = (
            SubprocessExecutor.from_settings(settings) if settings else SubprocessExecutor()
        )
    return _default_executor
