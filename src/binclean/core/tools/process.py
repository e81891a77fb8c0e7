"""
Process management utilities for external tool invocations.

This module provides utilities for:
- Spawning a process with captured output and an optional timeout
- Process group management so a timed-out tool leaves no children behind
- Platform-specific handling (Windows vs Unix)
- Graceful shutdown with escalating termination

The source-control guard runs every ``git`` invocation through
:func:`run_process`, one at a time.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"
IS_UNIX = not IS_WINDOWS


class ProcessResult(BaseModel):
    """Structured result from process execution."""

    success: bool
    """Whether the process completed successfully (exit code 0)."""

    exit_code: int | None
    """Process exit code, or None if killed/timed out."""

    stdout: str
    """Standard output from the process."""

    stderr: str
    """Standard error from the process."""

    duration_ms: int
    """Execution duration in milliseconds."""

    timed_out: bool = False
    """Whether the process was terminated due to timeout."""

    error: str | None = None
    """Error message if the process could not be run to completion."""

    @property
    def spawn_failed(self) -> bool:
        """True when the process never ran (missing executable, bad cwd)."""
        return self.error is not None and not self.timed_out

    def failure_detail(self) -> str:
        """Best available description of why the process failed."""
        if self.error:
            return self.error
        detail = self.stderr.strip() or self.stdout.strip()
        if detail:
            return detail
        return f"exit code {self.exit_code}"


def _elapsed_ms(started_at: datetime) -> int:
    return int((datetime.now(timezone.utc) - started_at).total_seconds() * 1000)


async def run_process(
    command: list[str],
    *,
    timeout: float | None = None,
    cwd: str | None = None,
) -> ProcessResult:
    """
    Run a subprocess with timeout and automatic cleanup.

    Args:
        command: Command and arguments as a list (e.g., ["git", "status"])
        timeout: Optional timeout in seconds. None means no timeout.
        cwd: Optional working directory for the process.

    Returns:
        ProcessResult with output, exit code, and timing information.
        A missing executable, a timeout or any spawn failure is reported in
        the result (``success=False``) rather than raised.

    Example:
        >>> result = await run_process(
        ...     ["git", "stash", "list"],
        ...     timeout=30.0,
        ...     cwd="/path/to/repo"
        ... )
        >>> if result.success:
        ...     print(result.stdout)
    """
    started_at = datetime.now(timezone.utc)
    process: asyncio.subprocess.Process | None = None

    try:
        kwargs: dict[str, Any] = {
            "stdout": asyncio.subprocess.PIPE,
            "stderr": asyncio.subprocess.PIPE,
            "stdin": asyncio.subprocess.DEVNULL,
            "cwd": cwd,
        }

        # Own process group on Unix so a timeout can take down the whole tree
        if IS_UNIX:
            kwargs["start_new_session"] = True

        logger.debug(f"Running process: {' '.join(command)}")
        process = await asyncio.create_subprocess_exec(*command, **kwargs)

        try:
            if timeout is not None:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout,
                )
            else:
                stdout_bytes, stderr_bytes = await process.communicate()

            stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
            stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""

            return ProcessResult(
                success=process.returncode == 0,
                exit_code=process.returncode,
                stdout=stdout,
                stderr=stderr,
                duration_ms=_elapsed_ms(started_at),
                timed_out=False,
            )

        except asyncio.TimeoutError:
            await kill_process_group(process)

            return ProcessResult(
                success=False,
                exit_code=None,
                stdout="",
                stderr="",
                duration_ms=_elapsed_ms(started_at),
                timed_out=True,
                error=f"{command[0]} timed out after {timeout}s",
            )

    except FileNotFoundError:
        return ProcessResult(
            success=False,
            exit_code=None,
            stdout="",
            stderr="",
            duration_ms=_elapsed_ms(started_at),
            error=f"Command not found: {command[0]}. Ensure it is installed and in PATH.",
        )

    except OSError as e:
        # Bad cwd, permission denied on the executable, etc.
        logger.exception(f"Unable to start process: {command}")
        return ProcessResult(
            success=False,
            exit_code=None,
            stdout="",
            stderr="",
            duration_ms=_elapsed_ms(started_at),
            error=f"Unable to start {command[0]}: {e}",
        )

    finally:
        if process is not None:
            await ensure_process_terminated(process)


async def kill_process_group(process: asyncio.subprocess.Process) -> None:
    """
    Kill the process group to ensure all child processes are terminated.

    This function handles platform differences:
    - Unix: Uses process groups with os.killpg()
    - Windows: Falls back to direct process.kill()

    Args:
        process: The subprocess to kill along with its children.
    """
    if process.returncode is not None:
        return

    try:
        if IS_UNIX:
            try:
                # pgid == pid because of start_new_session=True
                pgid = os.getpgid(process.pid)
                os.killpg(pgid, signal.SIGKILL)
                logger.debug(f"Killed process group {pgid}")
            except (ProcessLookupError, OSError) as e:
                logger.debug(f"Process group kill failed (process may be dead): {e}")
        else:
            try:
                process.kill()
                logger.debug(f"Killed process {process.pid} on Windows")
            except (ProcessLookupError, OSError) as e:
                logger.debug(f"Process kill failed (process may be dead): {e}")

        try:
            await asyncio.wait_for(process.wait(), timeout=5.0)
        except asyncio.TimeoutError:
            if IS_UNIX:
                try:
                    process.kill()
                    await asyncio.wait_for(process.wait(), timeout=2.0)
                except (asyncio.TimeoutError, ProcessLookupError, OSError):
                    pass

    except Exception as e:
        logger.warning(f"Error during process group kill: {e}")


async def ensure_process_terminated(process: asyncio.subprocess.Process) -> None:
    """
    Ensure the process is fully terminated using graceful shutdown.

    Escalates from SIGTERM (two second grace period) to a process group kill.
    Should be called in finally blocks to guarantee cleanup.

    Args:
        process: The subprocess to terminate.
    """
    if process.returncode is not None:
        return

    try:
        logger.debug(f"Terminating process {process.pid} gracefully")
        process.terminate()

        try:
            await asyncio.wait_for(process.wait(), timeout=2.0)
            logger.debug(f"Process {process.pid} terminated gracefully")
        except asyncio.TimeoutError:
            logger.debug(f"Process {process.pid} did not terminate gracefully, force killing")
            await kill_process_group(process)

    except (ProcessLookupError, OSError) as e:
        logger.debug(f"Process termination skipped (already dead): {e}")
    except Exception as e:
        logger.warning(f"Error during process termination: {e}")

