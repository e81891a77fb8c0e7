"""
Git repository client.

Thin async wrapper around the ``git`` executable: each method is one
invocation, run with the repository root as working directory and bounded by
a timeout. Callers must not interleave invocations, they all touch the
working tree.
"""

from __future__ import annotations

import logging
from pathlib import Path

from binclean.core.tools.process import ProcessResult, run_process

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """
    A git invocation failed, timed out, or could not be started.

    ``spawn_failed`` is set when git itself could not be run, as opposed to
    git running and refusing the operation.
    """

    def __init__(self, command: list[str], detail: str, spawn_failed: bool = False):
        self.command = command
        self.detail = detail
        self.spawn_failed = spawn_failed
        super().__init__(f"{' '.join(command)} failed: {detail}")


class GitRepository:
    """
    Source-control operations used by the guard.

    Example:
        >>> repo = GitRepository(Path("."), timeout=60)
        >>> await repo.version()
        'git version 2.43.0'
        >>> await repo.status()
        [' M src/app.cs', '?? notes.txt']
    """

    def __init__(self, root: Path, timeout: float | None = 120.0):
        self.root = root
        self.timeout = timeout

    async def version(self) -> str:
        return (await self._git("version")).stdout.strip()

    async def is_work_tree(self) -> bool:
        """True when root is inside a git working tree."""
        try:
            result = await self._git("rev-parse", "--is-inside-work-tree")
        except RepositoryError as e:
            logger.debug(f"Not a work tree: {e}")
            return False
        return result.stdout.strip() == "true"

    async def status(self) -> list[str]:
        """Changed paths, one ``git status --porcelain`` line each."""
        result = await self._git("status", "--porcelain")
        return [line for line in result.stdout.splitlines() if line.strip()]

    async def create_snapshot(self, label: str) -> None:
        """Stash tracked and untracked changes under a label."""
        await self._git("stash", "push", "--include-untracked", "-m", label)

    async def list_snapshots(self) -> list[str]:
        """``git stash list`` lines, newest first (line n is ``stash@{n}``)."""
        result = await self._git("stash", "list")
        return [line for line in result.stdout.splitlines() if line.strip()]

    async def pop_snapshot(self, index: int) -> None:
        """Reapply and drop ``stash@{index}``, restoring the index as well."""
        await self._git("stash", "pop", "--index", f"stash@{{{index}}}")

    async def hard_reset(self) -> None:
        """Discard uncommitted changes to tracked files."""
        await self._git("reset", "--hard")

    async def _git(self, *args: str) -> ProcessResult:
        command = ["git", *args]
        result = await run_process(command, timeout=self.timeout, cwd=str(self.root))
        if not result.success:
            raise RepositoryError(
                command, result.failure_detail(), spawn_failed=result.spawn_failed
            )
        return result
