"""
Source-control guard.

Shelves uncommitted changes before a clean and brings them back afterwards,
so deleting build output can never be mixed up with the developer's edits.

State machine:
    UNAVAILABLE  git missing or not a repository; every operation is a no-op
    CLEAN        no outstanding stash
    SNAPSHOTTED  one stash taken by this guard, identified by its token
    UNPROTECTED  git refused to stash; restore leaves the tree alone

The stash is found again by searching ``git stash list`` for the token
embedded in its label, so stashes created elsewhere during the run cannot
make it restore the wrong one.
"""

from __future__ import annotations

import logging
import secrets
from enum import Enum

from binclean.core.guard.repository import GitRepository, RepositoryError
from binclean.core.reporting import Reporter

logger = logging.getLogger(__name__)

STASH_LABEL_PREFIX = "binclean"


class GuardState(str, Enum):
    """Source-control guard state."""

    UNAVAILABLE = "unavailable"
    CLEAN = "clean"
    SNAPSHOTTED = "snapshotted"
    UNPROTECTED = "unprotected"


def new_stash_label() -> str:
    """Label with a fresh random token, e.g. ``binclean-3f9a1c07b2d4``."""
    return f"{STASH_LABEL_PREFIX}-{secrets.token_hex(6)}"


class SourceControlGuard:
    """
    Saves and restores the working tree around a clean.

    Use :meth:`create` rather than the constructor so that git is probed.

    Example:
        >>> guard = await SourceControlGuard.create(GitRepository(root), reporter)
        >>> await guard.save()
        >>> ...  # delete build output
        >>> await guard.restore()
    """

    def __init__(
        self,
        repository: GitRepository,
        reporter: Reporter,
        state: GuardState = GuardState.UNAVAILABLE,
    ):
        self.repository = repository
        self.reporter = reporter
        self.state = state
        self.stash_label: str | None = None

    @classmethod
    async def create(cls, repository: GitRepository, reporter: Reporter) -> SourceControlGuard:
        """
        Probe git and build a guard in the matching state.

        Never raises: a missing git executable or a root outside any
        repository yields an UNAVAILABLE guard.
        """
        guard = cls(repository, reporter)

        try:
            version = await repository.version()
        except RepositoryError as e:
            logger.debug(f"git probe failed: {e}")
            reporter.info("Git not found!")
            return guard

        if not await repository.is_work_tree():
            reporter.info("Not a git repository")
            return guard

        reporter.info(f"Git version: {version.removeprefix('git version ').strip()}")
        guard.state = GuardState.CLEAN
        return guard

    @property
    def available(self) -> bool:
        return self.state is not GuardState.UNAVAILABLE

    async def save(self) -> None:
        """
        Stash uncommitted changes, if there are any.

        Only acts in the CLEAN state. If git runs but fails (e.g. a repository
        without its initial commit), the failure is reported as a warning and
        the guard becomes UNPROTECTED: cleaning goes ahead and restore will
        not touch the working tree.

        Raises:
            RepositoryError: If git could not be run at all; nothing has been
                deleted yet.
        """
        if self.state in (GuardState.UNAVAILABLE, GuardState.UNPROTECTED):
            return
        if self.state is GuardState.SNAPSHOTTED:
            logger.warning(f"Working tree already stashed as {self.stash_label}")
            return

        label = new_stash_label()
        try:
            changes = await self.repository.status()
            if not changes:
                self.reporter.info("No changes found")
                return
            await self.repository.create_snapshot(label)
        except RepositoryError as e:
            if e.spawn_failed:
                raise
            self.state = GuardState.UNPROTECTED
            self.reporter.warning(f"Unable to stash changes: {e.detail}")
            return

        self.stash_label = label
        self.state = GuardState.SNAPSHOTTED
        self.reporter.info(f"Stashed {len(changes)} changes.")

    async def restore(self) -> None:
        """
        Return the working tree to its pre-clean state.

        CLEAN: hard reset. SNAPSHOTTED: hard reset, then pop our stash.
        UNPROTECTED: nothing, the edits were never stashed. If the
        stash cannot be found the tree is left alone and a warning is
        reported. The guard stays SNAPSHOTTED after a pop, so a second call
        finds no stash and never resets the restored changes away.

        Raises:
            RepositoryError: If git fails.
        """
        if self.state is GuardState.UNAVAILABLE:
            return

        if self.state is GuardState.UNPROTECTED:
            self.reporter.warning("Changes were not stashed, working tree left alone")
            return

        if self.state is GuardState.CLEAN:
            await self.repository.hard_reset()
            self.reporter.info("Working tree reset")
            return

        label = self.stash_label
        snapshots = await self.repository.list_snapshots()
        index = next(
            (i for i, line in enumerate(snapshots) if label and label in line),
            None,
        )
        if index is None:
            self.reporter.warning("Unable to find stash!")
            return

        await self.repository.hard_reset()
        await self.repository.pop_snapshot(index)
        self.reporter.info("Changes restored")
