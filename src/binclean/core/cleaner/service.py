"""
Build artifact cleaner.

Walks a project tree and deletes build output:
- ``bin``/``obj`` directories anywhere below the root (exact name match)
- optionally, the NuGet package caches, filtered by name patterns

Every filesystem call runs in a worker thread so the event loop stays
responsive; subtrees are still processed one after another. Failures on a
single entry are reported and skipped, never raised.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from collections.abc import Mapping
from pathlib import Path

from binclean.core.audit_log import RemovalLog
from binclean.core.cleaner.locations import resolve_cache_locations
from binclean.core.cleaner.models import CleanResult, PatternSet
from binclean.core.config.models import CleanerConfig
from binclean.core.reporting import Reporter
from binclean.core.tools.process import IS_WINDOWS

logger = logging.getLogger(__name__)


def _scan(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def _is_link(entry: os.DirEntry[str]) -> bool:
    """Symlink, or on Windows any reparse point (junctions included)."""
    if entry.is_symlink():
        return True
    if IS_WINDOWS:
        attributes = entry.stat(follow_symlinks=False).st_file_attributes
        return bool(attributes & stat.FILE_ATTRIBUTE_REPARSE_POINT)
    return False


def _is_dir(entry: os.DirEntry[str]) -> bool:
    # Links to directories are treated as plain entries, never followed
    try:
        return entry.is_dir(follow_symlinks=False) and not _is_link(entry)
    except OSError:
        return False


class ArtifactCleaner:
    """
    Deletes build artifacts and package caches.

    Example:
        >>> cleaner = ArtifactCleaner(reporter)
        >>> result = await cleaner.clean(Path("."))
        >>> result += await cleaner.clean_caches(Path("."), PatternSet.of(["Newtonsoft"]))
        >>> print(result.summary())
        2 directories and 14 files
    """

    def __init__(
        self,
        reporter: Reporter,
        config: CleanerConfig | None = None,
        removal_log: RemovalLog | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """
        Initialize the cleaner.

        Args:
            reporter: Receives status and per-entry error messages.
            config: Artifact/skip names and the cache metadata suffix.
            removal_log: Optional log every removed file is appended to.
            environ: Environment used to resolve cache locations
                (defaults to os.environ).
        """
        self.reporter = reporter
        self.config = config or CleanerConfig()
        self.removal_log = removal_log
        self.environ = environ

    async def clean(self, root: Path) -> CleanResult:
        """
        Remove every ``bin``/``obj`` directory below root.

        The walk is depth-first and pre-order, driven by an explicit stack.
        Artifact directories are emptied wholesale and then removed;
        directories named in ``skip_names`` are not entered at all.

        Args:
            root: Existing directory, validated by the caller.

        Returns:
            Directories and files removed.
        """
        result = CleanResult()
        artifact_names = set(self.config.artifact_names)
        skip_names = set(self.config.skip_names)

        pending = [root]
        while pending:
            directory = pending.pop()
            entries = await self._list(directory)
            if entries is None:
                continue

            subdirectories: list[Path] = []
            for entry in entries:
                if not _is_dir(entry):
                    continue

                path = Path(entry.path)
                if entry.name in artifact_names:
                    self.reporter.info(f"{entry.name} ({path})")
                    result.files += await self.delete_files(path)
                    if await self._remove_dir(path):
                        result.directories += 1
                    continue

                if entry.name in skip_names:
                    logger.debug(f"Skipping {path}")
                    continue

                subdirectories.append(path)

            # Reversed so siblings are visited in name order
            pending.extend(reversed(subdirectories))

        return result

    async def clean_caches(self, root: Path, patterns: PatternSet | None = None) -> CleanResult:
        """
        Purge the NuGet caches.

        Each location is emptied (honoring the pattern filter) and then
        removed if it ended up empty. Unresolvable, missing or unreadable
        locations are reported and skipped.

        Args:
            root: Project root, for its local ``packages`` folder.
            patterns: Optional filter; empty or None deletes everything.

        Returns:
            Directories and files removed across all locations.
        """
        result = CleanResult()

        for location in resolve_cache_locations(root, self.environ):
            if not location.resolved:
                self.reporter.error(f"Unable to resolve {location.description}: {location.error}")
                continue

            self.reporter.info(f"NuGet ({location.path})")
            result.files += await self.delete_files(location.path, patterns)
            if await self._remove_dir(location.path):
                result.directories += 1

        return result

    async def delete_files(self, path: Path, patterns: PatternSet | None = None) -> int:
        """
        Delete everything below path, bottom-up.

        Subdirectories are emptied and then removed (removal failures are
        ignored). With an active filter, only subdirectories whose name
        matches are entered, and everything below a matching directory is
        deleted. Non-matching files are deleted too, unless they are cache
        metadata files.

        Args:
            path: Directory to empty. It is not removed itself.
            patterns: Optional name filter.

        Returns:
            Number of files removed.
        """
        files = 0
        entries = await self._list(path)
        if entries is None:
            return files

        filtering = patterns is not None and patterns.is_active

        for entry in entries:
            child = Path(entry.path)

            if _is_dir(entry):
                if filtering and not patterns.matches(entry.name):
                    continue
                files += await self.delete_files(child)
                await self._remove_dir(child)
                continue

            if (
                filtering
                and not patterns.matches(entry.name)
                and entry.name.endswith(self.config.cache_metadata_suffix)
            ):
                continue

            try:
                await asyncio.to_thread(os.unlink, child)
            except OSError as e:
                self.reporter.error(f"Unable to delete {child}: {e}")
                continue

            files += 1
            if self.removal_log is not None:
                self.removal_log.record(child)

        return files

    async def _list(self, directory: Path) -> list[os.DirEntry[str]] | None:
        try:
            return await asyncio.to_thread(_scan, directory)
        except OSError as e:
            self.reporter.error(f"Unable to read {directory}: {e}")
            return None

    async def _remove_dir(self, directory: Path) -> bool:
        try:
            await asyncio.to_thread(os.rmdir, directory)
        except OSError as e:
            logger.debug(f"Unable to remove {directory}: {e}")
            return False
        return True
