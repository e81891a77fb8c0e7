"""
Run orchestration.

Sequences a complete run:
1. Detect git and stash uncommitted changes
2. Delete bin/obj directories (and the NuGet caches when requested)
3. Restore the working tree

Restoring is attempted whenever the stash step succeeded, even if cleaning
was interrupted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from binclean.core.audit_log import RemovalLog
from binclean.core.cleaner import ArtifactCleaner, CleanResult, PatternSet
from binclean.core.config.models import BincleanConfig
from binclean.core.guard import GitRepository, RepositoryError, SourceControlGuard
from binclean.core.reporting import Reporter

logger = logging.getLogger(__name__)


@dataclass
class CleanOptions:
    """What a run should do."""

    root: Path
    nuget: bool = False
    patterns: PatternSet = field(default_factory=PatternSet)
    config: BincleanConfig = field(default_factory=BincleanConfig)


@dataclass
class RunSummary:
    """Outcome of a run."""

    result: CleanResult
    elapsed_seconds: float
    restore_error: RepositoryError | None = None
    stash_label: str | None = None

    def message(self) -> str:
        return f"Cleaned {self.result.summary()} in {self.elapsed_seconds:.2f}s."


async def run_clean(
    options: CleanOptions,
    git_reporter: Reporter,
    clean_reporter: Reporter,
    environ: Mapping[str, str] | None = None,
) -> RunSummary:
    """
    Clean a project tree inside the source-control guard.

    Args:
        options: Root, cache pass switch, patterns and configuration.
        git_reporter: Receives guard messages.
        clean_reporter: Receives cleaner messages.
        environ: Environment for cache location lookup (defaults to os.environ).

    Returns:
        RunSummary with counts and elapsed time. A failed restore is reported
        and returned in ``restore_error`` so the counts are never lost.

    Raises:
        RepositoryError: If git could not be run while stashing. Nothing has
            been deleted then. Git refusing to stash only leaves the guard
            unprotected; the clean still runs.
    """
    started = time.monotonic()
    config = options.config

    guard: SourceControlGuard | None = None
    if config.git.enabled:
        repository = GitRepository(options.root, timeout=config.git.timeout_seconds)
        guard = await SourceControlGuard.create(repository, git_reporter)
        if guard.available:
            await guard.save()
        else:
            guard = None
    else:
        git_reporter.info("Disabled")

    removal_log: RemovalLog | None = None
    if config.audit_log.enabled:
        removal_log = RemovalLog(config.audit_log.path)
        removal_log.start_run()

    cleaner = ArtifactCleaner(
        clean_reporter,
        config=config.cleaner,
        removal_log=removal_log,
        environ=environ,
    )

    result = CleanResult()
    restore_error: RepositoryError | None = None
    try:
        result += await cleaner.clean(options.root)
        if options.nuget:
            result += await cleaner.clean_caches(options.root, options.patterns)
    finally:
        if guard is not None:
            try:
                await guard.restore()
            except RepositoryError as e:
                git_reporter.error(f"Unable to restore working tree: {e}")
                restore_error = e

    summary = RunSummary(
        result,
        time.monotonic() - started,
        restore_error=restore_error,
        stash_label=guard.stash_label if guard is not None else None,
    )
    logger.debug(summary.message())
    return summary
