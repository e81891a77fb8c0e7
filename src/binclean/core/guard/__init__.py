"""
Source-control safety wrapper.

Stashes uncommitted changes before cleaning and restores them afterwards.
"""

from binclean.core.guard.repository import GitRepository, RepositoryError
from binclean.core.guard.service import GuardState, SourceControlGuard, new_stash_label

__all__ = [
    "GitRepository",
    "GuardState",
    "RepositoryError",
    "SourceControlGuard",
    "new_stash_label",
]
