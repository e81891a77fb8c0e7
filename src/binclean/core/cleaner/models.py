"""
Cleaner data models.

CleanResult is the aggregate counter threaded through a cleaning run;
PatternSet is the optional name filter for the cache pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class CleanResult:
    """Number of directories and files removed."""

    directories: int = 0
    files: int = 0

    def __add__(self, other: CleanResult) -> CleanResult:
        if not isinstance(other, CleanResult):
            return NotImplemented
        return CleanResult(
            directories=self.directories + other.directories,
            files=self.files + other.files,
        )

    def __iadd__(self, other: CleanResult) -> CleanResult:
        if not isinstance(other, CleanResult):
            return NotImplemented
        self.directories += other.directories
        self.files += other.files
        return self

    def summary(self) -> str:
        return f"{self.directories} directories and {self.files} files"


@dataclass(frozen=True)
class PatternSet:
    """
    Substring filter for cache entries.

    An empty set matches everything. Matching is case-sensitive.

    Example:
        >>> PatternSet(("foo",)).matches("myfoo.dat")
        True
        >>> PatternSet(("foo",)).matches("Foo")
        False
    """

    patterns: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, patterns: list[str] | tuple[str, ...] | None) -> PatternSet:
        """Build a set, dropping empty strings (which would match everything)."""
        return cls(tuple(p for p in patterns or () if p))

    @property
    def is_active(self) -> bool:
        return bool(self.patterns)

    def matches(self, name: str) -> bool:
        if not self.patterns:
            return True
        return any(pattern in name for pattern in self.patterns)


@dataclass(frozen=True)
class CacheLocation:
    """A well-known cache directory, or the reason it could not be resolved."""

    description: str
    path: Path | None = None
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return self.path is not None
