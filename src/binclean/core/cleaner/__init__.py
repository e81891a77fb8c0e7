"""
Build artifact cleaning.

Deletes ``bin``/``obj`` directories below a project root and, optionally,
the NuGet package caches.
"""

from binclean.core.cleaner.locations import resolve_cache_locations
from binclean.core.cleaner.models import CacheLocation, CleanResult, PatternSet
from binclean.core.cleaner.service import ArtifactCleaner

__all__ = [
    "ArtifactCleaner",
    "CacheLocation",
    "CleanResult",
    "PatternSet",
    "resolve_cache_locations",
]
