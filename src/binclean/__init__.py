"""
binclean - build artifact cleaner

A CLI tool that deletes bin/obj directories (and optionally NuGet caches)
while keeping uncommitted git changes safely stashed.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from binclean.core.cleaner.models import CleanResult, PatternSet
from binclean.core.config.models import BincleanConfig

__all__ = ["BincleanConfig", "CleanResult", "PatternSet", "__version__"]
