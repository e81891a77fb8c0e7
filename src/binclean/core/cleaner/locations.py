"""
Well-known NuGet cache locations.

Each location is resolved from an OS-provided environment variable. A
missing variable only makes that one location unresolvable; the others are
still returned.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from binclean.core.cleaner.models import CacheLocation

# (description, environment variable, path segments below it)
NUGET_CACHE_DIRS: list[tuple[str, str, tuple[str, ...]]] = [
    ("global packages", "USERPROFILE", (".nuget", "packages")),
    ("http cache", "LOCALAPPDATA", ("NuGet", "Cache")),
    ("v3 cache", "LOCALAPPDATA", ("NuGet", "v3-cache")),
    ("plugins cache", "LOCALAPPDATA", ("NuGet", "plugins-cache")),
    ("fallback packages", "COMMONPROGRAMFILES(X86)", ("Microsoft SDKs", "NuGetPackages")),
]


def resolve_cache_locations(
    root: Path,
    environ: Mapping[str, str] | None = None,
) -> list[CacheLocation]:
    """
    Resolve the cache directories for a run.

    Args:
        root: Project root; its ``packages`` folder comes first.
        environ: Environment to resolve from (defaults to os.environ).

    Returns:
        One CacheLocation per well-known directory, in a fixed order.
        Unresolvable entries carry an error instead of a path.

    Example:
        >>> locations = resolve_cache_locations(Path("."), {"USERPROFILE": "C:/Users/me"})
        >>> locations[1].path
        PosixPath('C:/Users/me/.nuget/packages')
        >>> locations[2].error
        'LOCALAPPDATA is not set'
    """
    if environ is None:
        environ = os.environ

    locations = [CacheLocation("local packages", path=root / "packages")]
    for description, variable, segments in NUGET_CACHE_DIRS:
        base = environ.get(variable)
        if not base:
            locations.append(CacheLocation(description, error=f"{variable} is not set"))
            continue
        locations.append(CacheLocation(description, path=Path(base).joinpath(*segments)))

    return locations
