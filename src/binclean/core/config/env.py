"""
``.env`` support for binclean settings.

Only ``BINCLEAN_*`` variables are taken from ``.env`` files; every other key
is ignored. The NuGet cache locations are resolved from ``USERPROFILE``,
``LOCALAPPDATA`` and ``COMMONPROGRAMFILES(X86)``, and a ``.env`` lying in
whatever directory binclean is started from must not be able to point a
cache purge somewhere else.

Files, lowest precedence first:
- ``$XDG_CONFIG_HOME/binclean/.env``
- ``.env`` in the working directory

A variable already present in the process environment is never replaced.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "BINCLEAN_"


def read_settings(path: Path) -> dict[str, str]:
    """``BINCLEAN_*`` entries of one ``.env`` file (empty if it is missing)."""
    if not path.is_file():
        return {}

    settings: dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        if not key.startswith(ENV_PREFIX):
            logger.debug(f"Ignoring {key} from {path}")
            continue
        settings[key] = value
    return settings


def default_env_files(project_dir: Path | None = None) -> list[Path]:
    """User file first, then the project file."""
    if project_dir is None:
        project_dir = Path.cwd()
    return [get_xdg_config_home() / "binclean" / ".env", project_dir / ".env"]


def load_layered_env(env_files: Iterable[Path] | None = None) -> dict[str, str]:
    """
    Export ``BINCLEAN_*`` settings from ``.env`` files into ``os.environ``.

    Args:
        env_files: Files in increasing precedence (defaults to
            :func:`default_env_files`).

    Returns:
        The variables that were actually set.

    Example:
        >>> load_layered_env([Path("project/.env")])
        {'BINCLEAN_GIT_TIMEOUT': '30'}
    """
    if env_files is None:
        env_files = default_env_files()

    merged: dict[str, str] = {}
    for path in env_files:
        merged.update(read_settings(Path(path)))

    applied = {key: value for key, value in merged.items() if key not in os.environ}
    os.environ.update(applied)
    return applied
