"""
Configuration loading with layered merging.

Implements the configuration precedence chain:
    defaults < env vars < command-line overrides

There is no config file layer.
"""

import logging
import os
from pathlib import Path
from typing import Any

from .models import BincleanConfig

logger = logging.getLogger(__name__)

_FALSE_VALUES = ("false", "0", "no", "")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_xdg_state_home() -> Path:
    """
    Get XDG state home directory.

    Returns:
        Path to state directory (defaults to ~/.local/state)
    """
    if xdg_state := os.environ.get("XDG_STATE_HOME"):
        return Path(xdg_state)
    return Path.home() / ".local" / "state"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested dicts
    are merged, not replaced.

    Example:
        >>> deep_merge({"git": {"enabled": True, "timeout_seconds": 5}},
        ...            {"git": {"enabled": False}})
        {'git': {'enabled': False, 'timeout_seconds': 5}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        BINCLEAN_GIT_TIMEOUT - overrides git.timeout_seconds
        BINCLEAN_NO_GIT - truthy value disables the source-control guard
        BINCLEAN_AUDIT_LOG - enables the removal log at the given path

    Invalid values are logged and ignored.

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if timeout_str := os.environ.get("BINCLEAN_GIT_TIMEOUT"):
        try:
            timeout = float(timeout_str)
            if timeout <= 0:
                logger.warning(
                    f"BINCLEAN_GIT_TIMEOUT must be > 0, got {timeout_str!r}, ignoring"
                )
            else:
                result = deep_merge(result, {"git": {"timeout_seconds": timeout}})
        except ValueError:
            logger.warning(f"Invalid BINCLEAN_GIT_TIMEOUT value {timeout_str!r}, ignoring")

    if no_git_str := os.environ.get("BINCLEAN_NO_GIT"):
        if no_git_str.lower() not in _FALSE_VALUES:
            result = deep_merge(result, {"git": {"enabled": False}})

    if audit_path := os.environ.get("BINCLEAN_AUDIT_LOG"):
        result = deep_merge(
            result, {"audit_log": {"enabled": True, "path": str(Path(audit_path).expanduser())}}
        )

    return result


def load_config(overrides: dict[str, Any] | None = None) -> BincleanConfig:
    """
    Build the effective configuration.

    Args:
        overrides: Values from the command line (highest precedence). Keys
            follow the BincleanConfig structure, e.g. ``{"git": {"enabled": False}}``.

    Returns:
        Validated BincleanConfig

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    merged = apply_env_overrides(BincleanConfig().model_dump(mode="json"))
    if overrides:
        merged = deep_merge(merged, overrides)
    return BincleanConfig.model_validate(merged)
