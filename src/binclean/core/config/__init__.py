"""
Configuration models and loading.

This module provides Pydantic models for binclean configuration
with layered merging: defaults < env vars < command-line overrides.
"""

from .env import load_layered_env
from .loader import (
    apply_env_overrides,
    get_xdg_config_home,
    get_xdg_state_home,
    load_config,
)
from .models import (
    AuditLogConfig,
    BincleanConfig,
    CleanerConfig,
    GitConfig,
)

__all__ = [
    # Models
    "AuditLogConfig",
    "BincleanConfig",
    "CleanerConfig",
    "GitConfig",
    # Loader functions
    "apply_env_overrides",
    "get_xdg_config_home",
    "get_xdg_state_home",
    "load_config",
    "load_layered_env",
]
