"""
Configuration data models for binclean.

There is no configuration file: values come from built-in defaults,
environment variables and command-line options, validated here via Pydantic.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CleanerConfig(BaseModel):
    """
    What the artifact walk deletes and what it leaves alone.
    """
    artifact_names: list[str] = Field(
        default_factory=lambda: ["bin", "obj"],
        description="Directory names treated as build output (exact match)"
    )
    skip_names: list[str] = Field(
        default_factory=lambda: ["packages"],
        description="Directory names the artifact walk never enters"
    )
    cache_metadata_suffix: str = Field(
        default=".metadata",
        description="Suffix of cache bookkeeping files kept by a filtered cache pass"
    )

    @field_validator("artifact_names", "skip_names")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        """Names are single path segments, never paths."""
        for name in v:
            if not name or "/" in name or "\\" in name:
                raise ValueError(f"Invalid directory name: {name!r}")
        return v


class GitConfig(BaseModel):
    """
    Source-control guard settings.
    """
    enabled: bool = Field(
        default=True,
        description="Stash uncommitted changes around the clean"
    )
    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Upper bound for a single git invocation"
    )


class AuditLogConfig(BaseModel):
    """
    Append-only log of removed file paths.
    """
    enabled: bool = Field(
        default=False,
        description="Record every removed file"
    )
    path: Path = Field(
        default_factory=lambda: default_audit_log_path(),
        description="Log file location"
    )


class BincleanConfig(BaseModel):
    """
    Complete binclean configuration.

    Example:
        >>> config = BincleanConfig()
        >>> config.cleaner.artifact_names
        ['bin', 'obj']
    """
    model_config = ConfigDict(extra="ignore")

    cleaner: CleanerConfig = Field(default_factory=CleanerConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    audit_log: AuditLogConfig = Field(default_factory=AuditLogConfig)


def default_audit_log_path() -> Path:
    """~/.local/state/binclean/removed.log (or the XDG_STATE_HOME equivalent)."""
    from binclean.core.config.loader import get_xdg_state_home

    return get_xdg_state_home() / "binclean" / "removed.log"
