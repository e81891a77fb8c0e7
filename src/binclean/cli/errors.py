"""
Standardized error handling and exit codes for the binclean CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes.
"""

from enum import IntEnum
from pathlib import Path

from rich.console import Console

from binclean.core.guard.repository import RepositoryError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for binclean."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error, e.g. git failed while stashing or restoring."""

    USER_ERROR = 2
    """User input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Path not found: ./src",
        ...     solution="binclean --path <existing directory>",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_path_not_found_error(path: Path) -> None:
    """Print error when the root to clean does not exist."""
    print_error(
        f"{path} does not exist",
        solution="binclean --path <existing directory>",
    )


def print_not_a_directory_error(path: Path) -> None:
    """Print error when the root to clean is a file."""
    print_error(
        f"{path} is not a directory",
        solution="binclean --path <directory containing your projects>",
    )


def print_stash_error(error: RepositoryError) -> None:
    """Print error when uncommitted changes could not be stashed."""
    print_error(
        "Unable to stash uncommitted changes",
        reason=f"{error}. Nothing was deleted.",
        solution="git status  # or rerun with --no-git",
    )


def print_restore_error(error: RepositoryError, stash_label: str | None = None) -> None:
    """Print error when the working tree could not be restored after cleaning."""
    if stash_label:
        solution = f"git stash list  # your changes are in the stash labelled {stash_label}"
    else:
        solution = "git status"
    print_error(
        "Unable to restore the working tree",
        reason=str(error),
        solution=solution,
    )


def print_invalid_option_error(option: str, reason: str) -> None:
    """Print error when an option value fails validation."""
    print_error(f"Invalid option: {option}", reason=reason)


__all__ = [
    "ExitCode",
    "print_error",
    "print_invalid_option_error",
    "print_not_a_directory_error",
    "print_path_not_found_error",
    "print_restore_error",
    "print_stash_error",
]
