"""
binclean CLI - Main application entry point.

This module sets up the Typer CLI application.
"""

import asyncio
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from binclean import __version__
from binclean.cli.argv import preprocess_argv
from binclean.cli.errors import (
    ExitCode,
    print_invalid_option_error,
    print_not_a_directory_error,
    print_path_not_found_error,
    print_restore_error,
    print_stash_error,
)
from binclean.core.cleaner import PatternSet
from binclean.core.config import load_config, load_layered_env
from binclean.core.guard import RepositoryError
from binclean.core.orchestrator import CleanOptions, run_clean
from binclean.core.reporting import RichReporter, create_progress

app = typer.Typer(
    name="binclean",
    help="Delete bin/obj build output (and NuGet caches) without touching your changes",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging.

    Args:
        debug: If True, enable DEBUG level logging on stderr
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"binclean version {__version__}")
        raise typer.Exit(0)


@app.command()
def main(
    path: Path = typer.Option(
        Path("."),
        "--path",
        "-p",
        help="Root directory to clean",
    ),
    nuget: bool = typer.Option(
        False,
        "--nuget",
        "-n",
        help="Also purge the NuGet package caches",
    ),
    nuget_pattern: list[str] | None = typer.Option(
        None,
        "--nuget-pattern",
        help="Only purge cache entries whose name contains one of these (implies --nuget)",
    ),
    no_git: bool = typer.Option(
        False,
        "--no-git",
        help="Do not stash/restore uncommitted changes",
    ),
    git_timeout: float | None = typer.Option(
        None,
        "--git-timeout",
        help="Seconds to wait for a single git command",
    ),
    audit_log: Path | None = typer.Option(
        None,
        "--audit-log",
        help="Append every removed file to this log",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Recursively delete bin/ and obj/ directories.

    Uncommitted git changes are stashed before anything is deleted and
    restored afterwards.

    Examples:
        binclean                              # Clean the current directory
        binclean --path ~/src/solution        # Clean another tree
        binclean --nuget                      # Also purge every NuGet cache
        binclean --nuget-pattern Contoso Acme # Purge matching cache entries only
    """
    setup_logging(debug)
    load_layered_env()

    if not path.exists():
        print_path_not_found_error(path)
        raise typer.Exit(ExitCode.USER_ERROR)
    if not path.is_dir():
        print_not_a_directory_error(path)
        raise typer.Exit(ExitCode.USER_ERROR)

    overrides: dict[str, dict[str, object]] = {}
    if no_git:
        overrides.setdefault("git", {})["enabled"] = False
    if git_timeout is not None:
        overrides.setdefault("git", {})["timeout_seconds"] = git_timeout
    if audit_log is not None:
        overrides["audit_log"] = {"enabled": True, "path": str(audit_log.expanduser())}

    try:
        config = load_config(overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        print_invalid_option_error(field, first["msg"])
        raise typer.Exit(ExitCode.USER_ERROR)

    options = CleanOptions(
        root=path,
        nuget=nuget or bool(nuget_pattern),
        patterns=PatternSet.of(nuget_pattern),
        config=config,
    )

    try:
        with create_progress(console) as progress:
            git_reporter = RichReporter(progress, "Git")
            clean_reporter = RichReporter(progress, "Cleaning")

            try:
                summary = asyncio.run(run_clean(options, git_reporter, clean_reporter))
            except RepositoryError as e:
                git_reporter.warning("Unable to stash changes")
                git_reporter.finish()
                clean_reporter.warning("Skipped")
                clean_reporter.finish()
                print_stash_error(e)
                raise typer.Exit(ExitCode.GENERAL_ERROR)

            git_reporter.finish()
            clean_reporter.finish("Done")
    except KeyboardInterrupt:
        console.print("\n[yellow]Cleaning interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)

    console.print(summary.message())

    if summary.restore_error is not None:
        print_restore_error(summary.restore_error, summary.stash_label)
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def cli_main() -> None:
    """
    Main CLI entry point.

    The argv preprocessor expands ``--nuget-pattern a b`` before Typer
    parses it.
    """
    sys.argv[1:] = preprocess_argv(sys.argv[1:])
    app()


__all__ = ["app", "cli_main"]
