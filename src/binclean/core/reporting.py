"""
Status and error reporting for long-running operations.

The cleaner and the source-control guard only ever talk to a ``Reporter``.
The CLI provides ``RichReporter``, which renders one spinner line per
channel ("Git", "Cleaning") on a shared Rich progress display and prints
errors above it.
"""

import logging
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn
from rich.text import Text

logger = logging.getLogger(__name__)


@runtime_checkable
class Reporter(Protocol):
    """
    Fire-and-forget sink for progress messages.

    Implementations must not raise: a reporting failure is never a reason to
    stop deleting files.
    """

    def info(self, message: str) -> None:
        """Current activity (replaces the previous status)."""
        ...

    def warning(self, message: str) -> None:
        """Something the user should look at; processing carries on."""
        ...

    def error(self, message: str) -> None:
        """A failed operation; processing carries on."""
        ...


def create_progress(console: Console | None = None) -> Progress:
    """Progress display shared by all reporters of a run."""
    return Progress(
        SpinnerColumn(finished_text=""),
        TextColumn("{task.description}"),
        console=console,
        transient=False,
    )


class RichReporter:
    """
    Reporter bound to one line of a Rich progress display.

    Example:
        >>> with create_progress() as progress:
        ...     git = RichReporter(progress, "Git")
        ...     git.info("Stashed 3 changes.")
        ...     git.finish()
    """

    def __init__(self, progress: Progress, label: str):
        self.progress = progress
        self.label = label
        self._message = "starting"
        self._warned = False
        self._task_id: TaskID = progress.add_task(self._describe(), total=None)

    def _describe(self, symbol: str | None = None) -> str:
        prefix = f"{symbol} " if symbol else ""
        return f"{prefix}{self.label}: {self._message}"

    def info(self, message: str) -> None:
        logger.debug(f"{self.label}: {message}")
        self._message = message
        self.progress.update(self._task_id, description=self._describe())

    def warning(self, message: str) -> None:
        logger.warning(f"{self.label}: {message}")
        self._message = message
        self._warned = True
        self.progress.update(self._task_id, description=self._describe())

    def error(self, message: str) -> None:
        logger.error(f"{self.label}: {message}")
        self.progress.console.print(Text(f"❌ {message}", style="bold red"))

    def finish(self, message: str | None = None) -> None:
        """Stop the spinner, marking the line as done (or warned)."""
        if message is not None:
            self._message = message
        symbol = "⚠️" if self._warned else "✔️"
        self.progress.update(
            self._task_id,
            description=self._describe(symbol),
            total=1,
            completed=1,
        )
