"""
Append-only log of removed files.

Plain text, one path per line, each run introduced by a separator line.
Writing is best effort: an unwritable log is logged once and then ignored,
it never fails a deletion.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

SEPARATOR_TEMPLATE = "===== binclean run {timestamp} ====="


class RemovalLog:
    """
    Records removed file paths.

    Example:
        >>> log = RemovalLog(Path("~/.local/state/binclean/removed.log").expanduser())
        >>> log.start_run()
        >>> log.record(Path("proj/bin/app.exe"))
    """

    def __init__(self, path: Path):
        self.path = path
        self._disabled = False

    def start_run(self) -> None:
        """Write the run separator line."""
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        self._append(SEPARATOR_TEMPLATE.format(timestamp=timestamp))

    def record(self, removed: Path) -> None:
        """Append one removed file."""
        self._append(str(removed))

    def _append(self, line: str) -> None:
        if self._disabled:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.warning(f"Removal log disabled, unable to write {self.path}: {e}")
            self._disabled = True
