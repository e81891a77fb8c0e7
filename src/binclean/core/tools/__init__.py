"""External tool helpers."""

from binclean.core.tools.process import ProcessResult, run_process

__all__ = ["ProcessResult", "run_process"]
