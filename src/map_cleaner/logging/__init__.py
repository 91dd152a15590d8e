"""Progress and structured run logging utilities."""

from .audit import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp
from .progress import ProgressReporter

__all__ = ["JsonlRunLogger", "ProgressReporter", "RunEvent", "new_run_id", "utc_timestamp"]
