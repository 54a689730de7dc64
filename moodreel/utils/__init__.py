"""Shared utilities: logging and progress persistence."""

from moodreel.utils.logger import setup_logger
from moodreel.utils.progress_store import ProgressStore

__all__ = ["ProgressStore", "setup_logger"]
