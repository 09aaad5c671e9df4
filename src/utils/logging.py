"""
Logging utilities for Preordained Swapper.
Writes a plain-text run log: what was backed up, which simtypes were patched,
and the traceback of whatever stopped a run.
"""

import os
import sys
import traceback
from datetime import datetime
from typing import Optional

from constants import APP_VERSION, TEMP_LOG_DIR

# Module-level log file path
_log_file: str = os.path.join(TEMP_LOG_DIR, "error.log")


def get_log_file() -> str:
    """Get the current log file path."""
    return _log_file


def update_log_file_path(work_dir: str) -> None:
    """
    Move the log into another directory.

    Args:
        work_dir: Directory that should hold error.log
    """
    global _log_file
    os.makedirs(work_dir, exist_ok=True)
    _log_file = os.path.join(work_dir, "error.log")


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _append(text: str) -> None:
    try:
        with open(_log_file, "a") as f:
            f.write(text)
    except OSError as e:
        # If logging fails, print to console as fallback
        print(f"Failed to write to log file: {e}")
        print(text, end="")


def log_info(message: str) -> None:
    """Record a step of the run."""
    _append(f"[{_timestamp()}] INFO: {message}\n")


def log_error(
    error_msg: str,
    error_type: Optional[str] = None,
    traceback_str: Optional[str] = None,
) -> None:
    """
    Log an error message to the log file.

    Args:
        error_msg: The error message to log
        error_type: Optional error type/class name
        traceback_str: Optional traceback string
    """
    log_message = f"[{_timestamp()}] ERROR: {error_msg}\n"

    if error_type:
        log_message += f"Type: {error_type}\n"

    if traceback_str:
        log_message += f"Traceback:\n{traceback_str}\n"

    log_message += "-" * 80 + "\n"
    _append(log_message)


def log_exception(message: str, exc: BaseException) -> None:
    """Log an exception being handled, with its traceback."""
    log_error(
        f"{message}: {exc}",
        type(exc).__name__,
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


def init_log_file() -> bool:
    """
    Start a fresh log for this run.

    Returns:
        True if successful, False otherwise
    """
    try:
        log_dir = os.path.dirname(_log_file) or "."
        os.makedirs(log_dir, exist_ok=True)

        with open(_log_file, "w") as f:
            f.write(f"Preordained Swapper {APP_VERSION} - Started at {_timestamp()}\n")
            f.write(f"Python version: {sys.version}\n")
            f.write(f"Platform: {sys.platform}\n")
            f.write("-" * 80 + "\n")

        return True

    except OSError as e:
        print(f"Failed to initialize log file: {e}")
        return False
