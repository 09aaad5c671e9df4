"""
Utility functions for Preordained Swapper.
"""

from .logging import (
    log_info,
    log_error,
    log_exception,
    init_log_file,
    update_log_file_path,
    get_log_file,
)

__all__ = [
    "log_info",
    "log_error",
    "log_exception",
    "init_log_file",
    "update_log_file_path",
    "get_log_file",
]
