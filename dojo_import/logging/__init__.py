from __future__ import annotations

from .error_log import ErrorLogBuffer
from .init import SUMMARY_LEVEL, get_logger, log_summary, reset_logging, set_debug, setup_logging

__all__ = [
    "ErrorLogBuffer",
    "SUMMARY_LEVEL",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "setup_logging",
]
