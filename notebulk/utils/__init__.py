"""Utility modules for notebulk"""

from .error_handler import (
    ErrorHandler,
    critical_operation,
    handle_errors,
    safe_with_default,
)
from .logger import get_logger, setup_logging
from .mixins import LoggerMixin

__all__ = [
    "get_logger",
    "setup_logging",
    "ErrorHandler",
    "handle_errors",
    "safe_with_default",
    "critical_operation",
    "LoggerMixin",
]
