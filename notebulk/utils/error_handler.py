"""Shared error handling helpers.

Wrap operations whose failure should be logged in a consistent shape and
either degraded to a default value or re-raised to the caller.
"""

import inspect
import functools
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ErrorHandler:
    """Logging patterns for caught exceptions"""

    @staticmethod
    def describe(exception: BaseException) -> str:
        """Return a short, user-facing description of an exception."""
        message = str(exception).strip()
        return message or exception.__class__.__name__

    @staticmethod
    def log_and_return_default(
        operation_name: str,
        exception: Exception,
        default_value: T,
        level: str = "error",
        **kwargs: Any,
    ) -> T:
        """Log the failure and hand back a default value."""
        log = getattr(logger, level, logger.error)
        log(
            f"Failed to {operation_name}",
            error=ErrorHandler.describe(exception),
            **kwargs,
        )
        return default_value

    @staticmethod
    def log_and_reraise(
        operation_name: str, exception: Exception, **kwargs: Any
    ) -> None:
        """Log the failure, then raise the original exception again."""
        logger.error(
            f"Failed to {operation_name}",
            error=ErrorHandler.describe(exception),
            **kwargs,
        )
        raise exception


def handle_errors(
    operation_name: str,
    default_return: Any = None,
    reraise: bool = False,
    level: str = "error",
    **log_kwargs: Any,
):
    """
    Decorator that applies the ErrorHandler patterns to sync and async callables.

    Args:
        operation_name: Name used in the log event ("Failed to <name>")
        default_return: Value returned when the call fails and is not re-raised
        reraise: Re-raise the exception after logging it
        level: Log level used when the failure is absorbed
        **log_kwargs: Extra context added to the log event
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if reraise:
                    ErrorHandler.log_and_reraise(operation_name, e, **log_kwargs)
                return ErrorHandler.log_and_return_default(
                    operation_name, e, default_return, level, **log_kwargs
                )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if reraise:
                    ErrorHandler.log_and_reraise(operation_name, e, **log_kwargs)
                return ErrorHandler.log_and_return_default(
                    operation_name, e, default_return, level, **log_kwargs
                )

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return wrapper

    return decorator


def safe_with_default(
    operation_name: str, default_value: Any, level: str = "warning", **log_kwargs: Any
):
    """Absorb failures and return ``default_value``."""
    return handle_errors(
        operation_name, default_return=default_value, level=level, **log_kwargs
    )


def critical_operation(operation_name: str, **log_kwargs: Any):
    """Log failures and re-raise them."""
    return handle_errors(operation_name, reraise=True, **log_kwargs)
