"""Logger access for notebulk's stateful components."""

from typing import cast

import structlog


class LoggerMixin:
    """Mixin class to add logging capabilities to any class"""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Logger named by module path, e.g. notebulk.jobs.runner.BatchRunner"""
        cls = self.__class__
        return cast(
            "structlog.stdlib.BoundLogger",
            structlog.get_logger(f"{cls.__module__}.{cls.__qualname__}"),
        )
