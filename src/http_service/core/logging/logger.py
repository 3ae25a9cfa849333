"""
Main logger for HTTP Service.

Wraps a stdlib logger with console/rotating-file handlers, the configured
formatter and filters, and keyword-field logging with sensitive values masked.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from ..utils import mask_sensitive_data
from .config import LoggingConfig, LogLevel
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter


class ServiceLogger:
    """
    Structured logger for HTTP Service.

    Example:
        >>> logger = ServiceLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request completed", method="GET", status_code=200)
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "http_service"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self._get_level(self.config.level))
        self._logger.propagate = False  # Don't propagate to root logger

        # Remove existing handlers (if reinitializing)
        self._close_handlers()

        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._add_handler(logging.StreamHandler(sys.stdout), formatter, filters)

        if self.config.enable_file and self.config.file_path:
            # Create directory if it doesn't exist
            Path(self.config.file_path).parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=self.config.file_path,
                maxBytes=self.config.max_bytes,
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            self._add_handler(handler, formatter, filters)

    def _add_handler(
        self,
        handler: logging.Handler,
        formatter: logging.Formatter,
        filters: List[logging.Filter]
    ) -> None:
        handler.setLevel(self._get_level(self.config.level))
        handler.setFormatter(formatter)
        for f in filters:
            handler.addFilter(f)
        self._logger.addHandler(handler)

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    @property
    def handlers(self) -> List[logging.Handler]:
        return list(self._logger.handlers)

    def log(self, level: int, message: str, **kwargs: Any) -> None:
        """
        Log message with extra fields.

        Args:
            level: Logging level (e.g. logging.INFO)
            message: Log message
            **kwargs: Extra fields, sensitive keys are masked
        """
        if self._closed:
            return
        self._logger.log(level, message, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log(logging.ERROR, message, **kwargs)

    def _close_handlers(self) -> None:
        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

    def close(self) -> None:
        """
        Close all handlers and release resources.

        Idempotent - it can be safely called multiple times.
        """
        if self._closed:
            return
        self._close_handlers()
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
