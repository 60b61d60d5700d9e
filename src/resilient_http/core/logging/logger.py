"""
Logger used by the client for observability around retries.

Wraps a stdlib ``logging.Logger``; structured fields are passed as keyword
arguments, masked for secrets and attached to the record via ``extra``.
"""

import logging
from typing import Any, Dict, Optional, Union

from .config import LogLevel, LoggingConfig
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import STANDARD_FIELDS, get_formatter
from .handlers import build_handlers
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "resilient_http"


class ClientLogger:
    """
    Logger collaborator: level + message + optional structured fields.

    Without a config it only wraps ``logging.getLogger(name)`` and leaves
    handler setup to the application. With a config it installs its own
    handlers and stops propagation.

    Example:
        >>> logger = ClientLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.warning("Request failed, retrying", attempt=1, delay=0.1)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config
        self.name = name
        self._closed = False
        self._owns_handlers = config is not None

        self._logger = logging.getLogger(name)

        if config is None:
            return

        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters = []
        if config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        for handler in build_handlers(config, level, get_formatter(config.format.value), filters):
            self._logger.addHandler(handler)

    @staticmethod
    def _get_level(level: Union[LogLevel, str, int]) -> int:
        if isinstance(level, int):
            return level
        if isinstance(level, LogLevel):
            level = level.value
        return getattr(logging, str(level).upper())

    @staticmethod
    def _extra(fields: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = mask_sensitive_data(fields)
        # Reserved LogRecord attributes would make logging raise KeyError
        return {
            (f"field_{key}" if key in STANDARD_FIELDS else key): value
            for key, value in sanitized.items()
        }

    def _emit(self, level: int, message: str, fields: Dict[str, Any], exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        # Messages may embed error text with URLs or credentials
        self._logger.log(level, mask_sensitive_data(message), extra=self._extra(fields), exc_info=exc_info)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def is_enabled_for(self, level: Union[LogLevel, str, int]) -> bool:
        return self._logger.isEnabledFor(self._get_level(level))

    def log(self, level: Union[LogLevel, str, int], message: str, **fields: Any) -> None:
        """
        Log ``message`` at ``level`` with structured fields.

        Example:
            >>> logger.log("INFO", "Request completed", status=200)
        """
        self._emit(self._get_level(level), message, fields)

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log with traceback; call from an exception handler."""
        self._emit(logging.ERROR, message, fields, exc_info=True)

    def close(self) -> None:
        """
        Flush and close handlers this logger installed, then restore
        default level and propagation.

        Idempotent. A logger created without config owns no handlers and
        leaves the application's handlers alone.
        """
        if self._closed:
            return

        if self._owns_handlers:
            for handler in self._logger.handlers[:]:
                handler.flush()
                handler.close()
                self._logger.removeHandler(handler)
            self._logger.setLevel(logging.NOTSET)
            self._logger.propagate = True

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(
    config: Optional[LoggingConfig] = None,
    name: str = DEFAULT_LOGGER_NAME,
) -> ClientLogger:
    """
    Build a ClientLogger.

    There is no process-wide logger instance: each client gets the logger
    it was constructed with.
    """
    return ClientLogger(config, name=name)
