"""
Structured logging for resilient-http.

The client logs a WARNING per retried attempt and an ERROR per final
failure. Pass a LoggingConfig to have the client own its output, or leave
it out and configure ``logging.getLogger("resilient_http")`` yourself.

Example:
    >>> from resilient_http.core.logging import create_logger, LoggingConfig
    >>>
    >>> logger = create_logger(LoggingConfig.create(level="DEBUG", format="colored"))
    >>> logger.warning("Request failed, retrying", attempt=1, delay=0.1)
"""

from .config import ConsoleStream, LogFormat, LoggingConfig, LogLevel
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .formatters import ColoredFormatter, JSONFormatter, TextFormatter, get_formatter
from .handlers import build_handlers
from .logger import DEFAULT_LOGGER_NAME, ClientLogger, create_logger

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "ConsoleStream",
    "ClientLogger",
    "create_logger",
    "DEFAULT_LOGGER_NAME",
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "build_handlers",
]
