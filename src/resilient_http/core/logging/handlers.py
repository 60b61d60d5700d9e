"""
Handlers installed by a ClientLogger that owns its output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ConsoleStream, DEFAULT_MAX_BYTES, LoggingConfig


def _prepare(handler: logging.Handler, level: int, formatter: logging.Formatter,
             filters: Optional[Sequence[logging.Filter]]) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]] = None,
    stream: ConsoleStream = ConsoleStream.STDERR,
) -> logging.StreamHandler:
    """
    Console handler on stdout or stderr.

    The stream is looked up at call time, so pytest's capture and
    ``contextlib.redirect_stdout`` see the records.
    """
    target = sys.stdout if ConsoleStream(stream) is ConsoleStream.STDOUT else sys.stderr
    handler = logging.StreamHandler(target)
    _prepare(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = 5,
    filters: Optional[Sequence[logging.Filter]] = None,
) -> RotatingFileHandler:
    """
    Rotating UTF-8 file handler; missing parent directories are created.
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    _prepare(handler, level, formatter, filters)
    return handler


def build_handlers(
    config: LoggingConfig,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]] = None,
) -> List[logging.Handler]:
    """Every handler ``config`` asks for, in console-then-file order."""
    handlers: List[logging.Handler] = []

    if config.enable_console:
        handlers.append(create_console_handler(level, formatter, filters, stream=config.stream))

    if config.enable_file and config.file_path:
        handlers.append(create_file_handler(
            config.file_path,
            level,
            formatter,
            max_bytes=config.max_bytes,
            backup_count=config.backup_count,
            filters=filters,
        ))

    return handlers
