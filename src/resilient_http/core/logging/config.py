"""
Logging configuration for resilient-http.

A LoggingConfig only matters when the client should own its log output;
without one, records go to the ``resilient_http`` logger and the
application decides where they end up.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


class ConsoleStream(str, Enum):
    """Where console records are written."""
    STDOUT = "stdout"
    STDERR = "stderr"


def _parse(enum_cls, value: Union[str, Enum], normalise) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(normalise(str(value)))
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Invalid {enum_cls.__name__} {value!r}, expected one of: {allowed}")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for client-owned logging.

    Attributes:
        level: Minimum level of retry/failure records
        format: json (one object per line), text or colored
        enable_console: Write to ``stream``
        stream: stdout or stderr
        enable_file: Write to a rotating file
        file_path: Log file (required if enable_file=True)
        max_bytes: Rotation threshold
        backup_count: Rotated files to keep
        enable_correlation_id: Attach the current correlation id to records
        extra_fields: Static fields added to every record (service name, env)

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json", stream="stdout")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    stream: ConsoleStream = ConsoleStream.STDERR
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "level", _parse(LogLevel, self.level, str.upper))
        object.__setattr__(self, "format", _parse(LogFormat, self.format, str.lower))
        object.__setattr__(self, "stream", _parse(ConsoleStream, self.stream, str.lower))

        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @property
    def has_outputs(self) -> bool:
        """True when at least one handler would be installed."""
        return self.enable_console or bool(self.enable_file and self.file_path)

    @classmethod
    def create(
        cls,
        level: Union[str, LogLevel] = "INFO",
        format: Union[str, LogFormat] = "text",
        enable_console: bool = True,
        stream: Union[str, ConsoleStream] = "stderr",
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = 5,
        enable_correlation_id: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> "LoggingConfig":
        """
        Create LoggingConfig from case-insensitive strings.

        Raises:
            ValueError: Unknown level, format or stream

        Example:
            >>> config = LoggingConfig.create(
            ...     level="debug",
            ...     format="JSON",
            ...     enable_file=True,
            ...     file_path="/tmp/client.log"
            ... )
        """
        return cls(
            level=level,
            format=format,
            enable_console=enable_console,
            stream=stream,
            enable_file=enable_file,
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            enable_correlation_id=enable_correlation_id,
            extra_fields=dict(extra_fields or {}),
        )

    def with_level(self, level: Union[str, LogLevel]) -> "LoggingConfig":
        """Новый конфиг с другим уровнем."""
        return replace(self, level=level)
