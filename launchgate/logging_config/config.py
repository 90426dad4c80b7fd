"""Log output options for the LaunchGate service."""

from dataclasses import dataclass
from enum import Enum


class LogLevel(str, Enum):
    """Root logger level; values match the stdlib level names."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


@dataclass(frozen=True)
class LoggingConfig:
    """How ``configure_logging`` sets up the root handler.

    ``slow_threshold_ms`` is the default cutoff for ``log_performance``;
    LLM analysis and launch calls slower than this are logged at WARNING.
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    include_caller: bool = True
    slow_threshold_ms: float = 5000.0
    service_name: str = "launchgate"


DEFAULT_LOGGING_CONFIG = LoggingConfig()
