"""Logging Setup.

``configure_logging`` installs one stdout handler on the root logger with
either the JSON formatter (production) or the coloured console formatter
(local replay). Signal context bound with ``SignalContext`` is appended
to every line.
"""

import json
import logging
import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional

from launchgate.logging_config.config import DEFAULT_LOGGING_CONFIG, LogFormat, LoggingConfig, LogLevel
from launchgate.logging_config.context import get_context_dict

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "sqlalchemy.engine")

# Attributes callers attach through ``extra=`` that are copied into JSON output
PASSTHROUGH_FIELDS = ("duration_ms", "event_type", "channel", "extra_data")

_active_config: LoggingConfig = DEFAULT_LOGGING_CONFIG


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: timestamp, level, logger, message, service; caller location when
    ``include_caller`` is set; bound signal context; ``exception`` for
    records carrying exc_info; any passthrough fields present on the record.
    """

    def __init__(self, service_name: str = "launchgate", include_caller: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_caller = include_caller

    def _exception(self, record: logging.LogRecord) -> Optional[dict[str, Any]]:
        if not record.exc_info or record.exc_info[0] is None:
            return None
        exc_type, exc, _ = record.exc_info
        return {
            "type": exc_type.__name__,
            "message": str(exc),
            "traceback": self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }
        if self.include_caller:
            entry.update(module=record.module, function=record.funcName, line=record.lineno)
        entry.update(get_context_dict())

        exception = self._exception(record)
        if exception is not None:
            entry["exception"] = exception

        entry.update({
            name: getattr(record, name)
            for name in PASSTHROUGH_FIELDS
            if hasattr(record, name)
        })
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line coloured output with bound context in brackets."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        stamp = _utcnow().strftime("%H:%M:%S.%f")[:-3]
        context = get_context_dict()
        suffix = ""
        if context:
            suffix = " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"

        line = f"{color}{stamp} {record.levelname:8s}{self.RESET} {record.name}: {record.getMessage()}{suffix}"
        if record.exc_info and record.exc_info[0] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _apply_env_overrides(config: LoggingConfig) -> LoggingConfig:
    """LAUNCHGATE_LOG_LEVEL and LAUNCHGATE_LOG_FORMAT win over the passed config."""
    level = os.environ.get("LAUNCHGATE_LOG_LEVEL", "").upper()
    if level in LogLevel.__members__:
        config = replace(config, level=LogLevel(level))

    fmt = os.environ.get("LAUNCHGATE_LOG_FORMAT", "").lower()
    if fmt in {f.value for f in LogFormat}:
        config = replace(config, format=LogFormat(fmt))
    return config


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format == LogFormat.CONSOLE:
        return ConsoleFormatter()
    return StructuredFormatter(service_name=config.service_name, include_caller=config.include_caller)


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Install the root handler. Call once at startup.

    Replaces any handlers already on the root logger.
    """
    global _active_config
    config = _apply_env_overrides(config or DEFAULT_LOGGING_CONFIG)
    _active_config = config

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(config))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(config.level.value)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def active_logging_config() -> LoggingConfig:
    """The config most recently installed by configure_logging."""
    return _active_config


def get_logger(name: str) -> logging.Logger:
    """Plain stdlib logger; formatting is decided by configure_logging."""
    return logging.getLogger(name)
