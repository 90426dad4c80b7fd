"""Structured logging for the LaunchGate pipeline.

Provides JSON / console formatters, per-signal context binding, and
timing of slow network operations (LLM analysis, launch execution).
"""

from launchgate.logging_config.config import LogFormat, LoggingConfig, LogLevel
from launchgate.logging_config.context import SignalContext, get_context_dict
from launchgate.logging_config.performance import log_performance
from launchgate.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SignalContext",
    "configure_logging",
    "get_context_dict",
    "get_logger",
    "log_performance",
]
