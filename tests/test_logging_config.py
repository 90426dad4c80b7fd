"""Tests for structured logging and per-signal context binding."""

import asyncio
import json
import logging
import sys
import time

import pytest

from launchgate.logging_config.config import LogFormat, LoggingConfig, LogLevel
from launchgate.logging_config.context import (
    SignalContext,
    get_candidate_key,
    get_context_dict,
    get_signal_id,
)
from launchgate.logging_config import setup as logging_setup
from launchgate.logging_config.performance import log_performance
from launchgate.logging_config.setup import (
    ConsoleFormatter,
    StructuredFormatter,
    active_logging_config,
    configure_logging,
    get_logger,
)


def make_record(msg="test", level=logging.INFO, name="test", lineno=1, exc_info=None):
    return logging.LogRecord(
        name=name, level=level, pathname="test.py",
        lineno=lineno, msg=msg, args=(), exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    active = logging_setup._active_config
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_setup._active_config = active


class TestLoggingConfig:

    def test_defaults_are_production_json(self):
        assert LoggingConfig() == LoggingConfig(
            level=LogLevel.INFO, format=LogFormat.JSON, include_caller=True,
            slow_threshold_ms=5000.0, service_name="launchgate",
        )

    def test_format_parses_from_lowercase_name(self):
        assert LogFormat("json") is LogFormat.JSON
        assert LogFormat("console") is LogFormat.CONSOLE

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            LoggingConfig().level = LogLevel.DEBUG


class TestSignalContext:
    """Tests for signal context management."""

    def test_binds_and_clears(self):
        with SignalContext(signal_id="1800", source="twitter"):
            assert get_signal_id() == "1800"
            assert get_context_dict() == {"signal_id": "1800", "source": "twitter"}
        assert get_signal_id() == ""
        assert get_context_dict() == {}

    def test_bind_candidate(self):
        with SignalContext(signal_id="1800") as ctx:
            ctx.bind_candidate("PEPE2-1800")
            assert get_candidate_key() == "PEPE2-1800"
            assert get_context_dict()["candidate_key"] == "PEPE2-1800"
        assert get_candidate_key() == ""

    def test_nested_contexts_restore_outer(self):
        with SignalContext(signal_id="outer"):
            with SignalContext(signal_id="inner"):
                assert get_signal_id() == "inner"
            assert get_signal_id() == "outer"

    def test_elapsed_ms(self):
        with SignalContext() as ctx:
            time.sleep(0.01)
            assert ctx.elapsed_ms >= 10

    @pytest.mark.asyncio
    async def test_concurrent_tasks_keep_separate_context(self):
        seen = {}

        async def work(signal_id):
            with SignalContext(signal_id=signal_id):
                await asyncio.sleep(0.01)
                seen[signal_id] = get_signal_id()

        await asyncio.gather(work("a"), work("b"))
        assert seen == {"a": "a", "b": "b"}


class TestStructuredFormatter:
    """JSON lines emitted in production."""

    def test_core_fields(self):
        parsed = json.loads(StructuredFormatter().format(make_record("signal received")))
        assert (parsed["message"], parsed["level"]) == ("signal received", "INFO")
        assert parsed["service"] == "launchgate"
        assert "timestamp" in parsed

    def test_caller_info_toggle(self):
        with_caller = json.loads(StructuredFormatter(include_caller=True).format(make_record(lineno=42)))
        assert with_caller["line"] == 42
        without = json.loads(StructuredFormatter(include_caller=False).format(make_record(lineno=42)))
        assert "line" not in without

    def test_includes_signal_context(self):
        with SignalContext(signal_id="ctx-test", source="discord", candidate_key="X-1"):
            parsed = json.loads(StructuredFormatter().format(make_record()))
        assert parsed["signal_id"] == "ctx-test"
        assert parsed["source"] == "discord"
        assert parsed["candidate_key"] == "X-1"

    def test_exception_is_nested(self):
        try:
            raise KeyError("contract_address")
        except KeyError:
            record = make_record("normalize failed", level=logging.ERROR, exc_info=sys.exc_info())
        exception = json.loads(StructuredFormatter().format(record))["exception"]
        assert exception["type"] == "KeyError"
        assert "contract_address" in exception["message"]
        assert "Traceback" in exception["traceback"]

    def test_includes_duration(self):
        record = make_record()
        record.duration_ms = 42.5
        assert json.loads(StructuredFormatter().format(record))["duration_ms"] == 42.5


class TestConsoleFormatter:
    """Human-readable lines for local replay."""

    def test_shows_logger_and_message(self):
        output = ConsoleFormatter().format(make_record("hello", name="launchgate.pipeline"))
        assert "launchgate.pipeline" in output
        assert "hello" in output

    def test_appends_bound_signal(self):
        with SignalContext(signal_id="abc"):
            output = ConsoleFormatter().format(make_record())
        assert "signal_id=abc" in output

    def test_errors_are_red(self):
        output = ConsoleFormatter().format(make_record(level=logging.ERROR))
        assert "\033[31m" in output


class TestConfigureLogging:
    """Root handler installation."""

    def test_json_format(self, restore_root_logger):
        configure_logging(LoggingConfig(format=LogFormat.JSON))
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_console_format(self, restore_root_logger):
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_sets_log_level(self, restore_root_logger):
        configure_logging(LoggingConfig(level=LogLevel.DEBUG))
        assert restore_root_logger.level == logging.DEBUG

    def test_quiets_noisy_loggers(self, restore_root_logger):
        configure_logging()
        assert logging.getLogger("httpx").level >= logging.WARNING

    def test_env_var_overrides(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("LAUNCHGATE_LOG_LEVEL", "debug")
        monkeypatch.setenv("LAUNCHGATE_LOG_FORMAT", "CONSOLE")
        configure_logging(LoggingConfig(level=LogLevel.ERROR, format=LogFormat.JSON))
        assert restore_root_logger.level == logging.DEBUG
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_publishes_active_config(self, restore_root_logger):
        configure_logging(LoggingConfig(slow_threshold_ms=250.0))
        assert active_logging_config().slow_threshold_ms == 250.0

    def test_get_logger_is_named(self):
        assert get_logger("launchgate.test").name == "launchgate.test"


class TestPerformanceLogging:
    """Tests for the timing decorator."""

    def test_sync(self):
        @log_performance(threshold_ms=10000)
        def fast_func():
            return 42

        assert fast_func() == 42

    @pytest.mark.asyncio
    async def test_async(self):
        @log_performance(threshold_ms=10000)
        async def async_func():
            return "ok"

        assert await async_func() == "ok"

    def test_preserves_name(self):
        @log_performance()
        def my_function():
            """My docstring."""

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "My docstring."

    @pytest.mark.asyncio
    async def test_async_exception_logged_and_reraised(self, caplog):
        @log_performance(threshold_ms=10000, logger_name="launchgate.perf")
        async def async_failing():
            raise RuntimeError("async fail")

        with caplog.at_level(logging.ERROR, logger="launchgate.perf"):
            with pytest.raises(RuntimeError, match="async fail"):
                await async_failing()
        assert "failed after" in caplog.text

    def test_slow_call_warns(self, caplog):
        @log_performance(threshold_ms=0, logger_name="launchgate.perf")
        def slow():
            return None

        with caplog.at_level(logging.WARNING, logger="launchgate.perf"):
            slow()
        assert "Slow operation" in caplog.text

    def test_default_threshold_follows_configured_logging(self, caplog, monkeypatch):
        @log_performance(logger_name="launchgate.perf")
        def quick():
            return None

        with caplog.at_level(logging.DEBUG, logger="launchgate.perf"):
            quick()
            assert "Slow operation" not in caplog.text
            monkeypatch.setattr(logging_setup, "_active_config", LoggingConfig(slow_threshold_ms=0))
            quick()
        assert "Slow operation" in caplog.text
