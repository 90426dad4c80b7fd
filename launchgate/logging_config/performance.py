"""Timing for the network-bound pipeline steps.

``log_performance`` wraps LLM analysis and launch execution. Every call
is logged at DEBUG with its duration; calls over the threshold are
promoted to WARNING and failures are logged at ERROR before re-raising.
"""

import functools
import inspect
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from launchgate.logging_config.setup import active_logging_config


@contextmanager
def _timed(logger: logging.Logger, label: str, threshold_ms: float) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    except Exception as exc:
        elapsed = (time.perf_counter() - started) * 1000
        logger.error(
            "%s failed after %.1fms: %s", label, elapsed, type(exc).__name__,
            extra={"duration_ms": round(elapsed, 2)},
        )
        raise
    elapsed = (time.perf_counter() - started) * 1000
    level = logging.WARNING if elapsed >= threshold_ms else logging.DEBUG
    template = "Slow operation: %s took %.1fms" if level == logging.WARNING else "%s completed in %.1fms"
    logger.log(level, template, label, elapsed, extra={"duration_ms": round(elapsed, 2)})


def log_performance(threshold_ms: Optional[float] = None, logger_name: Optional[str] = None) -> Callable:
    """Time a function or coroutine function.

    Without ``threshold_ms`` the cutoff is read on every call from the
    config installed by ``configure_logging``. The logger defaults to the
    wrapped function's module.
    """

    def cutoff() -> float:
        if threshold_ms is not None:
            return threshold_ms
        return active_logging_config().slow_threshold_ms

    def wrap(func: Callable) -> Callable:
        logger = logging.getLogger(logger_name or func.__module__)
        label = func.__qualname__

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def timed_coroutine(*args: Any, **kwargs: Any) -> Any:
                with _timed(logger, label, cutoff()):
                    return await func(*args, **kwargs)
            return timed_coroutine

        @functools.wraps(func)
        def timed_call(*args: Any, **kwargs: Any) -> Any:
            with _timed(logger, label, cutoff()):
                return func(*args, **kwargs)
        return timed_call

    return wrap
