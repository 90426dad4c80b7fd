"""Alpha Aggregator.

Multi-source path: classify every non-twitter signal, drop low-quality
ones, and forward the rest to the registered handler and the audit sink.
"""

from collections import deque
from typing import Any, Awaitable, Callable, Optional, Union
import asyncio
import inspect
import logging

import numpy as np

from launchgate.classifier import (
    ClassifiedSignal,
    ClassifierConfig,
    SignalPriority,
    classify,
    is_filtered,
)
from launchgate.event_bus import EventBus, EventType, SignalEventData, alert_event_data
from launchgate.ingestion.base import Signal, SourceType
from launchgate.logging_config import SignalContext
from launchgate.persistence import AuditSink

logger = logging.getLogger(__name__)

SignalHandler = Callable[[ClassifiedSignal], Union[None, Awaitable[None]]]

DEFAULT_STATS_WINDOW = 500
_HIGH_PRIORITIES = (SignalPriority.HIGH, SignalPriority.URGENT)


def _signal_event(classified: ClassifiedSignal, reason: Optional[str] = None) -> SignalEventData:
    return SignalEventData(
        source=classified.source.value,
        source_id=classified.source_id,
        category=classified.category.value,
        priority=classified.priority.value,
        confidence=classified.confidence,
        risk=classified.risk,
        tickers=classified.tickers,
        contract_addresses=classified.contract_addresses,
        reason=reason,
    )


class AlphaAggregator:
    """Classify, filter and forward alpha signals from any source.

    Example:
        aggregator = AlphaAggregator(bus, ClassifierConfig(trusted_channels=["alpha"]))
        aggregator.on_signal(notify_traders)
        await aggregator.process_signal(signal)
    """

    def __init__(
        self,
        bus: EventBus,
        classifier_config: Optional[ClassifierConfig] = None,
        sink: Optional[AuditSink] = None,
        stats_window: int = DEFAULT_STATS_WINDOW,
    ) -> None:
        self.bus = bus
        self.config = classifier_config or ClassifierConfig()
        self.sink = sink
        self._handler: Optional[SignalHandler] = None
        self._pending: set[asyncio.Task] = set()
        self._confidences: deque[float] = deque(maxlen=stats_window)
        self._risks: deque[float] = deque(maxlen=stats_window)
        self._stats: dict[str, Any] = {
            "total_processed": 0,
            "by_source": {s.value: 0 for s in SourceType},
            "by_category": {},
            "filtered": 0,
            "high_priority": 0,
            "handler_errors": 0,
        }

    def on_signal(self, handler: Optional[SignalHandler]) -> None:
        """Register (or clear, with None) the downstream signal handler."""
        self._handler = handler

    async def process_signal(self, signal: Signal) -> Optional[ClassifiedSignal]:
        """Classify one signal; returns None when it was filtered out."""
        with SignalContext(signal_id=signal.source_id, source=signal.source.value):
            classified = classify(signal, self.config)
            self._record(classified)

            if is_filtered(classified, self.config):
                self._stats["filtered"] += 1
                logger.info(
                    "Filtered signal from %s: confidence=%.2f, risk=%.2f",
                    classified.source.value, classified.confidence, classified.risk,
                )
                self.bus.emit(EventType.SIGNAL_FILTERED, _signal_event(classified, "below quality threshold"))
                return None

            if classified.priority in _HIGH_PRIORITIES:
                self._stats["high_priority"] += 1

            logger.info(
                "New %s %s signal from %s (tickers: %s)",
                classified.priority.value, classified.category.value,
                classified.source.value, ", ".join(classified.tickers) or "none",
            )
            self.bus.emit(EventType.SIGNAL_CLASSIFIED, _signal_event(classified))
            self.bus.emit(EventType.ALERT_INFO, alert_event_data(
                f"Alpha Signal [{classified.priority.value.upper()}]",
                f"{classified.source.value}: {classified.content[:100]}...",
                source=classified.source.value,
                category=classified.category.value,
                priority=classified.priority.value,
                tickers=list(classified.tickers),
                confidence=classified.confidence,
            ))

            await self._forward(classified)
            self._persist(classified)
            return classified

    def _record(self, classified: ClassifiedSignal) -> None:
        stats = self._stats
        stats["total_processed"] += 1
        source = classified.source.value
        stats["by_source"][source] = stats["by_source"].get(source, 0) + 1
        category = classified.category.value
        stats["by_category"][category] = stats["by_category"].get(category, 0) + 1
        self._confidences.append(classified.confidence)
        self._risks.append(classified.risk)

    async def _forward(self, classified: ClassifiedSignal) -> None:
        if self._handler is None:
            return
        try:
            result = self._handler(classified)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self._stats["handler_errors"] += 1
            logger.exception("Signal handler failed for %s", classified.source_id)

    def _persist(self, classified: ClassifiedSignal) -> None:
        if self.sink is None:
            return
        task = asyncio.get_running_loop().create_task(self.sink.record_signal_async(classified))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for outstanding audit writes."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def get_stats(self) -> dict[str, Any]:
        stats = {
            **self._stats,
            "by_source": dict(self._stats["by_source"]),
            "by_category": dict(self._stats["by_category"]),
        }
        if self._confidences:
            confidences = np.asarray(self._confidences, dtype=float)
            risks = np.asarray(self._risks, dtype=float)
            stats["mean_confidence"] = round(float(np.mean(confidences)), 4)
            stats["p90_confidence"] = round(float(np.percentile(confidences, 90)), 4)
            stats["mean_risk"] = round(float(np.mean(risks)), 4)
        else:
            stats["mean_confidence"] = 0.0
            stats["p90_confidence"] = 0.0
            stats["mean_risk"] = 0.0
        return stats
