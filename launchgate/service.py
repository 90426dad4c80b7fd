"""LaunchGate service.

Composition root: builds every component from Settings, wires them to one
event bus, and exposes the single intake used by all source adapters.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Union
import logging

from launchgate.alerting import AlertDispatcher
from launchgate.analysis import GroqAnalyzer
from launchgate.classifier import ClassifiedSignal, TweetClassifier
from launchgate.event_bus import EventBus, EventType, SystemEventData
from launchgate.ingestion import Signal, SignalNormalizer, SourceType
from launchgate.launch import (
    CandidateCache,
    DryRunLaunchExecutor,
    IdempotencyStore,
    InMemoryIdempotencyStore,
    LaunchCandidate,
    LaunchCoordinator,
    LaunchExecutor,
)
from launchgate.persistence import AuditSink
from launchgate.pipeline import AlphaAggregator, TwitterLaunchPipeline
from launchgate.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "launchgate"

IntakeResult = Union[list[LaunchCandidate], Optional[ClassifiedSignal]]


class LaunchGateService:
    """All pipeline components wired together.

    Example:
        service = LaunchGateService.from_settings(get_settings(), DryRunLaunchExecutor())
        await service.start()
        await service.intake("twitter", tweet_payload)
        await service.stop()
    """

    def __init__(
        self,
        bus: EventBus,
        normalizer: SignalNormalizer,
        twitter_pipeline: TwitterLaunchPipeline,
        aggregator: AlphaAggregator,
        dispatcher: AlertDispatcher,
        sink: Optional[AuditSink] = None,
    ) -> None:
        self.bus = bus
        self.normalizer = normalizer
        self.twitter_pipeline = twitter_pipeline
        self.aggregator = aggregator
        self.dispatcher = dispatcher
        self.sink = sink
        self._running = False
        self._started_at: Optional[datetime] = None
        self._intake_count = 0

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        executor: Optional[LaunchExecutor] = None,
        store: Optional[IdempotencyStore] = None,
        analyzer: Optional[GroqAnalyzer] = None,
    ) -> "LaunchGateService":
        settings = settings or get_settings()
        bus = EventBus(settings.event_bus_config())
        dispatcher = AlertDispatcher(bus, settings.alert_config())

        sink = None
        if settings.database_url:
            sink = AuditSink(settings.database_url)
            sink.create_schema()
            sink.attach(bus)

        classifier_config = settings.classifier_config()
        if analyzer is None:
            analyzer = GroqAnalyzer(settings.groq_config())
        cache = CandidateCache()
        coordinator = LaunchCoordinator(
            bus,
            cache,
            store or InMemoryIdempotencyStore(),
            executor or DryRunLaunchExecutor(),
        )
        twitter_pipeline = TwitterLaunchPipeline(
            bus,
            TweetClassifier(bus, classifier_config),
            analyzer if analyzer.enabled else None,
            cache,
            coordinator,
            settings.launch_policy(),
            auto_launch=settings.auto_launch,
            analysis_timeout=settings.analysis_timeout,
        )
        aggregator = AlphaAggregator(bus, classifier_config, sink=sink)
        return cls(bus, SignalNormalizer(), twitter_pipeline, aggregator, dispatcher, sink)

    async def intake(self, source: Union[SourceType, str], payload: Any) -> IntakeResult:
        """Normalize a raw payload and route it by source.

        Raises:
            UnknownSourceError: If no adapter is registered for ``source``.
        """
        signal = self.normalizer.normalize(source, payload)
        self._intake_count += 1
        try:
            return await self._route(signal)
        except Exception as e:
            logger.exception("Processing of %s:%s failed", signal.source.value, signal.source_id)
            self.bus.emit(EventType.SYSTEM_ERROR, SystemEventData(
                service=SERVICE_NAME,
                message=str(e),
                details={"source": signal.source.value, "source_id": signal.source_id},
            ))
            raise

    async def _route(self, signal: Signal) -> IntakeResult:
        if signal.source == SourceType.TWITTER:
            return await self.twitter_pipeline.process_tweet(signal)
        return await self.aggregator.process_signal(signal)

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._started_at = datetime.now(timezone.utc)
        logger.info("LaunchGate started")
        self.bus.emit(EventType.SYSTEM_STARTED, SystemEventData(
            service=SERVICE_NAME,
            message="LaunchGate started",
            details={
                "sources": [s.value for s in self.normalizer.sources],
                "auto_launch": self.twitter_pipeline.auto_launch,
                "llm": self.twitter_pipeline.uses_llm,
            },
        ))

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.bus.emit(EventType.SYSTEM_STOPPED, SystemEventData(
            service=SERVICE_NAME, message="LaunchGate stopped",
        ))
        await self.aggregator.drain()
        await self.dispatcher.drain()
        if self.twitter_pipeline.analyzer is not None:
            await self.twitter_pipeline.analyzer.aclose()
        if self.sink is not None:
            await self.sink.drain()
            self.sink.dispose()
        logger.info("LaunchGate stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def status(self) -> dict[str, Any]:
        return {
            "running": self._running,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "intake": self._intake_count,
            "sources": [s.value for s in self.normalizer.sources],
            "twitter": self.twitter_pipeline.get_stats(),
            "alpha": self.aggregator.get_stats(),
            "alerts": self.dispatcher.get_stats(),
            "bus": self.bus.get_statistics(),
            "audit": self.sink.get_stats() if self.sink is not None else None,
        }
