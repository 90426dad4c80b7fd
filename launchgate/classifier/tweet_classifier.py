"""Tweet Classifier.

Stateful wrapper around ``classify`` for the twitter launch path: keeps
running counts, publishes ``tweet:classified``, and decides whether a
tweet passes the keyword gate before any LLM analysis is spent on it.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

from launchgate.classifier.config import ClassifierConfig, SignalCategory
from launchgate.classifier.models import ClassifiedSignal
from launchgate.classifier.scorer import classify
from launchgate.event_bus import (
    EventBus,
    EventType,
    SignalEventData,
    TweetEventData,
    alert_event_data,
)
from launchgate.ingestion.base import Signal

logger = logging.getLogger(__name__)


class TweetClassifier:
    """Classify tweets and gate them on risk, category and confidence.

    Example:
        classifier = TweetClassifier(bus, ClassifierConfig(trusted_users=["dev"]))
        classified = classifier.classify(signal)
        if classifier.passes_gate(classified):
            ...
    """

    def __init__(self, bus: EventBus, config: Optional[ClassifierConfig] = None) -> None:
        self.bus = bus
        self.config = config or ClassifierConfig()
        self._processed = 0
        self._launches = 0
        self._spam = 0
        self._filtered = 0

    def classify(self, signal: Signal) -> ClassifiedSignal:
        """Score a tweet, update counters, and publish the result."""
        classified = classify(signal, self.config)
        self._processed += 1
        if classified.category == SignalCategory.LAUNCH_ALERT:
            self._launches += 1
        if classified.risk > self.config.max_risk_threshold:
            self._spam += 1
            self.bus.emit(EventType.SPAM_DETECTED, SignalEventData(
                source=classified.source.value,
                source_id=classified.source_id,
                category=classified.category.value,
                priority=classified.priority.value,
                confidence=classified.confidence,
                risk=classified.risk,
                tickers=classified.tickers,
                contract_addresses=classified.contract_addresses,
                reason="risk above threshold",
            ))

        self.bus.emit(EventType.TWEET_CLASSIFIED, TweetEventData(
            tweet_id=signal.source_id,
            author_username=signal.author,
            text=signal.content,
            classification=classified.to_dict(),
        ))
        return classified

    def passes_gate(self, classified: ClassifiedSignal) -> bool:
        """True when the tweet clears the quality filter and has a known category.

        The quality filter is the same one the aggregator applies: confidence
        at or above ``min_confidence_threshold`` and risk at or below
        ``max_risk_threshold``.
        """
        if classified.risk > self.config.max_risk_threshold:
            self._filtered += 1
            self.bus.emit(EventType.ALERT_WARNING, alert_event_data(
                "High Risk Tweet Blocked",
                f"Tweet from @{classified.author} blocked due to high risk "
                f"score: {classified.risk:.2f}",
                tweet_id=classified.source_id,
                risk=classified.risk,
            ))
            return False
        if classified.category == SignalCategory.OTHER:
            self._filtered += 1
            logger.debug("Tweet %s has no actionable category", classified.source_id)
            return False
        if classified.confidence < self.config.min_confidence_threshold:
            self._filtered += 1
            logger.debug(
                "Tweet %s below confidence threshold: %.2f", classified.source_id, classified.confidence
            )
            return False
        return True

    def rejection_reason(self, classified: ClassifiedSignal) -> Optional[str]:
        if classified.risk > self.config.max_risk_threshold:
            return f"risk {classified.risk:.2f} above {self.config.max_risk_threshold:.2f}"
        if classified.category == SignalCategory.OTHER:
            return "no actionable category"
        if classified.confidence < self.config.min_confidence_threshold:
            return (
                f"confidence {classified.confidence:.2f} below "
                f"{self.config.min_confidence_threshold:.2f}"
            )
        return None

    def update_config(self, **changes: Any) -> None:
        self.config = replace(self.config, **changes)

    def add_trusted_user(self, username: str) -> None:
        lower = username.lower().lstrip("@")
        if lower not in self.config.trusted_users:
            self.config.trusted_users.append(lower)

    def remove_trusted_user(self, username: str) -> bool:
        lower = username.lower().lstrip("@")
        if lower in self.config.trusted_users:
            self.config.trusted_users.remove(lower)
            return True
        return False

    def get_stats(self) -> dict[str, Any]:
        processed = self._processed
        return {
            "processed": processed,
            "launches": self._launches,
            "spam": self._spam,
            "filtered": self._filtered,
            "launch_rate": self._launches / processed if processed else 0.0,
            "spam_rate": self._spam / processed if processed else 0.0,
        }
