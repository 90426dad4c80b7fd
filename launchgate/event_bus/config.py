"""Event bus configuration and event types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(str, Enum):
    """Event types published on the bus.

    Values are the wire names used by downstream consumers (SSE streams,
    audit tables), so they must stay stable.
    """

    # Ingestion
    TWEET_RECEIVED = "tweet:received"
    TWEET_FILTERED = "tweet:filtered"
    TWEET_CLASSIFIED = "tweet:classified"

    # Classification
    SIGNAL_CLASSIFIED = "signal:classified"
    SIGNAL_FILTERED = "signal:filtered"
    LAUNCH_DETECTED = "launch:detected"
    SPAM_DETECTED = "spam:detected"

    # Token lifecycle
    TOKEN_CREATING = "token:creating"
    TOKEN_CREATED = "token:created"
    TOKEN_FAILED = "token:failed"

    # Alerts
    ALERT_INFO = "alert:info"
    ALERT_WARNING = "alert:warning"
    ALERT_ERROR = "alert:error"
    ALERT_SUCCESS = "alert:success"

    # System
    SYSTEM_STARTED = "system:started"
    SYSTEM_STOPPED = "system:stopped"
    SYSTEM_ERROR = "system:error"

    @property
    def is_alert(self) -> bool:
        return self.value.startswith("alert:")


@dataclass
class EventBusConfig:
    """Configuration for the event bus."""

    max_history: int = 1000

    def __post_init__(self) -> None:
        if self.max_history < 1:
            raise ValueError("max_history must be at least 1")
