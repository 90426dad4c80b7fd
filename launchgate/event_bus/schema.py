"""Event schema for the launch pipeline.

Every event kind carries a statically known payload class. ``PAYLOAD_TYPES``
maps each EventType to the payload class the bus accepts for it, so a
handler subscribed to ``token:failed`` always receives a TokenEventData.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .config import EventType


@dataclass(frozen=True)
class TweetEventData:
    """Payload for tweet ingestion and classification events."""

    tweet_id: str
    author_username: str
    text: str
    classification: Optional[dict[str, Any]] = None
    analysis: Optional[dict[str, Any]] = None
    launch_status: Optional[str] = None
    reason: Optional[str] = None
    urls: tuple[str, ...] = ()
    media_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class SignalEventData:
    """Payload for alpha-signal classification events."""

    source: str
    source_id: str
    category: str
    priority: str
    confidence: float
    risk: float
    tickers: tuple[str, ...] = ()
    contract_addresses: tuple[str, ...] = ()
    reason: Optional[str] = None


@dataclass(frozen=True)
class LaunchDetectedData:
    """Payload for launch:detected."""

    ticker: str
    name: str
    tweet_id: str
    tweet_author: str
    confidence: float
    candidate_key: str = ""


@dataclass(frozen=True)
class TokenEventData:
    """Payload for token lifecycle events."""

    ticker: str
    name: str
    candidate_key: str = ""
    mint: Optional[str] = None
    signature: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AlertEventData:
    """Payload for alert:* events."""

    title: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SystemEventData:
    """Payload for system lifecycle and error events."""

    service: str
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)


EventData = Union[
    TweetEventData,
    SignalEventData,
    LaunchDetectedData,
    TokenEventData,
    AlertEventData,
    SystemEventData,
]


PAYLOAD_TYPES: dict[EventType, type] = {
    EventType.TWEET_RECEIVED: TweetEventData,
    EventType.TWEET_FILTERED: TweetEventData,
    EventType.TWEET_CLASSIFIED: TweetEventData,
    EventType.SIGNAL_CLASSIFIED: SignalEventData,
    EventType.SIGNAL_FILTERED: SignalEventData,
    EventType.LAUNCH_DETECTED: LaunchDetectedData,
    EventType.SPAM_DETECTED: SignalEventData,
    EventType.TOKEN_CREATING: TokenEventData,
    EventType.TOKEN_CREATED: TokenEventData,
    EventType.TOKEN_FAILED: TokenEventData,
    EventType.ALERT_INFO: AlertEventData,
    EventType.ALERT_WARNING: AlertEventData,
    EventType.ALERT_ERROR: AlertEventData,
    EventType.ALERT_SUCCESS: AlertEventData,
    EventType.SYSTEM_STARTED: SystemEventData,
    EventType.SYSTEM_STOPPED: SystemEventData,
    EventType.SYSTEM_ERROR: SystemEventData,
}


@dataclass(frozen=True)
class Event:
    """An immutable event as stored in the bus history."""

    type: EventType
    data: EventData
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(),
            "data": asdict(self.data),
        }


# ── Payload Factories ─────────────────────────────────────────────


def alert_event_data(title: str, message: str, **metadata: Any) -> AlertEventData:
    """Create an AlertEventData payload."""
    return AlertEventData(title=title, message=message, metadata=dict(metadata))


def token_event_data(
    ticker: str,
    name: str,
    candidate_key: str = "",
    mint: Optional[str] = None,
    signature: Optional[str] = None,
    error: Optional[str] = None,
) -> TokenEventData:
    """Create a TokenEventData payload."""
    return TokenEventData(
        ticker=ticker,
        name=name,
        candidate_key=candidate_key,
        mint=mint,
        signature=signature,
        error=error,
    )
