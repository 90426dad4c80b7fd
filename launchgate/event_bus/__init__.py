"""Event Bus: typed in-process publish/subscribe with bounded history."""

from .config import EventType, EventBusConfig
from .schema import (
    Event,
    EventData,
    PAYLOAD_TYPES,
    TweetEventData,
    SignalEventData,
    LaunchDetectedData,
    TokenEventData,
    AlertEventData,
    SystemEventData,
    alert_event_data,
    token_event_data,
)
from .bus import EventBus, EventHandler

__all__ = [
    # Config
    "EventType",
    "EventBusConfig",
    # Schema
    "Event",
    "EventData",
    "PAYLOAD_TYPES",
    "TweetEventData",
    "SignalEventData",
    "LaunchDetectedData",
    "TokenEventData",
    "AlertEventData",
    "SystemEventData",
    "alert_event_data",
    "token_event_data",
    # Bus
    "EventBus",
    "EventHandler",
]
