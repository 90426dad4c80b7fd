"""Alerting configuration and payload types."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import json


class AlertLevel(str, Enum):
    """Alert severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


LEVEL_EMOJI = {
    AlertLevel.INFO: "ℹ️",
    AlertLevel.WARNING: "⚠️",
    AlertLevel.ERROR: "❌",
    AlertLevel.SUCCESS: "✅",
}

DISCORD_COLORS = {
    AlertLevel.INFO: 0x3498DB,
    AlertLevel.WARNING: 0xF39C12,
    AlertLevel.ERROR: 0xE74C3C,
    AlertLevel.SUCCESS: 0x2ECC71,
}


@dataclass
class AlertConfig:
    """Which channels the dispatcher builds, and whether it delivers at all."""
    enabled: bool = True
    console_output: bool = True
    webhook_url: Optional[str] = None
    discord_webhook: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    request_timeout: float = 10.0


@dataclass
class AlertPayload:
    """A single notification."""
    level: AlertLevel
    title: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def emoji(self) -> str:
        return LEVEL_EMOJI[self.level]

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            # Metadata values may be datetimes or enums
            "metadata": json.loads(json.dumps(self.metadata, default=str)),
        }
