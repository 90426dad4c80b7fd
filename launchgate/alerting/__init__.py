"""Alert Dispatcher and channel back-ends."""

from launchgate.alerting.config import (
    AlertLevel,
    AlertConfig,
    AlertPayload,
    LEVEL_EMOJI,
    DISCORD_COLORS,
)
from launchgate.alerting.channels import (
    AlertChannel,
    ConsoleChannel,
    WebhookChannel,
    DiscordChannel,
    TelegramChannel,
)
from launchgate.alerting.dispatcher import AlertDispatcher

__all__ = [
    # Config
    "AlertLevel",
    "AlertConfig",
    "AlertPayload",
    "LEVEL_EMOJI",
    "DISCORD_COLORS",
    # Channels
    "AlertChannel",
    "ConsoleChannel",
    "WebhookChannel",
    "DiscordChannel",
    "TelegramChannel",
    # Dispatcher
    "AlertDispatcher",
]
