"""Alert Dispatcher.

Mirrors selected bus events to every configured alert channel. Delivery
is best effort: each channel is isolated, failures are logged and never
retried or raised.
"""

from dataclasses import replace
from typing import Any, Optional
import asyncio
import logging

import httpx

from launchgate.alerting.channels import (
    AlertChannel,
    ConsoleChannel,
    DiscordChannel,
    TelegramChannel,
    WebhookChannel,
)
from launchgate.alerting.config import AlertConfig, AlertLevel, AlertPayload
from launchgate.event_bus import Event, EventBus, EventType
from launchgate.launch.candidate import tweet_url

logger = logging.getLogger(__name__)

_ALERT_LEVELS = {
    EventType.ALERT_INFO: AlertLevel.INFO,
    EventType.ALERT_WARNING: AlertLevel.WARNING,
    EventType.ALERT_ERROR: AlertLevel.ERROR,
    EventType.ALERT_SUCCESS: AlertLevel.SUCCESS,
}


class AlertDispatcher:
    """Fan out alerts to console, webhook, Discord and Telegram channels.

    Bus handlers are synchronous, so each alert is scheduled as a task on
    the running loop; with no running loop the send runs to completion
    before the handler returns. ``drain()`` awaits scheduled sends.

    Example:
        dispatcher = AlertDispatcher(bus, AlertConfig(discord_webhook=url))
        bus.emit(EventType.ALERT_WARNING, alert_event_data("Heads up", "..."))
        await dispatcher.drain()
    """

    def __init__(
        self,
        bus: EventBus,
        config: Optional[AlertConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.bus = bus
        self.config = config or AlertConfig()
        self._client = client
        self._channels: list[AlertChannel] = []
        self._pending: set[asyncio.Task] = set()
        self._stats: dict[str, Any] = {
            "alerts": 0,
            "suppressed": 0,
            "delivered": {},
            "failed": {},
        }
        self._build_channels()
        self._subscribe()

    # ── Channels ─────────────────────────────────────────────────────

    def _build_channels(self) -> None:
        cfg = self.config
        timeout = cfg.request_timeout
        channels: list[AlertChannel] = []
        if cfg.console_output:
            channels.append(ConsoleChannel())
        if cfg.webhook_url:
            channels.append(WebhookChannel(cfg.webhook_url, self._client, timeout))
        if cfg.discord_webhook:
            channels.append(DiscordChannel(cfg.discord_webhook, self._client, timeout))
        if cfg.telegram_bot_token and cfg.telegram_chat_id:
            channels.append(TelegramChannel(
                cfg.telegram_bot_token, cfg.telegram_chat_id, self._client, timeout,
            ))
        self._channels = channels
        logger.info("Alert channels: %s", ", ".join(c.name for c in channels) or "none")

    @property
    def channels(self) -> list[AlertChannel]:
        return list(self._channels)

    def add_channel(self, channel: AlertChannel) -> None:
        self._channels.append(channel)

    def update_config(self, **changes: Any) -> None:
        """Apply config changes and rebuild channels.

        Channels added with ``add_channel`` are dropped by the rebuild.
        """
        self.config = replace(self.config, **changes)
        self._build_channels()

    # ── Delivery ─────────────────────────────────────────────────────

    async def send(self, alert: AlertPayload) -> None:
        if not self.config.enabled:
            self._stats["suppressed"] += 1
            return
        self._stats["alerts"] += 1
        channels = list(self._channels)
        results = await asyncio.gather(
            *(channel.send(alert) for channel in channels),
            return_exceptions=True,
        )
        for channel, result in zip(channels, results):
            if isinstance(result, BaseException):
                logger.error("Alert channel %s failed: %r", channel.name, result)
                ok = False
            else:
                ok = bool(result)
            bucket = self._stats["delivered"] if ok else self._stats["failed"]
            bucket[channel.name] = bucket.get(channel.name, 0) + 1

    def _schedule(self, alert: AlertPayload) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.send(alert))
            return
        task = loop.create_task(self.send(alert))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every scheduled send to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ── Event mapping ────────────────────────────────────────────────

    def _subscribe(self) -> None:
        for event_type in _ALERT_LEVELS:
            self.bus.on(event_type, self._on_alert)
        self.bus.on(EventType.TOKEN_CREATED, self._on_token_created)
        self.bus.on(EventType.TOKEN_FAILED, self._on_token_failed)
        self.bus.on(EventType.LAUNCH_DETECTED, self._on_launch_detected)
        self.bus.on(EventType.SYSTEM_ERROR, self._on_system_error)

    def _on_alert(self, event: Event) -> None:
        data = event.data
        self._schedule(AlertPayload(
            level=_ALERT_LEVELS[event.type],
            title=data.title,
            message=data.message,
            timestamp=event.timestamp,
            metadata=dict(data.metadata),
        ))

    def _on_token_created(self, event: Event) -> None:
        data = event.data
        self._schedule(AlertPayload(
            level=AlertLevel.SUCCESS,
            title="Token Created Successfully",
            message=f"{data.ticker} ({data.name}) has been created on PumpFun",
            metadata={
                "mint": data.mint,
                "signature": data.signature,
                "pumpfun": f"https://pump.fun/{data.mint}",
            },
        ))

    def _on_token_failed(self, event: Event) -> None:
        data = event.data
        self._schedule(AlertPayload(
            level=AlertLevel.ERROR,
            title="Token Creation Failed",
            message=f"Failed to create {data.ticker}: {data.error}",
            metadata={"ticker": data.ticker, "error": data.error},
        ))

    def _on_launch_detected(self, event: Event) -> None:
        data = event.data
        self._schedule(AlertPayload(
            level=AlertLevel.INFO,
            title="Launch Command Detected",
            message=f"@{data.tweet_author} triggered launch for {data.ticker}",
            metadata={
                "ticker": data.ticker,
                "confidence": f"{data.confidence * 100:.1f}%",
                "tweet": tweet_url(data.tweet_author, data.tweet_id),
            },
        ))

    def _on_system_error(self, event: Event) -> None:
        data = event.data
        self._schedule(AlertPayload(
            level=AlertLevel.ERROR,
            title="System Error",
            message=data.message or "Unknown error",
            metadata={"service": data.service, **data.details},
        ))

    def get_stats(self) -> dict[str, Any]:
        return {
            "enabled": self.config.enabled,
            "channels": [c.name for c in self._channels],
            "alerts": self._stats["alerts"],
            "suppressed": self._stats["suppressed"],
            "delivered": dict(self._stats["delivered"]),
            "failed": dict(self._stats["failed"]),
            "pending": len(self._pending),
        }
