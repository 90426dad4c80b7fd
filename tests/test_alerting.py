"""Tests for alert channels and the alert dispatcher."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from launchgate.alerting import (
    AlertConfig,
    AlertDispatcher,
    AlertLevel,
    AlertPayload,
    ConsoleChannel,
    DiscordChannel,
    TelegramChannel,
    WebhookChannel,
)
from launchgate.event_bus import (
    EventBus,
    EventType,
    LaunchDetectedData,
    SystemEventData,
    alert_event_data,
    token_event_data,
)


def recording_client(status_code=200):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status_code, json={"ok": status_code == 200})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


def make_alert(level=AlertLevel.WARNING, **metadata):
    return AlertPayload(
        level=level,
        title="Heads up",
        message="Something happened",
        timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc),
        metadata=metadata,
    )


class RecordingChannel:
    def __init__(self, name="recording"):
        self._name = name
        self.alerts = []

    @property
    def name(self):
        return self._name

    async def send(self, alert):
        self.alerts.append(alert)
        return True


class ExplodingChannel:
    @property
    def name(self):
        return "exploding"

    async def send(self, alert):
        raise RuntimeError("channel down")


# ═══════════════════════════════════════════════════════════════════════
# Channels
# ═══════════════════════════════════════════════════════════════════════


class TestChannels:

    @pytest.mark.asyncio
    async def test_console(self, caplog):
        caplog.set_level("INFO", logger="launchgate.alerts")
        assert await ConsoleChannel().send(make_alert(ticker="PEPE2")) is True
        assert "Heads up" in caplog.text
        assert "PEPE2" in caplog.text

    @pytest.mark.asyncio
    async def test_webhook_body(self):
        client, requests = recording_client()
        ok = await WebhookChannel("https://hooks.example/alert", client).send(make_alert(risk=0.9))
        assert ok is True
        body = json.loads(requests[0].content)
        assert body["level"] == "warning"
        assert body["metadata"] == {"risk": 0.9}
        assert body["timestamp"].startswith("2025-01-01")

    @pytest.mark.asyncio
    async def test_discord_embed(self):
        client, requests = recording_client()
        await DiscordChannel("https://discord.example/webhook", client).send(make_alert(ticker="PEPE2"))
        embed = json.loads(requests[0].content)["embeds"][0]
        assert embed["title"] == "Heads up"
        assert embed["color"] == 0xF39C12
        assert embed["fields"] == [{"name": "ticker", "value": "PEPE2", "inline": True}]

    @pytest.mark.asyncio
    async def test_telegram_message(self):
        client, requests = recording_client()
        channel = TelegramChannel("123:abc", "-100", client)
        await channel.send(make_alert(AlertLevel.SUCCESS))
        assert str(requests[0].url) == "https://api.telegram.org/bot123:abc/sendMessage"
        body = json.loads(requests[0].content)
        assert body["chat_id"] == "-100"
        assert body["parse_mode"] == "Markdown"
        assert body["text"].startswith("✅ *Heads up*")

    @pytest.mark.asyncio
    async def test_http_rejection_is_false(self):
        client, _ = recording_client(status_code=500)
        assert await WebhookChannel("https://hooks.example/alert", client).send(make_alert()) is False

    @pytest.mark.asyncio
    async def test_transport_error_is_false(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        assert await WebhookChannel("https://hooks.example/alert", client).send(make_alert()) is False


# ═══════════════════════════════════════════════════════════════════════
# Dispatcher
# ═══════════════════════════════════════════════════════════════════════


class TestAlertDispatcher:

    def setup_method(self):
        self.bus = EventBus()

    def dispatcher(self, **config):
        config.setdefault("console_output", False)
        dispatcher = AlertDispatcher(self.bus, AlertConfig(**config))
        channel = RecordingChannel()
        dispatcher.add_channel(channel)
        return dispatcher, channel

    def test_builds_configured_channels(self):
        dispatcher = AlertDispatcher(self.bus, AlertConfig(
            webhook_url="https://hooks.example/alert",
            discord_webhook="https://discord.example/webhook",
            telegram_bot_token="123:abc",
        ))
        # Telegram needs both token and chat id
        assert [c.name for c in dispatcher.channels] == ["console", "webhook", "discord"]

    @pytest.mark.asyncio
    async def test_alert_events_are_delivered(self):
        dispatcher, channel = self.dispatcher()
        self.bus.emit(EventType.ALERT_WARNING, alert_event_data("High Risk Tweet Blocked", "blocked", risk=0.9))
        await dispatcher.drain()
        assert channel.alerts[0].level == AlertLevel.WARNING
        assert channel.alerts[0].metadata == {"risk": 0.9}
        assert dispatcher.get_stats()["delivered"] == {"recording": 1}

    @pytest.mark.asyncio
    async def test_token_events(self):
        dispatcher, channel = self.dispatcher()
        self.bus.emit(EventType.TOKEN_CREATED, token_event_data("PEPE2", "Pepe Two", mint="Mint111", signature="Sig"))
        self.bus.emit(EventType.TOKEN_FAILED, token_event_data("PEPE2", "Pepe Two", error="rpc down"))
        await dispatcher.drain()
        created, failed = channel.alerts
        assert created.title == "Token Created Successfully"
        assert created.metadata["pumpfun"] == "https://pump.fun/Mint111"
        assert failed.level == AlertLevel.ERROR
        assert failed.message == "Failed to create PEPE2: rpc down"

    @pytest.mark.asyncio
    async def test_launch_detected_and_system_error(self):
        dispatcher, channel = self.dispatcher()
        self.bus.emit(EventType.LAUNCH_DETECTED, LaunchDetectedData(
            ticker="PEPE2", name="Pepe Two", tweet_id="99", tweet_author="alice", confidence=0.875,
        ))
        self.bus.emit(EventType.SYSTEM_ERROR, SystemEventData(service="intake", message="boom"))
        await dispatcher.drain()
        detected, error = channel.alerts
        assert detected.message == "@alice triggered launch for PEPE2"
        assert detected.metadata["confidence"] == "87.5%"
        assert detected.metadata["tweet"] == "https://twitter.com/alice/status/99"
        assert error.title == "System Error"
        assert error.metadata == {"service": "intake"}

    @pytest.mark.asyncio
    async def test_ignores_unmapped_events(self):
        dispatcher, channel = self.dispatcher()
        self.bus.emit(EventType.TOKEN_CREATING, token_event_data("PEPE2", "Pepe Two"))
        await dispatcher.drain()
        assert channel.alerts == []

    @pytest.mark.asyncio
    async def test_disabled_suppresses(self):
        dispatcher, channel = self.dispatcher(enabled=False)
        self.bus.emit(EventType.ALERT_INFO, alert_event_data("Info", "quiet"))
        await dispatcher.drain()
        assert channel.alerts == []
        assert dispatcher.get_stats()["suppressed"] == 1

    @pytest.mark.asyncio
    async def test_failing_channel_is_isolated(self):
        dispatcher, channel = self.dispatcher()
        dispatcher.add_channel(ExplodingChannel())
        self.bus.emit(EventType.ALERT_ERROR, alert_event_data("Bad", "news"))
        await dispatcher.drain()
        assert len(channel.alerts) == 1
        stats = dispatcher.get_stats()
        assert stats["failed"] == {"exploding": 1}
        assert stats["delivered"] == {"recording": 1}

    def test_delivers_without_running_loop(self):
        dispatcher, channel = self.dispatcher()
        self.bus.emit(EventType.ALERT_SUCCESS, alert_event_data("Done", "synchronously"))
        assert len(channel.alerts) == 1

    def test_update_config_rebuilds_channels(self):
        dispatcher, _ = self.dispatcher()
        dispatcher.update_config(console_output=True)
        assert [c.name for c in dispatcher.channels] == ["console"]
