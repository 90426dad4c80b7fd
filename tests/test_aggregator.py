"""Tests for the multi-source alpha aggregator."""

import pytest

from launchgate.classifier import ClassifierConfig, SignalCategory
from launchgate.event_bus import EventBus, EventType
from launchgate.ingestion import SourceType
from launchgate.persistence import AuditSink
from launchgate.pipeline import AlphaAggregator
from conftest import CONTRACT_ADDRESS, make_signal

LAUNCH_WITH_CONTRACT = f"$LAUNCH MOON now!! check r/moon and {CONTRACT_ADDRESS}"
AIRDROP_SPAM = "FREE AIRDROP dm me to claim, send 1 SOL now"


def discord_signal(content, source_id="900"):
    return make_signal(content, source=SourceType.DISCORD, source_id=source_id,
                       author="bob", channel="Degens/#calls")


class TestAlphaAggregator:

    def setup_method(self):
        self.bus = EventBus()
        self.aggregator = AlphaAggregator(self.bus)
        self.received = []
        self.aggregator.on_signal(self.received.append)

    @pytest.mark.asyncio
    async def test_forwards_launch_alert(self):
        classified = await self.aggregator.process_signal(discord_signal(LAUNCH_WITH_CONTRACT))
        assert classified.category == SignalCategory.LAUNCH_ALERT
        assert self.received == [classified]
        assert len(self.bus.get_events_by_type(EventType.SIGNAL_CLASSIFIED)) == 1
        info = self.bus.get_events_by_type(EventType.ALERT_INFO)[0]
        assert info.data.title == "Alpha Signal [HIGH]"
        assert info.data.metadata["tickers"] == ["LAUNCH"]

    @pytest.mark.asyncio
    async def test_filters_spam(self):
        assert await self.aggregator.process_signal(discord_signal(AIRDROP_SPAM)) is None
        assert self.received == []
        filtered = self.bus.get_events_by_type(EventType.SIGNAL_FILTERED)
        assert filtered[0].data.reason == "below quality threshold"
        assert self.aggregator.get_stats()["filtered"] == 1

    @pytest.mark.asyncio
    async def test_filters_low_confidence(self):
        assert await self.aggregator.process_signal(discord_signal("$BONK")) is None

    @pytest.mark.asyncio
    async def test_stats(self):
        await self.aggregator.process_signal(discord_signal(LAUNCH_WITH_CONTRACT, "1"))
        await self.aggregator.process_signal(discord_signal(AIRDROP_SPAM, "2"))
        await self.aggregator.process_signal(
            make_signal("gm", source=SourceType.REDDIT, source_id="3", channel="r/solana")
        )
        stats = self.aggregator.get_stats()
        assert stats["total_processed"] == 3
        assert stats["by_source"]["discord"] == 2
        assert stats["by_source"]["reddit"] == 1
        assert stats["by_source"]["telegram"] == 0
        assert stats["by_category"]["launch_alert"] == 1
        assert stats["high_priority"] == 1
        assert stats["filtered"] == 2
        assert stats["mean_confidence"] == pytest.approx(0.2, abs=1e-4)
        assert stats["mean_risk"] == pytest.approx(0.3, abs=1e-4)

    def test_empty_stats(self):
        stats = self.aggregator.get_stats()
        assert stats["total_processed"] == 0
        assert stats["mean_confidence"] == 0.0

    @pytest.mark.asyncio
    async def test_async_handler(self):
        seen = []

        async def handler(classified):
            seen.append(classified.source_id)

        self.aggregator.on_signal(handler)
        await self.aggregator.process_signal(discord_signal(LAUNCH_WITH_CONTRACT))
        assert seen == ["900"]

    @pytest.mark.asyncio
    async def test_handler_error_is_contained(self):
        def handler(classified):
            raise RuntimeError("downstream broke")

        self.aggregator.on_signal(handler)
        classified = await self.aggregator.process_signal(discord_signal(LAUNCH_WITH_CONTRACT))
        assert classified is not None
        assert self.aggregator.get_stats()["handler_errors"] == 1

    @pytest.mark.asyncio
    async def test_trusted_channel_config(self):
        aggregator = AlphaAggregator(self.bus, ClassifierConfig(trusted_channels=["degens"]))
        classified = await aggregator.process_signal(discord_signal("$BONK $WIF"))
        assert classified is not None
        assert classified.scores.trusted_channel is True

    @pytest.mark.asyncio
    async def test_persists_to_sink(self):
        sink = AuditSink("sqlite://")
        sink.create_schema()
        aggregator = AlphaAggregator(self.bus, sink=sink)
        await aggregator.process_signal(discord_signal(LAUNCH_WITH_CONTRACT))
        await aggregator.process_signal(discord_signal(AIRDROP_SPAM, "901"))
        await aggregator.drain()
        rows = sink.recent_signals()
        assert [r["source_id"] for r in rows] == ["900"]
        assert rows[0]["contract_addresses"] == [CONTRACT_ADDRESS]
        sink.dispose()
