"""Signal Normalizer.

Registry of source adapters. The single entry point every ingestion
client calls with the raw message it received.
"""

from typing import Any, Iterable, Optional, Union
import logging

from launchgate.errors import UnknownSourceError
from launchgate.ingestion.base import Signal, SignalAdapter, SourceType
from launchgate.ingestion.discord_adapter import DiscordAdapter
from launchgate.ingestion.reddit_adapter import RedditAdapter
from launchgate.ingestion.telegram_adapter import TelegramAdapter
from launchgate.ingestion.twitter_adapter import TwitterAdapter

logger = logging.getLogger(__name__)


class SignalNormalizer:
    """Dispatches source-native payloads to the matching adapter.

    Example:
        normalizer = SignalNormalizer()
        signal = normalizer.normalize("discord", message)
    """

    def __init__(self, adapters: Optional[Iterable[SignalAdapter]] = None):
        self._adapters: dict[SourceType, SignalAdapter] = {}
        if adapters is None:
            adapters = (TwitterAdapter(), DiscordAdapter(), TelegramAdapter(), RedditAdapter())
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: SignalAdapter) -> None:
        """Register (or replace) the adapter for its source."""
        self._adapters[adapter.source] = adapter

    @property
    def sources(self) -> list[SourceType]:
        return list(self._adapters.keys())

    def normalize(self, source: Union[SourceType, str], payload: Any) -> Signal:
        """Convert a payload into a Signal.

        Raises:
            UnknownSourceError: No adapter is registered for ``source``.
        """
        try:
            source_type = SourceType(source)
        except ValueError:
            raise UnknownSourceError(f"Unknown signal source: {source!r}") from None

        adapter = self._adapters.get(source_type)
        if adapter is None:
            raise UnknownSourceError(f"No adapter registered for {source_type.value}")

        signal = adapter.to_signal(payload)
        logger.debug(
            "Normalized %s signal %s from %s",
            signal.source.value, signal.source_id, signal.author,
        )
        return signal
